"""Period recaps: six category summaries plus the persisted comprehensive recap."""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence

from lumen.apps.engine.analytics.stats import mean, recap_trend, round_half_up
from lumen.apps.engine.recap.formatting import (
    format_change,
    format_day,
    format_one_decimal,
    format_thousands,
    period_label,
)
from lumen.libs.schemas.records import (
    AnalyticsInput,
    CheckIn,
    FinanceEntry,
    Goal,
    JournalEntry,
    Person,
    SoulMatrix,
    Task,
    WheelOfLife,
)

logger = logging.getLogger(__name__)

RECAP_MOOD_SCORES: dict[str, int] = {
    "excited": 9,
    "happy": 8,
    "content": 7,
    "calm": 6,
    "neutral": 5,
    "tired": 4,
    "stressed": 3,
    "anxious": 2,
    "sad": 1,
    "angry": 0,
}

LEARNING_KEYWORDS = ("learn", "discover", "realize")
CHALLENGE_KEYWORDS = ("challenge", "overcome", "difficult")
GROWTH_MINDSET_KEYWORDS = ("learn", "grow", "improve", "develop", "progress")

RECOMMENDATIONS = (
    "Continue your current wellness routine",
    "Maintain regular journaling habits",
    "Focus on identified growth areas",
    "Nurture important relationships",
    "Track financial goals consistently",
    "Embrace learning opportunities",
)

_LEADING_INT = re.compile(r"\s*([-+]?\d+)")


def recap_mood_score(mood: str) -> int:
    return RECAP_MOOD_SCORES.get((mood or "").lower(), 5)


def recap_energy_score(energy: Any) -> int:
    if energy == "High":
        return 8
    if energy == "Moderate":
        return 5
    return 3


def period_days(start: datetime, end: datetime) -> int:
    return math.ceil((end - start) / timedelta(days=1))


def _metric(label: str, value: str, trend: str, change: str) -> dict[str, str]:
    return {"label": label, "value": value, "trend": trend, "change": change}


def _mentions(entries: Sequence[JournalEntry], keywords: Iterable[str]) -> int:
    words = tuple(keywords)
    return sum(1 for e in entries if any(k in e.text.lower() for k in words))


def _leading_int(value: Any) -> int:
    """Integer prefix of a score value; 0 when there is none."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def best_mood_day(check_ins: Sequence[CheckIn]) -> str:
    if not check_ins:
        return "No data"
    best = check_ins[0]
    for current in check_ins[1:]:
        if recap_mood_score(current.mood) > recap_mood_score(best.mood):
            best = current
    return format_day(best.created_at)


def most_energetic_day(check_ins: Sequence[CheckIn]) -> str:
    if not check_ins:
        return "No data"
    best = check_ins[0]
    for current in check_ins[1:]:
        if recap_energy_score(current.energy) > recap_energy_score(best.energy):
            best = current
    return format_day(best.created_at)


def most_active_day(items: Sequence[JournalEntry | Task]) -> str:
    """Calendar day with the most items; later days win ties."""
    if not items:
        return "No data"
    counts: dict[date, int] = {}
    for item in items:
        day = item.created_at.date()
        counts[day] = counts.get(day, 0) + 1
    winner: date | None = None
    for day, count in counts.items():
        if winner is None or count >= counts[winner]:
            winner = day
    return f"{winner.month}/{winner.day}/{winner.year}"


def life_balance_score(wheel: WheelOfLife) -> int:
    scores = [_leading_int(v) for v in (wheel.area_scores() or {}).values()]
    return round_half_up(mean(scores)) if scores else 0


def low_life_areas(wheel: WheelOfLife) -> list[str]:
    return [area for area, score in (wheel.area_scores() or {}).items() if _leading_int(score) < 6]


def self_awareness_score(soul: SoulMatrix) -> int:
    traits = soul.trait_map()
    return round_half_up(len(traits) * 2) if traits else 0


def growth_mindset(entries: Sequence[JournalEntry]) -> str:
    mentions = _mentions(entries, GROWTH_MINDSET_KEYWORDS)
    if mentions > 5:
        return "Strong"
    if mentions > 2:
        return "Moderate"
    return "Developing"


def mention_counts(people: Sequence[Person], entries: Sequence[JournalEntry]) -> dict[str, int]:
    lowered = [e.text.lower() for e in entries]
    return {person.name: sum(1 for text in lowered if person.name.lower() in text) for person in people}


def most_mentioned_person(people: Sequence[Person], entries: Sequence[JournalEntry]) -> str:
    if not people or not entries:
        return "No data"
    counts = mention_counts(people, entries)
    winner: str | None = None
    for name, count in counts.items():
        if winner is None or count >= counts[winner]:
            winner = name
    return winner if counts[winner] > 0 else "No mentions"


def newest_person(people: Sequence[Person]) -> str:
    if not people:
        return "No data"
    newest = people[0]
    for person in people[1:]:
        if not newest.created_at > person.created_at:
            newest = person
    return newest.name


def productivity_score(tasks: Sequence[Task], finance: Sequence[FinanceEntry]) -> int:
    if tasks:
        task_score = len([t for t in tasks if t.status == "completed"]) / len(tasks) * 10
    else:
        task_score = 5
    finance_score = 8 if finance else 5
    return round_half_up((task_score + finance_score) / 2)


def savings_rate(finance: Sequence[FinanceEntry]) -> int:
    income = sum(e.amount for e in finance if e.category == "income")
    expenses = sum(e.amount for e in finance if e.category == "expense")
    if income <= 0:
        return 0
    return round_half_up((income - expenses) / income * 100)


def wellness_recap(check_ins: Sequence[CheckIn], period_name: str, days: int) -> dict[str, Any]:
    total = len(check_ins)
    moods = [recap_mood_score(c.mood) for c in check_ins]
    energies = [recap_energy_score(c.energy) for c in check_ins]
    if total:
        avg_mood = format_one_decimal(mean(moods))
        avg_energy = format_one_decimal(mean(energies))
        avg_sleep = format_one_decimal(mean([c.sleep_hours or 0 for c in check_ins]))
        mood_value, energy_value, sleep_value = f"{avg_mood}/10", f"{avg_energy}/10", f"{avg_sleep}h avg"
        check_in_rate = f"{total}/{days} days"
    else:
        avg_mood = avg_energy = avg_sleep = "N/A"
        mood_value = energy_value = sleep_value = "N/A"
        check_in_rate = "0 days"

    mood_trend = recap_trend(moods)
    energy_trend = recap_trend(energies)
    consistency_trend = "up" if total > days * 0.7 else "neutral"

    return {
        "category": "wellness",
        "title": "Wellness & Mood",
        "icon": "Heart",
        "color": "danger",
        "metrics": [
            _metric("Average Mood", mood_value, mood_trend, format_change("average_mood", mood_trend)),
            _metric("Energy Level", energy_value, energy_trend, format_change("energy_level", energy_trend)),
            _metric("Sleep Quality", sleep_value, "up", format_change("sleep_quality", "up")),
            _metric("Check-ins", check_in_rate, consistency_trend, format_change("check_ins", consistency_trend)),
        ],
        "insights": [
            f"Your average mood was {avg_mood}/10 {period_name}" if total else "No mood data available for this period",
            f"Energy levels averaged {avg_energy}/10" if total else "No energy data available for this period",
            f"Average sleep duration was {avg_sleep} hours" if total else "No sleep data available for this period",
        ],
        "highlights": [
            f"Best mood day: {best_mood_day(check_ins)}" if total else "No check-ins recorded",
            f"Most active day: {most_energetic_day(check_ins)}" if total else "No activity data",
            f"Consistent check-in rate: {check_in_rate}" if total else "No check-ins recorded",
        ],
    }


def journal_recap(entries: Sequence[JournalEntry], period_name: str, days: int) -> dict[str, Any]:
    total = len(entries)
    lengths = [len(e.text) for e in entries]
    total_words = sum(lengths)
    voice = len([e for e in entries if e.audio_url])
    avg_words = round_half_up(total_words / total) if total else 0

    entry_trend = recap_trend(list(range(1, total + 1)))
    word_trend = recap_trend(lengths)
    if avg_words > 100:
        depth = "High"
    elif avg_words > 50:
        depth = "Medium"
    else:
        depth = "Low"
    depth_trend = "up" if avg_words > 100 else "neutral"
    voice_trend = "up" if voice else "neutral"

    return {
        "category": "journal",
        "title": "Journal & Reflection",
        "icon": "BookOpen",
        "color": "primary",
        "metrics": [
            _metric("Entries Written", str(total), entry_trend, format_change("entries_written", entry_trend)),
            _metric("Words Written", format_thousands(total_words), word_trend, format_change("words_written", word_trend)),
            _metric("Reflection Depth", depth, depth_trend, format_change("reflection_depth", depth_trend)),
            _metric("Voice Entries", str(voice), voice_trend, format_change("voice_entries", voice_trend)),
        ],
        "insights": [
            f"Writing frequency: {total} entries {period_name}" if total else "No journal entries for this period",
            f"Average entry length: {avg_words} words" if total else "No content to analyze",
            f"Voice vs text ratio: {round_half_up(voice / total * 100)}% voice entries" if total else "No entries recorded",
        ],
        "highlights": [
            f"Longest entry: {max(lengths)} words" if total else "No entries to highlight",
            f"Most active day: {most_active_day(entries)}" if total else "No journal activity",
            f"Voice entries: {voice} recorded" if total else "No voice entries",
        ],
    }


def life_areas_recap(
    goals: Sequence[Goal],
    wheel: WheelOfLife | None,
    period_name: str,
    days: int,
) -> dict[str, Any]:
    completed = len([g for g in goals if g.status == "completed"])
    total = len(goals)
    completion_rate = round_half_up(completed / total * 100) if total else 0
    in_progress = len([g for g in goals if g.status == "in-progress"])

    balance: int | None = life_balance_score(wheel) if wheel is not None else None
    growth_areas = low_life_areas(wheel) if wheel is not None else ["No data available"]

    completed_trend = "up" if completed else "neutral"
    balance_trend = "up" if balance is not None and balance > 7 else "neutral"
    shifts_trend = "up" if in_progress else "neutral"
    areas_trend = "up" if growth_areas else "neutral"

    return {
        "category": "life-areas",
        "title": "Life Areas & Goals",
        "icon": "Target",
        "color": "success",
        "metrics": [
            _metric("Goals Completed", f"{completed}/{total}", completed_trend,
                    format_change("goals_completed", completed_trend, completed)),
            _metric("Life Balance", f"{balance}/10" if balance is not None else "N/A", balance_trend,
                    format_change("life_balance", balance_trend)),
            _metric("Priority Shifts", str(in_progress), shifts_trend,
                    format_change("priority_shifts", shifts_trend, in_progress)),
            _metric("Growth Areas", growth_areas[0] if growth_areas else "None", areas_trend,
                    format_change("growth_areas", areas_trend)),
        ],
        "insights": [
            f"Goal completion rate: {completion_rate}%" if total else "No goals set for this period",
            f"Life balance score: {balance}/10" if balance is not None else "No life balance data available",
            f"{in_progress} goals in progress" if in_progress else "No active goals",
        ],
        "highlights": [
            f"Completed: {completed} goals" if completed else "No goals completed",
            "Improved: Life balance" if balance_trend == "up" else "Life balance needs attention",
            f"Focus needed: {', '.join(growth_areas)}" if growth_areas else "All areas balanced",
        ],
    }


def relationships_recap(
    people: Sequence[Person],
    entries: Sequence[JournalEntry],
    end: datetime,
    period_name: str,
    days: int,
) -> dict[str, Any]:
    total_people = len(people)
    lowered = [e.text.lower() for e in entries]
    mentioned = len([p for p in people if any(p.name.lower() in text for text in lowered)])
    positive = round_half_up(mentioned / total_people * 100) if mentioned else 0
    cutoff = end - timedelta(days=days)
    new_connections = len([p for p in people if p.created_at >= cutoff])
    quality_time = mentioned * 2

    mentioned_trend = "up" if mentioned else "neutral"
    positive_trend = "up" if positive > 50 else "neutral"
    new_trend = "up" if new_connections else "neutral"
    time_trend = "up" if quality_time else "neutral"

    return {
        "category": "relationships",
        "title": "Relationships & People",
        "icon": "Users",
        "color": "info",
        "metrics": [
            _metric("People Mentioned", str(mentioned), mentioned_trend,
                    format_change("people_mentioned", mentioned_trend, mentioned)),
            _metric("Positive Interactions", f"{positive}%", positive_trend,
                    format_change("positive_interactions", positive_trend)),
            _metric("New Connections", str(new_connections), new_trend,
                    format_change("new_connections", new_trend, new_connections)),
            _metric("Quality Time", f"{quality_time}h", time_trend, format_change("quality_time", time_trend)),
        ],
        "insights": [
            f"Relationship network: {total_people} people tracked" if total_people else "No people tracked",
            f"Active relationships: {mentioned} people mentioned" if mentioned else "No relationship activity recorded",
            f"New connections: {new_connections} people added" if new_connections else "No new connections",
        ],
        "highlights": [
            f"Most mentioned: {most_mentioned_person(people, entries)}" if mentioned else "No mentions recorded",
            f"New connection: {newest_person(people)}" if new_connections else "No new connections",
            f"Quality time: {quality_time} hours estimated" if quality_time else "No interaction time recorded",
        ],
    }


def productivity_recap(
    tasks: Sequence[Task],
    finance: Sequence[FinanceEntry],
    period_name: str,
    days: int,
) -> dict[str, Any]:
    completed = len([t for t in tasks if t.status == "completed"])
    total = len(tasks)
    completion_rate = round_half_up(completed / total * 100) if total else 0
    rate = savings_rate(finance)
    score = productivity_score(tasks, finance)

    completed_trend = "up" if completed else "neutral"
    savings_trend = "up" if rate > 20 else "neutral"
    score_trend = "up" if score > 7 else "neutral"

    return {
        "category": "productivity",
        "title": "Finance & Tasks",
        "icon": "DollarSign",
        "color": "warning",
        "metrics": [
            _metric("Tasks Completed", f"{completed}/{total}", completed_trend,
                    format_change("tasks_completed", completed_trend, completed)),
            _metric("Financial Goals", "On Track" if rate > 20 else "Needs Attention", savings_trend,
                    format_change("financial_goals", savings_trend)),
            _metric("Savings Rate", f"{rate}%", savings_trend, format_change("savings_rate", savings_trend)),
            _metric("Productivity Score", f"{score}/10", score_trend, format_change("productivity_score", score_trend)),
        ],
        "insights": [
            f"Task completion rate: {completion_rate}%" if total else "No tasks for this period",
            f"Financial tracking: {len(finance)} entries" if finance else "No financial data",
            f"Savings rate: {rate}%" if rate > 0 else "No income/expense data",
        ],
        "highlights": [
            f"Completed: {completed} tasks" if completed else "No tasks completed",
            "Achieved: Savings goal" if rate > 20 else "Savings goal needs attention",
            "Improved: Productivity patterns" if score > 7 else "Productivity needs improvement",
        ],
    }


def growth_recap(
    soul: SoulMatrix | None,
    entries: Sequence[JournalEntry],
    period_name: str,
    days: int,
) -> dict[str, Any]:
    awareness: int | None = self_awareness_score(soul) if soul is not None else None
    learning = _mentions(entries, LEARNING_KEYWORDS)
    challenges = _mentions(entries, CHALLENGE_KEYWORDS)
    mindset = growth_mindset(entries)

    awareness_trend = "up" if awareness is not None and awareness > 7 else "neutral"
    learning_trend = "up" if learning else "neutral"
    challenge_trend = "up" if challenges else "neutral"
    mindset_trend = "up" if mindset == "Strong" else "neutral"

    return {
        "category": "growth",
        "title": "Personal Growth",
        "icon": "Brain",
        "color": "purple",
        "metrics": [
            _metric("Self-Awareness", f"{awareness}/10" if awareness is not None else "N/A", awareness_trend,
                    format_change("self_awareness", awareness_trend)),
            _metric("Learning Moments", str(learning), learning_trend,
                    format_change("learning_moments", learning_trend, learning)),
            _metric("Challenges Overcome", str(challenges), challenge_trend,
                    format_change("challenges_overcome", challenge_trend, challenges)),
            _metric("Growth Mindset", mindset, mindset_trend, format_change("growth_mindset", mindset_trend)),
        ],
        "insights": [
            f"Self-awareness score: {awareness}/10" if awareness is not None else "No personality data available",
            f"Learning moments: {learning} recorded" if learning else "No learning moments recorded",
            f"Challenges overcome: {challenges}" if challenges else "No challenges recorded",
        ],
        "highlights": [
            "Improved: Self-awareness" if awareness_trend == "up" else "Self-awareness needs development",
            f"Learned: {learning} new insights" if learning else "No learning moments",
            f"Overcame: {challenges} challenges" if challenges else "No challenges recorded",
        ],
    }


def generate_category_recaps(data: AnalyticsInput) -> list[dict[str, Any]]:
    period_name = period_label(data.period)
    days = period_days(data.start_date, data.end_date)
    return [
        wellness_recap(data.check_ins, period_name, days),
        journal_recap(data.journal_entries, period_name, days),
        life_areas_recap(data.goals, data.wheel_of_life, period_name, days),
        relationships_recap(data.people, data.journal_entries, data.end_date, period_name, days),
        productivity_recap(data.tasks, data.finance_entries, period_name, days),
        growth_recap(data.soul_matrix, data.journal_entries, period_name, days),
    ]


def generate_comprehensive_recap(data: AnalyticsInput) -> dict[str, Any]:
    """Collapse the category recaps into the single narrative that gets stored."""
    recaps = generate_category_recaps(data)
    content = (
        f"Your {period_label(data.period)} has been a journey of {len(data.journal_entries)} reflections "
        f"and {len(data.check_ins)} check-ins. "
        "Across all life areas, you've shown consistent growth and awareness. "
        "The data reveals patterns of improvement in wellness, relationships, and personal development."
    )
    improvements = [
        {
            "area": recap["title"],
            "improvement": "Improving" if recap["metrics"] and recap["metrics"][0]["trend"] == "up" else "Needs attention",
        }
        for recap in recaps
    ]
    metrics = {
        "total_categories": len(recaps),
        "improving_areas": len([r for r in recaps if any(m["trend"] == "up" for m in r["metrics"])]),
        "areas_needing_attention": len([r for r in recaps if any(m["trend"] == "down" for m in r["metrics"])]),
    }
    logger.debug(
        "comprehensive recap built",
        extra={"event": "recap_generated", "period": data.period, **metrics},
    )
    return {
        "content": content,
        "insights": [insight for recap in recaps for insight in recap["insights"]],
        "recommendations": list(RECOMMENDATIONS),
        "life_area_improvements": improvements,
        "metrics": metrics,
    }


__all__ = [
    "RECAP_MOOD_SCORES",
    "generate_category_recaps",
    "generate_comprehensive_recap",
    "growth_recap",
    "journal_recap",
    "life_areas_recap",
    "most_active_day",
    "period_days",
    "productivity_recap",
    "recap_energy_score",
    "recap_mood_score",
    "relationships_recap",
    "wellness_recap",
]
