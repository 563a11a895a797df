"""Story-style period recap: summary, highlights, goal and wellness rollups, and
five narrative renderings of the same period.

Check-in moods here use the emoji picker scale, not the word scale the
category recaps use.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Sequence

from lumen.apps.engine.analytics.stats import evolution_trend, mean
from lumen.apps.engine.evolution.buckets import energy_value, evolution_mood_score, sleep_total
from lumen.apps.engine.recap.formatting import format_one_decimal
from lumen.libs.json_utils import dumps
from lumen.libs.schemas.records import AnalyticsInput, CheckIn, Goal, JournalEntry

logger = logging.getLogger(__name__)

# Checked in order; the last theme wins a tie for dominant.
STORY_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("work", ("work", "job", "career")),
    ("relationships", ("family", "friend", "relationship")),
    ("health", ("health", "exercise", "diet")),
    ("finance", ("money", "finance", "budget")),
    ("personal", ("learn", "grow", "develop")),
)

THEME_PHRASES = {
    "work": "professional development",
    "relationships": "personal connections",
    "health": "wellness and self-care",
    "finance": "financial planning",
    "personal": "personal growth",
}

REFLECTION_QUESTIONS = (
    "What was the most significant moment of this period?",
    "How did your mood patterns reflect your overall well-being?",
    "What goals did you make progress on, and what helped or hindered you?",
    "What themes emerged in your thoughts and reflections?",
    "How have you grown or changed during this time?",
)

_TREND_WORDS = {"increasing": "improving", "decreasing": "declining", "stable": "stable"}


def story_trend(values: Sequence[float]) -> str:
    return _TREND_WORDS[evolution_trend(values)]


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def _period_noun(period: str) -> str:
    return "week" if period == "weekly" else "month"


def _average_length(entries: Sequence[JournalEntry]) -> float:
    return mean([len(e.text) for e in entries])


def recap_title(data: AnalyticsInput) -> str:
    name = "Week" if data.period == "weekly" else "Month"
    start, end = data.start_date, data.end_date
    return f"{name} of {start:%b} {start.day} - {end:%b} {end.day}"


def recap_summary(data: AnalyticsInput) -> str:
    moods = [evolution_mood_score(c.mood) for c in data.check_ins]
    total_words = sum(len(e.text) for e in data.journal_entries)
    return (
        f"This {_period_noun(data.period)} was filled with {len(data.journal_entries)} journal entries "
        f"totaling {total_words} words. You completed {len(data.check_ins)} wellness check-ins with an "
        f"average mood of {format_one_decimal(mean(moods))}/10. "
        f"{len(data.goals)} goals were active during this period."
    )


def story_highlights(data: AnalyticsInput) -> list[dict[str, Any]]:
    highlights: list[dict[str, Any]] = []

    if data.journal_entries:
        longest = data.journal_entries[0]
        for entry in data.journal_entries[1:]:
            if len(entry.text) > len(longest.text):
                longest = entry
        highlights.append(
            {
                "type": "journal",
                "title": "Most Detailed Entry",
                "description": f"Your longest entry was {len(longest.text)} characters long",
                "date": longest.created_at,
                "impact": "high",
            }
        )

    if data.check_ins:
        scores = [evolution_mood_score(c.mood) for c in data.check_ins]
        best, worst = max(scores), min(scores)
        if best >= 8:
            highlights.append(
                {
                    "type": "mood",
                    "title": "Peak Happiness",
                    "description": f"You experienced your highest mood of {best}/10",
                    "date": data.check_ins[scores.index(best)].created_at,
                    "impact": "positive",
                }
            )
        if worst <= 3:
            highlights.append(
                {
                    "type": "mood",
                    "title": "Challenging Moment",
                    "description": f"You faced a difficult day with mood of {worst}/10",
                    "date": data.check_ins[scores.index(worst)].created_at,
                    "impact": "learning",
                }
            )

    completed = [g for g in data.goals if g.status == "completed"]
    if completed:
        highlights.append(
            {
                "type": "goal",
                "title": "Goal Achievement",
                "description": f"You completed {len(completed)} goal{_plural(len(completed))}",
                "date": completed[0].updated_at,
                "impact": "achievement",
            }
        )
    return highlights


def story_insights(data: AnalyticsInput) -> list[dict[str, Any]]:
    insights: list[dict[str, Any]] = []

    average_length = _average_length(data.journal_entries)
    if average_length > 500:
        insights.append(
            {
                "type": "writing",
                "title": "Deep Reflection",
                "message": "You engaged in detailed journaling this period, showing a commitment to self-reflection.",
                "priority": "medium",
            }
        )
    elif average_length < 200:
        insights.append(
            {
                "type": "writing",
                "title": "Concise Expression",
                "message": "Your entries were brief but focused, indicating efficient self-expression.",
                "priority": "low",
            }
        )

    if data.check_ins:
        average_mood = mean([evolution_mood_score(c.mood) for c in data.check_ins])
        if average_mood > 7:
            insights.append(
                {
                    "type": "wellness",
                    "title": "Positive Outlook",
                    "message": "Your average mood was high, indicating good emotional well-being.",
                    "priority": "positive",
                }
            )
        elif average_mood < 4:
            insights.append(
                {
                    "type": "wellness",
                    "title": "Emotional Challenges",
                    "message": "You experienced lower mood levels, suggesting a need for self-care.",
                    "priority": "high",
                }
            )

    active = [g for g in data.goals if g.status == "in-progress"]
    if active:
        progress = mean([g.progress for g in active])
        if progress > 70:
            insights.append(
                {
                    "type": "goals",
                    "title": "Strong Progress",
                    "message": "You made excellent progress on your goals this period.",
                    "priority": "positive",
                }
            )
        elif progress < 30:
            insights.append(
                {
                    "type": "goals",
                    "title": "Goal Focus Needed",
                    "message": "Consider revisiting your goals and breaking them into smaller steps.",
                    "priority": "medium",
                }
            )
    return insights


def goal_summary(goals: Sequence[Goal]) -> dict[str, Any]:
    completed = [g for g in goals if g.status == "completed"]
    in_progress = [g for g in goals if g.status == "in-progress"]
    return {
        "total": len(goals),
        "completed": len(completed),
        "in_progress": len(in_progress),
        "pending": len([g for g in goals if g.status == "pending"]),
        "average_progress": mean([g.progress for g in in_progress]),
        "completion_rate": len(completed) / len(goals) * 100 if goals else 0.0,
    }


def wellness_summary(check_ins: Sequence[CheckIn]) -> dict[str, Any]:
    moods = [float(evolution_mood_score(c.mood)) for c in check_ins]
    energies = [energy_value(c.energy) for c in check_ins]
    sleep = [sleep_total(c) for c in check_ins]
    return {
        "average_mood": mean(moods),
        "average_energy": mean(energies),
        "average_sleep": mean(sleep),
        "mood_trend": story_trend(moods),
        "energy_trend": story_trend(energies),
        "sleep_trend": story_trend(sleep),
    }


def theme_analysis(entries: Sequence[JournalEntry]) -> dict[str, Any]:
    themes = {theme: 0 for theme, _ in STORY_THEMES}
    for entry in entries:
        lowered = entry.text.lower()
        for theme, keywords in STORY_THEMES:
            if any(k in lowered for k in keywords):
                themes[theme] += 1
    dominant = None
    for theme, count in themes.items():
        if dominant is None or not themes[dominant] > count:
            dominant = theme
    return {"themes": themes, "dominant_theme": dominant, "total_mentions": sum(themes.values())}


def story_recommendations(data: AnalyticsInput) -> list[dict[str, Any]]:
    recommendations: list[dict[str, Any]] = []
    if wellness_summary(data.check_ins)["average_mood"] < 5:
        recommendations.append(
            {
                "type": "wellness",
                "title": "Boost Your Mood",
                "description": "Consider activities that bring you joy, such as spending time with loved ones "
                "or pursuing hobbies.",
                "priority": "high",
            }
        )
    # Completion rate is a percentage; this only trips when nothing was completed.
    if goal_summary(data.goals)["completion_rate"] < 0.3:
        recommendations.append(
            {
                "type": "productivity",
                "title": "Goal Setting Review",
                "description": "Review your goals and break them into smaller, more manageable tasks.",
                "priority": "medium",
            }
        )
    if len(data.journal_entries) < 3:
        recommendations.append(
            {
                "type": "reflection",
                "title": "Increase Journaling",
                "description": "Try to journal more regularly to better track your thoughts and progress.",
                "priority": "medium",
            }
        )
    return recommendations


def narrative_story(
    period_noun: str,
    entry_count: int,
    wellness: dict[str, Any],
    goals: dict[str, Any],
    themes: dict[str, Any],
) -> str:
    mood = format_one_decimal(wellness["average_mood"])
    story = f"This {period_noun} was a journey of {entry_count} moments captured in your journal. "
    if wellness["average_mood"] > 7:
        story += (
            f"Your spirits were high, with an average mood of {mood}/10, "
            "reflecting a period of positivity and contentment. "
        )
    elif wellness["average_mood"] < 4:
        story += (
            f"You faced some challenges, with an average mood of {mood}/10, "
            "showing resilience through difficult times. "
        )
    else:
        story += f"Your mood remained balanced at {mood}/10, showing steady emotional well-being. "
    if goals["completed"] > 0:
        story += (
            f"You celebrated {goals['completed']} achievement{_plural(goals['completed'])}, "
            "marking significant progress in your personal growth. "
        )
    if themes["dominant_theme"]:
        story += (
            f"Your reflections often centered around {THEME_PHRASES[themes['dominant_theme']]}, "
            "showing where your focus and energy were directed. "
        )
    story += f"As this {period_noun} comes to a close, you've created {entry_count} opportunities for self-reflection and growth. "
    return story


def timeline_story(entries: Sequence[JournalEntry], check_ins: Sequence[CheckIn]) -> list[dict[str, Any]]:
    days: dict[date, list[JournalEntry]] = {}
    for entry in entries:
        days.setdefault(entry.created_at.date(), []).append(entry)

    timeline = []
    for day, day_entries in days.items():
        total_words = sum(len(e.text) for e in day_entries)
        first = next((c for c in check_ins if c.created_at.date() == day), None)
        mood = first.mood if first is not None and first.mood else "😐"
        if len(day_entries) > 2:
            highlight = "Most Active Day"
        elif total_words > 500:
            highlight = "Deep Reflection Day"
        else:
            highlight = "Regular Day"
        timeline.append(
            {"date": day, "entries": len(day_entries), "total_words": total_words, "mood": mood, "highlight": highlight}
        )
    return sorted(timeline, key=lambda item: item["date"])


def character_story(entry_count: int, wellness: dict[str, Any], goals: dict[str, Any]) -> dict[str, Any]:
    mood, rate = wellness["average_mood"], goals["completion_rate"]
    traits: list[str] = []
    growth: list[str] = []
    challenges: list[str] = []
    achievements: list[str] = []

    if mood > 7:
        traits += ["Optimistic", "Resilient", "Content"]
    elif mood < 4:
        traits += ["Persevering", "Strong", "Learning"]
    else:
        traits += ["Balanced", "Steady", "Reflective"]
    if rate > 70:
        traits += ["Determined", "Focused", "Achiever"]
    if entry_count > 10:
        traits += ["Thoughtful", "Self-aware", "Dedicated"]

    if mood < 6:
        growth += ["Emotional resilience", "Self-care practices"]
    if rate < 50:
        growth += ["Goal setting", "Time management"]

    if mood < 4:
        challenges += ["Managing difficult emotions", "Finding balance"]
    if entry_count < 3:
        challenges.append("Maintaining consistent reflection")

    if goals["completed"] > 0:
        achievements.append(f"Completed {goals['completed']} goal{_plural(goals['completed'])}")
    if entry_count > 5:
        achievements.append("Maintained regular journaling practice")

    return {
        "name": "Your Journey",
        "traits": traits,
        "growth": growth,
        "challenges": challenges,
        "achievements": achievements,
    }


def journey_story(data: AnalyticsInput, wellness: dict[str, Any], goals: dict[str, Any]) -> dict[str, Any]:
    period_noun = _period_noun(data.period)
    chapters = []
    for index in range(1 if data.period == "weekly" else 4):
        week_start = data.start_date + timedelta(days=index * 7)
        week_end = week_start + timedelta(days=6)
        count = len([e for e in data.journal_entries if week_start <= e.created_at <= week_end])
        chapters.append(
            {
                "week": index + 1,
                "title": f"Week {index + 1}: {'Active Reflection' if count else 'Quiet Contemplation'}",
                "entries": count,
                "theme": "Growth" if count else "Rest",
                "summary": f"A week of {count} reflections and insights"
                if count
                else "A period of quiet observation and internal processing",
            }
        )

    milestones = []
    if goals["completed"] > 0:
        milestones.append(
            {
                "type": "achievement",
                "title": "Goal Completion",
                "description": f"Reached {goals['completed']} milestone{_plural(goals['completed'])}",
                "impact": "high",
            }
        )
    if wellness["average_mood"] > 7:
        milestones.append(
            {
                "type": "wellness",
                "title": "Emotional Peak",
                "description": "Experienced sustained positive mood",
                "impact": "positive",
            }
        )
    if len(data.journal_entries) > 10:
        milestones.append(
            {
                "type": "practice",
                "title": "Consistent Reflection",
                "description": "Maintained regular journaling practice",
                "impact": "growth",
            }
        )

    lessons = []
    if wellness["average_mood"] < 5:
        lessons.append(
            {
                "lesson": "Resilience in challenging times",
                "insight": "Difficult periods often lead to the most growth",
                "application": "Use these experiences to build emotional strength",
            }
        )
    if goals["completion_rate"] > 70:
        lessons.append(
            {
                "lesson": "The power of focused effort",
                "insight": "Clear goals and consistent action lead to achievement",
                "application": "Apply this focus to other areas of life",
            }
        )

    return {
        "title": f"Your {period_noun.capitalize()} Journey",
        "chapters": chapters,
        "milestones": milestones,
        "lessons": lessons,
    }


def reflection_story(
    entries: Sequence[JournalEntry],
    wellness: dict[str, Any],
    goals: dict[str, Any],
    themes: dict[str, Any],
) -> dict[str, Any]:
    insights = []
    if wellness["average_mood"] > 7:
        insights.append(
            {
                "category": "Emotional Well-being",
                "insight": "You experienced sustained positive emotions",
                "reflection": "Consider what contributed to this positive state and how to maintain it",
            }
        )
    if goals["completion_rate"] > 70:
        insights.append(
            {
                "category": "Goal Achievement",
                "insight": "You demonstrated strong follow-through on your goals",
                "reflection": "What strategies worked well for you? How can you apply them to future goals?",
            }
        )
    if themes["dominant_theme"]:
        insights.append(
            {
                "category": "Focus Areas",
                "insight": f"Your attention was primarily focused on {themes['dominant_theme']}",
                "reflection": "Is this alignment with your priorities? What might need adjustment?",
            }
        )

    patterns: list[str] = []
    if entries:
        average_length = _average_length(entries)
        if average_length > 500:
            patterns += ["Deep reflection style", "Detailed self-exploration"]
        elif average_length < 200:
            patterns += ["Concise expression", "Focused thinking"]

    growth: list[str] = []
    if wellness["average_mood"] < 6:
        growth += ["Emotional regulation", "Stress management"]
    if goals["completion_rate"] < 50:
        growth += ["Goal setting strategies", "Action planning"]

    return {"questions": list(REFLECTION_QUESTIONS), "insights": insights, "patterns": patterns, "growth": growth}


def generate_story_recap(data: AnalyticsInput) -> dict[str, Any]:
    """Build the full story recap for one window."""
    wellness = wellness_summary(data.check_ins)
    goals = goal_summary(data.goals)
    themes = theme_analysis(data.journal_entries)
    period_noun = _period_noun(data.period)
    entry_count = len(data.journal_entries)

    recap = {
        "period": data.period,
        "start_date": data.start_date,
        "end_date": data.end_date,
        "title": recap_title(data),
        "summary": recap_summary(data),
        "highlights": story_highlights(data),
        "insights": story_insights(data),
        "goals": goals,
        "wellness": wellness,
        "themes": themes,
        "recommendations": story_recommendations(data),
        "story": {
            "narrative": narrative_story(period_noun, entry_count, wellness, goals, themes),
            "timeline": timeline_story(data.journal_entries, data.check_ins),
            "character": character_story(entry_count, wellness, goals),
            "journey": journey_story(data, wellness, goals),
            "reflection": reflection_story(data.journal_entries, wellness, goals, themes),
        },
    }
    logger.debug(
        "story recap built",
        extra={"event": "story_recap_generated", "period": data.period, "entries": entry_count},
    )
    return recap


def story_recap_record(recap: dict[str, Any]) -> dict[str, Any]:
    """Row payload for the recaps table; ``content`` carries the headline parts as JSON text."""
    content = {key: recap[key] for key in ("title", "summary", "highlights", "insights", "recommendations")}
    return {
        "content": dumps(content),
        "insights": recap["insights"],
        "recommendations": recap["recommendations"],
        "life_area_improvements": [],
        "metrics": {},
    }


__all__ = [
    "generate_story_recap",
    "goal_summary",
    "recap_title",
    "story_recap_record",
    "story_trend",
    "theme_analysis",
    "wellness_summary",
]
