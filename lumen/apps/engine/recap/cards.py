"""Swipeable highlight cards for the last week.

Each builder returns ``None`` when it has nothing to say; the caller keeps the
non-empty cards in a fixed order.
"""

from __future__ import annotations

from typing import Any, Sequence

from lumen.apps.engine.analytics.stats import mean
from lumen.apps.engine.recap.engine import growth_mindset, most_active_day, recap_mood_score
from lumen.apps.engine.recap.formatting import format_day
from lumen.libs.json_utils import json_safe
from lumen.libs.schemas.records import AnalyticsInput, CheckIn, FinanceEntry, Goal, JournalEntry, Person, Task

PLACE_KEYWORDS = ("home", "work", "office", "gym", "store", "restaurant", "cafe", "park", "school", "hospital")
CARD_LEARNING_KEYWORDS = ("learn", "learned", "discovered", "realized", "understood", "figured out")
CARD_CHALLENGE_KEYWORDS = ("challenge", "overcame", "difficult", "struggled", "managed", "solved")
CARD_GROWTH_KEYWORDS = ("grow", "growth", "improve", "develop", "progress", "better")


def _matching(entries: Sequence[JournalEntry], keywords: Sequence[str]) -> list[JournalEntry]:
    return [e for e in entries if any(k in e.text.lower() for k in keywords)]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


def _money(value: float) -> str:
    return f"${value:.2f}"


def mood_trend(scores: Sequence[float]) -> str:
    if len(scores) < 2:
        return "stable"
    split = len(scores) // 2
    first, second = mean(scores[:split]), mean(scores[split:])
    if second > first * 1.1:
        return "improving"
    if second < first * 0.9:
        return "declining"
    return "stable"


def dominant_mood(moods: Sequence[str]) -> str:
    counts: dict[str, int] = {}
    for mood in moods:
        counts[mood] = counts.get(mood, 0) + 1
    winner = moods[0]
    for mood, count in counts.items():
        if count >= counts[winner]:
            winner = mood
    return winner


def extract_places(entries: Sequence[JournalEntry]) -> list[dict[str, Any]]:
    counts: dict[str, int] = {}
    for entry in entries:
        lowered = entry.text.lower()
        for keyword in PLACE_KEYWORDS:
            if keyword in lowered:
                counts[keyword] = counts.get(keyword, 0) + 1
    places = [{"name": name, "count": count} for name, count in counts.items()]
    return sorted(places, key=lambda p: -p["count"])


def people_card(people: Sequence[Person], entries: Sequence[JournalEntry], data: AnalyticsInput) -> dict[str, Any] | None:
    if not people:
        return None
    mentions = []
    for person in people:
        count = len([e for e in entries if person.name.lower() in e.text.lower()])
        if count:
            mentions.append({**person.model_dump(), "mentions": count})
    mentions.sort(key=lambda p: -p["mentions"])
    new_people = [p for p in people if data.start_date <= p.created_at <= data.end_date]
    if not mentions and not new_people:
        return None

    top = mentions[0] if mentions else None
    total_mentions = sum(p["mentions"] for p in mentions)
    unique = len(mentions)

    content = ""
    if top:
        content += f"This week, you talked about {top['name']} the most in your journal entries. "
    if new_people:
        content += f"You also added {_plural(len(new_people), 'new person')} to your network. "
    content += f"In total, you mentioned {total_mentions} people across {unique} different connections. "
    if unique > 3:
        content += "You're maintaining a diverse social network!"
    elif unique > 0:
        content += "You're building meaningful relationships."

    insights = []
    if new_people:
        insights.append(f"You added {_plural(len(new_people), 'new person')} to your network")
    if total_mentions:
        insights.append(f"You mentioned {total_mentions} people in your journal entries")
    if unique > 1:
        insights.append(f"You interacted with {unique} different people this week")

    highlights = []
    if top:
        highlights.append(f"{top['name']} was mentioned {top['mentions']} times")
    if new_people:
        highlights.append(f"New connection: {new_people[0].name}")
    if mentions:
        highlights.append(f"Most active day for social interactions: {most_active_day(entries)}")

    return {
        "id": "people-card",
        "category": "people",
        "title": f"You talked about {top['name']} the most" if top else "Your social connections",
        "subtitle": "People & Relationships",
        "content": content,
        "insights": insights,
        "highlights": highlights,
        "data": {
            "people_mentions": mentions,
            "new_people": [p.model_dump() for p in new_people],
            "total_mentions": total_mentions,
        },
    }


def mood_card(check_ins: Sequence[CheckIn]) -> dict[str, Any] | None:
    if not check_ins:
        return None
    scored = [{**c.model_dump(), "score": recap_mood_score(c.mood)} for c in check_ins]
    scores = [c["score"] for c in scored]
    average = mean(scores)
    best, worst = max(scores), min(scores)
    best_day = next(c for c in scored if c["score"] == best)
    worst_day = next(c for c in scored if c["score"] == worst)
    trend = mood_trend(scores)
    dominant = dominant_mood([c.mood for c in check_ins])

    if average >= 7:
        content = f"You had a great week emotionally! Your average mood was {average:.1f}/10. "
    elif average >= 5:
        content = f"You had a balanced week with an average mood of {average:.1f}/10. "
    else:
        content = f"You had some challenging moments this week, with an average mood of {average:.1f}/10. "
    content += f"Your best day was {format_day(best_day['created_at'])} when you felt {best_day['mood']}. "
    if trend == "improving":
        content += "Your mood trended upward throughout the week!"
    elif trend == "declining":
        content += "You faced some emotional challenges this week."
    else:
        content += "Your mood remained relatively stable."

    return {
        "id": "mood-card",
        "category": "mood",
        "title": f"Your mood was mostly {dominant} this week",
        "subtitle": "Emotional Journey",
        "content": content,
        "insights": [
            f"Your average mood was {average:.1f}/10 this week",
            f"You felt your best on {format_day(best_day['created_at'])}",
            f"You had a challenging day on {format_day(worst_day['created_at'])}",
            f"You completed {len(check_ins)} mood check-ins",
        ],
        "highlights": [
            f"Best mood: {best}/10",
            f"Mood trend: {trend}",
            f"Most frequent mood: {dominant}",
        ],
        "data": {"mood_scores": scored, "avg_mood": average, "dominant_mood": dominant, "mood_trend": trend},
    }


def places_card(entries: Sequence[JournalEntry]) -> dict[str, Any] | None:
    places = extract_places(entries)
    if not places:
        return None
    top = places[0]
    total = len(places)
    active_day = most_active_day(entries)

    content = f"This week, you visited {top['name']} the most ({top['count']} times). "
    if total > 3:
        content += f"You were quite active, visiting {total} different places. "
    elif total > 1:
        content += f"You visited {total} different places this week. "
    if top["count"] > 3:
        content += f"It seems like {top['name']} is becoming a regular part of your routine!"
    else:
        content += "You're exploring different places and activities."

    return {
        "id": "places-card",
        "category": "places",
        "title": f"You visited {top['name']} the most",
        "subtitle": "Places & Activities",
        "content": content,
        "insights": [
            f"You mentioned {total} different places this week",
            f"Your most frequent location was {top['name']} ({top['count']} times)",
            f"You were most active on {active_day}",
        ],
        "highlights": [
            f"Favorite place: {top['name']}",
            f"Total places visited: {total}",
            f"Most active day: {active_day}",
        ],
        "data": {"places": places, "most_frequent_place": top, "total_places": total},
    }


def growth_card(entries: Sequence[JournalEntry]) -> dict[str, Any] | None:
    if not entries:
        return None
    learning = _matching(entries, CARD_LEARNING_KEYWORDS)
    challenges = _matching(entries, CARD_CHALLENGE_KEYWORDS)
    growth_words = _matching(entries, CARD_GROWTH_KEYWORDS)
    total = len(learning) + len(challenges) + len(growth_words)
    if total == 0:
        return None

    content = ""
    if learning:
        content += f"You had {_plural(len(learning), 'learning moment')} this week. "
    if challenges:
        content += f"You overcame {_plural(len(challenges), 'challenge')}. "
    if growth_words:
        content += f"You used {len(growth_words)} growth-related words in your reflections. "
    if total > 5:
        content += "You're showing excellent personal development this week!"
    elif total > 2:
        content += "You're making steady progress in your personal growth."
    else:
        content += "Every small step counts towards your growth."

    insights = []
    if learning:
        insights.append(f"You had {len(learning)} learning moments")
    if challenges:
        insights.append(f"You overcame {len(challenges)} challenges")
    if growth_words:
        insights.append(f"You used {len(growth_words)} growth-related words")

    highlights = []
    if learning:
        highlights.append(f"Learned: {learning[0].text[:50]}...")
    if challenges:
        highlights.append(f"Overcame: {challenges[0].text[:50]}...")
    highlights.append(f"Growth mindset: {growth_mindset(entries)}")

    return {
        "id": "growth-card",
        "category": "growth",
        "title": f"You grew in {total} different ways this week",
        "subtitle": "Personal Development",
        "content": content,
        "insights": insights,
        "highlights": highlights,
        "data": {
            "learning_moments": [e.model_dump() for e in learning],
            "challenges_overcome": [e.model_dump() for e in challenges],
            "growth_keywords": [e.model_dump() for e in growth_words],
            "total_growth": total,
        },
    }


def goals_card(goals: Sequence[Goal], tasks: Sequence[Task]) -> dict[str, Any] | None:
    completed_tasks = len([t for t in tasks if t.status == "completed"])
    completed_goals = len([g for g in goals if g.status == "completed"])
    total_tasks, total_goals = len(tasks), len(goals)
    if not total_tasks and not total_goals:
        return None
    task_rate = completed_tasks / total_tasks * 100 if total_tasks else 0.0
    goal_rate = completed_goals / total_goals * 100 if total_goals else 0.0

    content = ""
    if completed_tasks:
        content += f"You completed {completed_tasks} out of {total_tasks} tasks this week. "
    if completed_goals:
        content += f"You achieved {completed_goals} out of {total_goals} goals. "
    if task_rate >= 80:
        content += f"You had an excellent task completion rate of {task_rate:.1f}%! "
    elif task_rate >= 60:
        content += f"You had a good task completion rate of {task_rate:.1f}%. "
    elif total_tasks:
        content += f"You completed {task_rate:.1f}% of your tasks. "
    if goal_rate >= 80:
        content += "You're making excellent progress on your goals!"
    elif goal_rate >= 60:
        content += "You're making steady progress on your goals."
    elif total_goals:
        content += "Keep working towards your goals!"

    insights = []
    if total_tasks:
        insights.append(f"Task completion rate: {task_rate:.1f}%")
    if total_goals:
        insights.append(f"Goal completion rate: {goal_rate:.1f}%")
    insights.append(f"You made progress on {total_tasks + total_goals} items this week")

    highlights = []
    if completed_tasks:
        highlights.append(f"Completed {completed_tasks} tasks")
    if completed_goals:
        highlights.append(f"Achieved {completed_goals} goals")
    highlights.append(f"Most productive day: {most_active_day(tasks)}")

    return {
        "id": "goals-card",
        "category": "goals",
        "title": f"You completed {completed_tasks} tasks and {completed_goals} goals",
        "subtitle": "Achievements & Progress",
        "content": content,
        "insights": insights,
        "highlights": highlights,
        "data": {
            "completed_tasks": completed_tasks,
            "total_tasks": total_tasks,
            "completed_goals": completed_goals,
            "total_goals": total_goals,
            "task_completion_rate": task_rate,
            "goal_completion_rate": goal_rate,
        },
    }


def finance_card(finance: Sequence[FinanceEntry]) -> dict[str, Any] | None:
    if not finance:
        return None
    income = sum(e.amount for e in finance if e.category == "income")
    expenses_list = [e for e in finance if e.category == "expense"]
    expenses = sum(e.amount for e in expenses_list)
    savings = income - expenses
    rate = savings / income * 100 if income > 0 else 0.0
    top_expense = sorted(expenses_list, key=lambda e: -e.amount)[0] if expenses_list else None

    if savings >= 0:
        content = f"Great job! You saved {_money(savings)} this week. "
    else:
        content = f"You spent {_money(abs(savings))} more than you earned this week. "
    if income > 0:
        content += f"Your total income was {_money(income)}. "
    if expenses > 0:
        content += f"Your total expenses were {_money(expenses)}. "
    if rate >= 20:
        content += f"You're maintaining an excellent savings rate of {rate:.1f}%!"
    elif rate >= 10:
        content += f"You're building good savings habits with a {rate:.1f}% savings rate."
    elif rate > 0:
        content += f"You're starting to build your savings with a {rate:.1f}% rate."
    else:
        content += "Consider reviewing your spending patterns."

    insights = [f"Total income: {_money(income)}", f"Total expenses: {_money(expenses)}"]
    if rate > 0:
        insights.append(f"Savings rate: {rate:.1f}%")
    insights.append(f"You tracked {len(finance)} financial entries")

    highlights = [f"Saved {_money(savings)}" if savings >= 0 else f"Overspent by {_money(abs(savings))}"]
    if top_expense:
        highlights.append(f"Biggest expense: {top_expense.description} ({_money(top_expense.amount)})")
    highlights.append(f"Financial tracking: {len(finance)} entries")

    return {
        "id": "finance-card",
        "category": "finance",
        "title": f"You saved {_money(savings)} this week" if savings >= 0 else f"You spent {_money(abs(savings))} more than you earned",
        "subtitle": "Financial Journey",
        "content": content,
        "insights": insights,
        "highlights": highlights,
        "data": {
            "income": income,
            "expenses": expenses,
            "savings": savings,
            "savings_rate": rate,
            "top_expense": top_expense.model_dump() if top_expense else None,
            "total_entries": len(finance),
        },
    }


def generate_recap_cards(data: AnalyticsInput) -> list[dict[str, Any]]:
    """People, mood, places, growth, goals and finance cards, skipping empty ones."""
    cards = [
        people_card(data.people, data.journal_entries, data),
        mood_card(data.check_ins),
        places_card(data.journal_entries),
        growth_card(data.journal_entries),
        goals_card(data.goals, data.tasks),
        finance_card(data.finance_entries),
    ]
    return [json_safe(card) for card in cards if card is not None]


__all__ = [
    "extract_places",
    "finance_card",
    "generate_recap_cards",
    "goals_card",
    "growth_card",
    "mood_card",
    "people_card",
    "places_card",
]
