"""Display strings for recap metrics.

The ``change`` column on a recap metric is a fixed label chosen by metric and
trend direction, it is not computed from the data. Count-style metrics echo
their own count (``+{count}``). Every metric shows ``"0"`` when its trend is
neutral.
"""

from __future__ import annotations

from datetime import datetime

CHANGE_LABELS: dict[str, dict[str, str]] = {
    "average_mood": {"up": "+0.5", "down": "-0.3"},
    "energy_level": {"up": "+0.8", "down": "-0.4"},
    "sleep_quality": {"up": "+0.3h"},
    "check_ins": {"up": "+2 days"},
    "entries_written": {"up": "+3", "down": "-1"},
    "words_written": {"up": "+456", "down": "-120"},
    "reflection_depth": {"up": "+15%"},
    "voice_entries": {"up": "+1"},
    "goals_completed": {"up": "+{count}"},
    "life_balance": {"up": "+0.4"},
    "priority_shifts": {"up": "+{count}"},
    "growth_areas": {"up": "+1"},
    "people_mentioned": {"up": "+{count}"},
    "positive_interactions": {"up": "+10%"},
    "new_connections": {"up": "+{count}"},
    "quality_time": {"up": "+3h"},
    "tasks_completed": {"up": "+{count}"},
    "financial_goals": {"up": "+5%"},
    "savings_rate": {"up": "+5%"},
    "productivity_score": {"up": "+0.8"},
    "self_awareness": {"up": "+0.7"},
    "learning_moments": {"up": "+{count}"},
    "challenges_overcome": {"up": "+{count}"},
    "growth_mindset": {"up": "+15%"},
}


def format_change(metric: str, trend: str, count: int = 0) -> str:
    label = CHANGE_LABELS.get(metric, {}).get(trend)
    if label is None:
        return "0"
    return label.format(count=count)


def format_one_decimal(value: float) -> str:
    return f"{value:.1f}"


def format_day(ts: datetime) -> str:
    """US short date, e.g. ``3/7/2024``."""
    return f"{ts.month}/{ts.day}/{ts.year}"


def format_thousands(value: int) -> str:
    return f"{value:,}"


def period_label(period: str) -> str:
    return "this week" if period == "weekly" else "this month"


__all__ = [
    "CHANGE_LABELS",
    "format_change",
    "format_day",
    "format_one_decimal",
    "format_thousands",
    "period_label",
]
