from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, Sequence

from lumen.apps.engine.analytics.stats import mean
from lumen.apps.engine.evolution.heuristics import (
    extract_daily_themes,
    extract_monthly_themes,
    extract_weekly_themes,
)
from lumen.libs.schemas.records import CheckIn, JournalEntry

# Check-in mood pickers store emoji.
EVOLUTION_MOOD_SCORES: dict[str, int] = {
    "😊": 9,
    "🙂": 7,
    "😐": 5,
    "😞": 3,
    "😢": 1,
    "😡": 2,
    "😴": 4,
    "🤔": 6,
    "😌": 8,
    "😤": 4,
}

_ENERGY_LEVELS: dict[str, float] = {"high": 8.0, "moderate": 5.0, "low": 3.0}


def evolution_mood_score(mood: str) -> int:
    return EVOLUTION_MOOD_SCORES.get(mood, 5)


def energy_value(energy: Any) -> float:
    if energy is None or energy == "":
        return 0.0
    if isinstance(energy, (int, float)):
        return float(energy)
    try:
        return float(energy)
    except (TypeError, ValueError):
        return _ENERGY_LEVELS.get(str(energy).strip().lower(), 3.0)


def sleep_total(check_in: CheckIn) -> float:
    return (check_in.sleep_hours or 0.0) + (check_in.sleep_minutes or 0.0) / 60


def _midnight(ts: datetime) -> datetime:
    return datetime.combine(ts.date(), time.min, tzinfo=ts.tzinfo)


def week_start_for(ts: datetime) -> datetime:
    """Sunday on/before ``ts``, at midnight."""
    days_since_sunday = (ts.weekday() + 1) % 7
    return _midnight(ts) - timedelta(days=days_since_sunday)


def month_start_for(ts: datetime) -> datetime:
    return _midnight(ts).replace(day=1)


def next_month_start(month_start: datetime) -> datetime:
    if month_start.month == 12:
        return month_start.replace(year=month_start.year + 1, month=1)
    return month_start.replace(month=month_start.month + 1)


def group_by_week(entries: Sequence[JournalEntry]) -> list[dict[str, Any]]:
    weeks: dict[datetime, dict[str, Any]] = {}
    for entry in entries:
        start = week_start_for(entry.created_at)
        weeks.setdefault(start, {"week_start": start, "entries": []})["entries"].append(entry)
    return [weeks[key] for key in sorted(weeks)]


def group_by_month(entries: Sequence[JournalEntry]) -> list[dict[str, Any]]:
    months: dict[datetime, dict[str, Any]] = {}
    for entry in entries:
        start = month_start_for(entry.created_at)
        months.setdefault(start, {"month_start": start, "entries": []})["entries"].append(entry)
    return [months[key] for key in sorted(months)]


def _summarize(entries: Sequence[JournalEntry], check_ins: Sequence[CheckIn], themes: list[str]) -> dict[str, Any]:
    return {
        "entry_count": len(entries),
        # character count stands in for word count
        "total_words": sum(len(e.text) for e in entries),
        "avg_mood": mean([evolution_mood_score(c.mood) for c in check_ins]),
        "avg_energy": mean([energy_value(c.energy) for c in check_ins]),
        "themes": themes,
    }


def analyze_day_data(entry: JournalEntry, check_ins: Sequence[CheckIn]) -> dict[str, Any]:
    day = entry.created_at.date()
    day_check_ins = [c for c in check_ins if c.created_at.date() == day]
    return _summarize([entry], day_check_ins, extract_daily_themes(entry))


def analyze_week_data(week: dict[str, Any], check_ins: Sequence[CheckIn]) -> dict[str, Any]:
    start = week["week_start"]
    end = start + timedelta(days=7)
    week_check_ins = [c for c in check_ins if start <= c.created_at < end]
    return _summarize(week["entries"], week_check_ins, extract_weekly_themes(week["entries"]))


def analyze_month_data(month: dict[str, Any], check_ins: Sequence[CheckIn]) -> dict[str, Any]:
    start = month["month_start"]
    end = next_month_start(start)
    month_check_ins = [c for c in check_ins if start <= c.created_at < end]
    return _summarize(month["entries"], month_check_ins, extract_monthly_themes(month["entries"]))


def generate_personality_snapshot(metrics: dict[str, Any]) -> dict[str, float]:
    """Behavioural trait estimate for one bucket; independent of the text scorers."""
    avg_mood = metrics["avg_mood"]
    avg_energy = metrics["avg_energy"]
    entry_count = metrics["entry_count"]
    total_words = metrics["total_words"]
    themes = metrics["themes"]
    return {
        "extraversion": 5 + (avg_mood - 5) * 0.2 + (0.5 if entry_count > 3 else 0),
        "neuroticism": 5 + (5 - avg_mood) * 0.3 + (0.3 if avg_energy < 5 else 0),
        "openness": 5 + (0.5 if len(themes) > 2 else 0) + (0.3 if total_words > 1000 else 0),
        "conscientiousness": 5 + (0.4 if entry_count > 2 else 0) + (0.3 if total_words > 500 else 0),
        "agreeableness": 5 + (0.3 if avg_mood > 6 else 0) + (0.4 if "relationships" in themes else 0),
    }


__all__ = [
    "EVOLUTION_MOOD_SCORES",
    "analyze_day_data",
    "analyze_month_data",
    "analyze_week_data",
    "energy_value",
    "evolution_mood_score",
    "generate_personality_snapshot",
    "group_by_month",
    "group_by_week",
    "month_start_for",
    "sleep_total",
    "week_start_for",
]
