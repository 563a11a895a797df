"""Day-level correlations between check-ins and journal writing.

Check-ins and entries are joined on calendar day. Mood, energy and content
rows pair an entry with same-day check-ins; sleep rows pair it with the
previous day's check-ins.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Mapping, Sequence

from lumen.apps.engine.analytics.stats import mean
from lumen.apps.engine.evolution.buckets import energy_value, evolution_mood_score, sleep_total, week_start_for
from lumen.apps.engine.evolution.heuristics import count_hits
from lumen.libs.schemas.records import AnalyticsInput, CheckIn, JournalEntry

logger = logging.getLogger(__name__)

ANALYSIS_TYPES = ("all", "mood", "energy", "sleep", "content")

LONG_ENTRY = 500
SHORT_ENTRY = 200
RESTED_ENTRY = 400

ANALYZED_STATUSES = ("analyzed", "completed")

CONTENT_POSITIVE_WORDS = ("happy", "good", "great", "excellent", "wonderful", "amazing", "love", "enjoy")
CONTENT_NEGATIVE_WORDS = ("sad", "bad", "terrible", "awful", "hate", "stress", "anxiety", "worried")

CONTENT_THEMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("work", ("work", "job", "project")),
    ("relationships", ("family", "friend", "relationship")),
    ("health", ("health", "exercise", "diet")),
    ("finance", ("money", "finance", "budget")),
)

# Flag name -> keywords, any hit sets the flag.
CONTENT_FLAGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("positive_content", ("happy", "good", "great")),
    ("negative_content", ("sad", "bad", "stress")),
    ("work_content", ("work", "job", "project")),
    ("personal_content", ("family", "friend", "relationship")),
)

WEEKLY_TREND_DELTA = 0.5


def sleep_quality(hours: float) -> str:
    if hours >= 8:
        return "excellent"
    if hours >= 7:
        return "good"
    if hours >= 6:
        return "fair"
    return "poor"


def dominant_mood(moods: Sequence[str]) -> str:
    """Most frequent mood; the first one seen wins a tie."""
    counts: dict[str, int] = {}
    for mood in moods:
        counts[mood] = counts.get(mood, 0) + 1
    if not counts:
        return "😐"
    return max(counts, key=counts.__getitem__)


def mood_writing_pattern(mood: float, length: int) -> str:
    if mood > 7 and length > LONG_ENTRY:
        return "high_mood_long_writing"
    if mood < 4 and length < SHORT_ENTRY:
        return "low_mood_short_writing"
    if mood > 7 and length < SHORT_ENTRY:
        return "high_mood_concise"
    if mood < 4 and length > LONG_ENTRY:
        return "low_mood_detailed"
    return "balanced"


def energy_writing_pattern(energy: float, length: int) -> str:
    if energy > 7 and length > LONG_ENTRY:
        return "high_energy_detailed"
    if energy < 4 and length < SHORT_ENTRY:
        return "low_energy_brief"
    if energy > 7 and length < SHORT_ENTRY:
        return "high_energy_focused"
    if energy < 4 and length > LONG_ENTRY:
        return "low_energy_rambling"
    return "balanced"


def sleep_writing_pattern(sleep: float, length: int, hour: int) -> str:
    if sleep >= 7 and length > RESTED_ENTRY:
        return "well_rested_detailed"
    if sleep < 6 and length < SHORT_ENTRY:
        return "tired_brief"
    if sleep >= 7 and hour < 12:
        return "well_rested_morning"
    if sleep < 6 and hour > 22:
        return "tired_late_night"
    return "balanced"


def content_sentiment(text: str) -> str:
    lowered = (text or "").lower()
    positive = count_hits(lowered, CONTENT_POSITIVE_WORDS)
    negative = count_hits(lowered, CONTENT_NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def content_themes(text: str) -> list[str]:
    lowered = (text or "").lower()
    return [theme for theme, keywords in CONTENT_THEMES if any(k in lowered for k in keywords)]


def _by_day(check_ins: Sequence[CheckIn]) -> dict[date, list[CheckIn]]:
    days: dict[date, list[CheckIn]] = {}
    for check_in in check_ins:
        days.setdefault(check_in.created_at.date(), []).append(check_in)
    return days


def analyze_mood_correlations(
    entries: Sequence[JournalEntry],
    check_ins: Sequence[CheckIn],
) -> list[dict[str, Any]]:
    days = {
        day: {
            "average": mean([evolution_mood_score(c.mood) for c in group]),
            "dominant": dominant_mood([c.mood for c in group]),
        }
        for day, group in _by_day(check_ins).items()
    }
    rows: list[dict[str, Any]] = []
    for entry in entries:
        day = entry.created_at.date()
        if day not in days:
            continue
        mood, length = days[day]["average"], len(entry.text)
        rows.append(
            {
                "date": day,
                "mood": mood,
                "dominant_mood": days[day]["dominant"],
                "entry_length": length,
                "has_analysis": entry.processing_status in ANALYZED_STATUSES,
                "correlation": {
                    "high_mood_long_entries": mood > 7 and length > LONG_ENTRY,
                    "low_mood_short_entries": mood < 4 and length < SHORT_ENTRY,
                    "mood_writing_pattern": mood_writing_pattern(mood, length),
                },
            }
        )
    return rows


def analyze_energy_correlations(
    entries: Sequence[JournalEntry],
    check_ins: Sequence[CheckIn],
) -> list[dict[str, Any]]:
    days: dict[date, dict[str, Any]] = {}
    for day, group in _by_day(check_ins).items():
        energies = [energy_value(c.energy) for c in group]
        days[day] = {"average": mean(energies), "range": {"min": min(energies), "max": max(energies)}}

    rows: list[dict[str, Any]] = []
    for entry in entries:
        day = entry.created_at.date()
        if day not in days:
            continue
        energy, length = days[day]["average"], len(entry.text)
        rows.append(
            {
                "date": day,
                "energy": energy,
                "energy_range": days[day]["range"],
                "entry_length": length,
                "processing_type": entry.processing_type,
                "correlation": {
                    "high_energy_full_analysis": energy > 7 and entry.processing_type == "full-analysis",
                    "low_energy_basic_processing": energy < 4 and entry.processing_type == "transcribe-only",
                    "energy_writing_pattern": energy_writing_pattern(energy, length),
                },
            }
        )
    return rows


def analyze_sleep_correlations(
    entries: Sequence[JournalEntry],
    check_ins: Sequence[CheckIn],
) -> list[dict[str, Any]]:
    nights = {day: mean([sleep_total(c) for c in group]) for day, group in _by_day(check_ins).items()}
    rows: list[dict[str, Any]] = []
    for entry in entries:
        previous = entry.created_at.date() - timedelta(days=1)
        if previous not in nights:
            continue
        sleep, length, hour = nights[previous], len(entry.text), entry.created_at.hour
        rows.append(
            {
                "date": entry.created_at.date(),
                "previous_day_sleep": sleep,
                "sleep_quality": sleep_quality(sleep),
                "entry_length": length,
                "entry_time": hour,
                "correlation": {
                    "good_sleep_long_entries": sleep >= 7 and length > RESTED_ENTRY,
                    "poor_sleep_short_entries": sleep < 6 and length < SHORT_ENTRY,
                    "sleep_writing_pattern": sleep_writing_pattern(sleep, length, hour),
                },
            }
        )
    return rows


def analyze_content_patterns(
    entries: Sequence[JournalEntry],
    check_ins: Sequence[CheckIn],
) -> list[dict[str, Any]]:
    days = _by_day(check_ins)
    rows: list[dict[str, Any]] = []
    for entry in entries:
        day = entry.created_at.date()
        group = days.get(day)
        if not group:
            continue
        text = entry.text
        lowered = text.lower()
        rows.append(
            {
                "date": day,
                "content_length": len(text),
                "word_count": len(text.split(" ")),
                "sentiment": content_sentiment(text),
                "themes": content_themes(text),
                "mood": mean([evolution_mood_score(c.mood) for c in group]),
                "energy": mean([energy_value(c.energy) for c in group]),
                "patterns": {flag: any(k in lowered for k in keywords) for flag, keywords in CONTENT_FLAGS},
            }
        )
    return rows


def group_data_by_week(entries: Sequence[JournalEntry], check_ins: Sequence[CheckIn]) -> list[dict[str, Any]]:
    """Sunday-start weeks seeded by check-ins; entries only land in weeks that have one."""
    weeks: dict[date, dict[str, list[float]]] = {}
    for check_in in check_ins:
        week = weeks.setdefault(
            week_start_for(check_in.created_at).date(),
            {"moods": [], "energies": [], "sleep": [], "lengths": []},
        )
        week["moods"].append(evolution_mood_score(check_in.mood))
        week["energies"].append(energy_value(check_in.energy))
        week["sleep"].append(sleep_total(check_in))
    for entry in entries:
        week = weeks.get(week_start_for(entry.created_at).date())
        if week is not None:
            week["lengths"].append(len(entry.text))

    return [
        {
            "week": start,
            "average_mood": mean(week["moods"]),
            "average_energy": mean(week["energies"]),
            "average_sleep": mean(week["sleep"]),
            "journal_count": len(week["lengths"]),
            "average_entry_length": mean(week["lengths"]),
        }
        for start, week in weeks.items()
    ]


def week_over_week(previous: Mapping[str, Any] | None, current: Mapping[str, Any]) -> str:
    if previous is None:
        return "stable"
    delta = current["average_mood"] - previous["average_mood"]
    if delta > WEEKLY_TREND_DELTA:
        return "improving"
    if delta < -WEEKLY_TREND_DELTA:
        return "declining"
    return "stable"


def analyze_trends(entries: Sequence[JournalEntry], check_ins: Sequence[CheckIn]) -> list[dict[str, Any]]:
    weeks = sorted(group_data_by_week(entries, check_ins), key=lambda w: w["week"])
    trends: list[dict[str, Any]] = []
    previous: Mapping[str, Any] | None = None
    for week in weeks:
        trends.append(
            {
                "period": week["week"],
                "type": "weekly",
                "metrics": {
                    "average_mood": week["average_mood"],
                    "average_energy": week["average_energy"],
                    "average_sleep": week["average_sleep"],
                    "journal_frequency": week["journal_count"],
                    "average_entry_length": week["average_entry_length"],
                    "trend": week_over_week(previous, week),
                },
            }
        )
        previous = week
    return trends


def generate_correlation_insights(analysis: Mapping[str, Sequence[Mapping[str, Any]]]) -> list[dict[str, Any]]:
    insights: list[dict[str, Any]] = []

    moods = analysis.get("mood_correlations", [])
    high_mood = len([c for c in moods if c["mood"] > 7])
    low_mood = len([c for c in moods if c["mood"] < 4])
    if high_mood > low_mood:
        insights.append(
            {
                "type": "mood_trend",
                "title": "Positive Mood Trend",
                "message": f"You've had {high_mood} high-mood days vs {low_mood} low-mood days. "
                "Your overall mood trend is positive.",
                "priority": "low",
            }
        )
    elif low_mood > high_mood:
        insights.append(
            {
                "type": "mood_trend",
                "title": "Mood Improvement Opportunity",
                "message": f"You've had {low_mood} low-mood days vs {high_mood} high-mood days. "
                "Consider activities that boost your mood.",
                "priority": "high",
            }
        )

    energies = analysis.get("energy_correlations", [])
    high_energy = len([c for c in energies if c["energy"] > 7])
    low_energy = len([c for c in energies if c["energy"] < 4])
    if high_energy > low_energy:
        insights.append(
            {
                "type": "energy_trend",
                "title": "Good Energy Levels",
                "message": f"You tend to journal more when your energy is high "
                f"({high_energy} vs {low_energy} low-energy entries).",
                "priority": "low",
            }
        )

    nights = analysis.get("sleep_correlations", [])
    good_sleep = len([c for c in nights if c["previous_day_sleep"] >= 7])
    poor_sleep = len([c for c in nights if c["previous_day_sleep"] < 6])
    if poor_sleep > good_sleep:
        insights.append(
            {
                "type": "sleep_trend",
                "title": "Sleep Quality Impact",
                "message": f"Poor sleep ({poor_sleep} days) seems to affect your journaling "
                f"more than good sleep ({good_sleep} days).",
                "priority": "medium",
            }
        )
    return insights


def generate_correlation_analysis(data: AnalyticsInput, *, analysis_type: str = "all") -> dict[str, Any]:
    """Run the requested correlation passes; weekly trends and insights always run."""
    if analysis_type not in ANALYSIS_TYPES:
        raise ValueError(f"Unknown analysis type: {analysis_type}")
    entries = sorted(data.journal_entries, key=lambda e: e.created_at)
    check_ins = sorted(data.check_ins, key=lambda c: c.created_at)

    def wanted(kind: str) -> bool:
        return analysis_type in ("all", kind)

    analysis: dict[str, Any] = {
        "mood_correlations": analyze_mood_correlations(entries, check_ins) if wanted("mood") else [],
        "energy_correlations": analyze_energy_correlations(entries, check_ins) if wanted("energy") else [],
        "sleep_correlations": analyze_sleep_correlations(entries, check_ins) if wanted("sleep") else [],
        "content_patterns": analyze_content_patterns(entries, check_ins) if wanted("content") else [],
        "trends": analyze_trends(entries, check_ins),
    }
    analysis["insights"] = generate_correlation_insights(analysis)
    logger.debug(
        "correlation analysis built",
        extra={
            "event": "correlations_generated",
            "analysis_type": analysis_type,
            "mood_rows": len(analysis["mood_correlations"]),
            "insights": len(analysis["insights"]),
        },
    )
    return analysis


__all__ = [
    "ANALYSIS_TYPES",
    "analyze_content_patterns",
    "analyze_energy_correlations",
    "analyze_mood_correlations",
    "analyze_sleep_correlations",
    "analyze_trends",
    "content_sentiment",
    "content_themes",
    "dominant_mood",
    "generate_correlation_analysis",
    "generate_correlation_insights",
    "group_data_by_week",
    "sleep_quality",
]
