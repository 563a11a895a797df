from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from lumen.apps.engine.analytics.stats import evolution_trend, mean, variance
from lumen.apps.engine.evolution.buckets import (
    analyze_day_data,
    analyze_month_data,
    analyze_week_data,
    generate_personality_snapshot,
    group_by_month,
    group_by_week,
)
from lumen.apps.engine.evolution.heuristics import (
    TRAITS,
    analyze_content_for_traits,
    calculate_confidence,
    detect_life_events,
    estimate_personality_impact,
    extract_context,
)
from lumen.libs.schemas.records import AnalyticsInput, CheckIn, JournalEntry

logger = logging.getLogger(__name__)

DEFAULT_IDEAL_PROFILE: dict[str, float] = {
    "extraversion": 7,
    "neuroticism": 3,
    "openness": 8,
    "conscientiousness": 7,
    "agreeableness": 8,
}

GROWTH_SUGGESTIONS: dict[str, list[str]] = {
    "extraversion": [
        "Try joining a social group or club",
        "Practice initiating conversations",
        "Attend social events regularly",
    ],
    "neuroticism": [
        "Practice mindfulness and meditation",
        "Develop stress management techniques",
        "Consider therapy or counseling",
    ],
    "openness": [
        "Try new hobbies or activities",
        "Read diverse books and articles",
        "Travel to new places",
    ],
    "conscientiousness": [
        "Set clear goals and deadlines",
        "Create daily routines and schedules",
        "Practice time management skills",
    ],
    "agreeableness": [
        "Practice active listening",
        "Show empathy in conversations",
        "Volunteer or help others",
    ],
}

GROWTH_GAP_THRESHOLD = 0.3


def _chronological(entries: Sequence[JournalEntry]) -> list[JournalEntry]:
    return sorted(entries, key=lambda e: e.created_at)


def generate_timeline(
    entries: Sequence[JournalEntry],
    check_ins: Sequence[CheckIn],
    granularity: str,
) -> list[dict[str, Any]]:
    ordered = _chronological(entries)
    buckets: list[tuple] = []
    if granularity == "weekly":
        for week in group_by_week(ordered):
            buckets.append((week["week_start"], "weekly", analyze_week_data(week, check_ins)))
    elif granularity == "monthly":
        for month in group_by_month(ordered):
            buckets.append((month["month_start"], "monthly", analyze_month_data(month, check_ins)))
    else:
        for entry in ordered:
            buckets.append((entry.created_at, "daily", analyze_day_data(entry, check_ins)))

    return [
        {
            "period": period,
            "type": kind,
            "index": index,
            "metrics": metrics,
            "personality_snapshot": generate_personality_snapshot(metrics),
        }
        for index, (period, kind, metrics) in enumerate(buckets)
    ]


def analyze_trait_evolution(entries: Sequence[JournalEntry]) -> dict[str, list[dict[str, Any]]]:
    series: dict[str, list[dict[str, Any]]] = {trait: [] for trait in TRAITS}
    for entry in _chronological(entries):
        text = entry.text
        scores = analyze_content_for_traits(text)
        confidence = calculate_confidence(len(text))
        for trait in TRAITS:
            series[trait].append(
                {
                    "date": entry.created_at,
                    "score": scores[trait],
                    "confidence": confidence,
                    "context": extract_context(text, trait),
                }
            )

    # Second pass: one trend per full series, point-to-point change.
    for points in series.values():
        trend = evolution_trend([p["score"] for p in points])
        previous: float | None = None
        for point in points:
            point["trend"] = trend
            point["change"] = point["score"] - previous if previous is not None else 0
            previous = point["score"]
    return series


def identify_life_events(entries: Sequence[JournalEntry]) -> list[dict[str, Any]]:
    events: list[dict[str, Any]] = []
    for entry in entries:
        text = entry.text
        for detected in detect_life_events(text):
            events.append(
                {
                    "date": entry.created_at,
                    "type": detected["type"],
                    "impact": detected["impact"],
                    "description": detected["description"],
                    "personality_impact": estimate_personality_impact(detected, text),
                }
            )
    return sorted(events, key=lambda e: e["date"])


def _snapshot_average(snapshot: Mapping[str, float]) -> float:
    return sum(snapshot.values()) / len(TRAITS)


def analyze_growth_patterns(timeline: Sequence[Mapping[str, Any]]) -> dict[str, int]:
    positive = negative = 0
    for previous, current in zip(timeline, timeline[1:]):
        before = _snapshot_average(previous["personality_snapshot"])
        after = _snapshot_average(current["personality_snapshot"])
        if after > before:
            positive += 1
        elif after < before:
            negative += 1
    return {"positive_growth": positive, "negative_growth": negative}


def generate_personality_insights(
    trait_evolution: Mapping[str, Sequence[Mapping[str, Any]]],
    timeline: Sequence[Mapping[str, Any]],
    life_events: Sequence[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    insights: list[dict[str, Any]] = []
    for trait, points in trait_evolution.items():
        spread = variance([p["score"] for p in points])
        if spread > 0.5:
            insights.append(
                {
                    "type": "trait_volatility",
                    "trait": trait,
                    "message": f"Your {trait} shows significant variation, suggesting you're adapting to changing circumstances.",
                    "priority": "medium",
                }
            )
        elif spread < 0.1:
            insights.append(
                {
                    "type": "trait_stability",
                    "trait": trait,
                    "message": f"Your {trait} remains remarkably stable, indicating a strong core personality trait.",
                    "priority": "low",
                }
            )

    patterns = analyze_growth_patterns(timeline)
    if patterns["positive_growth"] > patterns["negative_growth"]:
        insights.append(
            {
                "type": "positive_evolution",
                "message": "Your personality shows positive evolution with increasing emotional maturity and self-awareness.",
                "priority": "high",
            }
        )

    significant = [e for e in life_events if e["impact"] > 0.7]
    if significant:
        insights.append(
            {
                "type": "life_event_impact",
                "message": f"{len(significant)} significant life events have influenced your personality development.",
                "priority": "medium",
            }
        )
    return insights


def identify_growth_areas(
    trait_evolution: Mapping[str, Sequence[Mapping[str, Any]]],
    ideal_profile: Mapping[str, float] | None = None,
) -> list[dict[str, Any]]:
    profile = DEFAULT_IDEAL_PROFILE if ideal_profile is None else ideal_profile
    areas: list[dict[str, Any]] = []
    for trait, points in trait_evolution.items():
        if not points or trait not in profile:
            continue
        average = mean([p["score"] for p in points])
        ideal = profile[trait]
        # Signed: a score above the target gives a negative gap. Rounded so float
        # noise on an exact 0.3 gap does not cross the threshold.
        gap = ideal - average
        if round(gap, 9) > GROWTH_GAP_THRESHOLD:
            areas.append(
                {
                    "trait": trait,
                    "current_level": average,
                    "ideal_level": ideal,
                    "gap": gap,
                    "suggestions": list(GROWTH_SUGGESTIONS.get(trait, [])),
                }
            )
    return areas


def calculate_stability_metrics(
    trait_evolution: Mapping[str, Sequence[Mapping[str, Any]]],
    timeline: Sequence[Mapping[str, Any]],
    life_events: Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    trait_variances = {trait: variance([p["score"] for p in points]) for trait, points in trait_evolution.items()}

    growth_rate = 0.0
    if len(timeline) > 1:
        first = _snapshot_average(timeline[0]["personality_snapshot"])
        last = _snapshot_average(timeline[-1]["personality_snapshot"])
        growth_rate = (last - first) / 10

    adaptation = 0.0
    if life_events:
        adaptation = min(1.0, len([e for e in life_events if e["impact"] > 0.5]) / 10)

    return {
        "overall_stability": 1 - mean(list(trait_variances.values())),
        "trait_stability": {trait: 1 - value for trait, value in trait_variances.items()},
        "growth_rate": growth_rate,
        "adaptation_score": adaptation,
    }


def generate_personality_evolution(
    data: AnalyticsInput,
    *,
    granularity: str = "weekly",
    period: int = 90,
    ideal_profile: Mapping[str, float] | None = None,
) -> dict[str, Any]:
    """Roll a user's journal window up into trait trajectories and derived insights."""
    timeline = generate_timeline(data.journal_entries, data.check_ins, granularity)
    trait_evolution = analyze_trait_evolution(data.journal_entries)
    life_events = identify_life_events(data.journal_entries)
    insights = generate_personality_insights(trait_evolution, timeline, life_events)
    growth_areas = identify_growth_areas(trait_evolution, ideal_profile)
    stability = calculate_stability_metrics(trait_evolution, timeline, life_events)

    logger.debug(
        "personality evolution computed",
        extra={
            "event": "personality_evolution",
            "entries": len(data.journal_entries),
            "granularity": granularity,
            "timeline_points": len(timeline),
            "life_events": len(life_events),
        },
    )
    return {
        "period": period,
        "granularity": granularity,
        "timeline": timeline,
        "trait_evolution": trait_evolution,
        "life_events": life_events,
        "personality_insights": insights,
        "growth_areas": growth_areas,
        "stability_metrics": stability,
    }


__all__ = [
    "DEFAULT_IDEAL_PROFILE",
    "analyze_growth_patterns",
    "analyze_trait_evolution",
    "calculate_stability_metrics",
    "generate_personality_evolution",
    "generate_personality_insights",
    "generate_timeline",
    "identify_growth_areas",
    "identify_life_events",
]
