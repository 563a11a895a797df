"""Keyword heuristics that read personality signals out of journal text.

All matching is plain substring containment on the lower-cased text, so a
keyword also fires inside longer words ("stress" inside "mistress"). Each
keyword counts at most once per text.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence

from lumen.apps.engine.analytics.stats import clamp
from lumen.libs.schemas.records import JournalEntry

TRAITS: tuple[str, ...] = (
    "extraversion",
    "neuroticism",
    "openness",
    "conscientiousness",
    "agreeableness",
)

# trait -> (raising keywords, lowering keywords, weight per net hit)
TRAIT_KEYWORDS: dict[str, tuple[tuple[str, ...], tuple[str, ...], float]] = {
    "extraversion": (
        ("friend", "party", "social", "meet", "talk", "people", "group", "team"),
        ("alone", "quiet", "solitude", "introvert", "shy"),
        0.5,
    ),
    "neuroticism": (
        ("stress", "anxiety", "worry", "fear", "sad", "angry", "frustrated", "overwhelmed"),
        ("happy", "calm", "peaceful", "relaxed", "content", "satisfied"),
        0.3,
    ),
    "openness": (
        ("explore", "learn", "new", "creative", "imagine", "curious", "adventure", "experience"),
        ("routine", "same", "boring", "predictable", "traditional"),
        0.4,
    ),
    "conscientiousness": (
        ("plan", "organize", "goal", "achieve", "complete", "responsible", "diligent"),
        ("procrastinate", "messy", "forget", "late", "chaos"),
        0.4,
    ),
    "agreeableness": (
        ("help", "kind", "compassionate", "understanding", "forgive", "support"),
        ("conflict", "argue", "angry", "hostile", "critical", "judge"),
        0.4,
    ),
}

# Narrower lists used only to pick context sentences.
CONTEXT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "extraversion": ("friend", "social", "party", "people", "talk", "meet"),
    "neuroticism": ("stress", "anxiety", "worry", "fear", "sad", "angry"),
    "openness": ("explore", "learn", "new", "creative", "imagine", "curious"),
    "conscientiousness": ("plan", "goal", "achieve", "complete", "responsible"),
    "agreeableness": ("help", "kind", "compassionate", "understanding", "support"),
}

POSITIVE_WORDS = ("happy", "good", "great", "wonderful", "amazing", "love", "enjoy")
NEGATIVE_WORDS = ("sad", "bad", "terrible", "awful", "hate", "stress", "anxiety")

# type -> (trigger keywords, impact, description)
LIFE_EVENT_DETECTORS: tuple[tuple[str, tuple[str, ...], float, str], ...] = (
    ("career", ("job", "work", "career"), 0.6, "Career-related event"),
    ("relationship", ("relationship", "marriage", "breakup"), 0.8, "Relationship event"),
    ("health", ("health", "illness", "recovery"), 0.7, "Health-related event"),
    ("personal_growth", ("learn", "grow", "change"), 0.5, "Personal growth event"),
)

# event type -> trait -> (coefficient when sentiment is negative, coefficient otherwise)
IMPACT_RULES: dict[str, dict[str, tuple[float, float]]] = {
    "career": {
        "conscientiousness": (0.3, 0.3),
        "neuroticism": (0.2, -0.1),
    },
    "relationship": {
        "agreeableness": (0.2, 0.2),
        "extraversion": (0.2, 0.2),
        "neuroticism": (0.3, -0.2),
    },
    "health": {
        "neuroticism": (0.4, -0.2),
        "conscientiousness": (0.2, 0.2),
    },
    "personal_growth": {
        "openness": (0.3, 0.3),
        "conscientiousness": (0.2, 0.2),
    },
}

THEME_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("work", ("work", "job")),
    ("relationships", ("family", "friend")),
    ("health", ("health", "exercise")),
    ("finance", ("money", "finance")),
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def count_hits(lowered: str, keywords: Iterable[str]) -> int:
    return sum(1 for word in keywords if word in lowered)


def score_trait(trait: str, lowered: str) -> float:
    raising, lowering, weight = TRAIT_KEYWORDS[trait]
    net = count_hits(lowered, raising) - count_hits(lowered, lowering)
    return clamp(1, 10, 5 + net * weight)


def analyze_content_for_traits(text: str) -> dict[str, float]:
    lowered = (text or "").lower()
    return {trait: score_trait(trait, lowered) for trait in TRAITS}


def calculate_confidence(text_length: int) -> float:
    return clamp(0.1, 1.0, text_length / 1000)


def extract_context(text: str, trait: str) -> str:
    keywords = CONTEXT_KEYWORDS.get(trait, ())
    sentences = [s for s in _SENTENCE_SPLIT.split(text or "") if len(s.strip()) > 10]
    relevant = [s for s in sentences if any(k in s.lower() for k in keywords)]
    return " ".join(relevant[:2])[:200] + "..."


def detect_life_events(text: str) -> list[dict[str, object]]:
    lowered = (text or "").lower()
    return [
        {"type": event_type, "impact": impact, "description": description}
        for event_type, triggers, impact, description in LIFE_EVENT_DETECTORS
        if any(t in lowered for t in triggers)
    ]


def analyze_sentiment(text: str) -> str:
    lowered = (text or "").lower()
    positive = count_hits(lowered, POSITIVE_WORDS)
    negative = count_hits(lowered, NEGATIVE_WORDS)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def estimate_personality_impact(event: Mapping[str, object], text: str) -> dict[str, float]:
    rules = IMPACT_RULES.get(str(event.get("type")), {})
    impact = float(event.get("impact") or 0.0)
    negative = analyze_sentiment(text) == "negative"
    return {
        trait: impact * (when_negative if negative else otherwise)
        for trait, (when_negative, otherwise) in rules.items()
    }


def extract_daily_themes(entry: JournalEntry) -> list[str]:
    lowered = entry.text.lower()
    return [theme for theme, keywords in THEME_KEYWORDS if any(k in lowered for k in keywords)]


def extract_period_themes(entries: Sequence[JournalEntry]) -> list[str]:
    """Union of daily themes across a bucket, first-seen order, no duplicates."""
    themes: list[str] = []
    for entry in entries:
        for theme in extract_daily_themes(entry):
            if theme not in themes:
                themes.append(theme)
    return themes


# Weekly and monthly buckets share the same union rule.
extract_weekly_themes = extract_period_themes
extract_monthly_themes = extract_period_themes


__all__ = [
    "TRAITS",
    "analyze_content_for_traits",
    "analyze_sentiment",
    "calculate_confidence",
    "detect_life_events",
    "estimate_personality_impact",
    "extract_context",
    "extract_daily_themes",
    "extract_monthly_themes",
    "extract_period_themes",
    "extract_weekly_themes",
    "score_trait",
]
