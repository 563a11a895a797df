import pytest

from lumen.apps.engine.evolution.heuristics import (
    TRAITS,
    analyze_content_for_traits,
    analyze_sentiment,
    calculate_confidence,
    detect_life_events,
    estimate_personality_impact,
    extract_context,
    extract_period_themes,
)


def test_text_without_keywords_scores_neutral():
    scores = analyze_content_for_traits("Nothing of note happened on Tuesday.")
    assert set(scores) == set(TRAITS)
    assert all(score == 5 for score in scores.values())
    assert calculate_confidence(len("Nothing of note happened on Tuesday.")) == pytest.approx(0.1)


def test_extraversion_counts_distinct_keyword_hits():
    scores = analyze_content_for_traits("I went to a party with a friend and we talked to people. Friend again!")
    # friend, party, talk, people
    assert scores["extraversion"] == pytest.approx(7.0)
    assert scores["neuroticism"] == 5


def test_lowering_keywords_reduce_score():
    scores = analyze_content_for_traits("Alone and quiet, a shy introvert enjoying solitude")
    assert scores["extraversion"] == pytest.approx(2.5)


def test_matching_is_substring_based():
    scores = analyze_content_for_traits("The mistress of ceremonies")
    assert scores["neuroticism"] == pytest.approx(5.3)


def test_confidence_scales_with_length():
    assert calculate_confidence(0) == pytest.approx(0.1)
    assert calculate_confidence(500) == pytest.approx(0.5)
    assert calculate_confidence(5000) == pytest.approx(1.0)


def test_extract_context_keeps_relevant_sentences():
    text = "I met a good friend today. Short. We planned a trip together!"
    assert extract_context(text, "extraversion") == "I met a good friend today..."
    assert extract_context(text, "neuroticism") == "..."


def test_detect_life_events_fires_independently():
    events = detect_life_events("Started a new job and my health is finally on track")
    assert [e["type"] for e in events] == ["career", "health"]
    assert [e["impact"] for e in events] == [0.6, 0.7]
    assert detect_life_events("") == []


def test_sentiment_by_keyword_counts():
    assert analyze_sentiment("I love this, it was great") == "positive"
    assert analyze_sentiment("work stress is awful") == "negative"
    assert analyze_sentiment("a plain day") == "neutral"


def test_personality_impact_follows_sentiment():
    event = {"type": "career", "impact": 0.6}
    negative = estimate_personality_impact(event, "work stress is awful")
    assert negative == {
        "conscientiousness": pytest.approx(0.18),
        "neuroticism": pytest.approx(0.12),
    }
    positive = estimate_personality_impact(event, "I love my new job")
    assert positive["neuroticism"] == pytest.approx(-0.06)
    assert set(positive) == {"conscientiousness", "neuroticism"}


def test_period_themes_are_deduplicated(entry):
    entries = [
        entry("Long day at work, then exercise"),
        entry("Dinner with family after my job"),
    ]
    assert extract_period_themes(entries) == ["work", "health", "relationships"]
