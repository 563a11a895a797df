from datetime import datetime, timezone

import pytest

from conftest import at
from lumen.apps.engine.evolution.buckets import (
    EVOLUTION_MOOD_SCORES,
    analyze_day_data,
    analyze_month_data,
    analyze_week_data,
    energy_value,
    evolution_mood_score,
    generate_personality_snapshot,
    group_by_month,
    group_by_week,
    week_start_for,
)


def test_emoji_mood_table_and_fallback():
    expected = {"😊": 9, "🙂": 7, "😐": 5, "😞": 3, "😢": 1, "😡": 2, "😴": 4, "🤔": 6, "😌": 8, "😤": 4}
    for mood, score in expected.items():
        assert evolution_mood_score(mood) == score
    assert set(EVOLUTION_MOOD_SCORES) == set(expected)
    assert evolution_mood_score("happy") == 5
    assert evolution_mood_score("") == 5


def test_energy_value_accepts_numbers_and_labels():
    assert energy_value(7) == 7
    assert energy_value("6") == 6
    assert energy_value("High") == 8
    assert energy_value("moderate") == 5
    assert energy_value("sluggish") == 3
    assert energy_value(None) == 0


def test_week_start_is_previous_sunday_midnight():
    # 2024-03-06 is a Wednesday
    assert week_start_for(at(2024, 3, 6, 15)) == datetime(2024, 3, 3, tzinfo=timezone.utc)
    assert week_start_for(at(2024, 3, 3, 9)) == datetime(2024, 3, 3, tzinfo=timezone.utc)


def test_single_week_produces_one_bucket(entry):
    entries = [entry("a", at(2024, 3, 5)), entry("b", at(2024, 3, 8)), entry("c", at(2024, 3, 4))]
    weeks = group_by_week(entries)
    assert len(weeks) == 1
    assert weeks[0]["week_start"] == datetime(2024, 3, 3, tzinfo=timezone.utc)
    assert len(weeks[0]["entries"]) == 3


def test_week_buckets_are_ascending(entry):
    entries = [entry("late", at(2024, 3, 20)), entry("early", at(2024, 3, 1))]
    starts = [w["week_start"] for w in group_by_week(entries)]
    assert starts == sorted(starts)
    assert len(starts) == 2


def test_month_buckets(entry):
    entries = [entry("a", at(2024, 2, 28)), entry("b", at(2024, 3, 1)), entry("c", at(2024, 3, 31))]
    months = group_by_month(entries)
    assert [m["month_start"].month for m in months] == [2, 3]
    assert len(months[1]["entries"]) == 2


def test_week_metrics_only_use_check_ins_inside_the_week(entry, check_in):
    week = group_by_week([entry("Busy at work today", at(2024, 3, 5))])[0]
    check_ins = [
        check_in("😊", at(2024, 3, 4), energy=6),
        check_in("😢", at(2024, 3, 3, 0), energy=2),
        check_in("😡", datetime(2024, 3, 10, tzinfo=timezone.utc), energy=9),
    ]
    metrics = analyze_week_data(week, check_ins)
    assert metrics["entry_count"] == 1
    assert metrics["total_words"] == len("Busy at work today")
    assert metrics["avg_mood"] == pytest.approx(5.0)
    assert metrics["avg_energy"] == pytest.approx(4.0)
    assert metrics["themes"] == ["work"]


def test_day_and_month_metrics_default_to_zero(entry):
    day = analyze_day_data(entry("quiet", at(2024, 3, 5)), [])
    assert day["avg_mood"] == 0
    assert day["avg_energy"] == 0
    month = analyze_month_data(group_by_month([entry("x", at(2024, 3, 5))])[0], [])
    assert month["entry_count"] == 1


def test_snapshot_formulas():
    snapshot = generate_personality_snapshot(
        {
            "avg_mood": 8,
            "avg_energy": 4,
            "entry_count": 4,
            "total_words": 1200,
            "themes": ["work", "relationships", "health"],
        }
    )
    assert snapshot["extraversion"] == pytest.approx(6.1)
    assert snapshot["neuroticism"] == pytest.approx(4.4)
    assert snapshot["openness"] == pytest.approx(5.8)
    assert snapshot["conscientiousness"] == pytest.approx(5.7)
    assert snapshot["agreeableness"] == pytest.approx(5.7)
