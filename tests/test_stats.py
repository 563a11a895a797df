import pytest

from lumen.apps.engine.analytics.stats import clamp, evolution_trend, mean, recap_trend, round_half_up, variance


def test_variance_of_degenerate_series_is_zero():
    assert variance([]) == 0
    assert variance([4.2]) == 0
    assert variance([1, 1, 1]) == 0


def test_variance_is_population_variance():
    assert variance([1, 2, 3, 4]) == pytest.approx(1.25)
    assert mean([]) == 0


def test_evolution_trend_uses_absolute_threshold():
    assert evolution_trend([1, 2, 3, 4, 5]) == "increasing"
    assert evolution_trend([5, 4, 3, 2, 1]) == "decreasing"
    assert evolution_trend([5, 5, 5, 5]) == "stable"
    assert evolution_trend([5, 5.4]) == "stable"
    assert evolution_trend([7]) == "stable"


def test_recap_trend_uses_relative_threshold():
    assert recap_trend([5, 5, 6, 6]) == "up"
    assert recap_trend([10, 8]) == "down"
    assert recap_trend([10, 9.5]) == "neutral"
    assert recap_trend([0, 0]) == "neutral"
    assert recap_trend([3]) == "neutral"


def test_round_half_up_and_clamp():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4) == 2
    assert clamp(1, 10, 12) == 10
    assert clamp(1, 10, -3) == 1
    assert clamp(0.1, 1, 0.5) == 0.5
