from __future__ import annotations

import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def variance(values: Sequence[float]) -> float:
    """Population variance; 0.0 for an empty series."""
    if not values:
        return 0.0
    avg = mean(values)
    return sum((v - avg) ** 2 for v in values) / len(values)


def clamp(lo: float, hi: float, value: float) -> float:
    return min(hi, max(lo, value))


def round_half_up(value: float) -> int:
    # Recap integers round .5 upwards, unlike the builtin banker's rounding.
    return int(math.floor(value + 0.5))


def _half_means(values: Sequence[float]) -> tuple[float, float]:
    split = len(values) // 2
    return mean(values[:split]), mean(values[split:])


def evolution_trend(scores: Sequence[float]) -> str:
    """Absolute-threshold trend used for trait series (±0.5 on the 1-10 scale)."""
    if len(scores) < 2:
        return "stable"
    first, second = _half_means(scores)
    difference = second - first
    if difference > 0.5:
        return "increasing"
    if difference < -0.5:
        return "decreasing"
    return "stable"


def recap_trend(values: Sequence[float]) -> str:
    """Relative-threshold trend used for recap metrics (±10% of the first half)."""
    if len(values) < 2:
        return "neutral"
    first, second = _half_means(values)
    if second > first * 1.1:
        return "up"
    if second < first * 0.9:
        return "down"
    return "neutral"


__all__ = [
    "clamp",
    "evolution_trend",
    "mean",
    "recap_trend",
    "round_half_up",
    "variance",
]
