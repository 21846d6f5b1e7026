"""
Statistics helpers for leaderboard aggregation.

Every helper returns None ("not enough data") instead of 0 or NaN when
the input can't support a value, so a true 0% stays distinguishable
from "no predictions of that kind".
"""

import math
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

Number = float | int


def _present(values: Iterable[Optional[Number]]) -> list[Number]:
    return [v for v in values if v is not None]


def safe_ratio(
    numerator: Optional[Number],
    denominator: Optional[Number],
) -> Optional[float]:
    """numerator / denominator, or None when either side is missing or the denominator is 0."""
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


def total(values: Iterable[Optional[Number]]) -> Optional[Number]:
    """Sum of the non-null values; None when there are none (like SQL SUM)."""
    present = _present(values)
    if not present:
        return None
    return sum(present)


def mean(values: Iterable[Optional[Number]]) -> Optional[float]:
    """Arithmetic mean over the non-null values only."""
    present = _present(values)
    if not present:
        return None
    return sum(present) / len(present)


def percentile(values: Iterable[Optional[Number]], fraction: float) -> Optional[float]:
    """
    Continuous percentile (linear interpolation between order statistics).

    For sorted x[0..n-1] the position is p = fraction * (n - 1); the
    result interpolates between x[floor(p)] and x[ceil(p)]. Same
    definition as SQL percentile_cont.
    """
    if not 0 <= fraction <= 1:
        raise ValueError(f"fraction must be between 0 and 1, got {fraction}")

    ordered = sorted(_present(values))
    if not ordered:
        return None

    position = fraction * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)

    if lower == upper:
        return float(ordered[lower])

    weight = position - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * weight


def median(values: Iterable[Optional[Number]]) -> Optional[float]:
    """50th continuous percentile."""
    return percentile(values, 0.5)


def count(predicate: Callable[[T], bool], items: Iterable[T]) -> int:
    return sum(1 for item in items if predicate(item))
