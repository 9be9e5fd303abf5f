"""Stateless samplers built on the seeded generator.

Every sampler takes the generator by reference and consumes a documented,
fixed number of draws from it. Samplers never reseed or own the generator,
so composing them in a fixed order keeps output reproducible.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from benchstage.rng import Mulberry32

T = TypeVar("T")

# Box-Muller offset keeping ln() away from zero
LOG_EPSILON = 1e-4

# Default long-tail shape for popularity counts (votes, views, likes):
# 70% of draws in the smallest tier, 2% in the largest.
VOTE_TIER_THRESHOLDS: tuple[float, ...] = (0.7, 0.9, 0.98)
VOTE_TIER_RANGES: tuple[tuple[int, int], ...] = (
    (5, 1_004),
    (1_000, 50_999),
    (50_000, 549_999),
    (500_000, 2_499_999),
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def below(n: int, rng: Mulberry32) -> int:
    """Return ``floor(rng.next() * n)``, an integer in [0, n). One draw."""
    return math.floor(rng.next() * n)


def chance(probability: float, rng: Mulberry32) -> bool:
    """Return True with the given probability. One draw."""
    return rng.next() < probability


def pick(candidates: Sequence[T], rng: Mulberry32) -> T:
    """Uniform categorical choice. One draw.

    Raises:
        ValueError: If ``candidates`` is empty.
    """
    if not candidates:
        raise ValueError("pick() requires at least one candidate")
    return candidates[math.floor(rng.next() * len(candidates))]


def weighted_pick(
    candidates: Sequence[T],
    weights: Sequence[float],
    rng: Mulberry32,
) -> T:
    """Cumulative-weight threshold selection. One draw.

    Weights are relative and normalized internally.

    Raises:
        ValueError: On empty input, length mismatch, or a non-positive total.
    """
    if not candidates:
        raise ValueError("weighted_pick() requires at least one candidate")
    if len(candidates) != len(weights):
        raise ValueError("candidates and weights must have the same length")
    total = float(sum(weights))
    if total <= 0:
        raise ValueError("weights must sum to a positive value")

    threshold = rng.next() * total
    cumulative = 0.0
    for candidate, weight in zip(candidates, weights, strict=True):
        cumulative += weight
        if threshold < cumulative:
            return candidate
    # Floating point accumulation can leave threshold == total
    return candidates[-1]


def int_range(minimum: int, maximum: int, rng: Mulberry32) -> int:
    """Integer in [minimum, maximum], inclusive on both ends. One draw.

    Raises:
        ValueError: If ``maximum < minimum``.
    """
    if maximum < minimum:
        raise ValueError(f"int_range() max {maximum} is below min {minimum}")
    return minimum + math.floor(rng.next() * (maximum - minimum + 1))


def round_half_away(value: float, precision: int) -> float:
    """Round to ``precision`` decimals, halves away from zero."""
    scale = 10**precision
    rounded = math.floor(abs(value) * scale + 0.5) / scale
    return math.copysign(rounded, value)


def decimal_range(
    minimum: float,
    maximum: float,
    precision: int,
    rng: Mulberry32,
) -> float:
    """Decimal in [minimum, maximum] at a fixed precision. One draw."""
    if maximum < minimum:
        raise ValueError(f"decimal_range() max {maximum} is below min {minimum}")
    return round_half_away(minimum + rng.next() * (maximum - minimum), precision)


def _year_bounds_ms(start_year: int, end_year: int) -> tuple[int, int]:
    start = datetime(start_year, 1, 1, tzinfo=UTC)
    end = datetime(end_year, 12, 31, tzinfo=UTC)
    if end < start:
        raise ValueError(f"end year {end_year} is before start year {start_year}")
    return (
        (start - _EPOCH) // timedelta(milliseconds=1),
        (end - _EPOCH) // timedelta(milliseconds=1),
    )


def _epoch_ms_range(start_year: int, end_year: int, rng: Mulberry32) -> int:
    start_ms, end_ms = _year_bounds_ms(start_year, end_year)
    return math.floor(start_ms + rng.next() * (end_ms - start_ms))


def timestamp_range(start_year: int, end_year: int, rng: Mulberry32) -> datetime:
    """UTC timestamp between Jan 1 of ``start_year`` and Dec 31 of ``end_year``.

    Linear interpolation at millisecond resolution. One draw.
    """
    millis = _epoch_ms_range(start_year, end_year, rng)
    return _EPOCH + timedelta(milliseconds=millis)


def unix_timestamp_range(start_year: int, end_year: int, rng: Mulberry32) -> int:
    """Same draw as :func:`timestamp_range`, as whole Unix seconds."""
    return _epoch_ms_range(start_year, end_year, rng) // 1000


def iso_timestamp_range(start_year: int, end_year: int, rng: Mulberry32) -> str:
    """Same draw as :func:`timestamp_range`, as ``YYYY-MM-DDTHH:MM:SS.sssZ``."""
    return format_iso(timestamp_range(start_year, end_year, rng))


def format_iso(moment: datetime) -> str:
    """Format an aware UTC datetime with millisecond precision and a Z suffix."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def long_tail(
    thresholds: Sequence[float],
    ranges: Sequence[tuple[int, int]],
    rng: Mulberry32,
) -> int:
    """Power-law-like volume: pick a magnitude tier, then a value inside it.

    The tier is the first whose threshold the selector draw falls below; the
    last range catches everything above the final threshold. Two draws.

    Args:
        thresholds: Ascending cumulative tier boundaries in (0, 1).
        ranges: Inclusive (min, max) per tier; one more than thresholds.
        rng: Generator to draw from.

    Example:
        >>> votes = long_tail(VOTE_TIER_THRESHOLDS, VOTE_TIER_RANGES, rng)
    """
    if len(ranges) != len(thresholds) + 1:
        raise ValueError("long_tail() needs exactly one more range than thresholds")
    selector = rng.next()
    tier = len(thresholds)
    for i, threshold in enumerate(thresholds):
        if selector < threshold:
            tier = i
            break
    low, high = ranges[tier]
    return int_range(low, high, rng)


def bell_curve(
    mean: float,
    stddev: float,
    rng: Mulberry32,
    *,
    low: float | None = None,
    high: float | None = None,
) -> float:
    """Gaussian draw via the Box-Muller transform. Two draws.

    ``u1`` is offset by ``LOG_EPSILON`` so a zero draw cannot produce an
    infinite logarithm. The result is clamped to ``[low, high]`` when given.
    """
    u1 = rng.next()
    u2 = rng.next()
    gaussian = math.sqrt(-2 * math.log(u1 + LOG_EPSILON)) * math.cos(2 * math.pi * u2)
    value = mean + gaussian * stddev
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


def skewed_index(n: int, skew: float, rng: Mulberry32) -> int:
    """Index in [0, n) biased toward 0 for positive ``skew``. One draw.

    ``skew=0`` is exactly uniform (same as :func:`below`); larger values
    concentrate references on the earliest entries, approximating the
    popularity skew of real foreign keys.
    """
    if n <= 0:
        raise ValueError("skewed_index() requires a positive population")
    u = rng.next()
    if skew:
        u = u ** (1.0 + skew)
    return min(n - 1, math.floor(u * n))
