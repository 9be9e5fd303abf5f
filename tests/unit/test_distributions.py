"""Unit tests for samplers and weighted distributions.

Tests cover:
- Draw-consuming samplers (pick, weighted_pick, ranges, long tail, bell curve)
- Timestamp samplers
- Declarative sampler configurations
- WeightedDistribution
"""

from __future__ import annotations

import math
import re
from collections import Counter
from datetime import UTC, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from benchstage.distributions import (
    BellCurveSampler,
    IntRangeSampler,
    LongTailSampler,
    SamplerConfig,
    TimestampRangeSampler,
    WeightedDistribution,
    bell_curve,
    below,
    chance,
    decimal_range,
    int_range,
    iso_timestamp_range,
    long_tail,
    pick,
    skewed_index,
    timestamp_range,
    unix_timestamp_range,
    weighted_pick,
)
from benchstage.distributions.samplers import (
    VOTE_TIER_RANGES,
    VOTE_TIER_THRESHOLDS,
    round_half_away,
)
from benchstage.distributions.weighted import ORDER_STATUS_WEIGHTS
from benchstage.rng import Mulberry32

pytestmark = pytest.mark.unit

ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class _FixedRng:
    """Generator stand-in returning preset values."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def next(self) -> float:
        return self._values.pop(0)


def _position(rng: Mulberry32) -> float:
    return rng.next()


class TestBasicSamplers:
    """Tests for below, chance and pick."""

    def test_below_range(self) -> None:
        rng = Mulberry32(1)

        values = {below(10, rng) for _ in range(2000)}

        assert values == set(range(10))

    def test_chance_extremes(self) -> None:
        rng = Mulberry32(1)

        assert not any(chance(0.0, rng) for _ in range(100))
        assert all(chance(1.0, rng) for _ in range(100))

    def test_pick_consumes_one_draw(self) -> None:
        """pick advances the generator exactly once."""
        a = Mulberry32(5)
        b = Mulberry32(5)

        pick(["x", "y", "z"], a)
        b.next()

        assert _position(a) == _position(b)

    def test_pick_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            pick([], Mulberry32(1))


class TestWeightedPick:
    """Tests for weighted_pick."""

    def test_frequencies_converge(self) -> None:
        """Frequencies over 100k draws are within 2% of the weights."""
        rng = Mulberry32(42)
        weights = [60, 25, 10, 5]

        counts = Counter(weighted_pick("abcd", weights, rng) for _ in range(100_000))

        for candidate, weight in zip("abcd", weights, strict=True):
            assert counts[candidate] / 100_000 == pytest.approx(weight / 100, abs=0.02)

    def test_fractional_weights_converge(self) -> None:
        rng = Mulberry32(56789)

        first = sum(1 for _ in range(100_000) if weighted_pick(["a", "b"], [0.7, 0.3], rng) == "a")

        assert first / 100_000 == pytest.approx(0.7, abs=0.02)

    def test_zero_weight_never_selected(self) -> None:
        rng = Mulberry32(42)

        values = {weighted_pick(["a", "b"], [1, 0], rng) for _ in range(1000)}

        assert values == {"a"}

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="same length"):
            weighted_pick(["a", "b"], [1], Mulberry32(1))

    def test_non_positive_total_raises(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            weighted_pick(["a", "b"], [0, 0], Mulberry32(1))

    def test_top_of_range_returns_last(self) -> None:
        """A draw just below 1.0 selects the last candidate."""
        assert weighted_pick(["a", "b"], [0.1, 0.2], _FixedRng(0.9999999999)) == "b"  # type: ignore[arg-type]


class TestRanges:
    """Tests for int_range, decimal_range and round_half_away."""

    def test_int_range_inclusive(self) -> None:
        """Both bounds are reachable and nothing outside them is."""
        rng = Mulberry32(3)

        values = {int_range(1, 6, rng) for _ in range(5000)}

        assert values == {1, 2, 3, 4, 5, 6}

    def test_int_range_single_value(self) -> None:
        assert int_range(7, 7, Mulberry32(1)) == 7

    def test_int_range_inverted_raises(self) -> None:
        with pytest.raises(ValueError, match="below min"):
            int_range(5, 1, Mulberry32(1))

    def test_decimal_range_precision(self) -> None:
        rng = Mulberry32(11)

        for _ in range(1000):
            value = decimal_range(5, 2000, 2, rng)
            assert 5 <= value <= 2000
            assert round(value, 2) == value

    @pytest.mark.parametrize(
        ("value", "precision", "expected"),
        [
            (2.5, 0, 3.0),
            (-2.5, 0, -3.0),
            (0.125, 2, 0.13),
            (6.449, 1, 6.4),
            (1.0, 1, 1.0),
        ],
    )
    def test_round_half_away(self, value: float, precision: int, expected: float) -> None:
        assert round_half_away(value, precision) == expected


class TestTimestamps:
    """Tests for the timestamp samplers."""

    def test_timestamp_within_years(self) -> None:
        rng = Mulberry32(8)
        start = datetime(2020, 1, 1, tzinfo=UTC)
        end = datetime(2024, 12, 31, tzinfo=UTC)

        for _ in range(1000):
            moment = timestamp_range(2020, 2024, rng)
            assert moment.tzinfo is UTC
            assert start <= moment <= end

    def test_unix_matches_datetime_draw(self) -> None:
        """unix_timestamp_range is the same draw in whole seconds."""
        a = Mulberry32(21)
        b = Mulberry32(21)

        moment = timestamp_range(2020, 2024, a)
        seconds = unix_timestamp_range(2020, 2024, b)

        assert seconds == int(moment.timestamp())

    def test_iso_format(self) -> None:
        rng = Mulberry32(4)

        for _ in range(100):
            assert ISO_PATTERN.match(iso_timestamp_range(2020, 2023, rng))

    def test_inverted_years_raise(self) -> None:
        with pytest.raises(ValueError, match="before start year"):
            timestamp_range(2024, 2020, Mulberry32(1))


class TestLongTail:
    """Tests for long_tail."""

    def test_values_within_tier_ranges(self) -> None:
        rng = Mulberry32(13)
        low = VOTE_TIER_RANGES[0][0]
        high = VOTE_TIER_RANGES[-1][1]

        for _ in range(5000):
            assert low <= long_tail(VOTE_TIER_THRESHOLDS, VOTE_TIER_RANGES, rng) <= high

    def test_most_values_in_smallest_tier(self) -> None:
        """About 70% of draws land in the first tier."""
        rng = Mulberry32(13)

        values = [long_tail(VOTE_TIER_THRESHOLDS, VOTE_TIER_RANGES, rng) for _ in range(20_000)]
        small = sum(1 for v in values if v <= VOTE_TIER_RANGES[0][1])

        assert small / len(values) == pytest.approx(0.7, abs=0.03)

    def test_consumes_two_draws(self) -> None:
        a = Mulberry32(9)
        b = Mulberry32(9)

        long_tail((0.5,), ((1, 2), (3, 4)), a)
        b.next()
        b.next()

        assert _position(a) == _position(b)

    def test_range_count_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="one more range"):
            long_tail((0.5,), ((1, 2),), Mulberry32(1))


class TestBellCurve:
    """Tests for bell_curve."""

    def test_zero_draw_is_finite(self) -> None:
        """A zero first draw does not produce an infinite value."""
        value = bell_curve(6.5, 1.5, _FixedRng(0.0, 0.0))  # type: ignore[arg-type]

        assert value == pytest.approx(6.5 + 1.5 * math.sqrt(-2 * math.log(1e-4)))

    def test_clamped_to_bounds(self) -> None:
        rng = Mulberry32(17)

        for _ in range(5000):
            assert 1.0 <= bell_curve(6.5, 5.0, rng, low=1.0, high=10.0) <= 10.0

    def test_mean_converges(self) -> None:
        rng = Mulberry32(17)

        values = [bell_curve(6.5, 1.5, rng) for _ in range(20_000)]

        assert sum(values) / len(values) == pytest.approx(6.5, abs=0.1)


class TestSkewedIndex:
    """Tests for skewed_index."""

    def test_zero_skew_matches_below(self) -> None:
        a = Mulberry32(31)
        b = Mulberry32(31)

        assert [skewed_index(50, 0.0, a) for _ in range(100)] == [below(50, b) for _ in range(100)]

    def test_positive_skew_favours_low_indexes(self) -> None:
        uniform_rng = Mulberry32(31)
        skewed_rng = Mulberry32(31)

        uniform = sum(skewed_index(100, 0.0, uniform_rng) for _ in range(5000))
        skewed = sum(skewed_index(100, 2.0, skewed_rng) for _ in range(5000))

        assert skewed < uniform

    def test_empty_population_raises(self) -> None:
        with pytest.raises(ValueError, match="positive population"):
            skewed_index(0, 0.0, Mulberry32(1))


class TestSamplerConfig:
    """Tests for declarative sampler configurations."""

    adapter: TypeAdapter[SamplerConfig] = TypeAdapter(SamplerConfig)

    def test_discriminates_on_kind(self) -> None:
        sampler = self.adapter.validate_python({"kind": "int_range", "min": 1, "max": 6})

        assert isinstance(sampler, IntRangeSampler)
        assert sampler.draw(Mulberry32(7)) in range(1, 7)

    def test_draw_matches_function(self) -> None:
        """A configured sampler draws exactly like the function it wraps."""
        sampler = self.adapter.validate_python({"kind": "long_tail"})

        assert isinstance(sampler, LongTailSampler)
        assert sampler.draw(Mulberry32(3)) == long_tail(
            VOTE_TIER_THRESHOLDS, VOTE_TIER_RANGES, Mulberry32(3)
        )

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"kind": "zipf"})

    def test_weights_must_match_candidates(self) -> None:
        with pytest.raises(ValidationError, match="match candidates"):
            self.adapter.validate_python(
                {"kind": "weighted_pick", "candidates": ["a", "b"], "weights": [1]}
            )

    def test_inverted_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError, match="max must be >= min"):
            self.adapter.validate_python({"kind": "int_range", "min": 6, "max": 1})

    def test_timestamp_output_formats(self) -> None:
        unix = TimestampRangeSampler(start_year=2020, end_year=2024, output="unix")
        iso = TimestampRangeSampler(start_year=2020, end_year=2024)

        assert isinstance(unix.draw(Mulberry32(1)), int)
        assert ISO_PATTERN.match(str(iso.draw(Mulberry32(1))))

    def test_bell_curve_precision(self) -> None:
        sampler = BellCurveSampler(mean=6.5, stddev=1.5, low=1.0, high=10.0, precision=1)

        value = sampler.draw(Mulberry32(5))

        assert round(value, 1) == value
        assert 1.0 <= value <= 10.0

    def test_configs_are_frozen(self) -> None:
        sampler = IntRangeSampler(min=1, max=6)

        with pytest.raises(ValidationError):
            sampler.minimum = 2  # type: ignore[misc]


class TestWeightedDistribution:
    """Tests for WeightedDistribution."""

    def test_deterministic_with_seed(self) -> None:
        """Same seed produces identical samples."""
        dist1 = WeightedDistribution(ORDER_STATUS_WEIGHTS, seed=42)
        dist2 = WeightedDistribution(ORDER_STATUS_WEIGHTS, seed=42)

        assert dist1.sample(100) == dist2.sample(100)

    def test_different_seeds_differ(self) -> None:
        dist1 = WeightedDistribution({"a": 1, "b": 1}, seed=42)
        dist2 = WeightedDistribution({"a": 1, "b": 1}, seed=123)

        assert dist1.sample(100) != dist2.sample(100)

    def test_draw_uses_caller_generator(self) -> None:
        """draw() leaves the private generator untouched."""
        dist = WeightedDistribution({"a": 1, "b": 1}, seed=42)
        fresh = WeightedDistribution({"a": 1, "b": 1}, seed=42)

        dist.draw(Mulberry32(1))

        assert dist.sample(10) == fresh.sample(10)

    def test_probabilities_sum_to_one(self) -> None:
        dist = WeightedDistribution(ORDER_STATUS_WEIGHTS)

        assert sum(dist.probabilities.values()) == pytest.approx(1.0)
        assert dist.probabilities["delivered"] == pytest.approx(0.45)

    def test_empty_weights_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one value"):
            WeightedDistribution({})
