"""Declarative sampler configurations.

One frozen model per sampler kind, discriminated on ``kind``. A
``SamplerConfig`` can be loaded from JSON/YAML-shaped data and drawn from
directly, which keeps column generators in data rather than code.

Example:
    >>> from pydantic import TypeAdapter
    >>> adapter = TypeAdapter(SamplerConfig)
    >>> sampler = adapter.validate_python({"kind": "int_range", "min": 1, "max": 6})
    >>> sampler.draw(Mulberry32(7)) in range(1, 7)
    True
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, model_validator
from typing_extensions import Self

from benchstage.distributions.samplers import (
    VOTE_TIER_RANGES,
    VOTE_TIER_THRESHOLDS,
    bell_curve,
    decimal_range,
    int_range,
    iso_timestamp_range,
    long_tail,
    pick,
    round_half_away,
    timestamp_range,
    unix_timestamp_range,
    weighted_pick,
)
from benchstage.rng import Mulberry32


class _SamplerBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class PickSampler(_SamplerBase):
    """Uniform choice among candidates."""

    kind: Literal["pick"] = "pick"
    candidates: tuple[Any, ...] = Field(..., min_length=1)

    def draw(self, rng: Mulberry32) -> Any:
        return pick(self.candidates, rng)


class WeightedPickSampler(_SamplerBase):
    """Weighted choice; weights are relative."""

    kind: Literal["weighted_pick"] = "weighted_pick"
    candidates: tuple[Any, ...] = Field(..., min_length=1)
    weights: tuple[float, ...] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_weights(self) -> Self:
        if len(self.weights) != len(self.candidates):
            raise ValueError("weights must match candidates in length")
        if any(w < 0 for w in self.weights) or sum(self.weights) <= 0:
            raise ValueError("weights must be non-negative with a positive total")
        return self

    def draw(self, rng: Mulberry32) -> Any:
        return weighted_pick(self.candidates, self.weights, rng)


class IntRangeSampler(_SamplerBase):
    """Integer in [min, max] inclusive."""

    kind: Literal["int_range"] = "int_range"
    minimum: int = Field(..., alias="min")
    maximum: int = Field(..., alias="max")

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.maximum < self.minimum:
            raise ValueError("max must be >= min")
        return self

    def draw(self, rng: Mulberry32) -> int:
        return int_range(self.minimum, self.maximum, rng)


class DecimalRangeSampler(_SamplerBase):
    """Decimal in [min, max] rounded half away from zero."""

    kind: Literal["decimal_range"] = "decimal_range"
    minimum: float = Field(..., alias="min")
    maximum: float = Field(..., alias="max")
    precision: int = Field(default=2, ge=0, le=12)

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.maximum < self.minimum:
            raise ValueError("max must be >= min")
        return self

    def draw(self, rng: Mulberry32) -> float:
        return decimal_range(self.minimum, self.maximum, self.precision, rng)


class TimestampRangeSampler(_SamplerBase):
    """Timestamp between two calendar years."""

    kind: Literal["timestamp_range"] = "timestamp_range"
    start_year: int = Field(..., ge=1970)
    end_year: int = Field(..., ge=1970)
    output: Literal["datetime", "unix", "iso"] = "iso"

    @model_validator(mode="after")
    def _check_years(self) -> Self:
        if self.end_year < self.start_year:
            raise ValueError("end_year must be >= start_year")
        return self

    def draw(self, rng: Mulberry32) -> datetime | int | str:
        if self.output == "unix":
            return unix_timestamp_range(self.start_year, self.end_year, rng)
        if self.output == "iso":
            return iso_timestamp_range(self.start_year, self.end_year, rng)
        return timestamp_range(self.start_year, self.end_year, rng)


class LongTailSampler(_SamplerBase):
    """Tiered magnitude sampling for popularity-like counts."""

    kind: Literal["long_tail"] = "long_tail"
    thresholds: tuple[float, ...] = VOTE_TIER_THRESHOLDS
    ranges: tuple[tuple[int, int], ...] = VOTE_TIER_RANGES

    @model_validator(mode="after")
    def _check_tiers(self) -> Self:
        if len(self.ranges) != len(self.thresholds) + 1:
            raise ValueError("ranges must have exactly one more entry than thresholds")
        if list(self.thresholds) != sorted(self.thresholds):
            raise ValueError("thresholds must be ascending")
        if any(high < low for low, high in self.ranges):
            raise ValueError("each range must be (min, max) with max >= min")
        return self

    def draw(self, rng: Mulberry32) -> int:
        return long_tail(self.thresholds, self.ranges, rng)


class BellCurveSampler(_SamplerBase):
    """Gaussian score clamped to an optional range."""

    kind: Literal["bell_curve"] = "bell_curve"
    mean: float
    stddev: float = Field(..., ge=0)
    low: float | None = None
    high: float | None = None
    precision: int | None = Field(default=None, ge=0, le=12)

    def draw(self, rng: Mulberry32) -> float:
        value = bell_curve(self.mean, self.stddev, rng, low=self.low, high=self.high)
        if self.precision is None:
            return value
        return round_half_away(value, self.precision)


# Union type with discriminator on "kind" field
SamplerConfig = Annotated[
    PickSampler
    | WeightedPickSampler
    | IntRangeSampler
    | DecimalRangeSampler
    | TimestampRangeSampler
    | LongTailSampler
    | BellCurveSampler,
    Discriminator("kind"),
]
"""Sampler configuration with one variant per sampler kind."""
