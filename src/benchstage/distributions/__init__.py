"""Distribution helpers for synthetic data generation.

This module provides samplers that consume a seeded generator:
- Categorical choices (uniform and weighted)
- Integer, decimal and timestamp ranges
- Long-tail counts and bell-curve scores
- Declarative sampler configs, one model per sampler kind
"""

from __future__ import annotations

from benchstage.distributions.config import (
    BellCurveSampler,
    DecimalRangeSampler,
    IntRangeSampler,
    LongTailSampler,
    PickSampler,
    SamplerConfig,
    TimestampRangeSampler,
    WeightedPickSampler,
)
from benchstage.distributions.samplers import (
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
from benchstage.distributions.weighted import WeightedDistribution

__all__ = [
    "BellCurveSampler",
    "DecimalRangeSampler",
    "IntRangeSampler",
    "LongTailSampler",
    "PickSampler",
    "SamplerConfig",
    "TimestampRangeSampler",
    "WeightedDistribution",
    "WeightedPickSampler",
    "bell_curve",
    "below",
    "chance",
    "decimal_range",
    "int_range",
    "iso_timestamp_range",
    "long_tail",
    "pick",
    "skewed_index",
    "timestamp_range",
    "unix_timestamp_range",
    "weighted_pick",
]
