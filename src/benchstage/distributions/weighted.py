"""Weighted distribution utilities.

This module provides a mapping-based helper for weighted categorical
selection, backed by a private seeded generator.
"""

from __future__ import annotations

from benchstage.distributions.samplers import weighted_pick
from benchstage.rng import Mulberry32


class WeightedDistribution:
    """Helper for weighted random selection.

    Provides a clean interface for selecting values based on weights,
    with support for seeding and batch generation.

    Example:
        >>> statuses = WeightedDistribution({
        ...     "delivered": 60,
        ...     "shipped": 20,
        ...     "pending": 15,
        ...     "cancelled": 5,
        ... }, seed=42)
        >>> values = statuses.sample(100)  # 100 values with this distribution
    """

    def __init__(self, weights: dict[str, int | float], seed: int = 0) -> None:
        """Initialize with weight mapping.

        Args:
            weights: Mapping of values to their relative weights
            seed: Seed for the private generator
        """
        if not weights:
            raise ValueError("WeightedDistribution requires at least one value")
        self.values = list(weights.keys())
        self.weights = list(weights.values())
        self._rng = Mulberry32(seed)

    def sample(self, count: int) -> list[str]:
        """Generate weighted random values.

        Args:
            count: Number of values to generate

        Returns:
            List of randomly selected values
        """
        return [self.sample_one() for _ in range(count)]

    def sample_one(self) -> str:
        """Generate a single weighted random value."""
        return weighted_pick(self.values, self.weights, self._rng)

    def draw(self, rng: Mulberry32) -> str:
        """Draw one value from a caller-owned generator instead of the private one."""
        return weighted_pick(self.values, self.weights, rng)

    @property
    def probabilities(self) -> dict[str, float]:
        """Get probability distribution.

        Returns:
            Dictionary mapping values to their probabilities
        """
        total = sum(self.weights)
        return {v: w / total for v, w in zip(self.values, self.weights, strict=True)}


# Common weight distributions for reuse
ORDER_STATUS_WEIGHTS: dict[str, int] = {
    "delivered": 45,
    "shipped": 20,
    "processing": 15,
    "pending": 12,
    "cancelled": 8,
}

PAYMENT_STATUS_WEIGHTS: dict[str, int] = {
    "paid": 80,
    "pending": 10,
    "refunded": 6,
    "failed": 4,
}

PLAN_WEIGHTS: dict[str, int] = {
    "free": 50,
    "starter": 25,
    "pro": 20,
    "enterprise": 5,
}

CUSTOMER_TIER_WEIGHTS: dict[str, int] = {
    "free": 70,
    "pro": 25,
    "enterprise": 5,
}
