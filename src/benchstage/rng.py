"""Seeded pseudo-random number generator.

Mulberry32: a 32-bit state-mixing generator (constant add, multiply and
xor-shift rounds). All arithmetic is done on unsigned 32-bit integers so
output is identical on every platform. Suitable for simulation, not for
anything cryptographic.
"""

from __future__ import annotations

from collections.abc import Iterator

MASK_32 = 0xFFFFFFFF
GOLDEN_GAMMA = 0x9E3779B9
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Multiply two 32-bit integers keeping the low 32 bits."""
    return (a * b) & MASK_32


class Mulberry32:
    """Deterministic stream of floats in [0, 1) from an integer seed.

    The call order is part of the contract: two generators built from the
    same seed return the same values only when drawn in the same order.

    Example:
        >>> rng = Mulberry32(56789)
        >>> first = [rng.next() for _ in range(3)]
        >>> rng = Mulberry32(56789)
        >>> [rng.next() for _ in range(3)] == first
        True
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        """Initialize the generator.

        Args:
            seed: Integer seed. Reduced modulo 2**32.
        """
        self._seed = seed & MASK_32
        self._state = self._seed

    @property
    def seed(self) -> int:
        """The (32-bit) seed this generator was created with."""
        return self._seed

    def next_uint32(self) -> int:
        """Advance the state and return the raw 32-bit output."""
        self._state = (self._state + _INCREMENT) & MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & MASK_32
        return (t ^ (t >> 14)) & MASK_32

    def next(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        return self.next_uint32() / _TWO_POW_32

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        return self.next()

    def __repr__(self) -> str:
        return f"Mulberry32(seed={self._seed})"


def derive_table_seed(dataset_seed: int, position: int) -> int:
    """Derive the seed for the table at ``position`` within a dataset.

    Position 0 keeps the dataset seed unchanged; later tables are offset by
    multiples of the golden-ratio constant so their streams do not overlap
    in practice.

    Args:
        dataset_seed: The dataset's fixed seed constant.
        position: Index of the table in generation order.

    Returns:
        32-bit seed for that table's private generator.
    """
    return (dataset_seed + position * GOLDEN_GAMMA) & MASK_32
