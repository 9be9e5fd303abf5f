"""Base synthesizer protocol and shared generation utilities.

This module defines the RecordSynthesizer base class that every table
synthesizer implements, plus the identifier pools used for foreign keys.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Generic, TypeVar

import structlog
from faker import Faker
from pydantic import BaseModel

from benchstage.distributions.samplers import skewed_index
from benchstage.errors import GenerationInvariantViolation
from benchstage.rng import Mulberry32

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=BaseModel)


class IdentifierPools:
    """Identifier pools published by completed parent tables.

    A pool is published once, after its table has been fully generated,
    and is never mutated afterwards. ``publish`` returns a new instance so
    a worker holding a pools object never observes a later change.

    Example:
        >>> pools = IdentifierPools().publish("title_basics", ["tt0000001"])
        >>> pools.get("title_basics")
        ('tt0000001',)
    """

    __slots__ = ("_pools",)

    def __init__(self, pools: Mapping[str, tuple[Any, ...]] | None = None) -> None:
        self._pools: Mapping[str, tuple[Any, ...]] = MappingProxyType(dict(pools or {}))

    def publish(self, table: str, identifiers: Iterable[Any]) -> IdentifierPools:
        """Return new pools with ``table``'s identifiers added."""
        merged = dict(self._pools)
        merged[table] = tuple(identifiers)
        return IdentifierPools(merged)

    def get(self, table: str, *, requester: str | None = None) -> tuple[Any, ...]:
        """Return the identifiers of ``table``.

        Raises:
            GenerationInvariantViolation: If the pool was never published or is empty.
        """
        pool = self._pools.get(table)
        if pool is None:
            raise GenerationInvariantViolation(table, table=requester)
        if not pool:
            raise GenerationInvariantViolation(table, table=requester, reason="empty")
        return pool

    def __contains__(self, table: object) -> bool:
        return table in self._pools

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._pools)


class RecordSynthesizer(ABC, Generic[R]):
    """Abstract base class for per-table record synthesizers.

    Subclasses set ``table`` and ``record_type``, list the parent tables
    they reference in ``references``, and implement ``synthesize``.

    Synthesizers must be a pure function of (index, generator position,
    published pools): the only state they may carry across records is
    what ``prepare`` draws up front from the table's own generator.

    Example:
        >>> class CounterSynthesizer(RecordSynthesizer[Counter]):
        ...     table = "counters"
        ...     record_type = Counter
        ...
        ...     def synthesize(self, index, rng, pools):
        ...         return Counter(id=index, value=int_range(0, 9, rng))
    """

    table: ClassVar[str]
    record_type: ClassVar[type[BaseModel]]
    references: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *, reference_skew: float = 0.0) -> None:
        """Initialize the synthesizer.

        Args:
            reference_skew: Bias of foreign-key picks toward early parent rows.
                0.0 (default) is uniform.
        """
        if reference_skew < 0:
            raise ValueError("reference_skew must be >= 0")
        self.reference_skew = reference_skew

    def prepare(self, rng: Mulberry32, count: int, pools: IdentifierPools) -> None:
        """Draw run-private state before the first record.

        Args:
            rng: The table's generator.
            count: Number of records that will be synthesized.
            pools: Published parent pools.
        """
        for parent in self.references:
            pools.get(parent, requester=self.table)

    @abstractmethod
    def synthesize(  # pragma: no cover - abstract method
        self, index: int, rng: Mulberry32, pools: IdentifierPools
    ) -> R:
        """Build the record at ``index``.

        Args:
            index: Zero-based record position within the table
            rng: The table's generator, positioned after the previous record
            pools: Published parent pools

        Returns:
            One immutable record
        """
        ...

    def identifier(self, record: R) -> Any:
        """Return the value this record contributes to its table's pool."""
        return record.id  # type: ignore[attr-defined]

    def reference(self, parent: str, rng: Mulberry32, pools: IdentifierPools) -> Any:
        """Pick a foreign key from a published parent pool. One draw."""
        pool = pools.get(parent, requester=self.table)
        return pool[skewed_index(len(pool), self.reference_skew, rng)]

    def generate_stream(
        self, count: int, rng: Mulberry32, pools: IdentifierPools
    ) -> Iterator[R]:
        """Yield ``count`` records in order, without buffering the table.

        Args:
            count: Number of records to generate
            rng: The table's private generator
            pools: Published parent pools

        Yields:
            Records for index 0 .. count - 1
        """
        self.prepare(rng, count, pools)
        for index in range(count):
            yield self.synthesize(index, rng, pools)
        self._log_generation(count)

    def _log_generation(self, count: int) -> None:
        """Log generation activity.

        Args:
            count: Number of records generated
        """
        logger.info("data_generated", entity=self.table, count=count)


class FakerSynthesizer(RecordSynthesizer[R]):
    """Synthesizer that also uses Faker for realistic text values.

    Faker is seeded from the table's generator in ``prepare``, so output
    remains a pure function of the table seed for a given Faker version.
    Numbers, categories and foreign keys still come from the samplers.
    """

    def __init__(self, *, reference_skew: float = 0.0, locale: str = "en_US") -> None:
        super().__init__(reference_skew=reference_skew)
        self.fake = Faker(locale)

    def prepare(self, rng: Mulberry32, count: int, pools: IdentifierPools) -> None:
        super().prepare(rng, count, pools)
        self.fake.seed_instance(rng.next_uint32())
