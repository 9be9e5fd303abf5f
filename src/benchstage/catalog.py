"""Dataset catalog for benchstage.

This module defines the immutable dataset configuration:
- SizeTier: Enum of the supported size labels
- TableConfig: one table, its parents, synthesizer and per-tier counts
- DatasetConfig: an ordered set of tables sharing one seed
- DatasetCatalog: lookup over dataset configs, validated on construction

The default catalog is built once at import and passed explicitly to the
pipeline; nothing registers itself into it at runtime.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from benchstage.errors import CatalogError, InvalidDatasetError
from benchstage.generators import (
    CLICKBENCH_SEED,
    IMDB_SEED,
    OLTP_SEED,
    CommentSynthesizer,
    CustomerSynthesizer,
    DocumentSynthesizer,
    HitSynthesizer,
    MemberSynthesizer,
    NameBasicsSynthesizer,
    OrderSynthesizer,
    OrganizationSynthesizer,
    PostSynthesizer,
    ProductSynthesizer,
    RecordSynthesizer,
    ReviewSynthesizer,
    SocialUserSynthesizer,
    TitleBasicsSynthesizer,
    TitleRatingSynthesizer,
)
from benchstage.rng import derive_table_seed

DatasetFamily = Literal["analytics", "reference", "oltp"]


class SizeTier(str, Enum):
    """Supported size labels. Each maps to fixed per-table record counts.

    Values:
        ONE_MB: ~1 MB of serialized output.
        TEN_MB: ~10 MB.
        HUNDRED_MB: ~100 MB.
        ONE_GB: ~1 GB.
    """

    ONE_MB = "1mb"
    TEN_MB = "10mb"
    HUNDRED_MB = "100mb"
    ONE_GB = "1gb"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """Return the size tokens in ascending order."""
        return tuple(tier.value for tier in cls)


def tiered(base: int, multiplier: float = 1.0) -> dict[SizeTier, int]:
    """Counts growing tenfold per tier, starting at ``base * multiplier``.

    Example:
        >>> tiered(1_000, 0.2)[SizeTier.TEN_MB]
        2000
    """
    return {
        tier: max(1, round(base * 10**step * multiplier))
        for step, tier in enumerate(SizeTier)
    }


class TableConfig(BaseModel):
    """One table of a dataset.

    Attributes:
        name: Table name, also the file stem in storage.
        synthesizer: Factory returning a fresh synthesizer per run.
        depends_on: Tables whose identifier pools this table references.
        counts: Record count for each size tier.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, pattern=r"^[a-z][a-z0-9_]*$")
    synthesizer: Callable[[], RecordSynthesizer[Any]]
    depends_on: tuple[str, ...] = ()
    counts: Mapping[SizeTier, int]

    def count(self, size: SizeTier) -> int:
        return self.counts[size]


class DatasetConfig(BaseModel):
    """A dataset: tables generated in declaration order from one seed.

    Example:
        >>> imdb = DEFAULT_CATALOG.get("imdb")
        >>> [[t.name for t in level] for level in imdb.levels()]
        [['title_basics'], ['name_basics', 'title_ratings']]
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, pattern=r"^[a-z][a-z0-9_-]*$")
    name: str
    description: str = ""
    family: DatasetFamily
    seed: int = Field(..., ge=0)
    tables: tuple[TableConfig, ...] = Field(..., min_length=1)

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.tables)

    def table(self, name: str) -> TableConfig:
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)

    def table_seed(self, name: str) -> int:
        """Seed of the private generator for table ``name``."""
        return derive_table_seed(self.seed, self.table_names.index(name))

    def counts(self, size: SizeTier) -> dict[str, int]:
        """Record count per table for one size tier."""
        return {t.name: t.count(size) for t in self.tables}

    def levels(self) -> tuple[tuple[TableConfig, ...], ...]:
        """Group tables by dependency depth.

        Tables in one level only depend on tables of earlier levels, so a
        level can be generated concurrently once the previous one is done.
        """
        depth: dict[str, int] = {}
        for table in self.tables:
            depth[table.name] = 1 + max((depth[p] for p in table.depends_on), default=-1)
        grouped: dict[int, list[TableConfig]] = {}
        for table in self.tables:
            grouped.setdefault(depth[table.name], []).append(table)
        return tuple(tuple(grouped[d]) for d in sorted(grouped))

    def describe(self) -> dict[str, Any]:
        """Plain summary used by listings."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "family": self.family,
            "tables": list(self.table_names),
            "sizes": list(SizeTier.values()),
        }


def _check_dataset(config: DatasetConfig) -> None:
    seen: set[str] = set()
    for table in config.tables:
        if table.name in seen:
            raise CatalogError(
                f"Duplicate table {table.name!r}",
                details={"dataset": config.id},
            )
        for parent in table.depends_on:
            if parent not in seen:
                raise CatalogError(
                    f"Table {table.name!r} depends on {parent!r}, which is not declared before it",
                    details={"dataset": config.id},
                )
        missing = [tier.value for tier in SizeTier if tier not in table.counts]
        if missing:
            raise CatalogError(
                f"Table {table.name!r} has no count for {', '.join(missing)}",
                details={"dataset": config.id},
            )
        factory = getattr(table.synthesizer, "func", table.synthesizer)
        synthesizer_refs = set(getattr(factory, "references", ()))
        if not synthesizer_refs <= set(table.depends_on):
            raise CatalogError(
                f"Table {table.name!r} references {sorted(synthesizer_refs)} "
                f"but depends on {list(table.depends_on)}",
                details={"dataset": config.id},
            )
        seen.add(table.name)


class DatasetCatalog:
    """Immutable lookup of dataset configurations.

    Raises:
        CatalogError: If two datasets share an id, or a dataset's tables
            are not declared in dependency order.

    Example:
        >>> catalog = DatasetCatalog([clickbench, imdb])
        >>> catalog.ids
        ('clickbench', 'imdb')
    """

    def __init__(self, datasets: Iterable[DatasetConfig]) -> None:
        configs: dict[str, DatasetConfig] = {}
        for config in datasets:
            if config.id in configs:
                raise CatalogError(f"Duplicate dataset {config.id!r}")
            _check_dataset(config)
            configs[config.id] = config
        self._datasets: Mapping[str, DatasetConfig] = MappingProxyType(configs)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._datasets)

    def get(self, dataset: str) -> DatasetConfig:
        """Return the config for ``dataset``.

        Raises:
            InvalidDatasetError: If the catalog has no such dataset.
        """
        try:
            return self._datasets[dataset]
        except KeyError:
            raise InvalidDatasetError(dataset, self.ids) from None

    def describe(self) -> list[dict[str, Any]]:
        return [config.describe() for config in self._datasets.values()]

    def __contains__(self, dataset: object) -> bool:
        return dataset in self._datasets

    def __iter__(self) -> Iterator[DatasetConfig]:
        return iter(self._datasets.values())

    def __len__(self) -> int:
        return len(self._datasets)


def _table(
    name: str,
    synthesizer: Callable[[], RecordSynthesizer[Any]],
    counts: Mapping[SizeTier, int],
    depends_on: Sequence[str] = (),
) -> TableConfig:
    return TableConfig(
        name=name,
        synthesizer=synthesizer,
        counts=MappingProxyType(dict(counts)),
        depends_on=tuple(depends_on),
    )


OLTP_BASE_COUNT = 1_000


def build_default_catalog() -> DatasetCatalog:
    """Build the catalog of built-in datasets."""
    return DatasetCatalog(
        [
            DatasetConfig(
                id="clickbench",
                name="ClickBench",
                description="Synthetic web analytics benchmark data (page views, sessions, events)",
                family="analytics",
                seed=CLICKBENCH_SEED,
                tables=(_table("hits", HitSynthesizer, tiered(2_000)),),
            ),
            DatasetConfig(
                id="imdb",
                name="IMDB",
                description="Synthetic movie/TV data (titles, names, ratings)",
                family="reference",
                seed=IMDB_SEED,
                tables=(
                    _table("title_basics", TitleBasicsSynthesizer, tiered(2_000)),
                    _table("name_basics", NameBasicsSynthesizer, tiered(3_000), ["title_basics"]),
                    _table("title_ratings", TitleRatingSynthesizer, tiered(1_500), ["title_basics"]),
                ),
            ),
            DatasetConfig(
                id="ecommerce",
                name="E-commerce",
                description="Online retail OLTP data (customers, products, orders, reviews)",
                family="oltp",
                seed=OLTP_SEED,
                tables=(
                    _table("customers", CustomerSynthesizer, tiered(OLTP_BASE_COUNT, 0.2)),
                    _table("products", ProductSynthesizer, tiered(OLTP_BASE_COUNT, 0.5)),
                    _table(
                        "orders",
                        OrderSynthesizer,
                        tiered(OLTP_BASE_COUNT, 1.0),
                        ["customers", "products"],
                    ),
                    _table(
                        "reviews",
                        ReviewSynthesizer,
                        tiered(OLTP_BASE_COUNT, 0.8),
                        ["customers", "products"],
                    ),
                ),
            ),
            DatasetConfig(
                id="saas",
                name="SaaS Multi-Tenant",
                description="Multi-tenant SaaS data (organizations, users, documents)",
                family="oltp",
                seed=OLTP_SEED,
                tables=(
                    _table("orgs", OrganizationSynthesizer, tiered(OLTP_BASE_COUNT, 0.01)),
                    _table("users", MemberSynthesizer, tiered(OLTP_BASE_COUNT, 0.1), ["orgs"]),
                    _table(
                        "documents",
                        DocumentSynthesizer,
                        tiered(OLTP_BASE_COUNT, 1.0),
                        ["orgs", "users"],
                    ),
                ),
            ),
            DatasetConfig(
                id="social",
                name="Social Network",
                description="Social network data (users, posts, comments)",
                family="oltp",
                seed=OLTP_SEED,
                tables=(
                    _table("users", SocialUserSynthesizer, tiered(OLTP_BASE_COUNT, 0.1)),
                    _table("posts", PostSynthesizer, tiered(OLTP_BASE_COUNT, 1.0), ["users"]),
                    _table(
                        "comments",
                        CommentSynthesizer,
                        tiered(OLTP_BASE_COUNT, 0.5),
                        ["posts", "users"],
                    ),
                ),
            ),
        ]
    )


DEFAULT_CATALOG = build_default_catalog()
