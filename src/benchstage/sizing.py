"""Size-tier resolution.

Maps a (dataset, size) request to per-table record counts. Pure lookup:
nothing here generates data or touches storage, so it is the place to
validate a request before any work starts.
"""

from __future__ import annotations

from benchstage.catalog import DEFAULT_CATALOG, DatasetCatalog, DatasetConfig, SizeTier
from benchstage.errors import InvalidSizeTierError

__all__ = ["SizeTier", "parse_size", "resolve", "validate"]


def parse_size(size: str | SizeTier) -> SizeTier:
    """Return the tier for an exact size token (``1mb``, ``10mb``, ...).

    Raises:
        InvalidSizeTierError: If the token is not a known tier.
    """
    if isinstance(size, SizeTier):
        return size
    try:
        return SizeTier(size)
    except ValueError:
        raise InvalidSizeTierError(size, SizeTier.values()) from None


def validate(
    dataset: str,
    size: str | SizeTier,
    catalog: DatasetCatalog = DEFAULT_CATALOG,
) -> tuple[DatasetConfig, SizeTier]:
    """Validate a request, dataset first.

    Raises:
        InvalidDatasetError: If the dataset is not in the catalog.
        InvalidSizeTierError: If the size is not a known tier.
    """
    config = catalog.get(dataset)
    return config, parse_size(size)


def resolve(
    dataset: str,
    size: str | SizeTier,
    catalog: DatasetCatalog = DEFAULT_CATALOG,
) -> dict[str, int]:
    """Record count per table for ``dataset`` at ``size``.

    Example:
        >>> resolve("imdb", "1mb")
        {'title_basics': 2000, 'name_basics': 3000, 'title_ratings': 1500}
    """
    config, tier = validate(dataset, size, catalog)
    return config.counts(tier)
