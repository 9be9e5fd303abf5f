"""Dagster assets for staged benchmark datasets.

One asset per catalog dataset, partitioned by size tier. Materializing a
partition stages that (dataset, size) pair and reports the manifest.

Note: This module intentionally does NOT use `from __future__ import annotations`
because Dagster's @asset decorator validates type hints at runtime and PEP 563
string annotations confuse its context type validation.
"""

# Note: No `from __future__ import annotations` - see module docstring
from dagster import (
    AssetExecutionContext,
    AssetsDefinition,
    MaterializeResult,
    MetadataValue,
    StaticPartitionsDefinition,
    asset,
)

from benchstage.catalog import DEFAULT_CATALOG, DatasetCatalog, DatasetConfig, SizeTier
from benchstage.dagster.resources import StagingPipelineResource

size_partitions = StaticPartitionsDefinition(list(SizeTier.values()))


def build_staging_asset(dataset: DatasetConfig) -> AssetsDefinition:
    """Create the size-partitioned asset that stages ``dataset``.

    Args:
        dataset: Catalog entry to stage.

    Returns:
        Asset named ``{dataset.id}_staged`` requiring a ``staging`` resource.
    """

    @asset(
        name=f"{dataset.id.replace('-', '_')}_staged",
        partitions_def=size_partitions,
        group_name=f"benchstage_{dataset.family}",
        description=dataset.description,
    )
    def _staged(
        context: AssetExecutionContext,
        staging: StagingPipelineResource,
    ) -> MaterializeResult:
        manifest = staging.get_pipeline().stage(dataset.id, context.partition_key)
        context.log.info(
            f"{dataset.id}/{manifest.size}: {len(manifest.files)} files, "
            f"{manifest.total_size} bytes (cached={manifest.cached})"
        )
        return MaterializeResult(
            metadata={
                "cached": MetadataValue.bool(manifest.cached),
                "duration_ms": MetadataValue.int(manifest.duration_ms),
                "total_size": MetadataValue.int(manifest.total_size),
                "files": MetadataValue.json(
                    [f.model_dump(mode="json") for f in manifest.files]
                ),
            }
        )

    return _staged


def build_staging_assets(catalog: DatasetCatalog = DEFAULT_CATALOG) -> list[AssetsDefinition]:
    """Create one staging asset per dataset in ``catalog``."""
    return [build_staging_asset(dataset) for dataset in catalog]


staging_assets = build_staging_assets()
