"""Unit tests for the Dagster resource and staging assets.

The resource is a thin wrapper, so we test instantiation and method
returns; assets are checked for naming, grouping and partitioning, and
one is materialized against in-memory storage.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dagster import AssetKey, materialize

from benchstage.catalog import DEFAULT_CATALOG, SizeTier
from benchstage.dagster import (
    StagingPipelineResource,
    build_staging_asset,
    size_partitions,
    staging_assets,
)
from benchstage.pipeline import StagingPipeline
from benchstage.storage import ArrowFileSystemStorage, InMemoryStorage

pytestmark = pytest.mark.unit


class TestStagingPipelineResource:
    """Tests for StagingPipelineResource."""

    def test_defaults(self) -> None:
        """Resource defaults match the settings defaults."""
        resource = StagingPipelineResource()

        assert resource.storage_backend == "local"
        assert resource.storage_root == "./staged"
        assert resource.max_workers == 1
        assert resource.write_attempts == 3

    def test_get_settings(self) -> None:
        resource = StagingPipelineResource(storage_backend="memory", key_prefix="bench", max_workers=4)

        settings = resource.get_settings()

        assert settings.storage_backend == "memory"
        assert settings.normalized_prefix() == "bench/"
        assert settings.max_workers == 4

    def test_get_pipeline_memory(self) -> None:
        pipeline = StagingPipelineResource(storage_backend="memory").get_pipeline()

        assert isinstance(pipeline, StagingPipeline)
        assert isinstance(pipeline.storage, InMemoryStorage)

    def test_get_pipeline_local(self, tmp_path: Path) -> None:
        pipeline = StagingPipelineResource(storage_backend="local", storage_root=str(tmp_path)).get_pipeline()

        assert isinstance(pipeline.storage, ArrowFileSystemStorage)


class TestStagingAssets:
    """Tests for the generated staging assets."""

    def test_one_asset_per_dataset(self) -> None:
        keys = {asset.key for asset in staging_assets}

        assert keys == {AssetKey(f"{dataset_id}_staged") for dataset_id in DEFAULT_CATALOG.ids}

    def test_partitioned_by_size(self) -> None:
        assert size_partitions.get_partition_keys() == list(SizeTier.values())
        for asset in staging_assets:
            assert asset.partitions_def == size_partitions

    def test_grouped_by_family(self) -> None:
        asset = build_staging_asset(DEFAULT_CATALOG.get("imdb"))

        assert asset.group_names_by_key[asset.key] == "benchstage_reference"

    def test_materialize_partition(self) -> None:
        asset = build_staging_asset(DEFAULT_CATALOG.get("clickbench"))

        result = materialize(
            [asset],
            resources={"staging": StagingPipelineResource(storage_backend="memory")},
            partition_key="1mb",
        )

        assert result.success
        materialization = result.asset_materializations_for_node("clickbench_staged")[0]
        assert materialization.metadata["cached"].value is False
        assert materialization.metadata["total_size"].value > 0
