"""Dagster assets and resources for dataset staging.

Note: Requires the 'dagster' optional dependency.
"""

from __future__ import annotations

try:
    from benchstage.dagster.assets import (
        build_staging_asset,
        build_staging_assets,
        size_partitions,
        staging_assets,
    )
    from benchstage.dagster.resources import StagingPipelineResource

    __all__ = [
        "StagingPipelineResource",
        "build_staging_asset",
        "build_staging_assets",
        "size_partitions",
        "staging_assets",
    ]
except ImportError:
    # Dagster not installed
    __all__ = []
