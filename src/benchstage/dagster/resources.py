"""Dagster resources for dataset staging.

This module provides a Dagster ConfigurableResource that builds a
StagingPipeline from run configuration.
"""

from __future__ import annotations

from dagster import ConfigurableResource
from pydantic import Field

from benchstage.config import StagingSettings
from benchstage.pipeline import StagingPipeline
from benchstage.storage import create_storage


class StagingPipelineResource(ConfigurableResource):
    """Dagster resource for StagingPipeline.

    Example:
        >>> @asset
        >>> def hits(staging: StagingPipelineResource):
        ...     return staging.get_pipeline().stage("clickbench", "1mb")
    """

    storage_backend: str = Field(default="local", description="memory, local or s3")
    storage_root: str = Field(default="./staged", description="Directory or s3 bucket[/path]")
    key_prefix: str = Field(default="", description="Prefix inside the storage root")
    s3_endpoint: str | None = Field(default=None, description="S3 endpoint override")
    s3_region: str = Field(default="us-east-1", description="S3 region")
    s3_access_key: str | None = Field(default=None, description="S3 access key id")
    s3_secret_key: str | None = Field(default=None, description="S3 secret access key")
    max_workers: int = Field(default=1, description="Concurrent tables per dependency level")
    write_attempts: int = Field(default=3, description="Attempts per storage write")

    def get_settings(self) -> StagingSettings:
        """Build StagingSettings from the resource configuration."""
        return StagingSettings(
            storage_backend=self.storage_backend,  # type: ignore[arg-type]
            storage_root=self.storage_root,
            key_prefix=self.key_prefix,
            s3_endpoint=self.s3_endpoint,
            s3_region=self.s3_region,
            s3_access_key=self.s3_access_key,
            s3_secret_key=self.s3_secret_key,  # type: ignore[arg-type]
            max_workers=self.max_workers,
            write_attempts=self.write_attempts,
        )

    def get_pipeline(self) -> StagingPipeline:
        """Create a StagingPipeline over the configured storage."""
        settings = self.get_settings()
        return StagingPipeline(create_storage(settings), settings=settings)
