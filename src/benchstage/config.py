"""Runtime configuration for benchstage.

Settings are loaded from environment variables with the ``BENCHSTAGE_``
prefix (or a ``.env`` file) and can be overridden explicitly.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackend = Literal["memory", "local", "s3"]


class StagingSettings(BaseSettings):
    """Configuration for the staging pipeline and its storage gateway.

    Example:
        >>> # From environment
        >>> settings = StagingSettings()
        >>>
        >>> # Explicit
        >>> settings = StagingSettings(
        ...     storage_backend="s3",
        ...     storage_root="benchmarks-bucket/analytics",
        ...     s3_endpoint="http://localhost:9000",
        ... )
    """

    model_config = SettingsConfigDict(
        env_prefix="BENCHSTAGE_",
        env_file=".env",
        extra="ignore",
    )

    storage_backend: StorageBackend = Field(
        default="local",
        description="Storage gateway implementation",
    )
    storage_root: str = Field(
        default="./staged",
        description="Directory (local) or bucket[/path] (s3) that keys are relative to",
    )
    key_prefix: str = Field(
        default="",
        description="Optional prefix prepended to every {dataset}/{size}/ key",
    )
    s3_endpoint: str | None = Field(
        default=None,
        description="S3 endpoint override (R2, MinIO, LocalStack)",
    )
    s3_region: str = Field(
        default="us-east-1",
        description="S3 region",
    )
    s3_access_key: str | None = Field(
        default=None,
        description="S3 access key id",
    )
    s3_secret_key: SecretStr | None = Field(
        default=None,
        description="S3 secret access key",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Worker threads for tables within one dependency level",
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per storage write before the run fails",
    )
    retry_initial_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Initial backoff (and jitter) between write attempts",
    )
    retry_max_wait_seconds: float = Field(
        default=10.0,
        ge=0.0,
        le=300.0,
        description="Upper bound on the backoff between write attempts",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON instead of console output",
    )

    def normalized_prefix(self) -> str:
        """Return the key prefix with exactly one trailing slash, or empty."""
        prefix = self.key_prefix.strip("/")
        return f"{prefix}/" if prefix else ""
