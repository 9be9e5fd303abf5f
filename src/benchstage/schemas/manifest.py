"""Result models returned by the staging pipeline.

- StagedFile: one persisted table
- StagingManifest: outcome of one (dataset, size) staging run
- StoredFile / StagingStatus: what already exists under a prefix
- DeleteResult: outcome of removing a staged dataset
- StageAllSummary: outcome of staging every dataset at one size
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(num_bytes: int) -> str:
    """Human readable byte count using 1024-based units.

    Example:
        >>> format_bytes(1536)
        '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"
    exponent = 0
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(_BYTE_UNITS) - 1:
        exponent += 1
    value = round(num_bytes / 1024**exponent, 2)
    return f"{value:g} {_BYTE_UNITS[exponent]}"


class StagedFile(BaseModel):
    """A table persisted (or found) in storage.

    Attributes:
        table: Logical table name
        name: File name (``{table}.jsonl``)
        key: Full storage key
        size_bytes: Object size in bytes
        records: Record count when freshly generated, None when cached
    """

    model_config = ConfigDict(frozen=True)

    table: str
    name: str
    key: str
    size_bytes: int = Field(..., ge=0)
    records: int | None = None


class StagingManifest(BaseModel):
    """Outcome of one staging run.

    Example:
        >>> manifest = pipeline.stage("imdb", "1mb")
        >>> [f.table for f in manifest.files]
        ['title_basics', 'name_basics', 'title_ratings']
    """

    model_config = ConfigDict(frozen=True)

    dataset: str
    size: str
    cached: bool = False
    duration_ms: int = Field(..., ge=0)
    files: tuple[StagedFile, ...]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size(self) -> int:
        """Sum of file sizes in bytes."""
        return sum(f.size_bytes for f in self.files)


class StoredFile(BaseModel):
    """An object listed under a staging prefix."""

    model_config = ConfigDict(frozen=True)

    name: str
    key: str
    size_bytes: int = Field(..., ge=0)
    uploaded_at: datetime | None = None


class StagingStatus(BaseModel):
    """What is currently staged for a (dataset, size) pair."""

    model_config = ConfigDict(frozen=True)

    dataset: str
    size: str
    exists: bool
    complete: bool
    expected_tables: tuple[str, ...]
    files: tuple[StoredFile, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size(self) -> int:
        """Sum of listed object sizes in bytes."""
        return sum(f.size_bytes for f in self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size_formatted(self) -> str:
        """Total size as a human readable string."""
        return format_bytes(self.total_size)


class DeleteResult(BaseModel):
    """Outcome of deleting everything under a staging prefix."""

    model_config = ConfigDict(frozen=True)

    dataset: str
    size: str
    deleted: int = Field(..., ge=0)


class StageAllSummary(BaseModel):
    """Outcome of staging several datasets at one size.

    Failed datasets are reported in ``errors`` by message; they never
    contribute a manifest to ``results``.
    """

    model_config = ConfigDict(frozen=True)

    size: str
    results: tuple[StagingManifest, ...] = ()
    errors: dict[str, str] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def successful(self) -> int:
        return len(self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return len(self.errors)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.successful + self.failed

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size(self) -> int:
        return sum(r.total_size for r in self.results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_size_formatted(self) -> str:
        return format_bytes(self.total_size)
