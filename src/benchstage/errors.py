"""Custom exceptions for benchstage.

This module defines the exception hierarchy:
- BenchStageError (base)
- InvalidDatasetError
- InvalidSizeTierError
- CatalogError
- StorageWriteError
- StorageReadError
- GenerationInvariantViolation
"""

from __future__ import annotations

from collections.abc import Sequence


class BenchStageError(Exception):
    """Base exception for all benchstage operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     pipeline.stage("unknown", "1mb")
        ... except BenchStageError as e:
        ...     print(f"Staging error: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize BenchStageError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class InvalidDatasetError(BenchStageError):
    """Dataset identifier is not in the catalog.

    Raised before any generation work begins, so no storage is touched.

    Example:
        >>> try:
        ...     resolve("tpch", "1mb")
        ... except InvalidDatasetError as e:
        ...     print(e.valid)
    """

    def __init__(self, dataset: str, valid: Sequence[str]) -> None:
        """Initialize InvalidDatasetError.

        Args:
            dataset: The dataset identifier that was requested.
            valid: Dataset identifiers the catalog knows about.
        """
        self.dataset = dataset
        self.valid = tuple(valid)
        super().__init__(
            f"Invalid dataset: {dataset}. Valid options: {', '.join(self.valid)}",
            details={"dataset": dataset},
        )


class InvalidSizeTierError(BenchStageError):
    """Size token is not one of the enumerated size tiers."""

    def __init__(self, size: str, valid: Sequence[str]) -> None:
        """Initialize InvalidSizeTierError.

        Args:
            size: The size token that was requested.
            valid: The accepted size tokens.
        """
        self.size = size
        self.valid = tuple(valid)
        super().__init__(
            f"Invalid size: {size}. Valid options: {', '.join(self.valid)}",
            details={"size": size},
        )


class CatalogError(BenchStageError):
    """Dataset catalog configuration is inconsistent.

    Raised when:
    - A table depends on a table that is not declared before it
    - A size tier omits a declared table
    - Two datasets share an identifier
    """


class StorageWriteError(BenchStageError):
    """Persisting a generated table to storage failed.

    The staging run is aborted at the first failure. ``completed_tables``
    lists the tables written before the failure, for diagnostics only; a
    failed run is never reported as a partial success.

    Example:
        >>> try:
        ...     pipeline.stage("imdb", "10mb")
        ... except StorageWriteError as e:
        ...     print(f"Failed at {e.key}, already wrote {e.completed_tables}")
    """

    def __init__(
        self,
        message: str = "Storage write failed",
        *,
        key: str | None = None,
        completed_tables: Sequence[str] = (),
        cause: str | None = None,
    ) -> None:
        """Initialize StorageWriteError.

        Args:
            message: Human-readable error description.
            key: The storage key that failed to write.
            completed_tables: Tables persisted before the failure.
            cause: The underlying cause of the failure.
        """
        details: dict[str, str] = {}
        if key:
            details["key"] = key
        if completed_tables:
            details["completed_tables"] = ",".join(completed_tables)
        if cause:
            details["cause"] = cause
        super().__init__(message, details=details)
        self.key = key
        self.completed_tables = tuple(completed_tables)
        self.cause = cause


class StorageReadError(BenchStageError):
    """Listing staged objects failed before generation started."""

    def __init__(self, prefix: str, *, cause: str | None = None) -> None:
        details = {"prefix": prefix}
        if cause:
            details["cause"] = cause
        super().__init__(f"Failed to list {prefix}", details=details)
        self.prefix = prefix
        self.cause = cause


class GenerationInvariantViolation(BenchStageError):
    """A synthesizer referenced an identifier pool that is not ready.

    This indicates the parent-before-child generation order was violated.
    It is a programming error: callers should let it propagate.
    """

    def __init__(self, pool: str, *, table: str | None = None, reason: str = "not published") -> None:
        """Initialize GenerationInvariantViolation.

        Args:
            pool: Name of the identifier pool that was referenced.
            table: Table whose synthesizer made the reference.
            reason: Why the pool could not be used.
        """
        details = {"pool": pool}
        if table:
            details["table"] = table
        super().__init__(f"Identifier pool {pool!r} is {reason}", details=details)
        self.pool = pool
        self.table = table
