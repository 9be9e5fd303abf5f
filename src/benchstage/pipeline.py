"""Staging pipeline: generate a dataset at a size tier and persist it.

One ``stage`` call runs::

    CHECKING -> GENERATING -> SERIALIZING -> PERSISTING -> DONE
                                                  (FAILED from any state)

Tables are grouped into dependency levels. Tables inside a level run
concurrently on a thread pool; a level starts only after every table of
the previous level is persisted and its identifier pool published. Each
table owns a private generator seeded from the dataset seed and the
table's position, so output does not depend on scheduling.
"""

from __future__ import annotations

import io
import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from benchstage.catalog import DEFAULT_CATALOG, DatasetCatalog, DatasetConfig, SizeTier, TableConfig
from benchstage.config import StagingSettings
from benchstage.errors import (
    BenchStageError,
    GenerationInvariantViolation,
    StorageReadError,
    StorageWriteError,
)
from benchstage.generators.base import IdentifierPools
from benchstage.observability import get_logger, log_write_retry, staging_operation
from benchstage.rng import Mulberry32
from benchstage.schemas.manifest import (
    DeleteResult,
    StageAllSummary,
    StagedFile,
    StagingManifest,
    StagingStatus,
    StoredFile,
)
from benchstage.sizing import parse_size, validate
from benchstage.storage.base import NDJSON_CONTENT_TYPE, StorageGateway, StoredObject

TABLE_FILE_SUFFIX = ".jsonl"


class StagingState(str, Enum):
    """Lifecycle of a staging run and of each table within it."""

    CHECKING = "checking"
    GENERATING = "generating"
    SERIALIZING = "serializing"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[StagingState, frozenset[StagingState]] = {
    StagingState.CHECKING: frozenset({StagingState.GENERATING, StagingState.DONE, StagingState.FAILED}),
    StagingState.GENERATING: frozenset({StagingState.SERIALIZING, StagingState.FAILED}),
    StagingState.SERIALIZING: frozenset({StagingState.PERSISTING, StagingState.FAILED}),
    StagingState.PERSISTING: frozenset({StagingState.DONE, StagingState.FAILED}),
    StagingState.DONE: frozenset(),
    StagingState.FAILED: frozenset(),
}


class StagingRun:
    """State of one ``stage`` call.

    The run and every table move forward through ``StagingState`` only;
    ``history`` records each transition as ``(table or None, state)``.
    """

    def __init__(self, dataset: str, size: str, tables: tuple[str, ...]) -> None:
        self.dataset = dataset
        self.size = size
        self.state = StagingState.CHECKING
        self.table_states: dict[str, StagingState] = {t: StagingState.CHECKING for t in tables}
        self.history: list[tuple[str | None, StagingState]] = [(None, StagingState.CHECKING)]
        self._lock = threading.Lock()

    def transition(self, state: StagingState, table: str | None = None) -> None:
        """Move the run (``table=None``) or one table to ``state``.

        Raises:
            ValueError: If the move is not a forward transition.
        """
        with self._lock:
            current = self.state if table is None else self.table_states[table]
            if state not in _TRANSITIONS[current]:
                raise ValueError(f"Cannot move {table or 'run'} from {current.value} to {state.value}")
            if table is None:
                self.state = state
            else:
                self.table_states[table] = state
            self.history.append((table, state))

    @property
    def completed_tables(self) -> tuple[str, ...]:
        """Tables persisted so far, in declaration order."""
        return tuple(t for t, s in self.table_states.items() if s is StagingState.DONE)


def staging_prefix(settings: StagingSettings, dataset: str, size: str) -> str:
    """Key prefix under which a (dataset, size) pair is stored."""
    return f"{settings.normalized_prefix()}{dataset}/{size}/"


def _table_of(obj: StoredObject) -> str:
    name = obj.name
    return name[: -len(TABLE_FILE_SUFFIX)] if name.endswith(TABLE_FILE_SUFFIX) else name


class StagingPipeline:
    """Generate datasets and persist them as NDJSON objects.

    Attributes:
        storage: Gateway objects are written through
        catalog: Datasets this pipeline can stage
        settings: Worker count, retry policy and key prefix

    Example:
        >>> pipeline = StagingPipeline(InMemoryStorage(), settings=StagingSettings(storage_backend="memory"))
        >>> manifest = pipeline.stage("clickbench", "1mb")
        >>> manifest.files[0].records
        2000
    """

    def __init__(
        self,
        storage: StorageGateway,
        catalog: DatasetCatalog = DEFAULT_CATALOG,
        settings: StagingSettings | None = None,
    ) -> None:
        self.storage = storage
        self.catalog = catalog
        self.settings = settings or StagingSettings()

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    def stage(self, dataset: str, size: str | SizeTier) -> StagingManifest:
        """Stage ``dataset`` at ``size``, or return the cached manifest.

        Args:
            dataset: Dataset identifier from the catalog.
            size: Size tier token (``1mb``, ``10mb``, ``100mb``, ``1gb``).

        Returns:
            Manifest listing one file per table.

        Raises:
            InvalidDatasetError: Unknown dataset; nothing is read or written.
            InvalidSizeTierError: Unknown size; nothing is read or written.
            StorageReadError: The staged prefix could not be listed.
            StorageWriteError: A write failed after retries; the run is aborted.
        """
        config, tier = validate(dataset, size, self.catalog)
        started = time.monotonic()
        prefix = staging_prefix(self.settings, config.id, tier.value)
        run = StagingRun(config.id, tier.value, config.table_names)
        logger = get_logger().bind(dataset=config.id, size=tier.value)

        with staging_operation("stage", dataset=config.id, size=tier.value):
            try:
                existing = self.storage.list(prefix)
            except OSError as exc:
                run.transition(StagingState.FAILED)
                raise StorageReadError(prefix, cause=f"{type(exc).__name__}: {exc}") from exc
            if len(existing) >= len(config.tables):
                run.transition(StagingState.DONE)
                logger.info("stage_cached", files=len(existing))
                return StagingManifest(
                    dataset=config.id,
                    size=tier.value,
                    cached=True,
                    duration_ms=_elapsed_ms(started),
                    files=tuple(
                        StagedFile(table=_table_of(obj), name=obj.name, key=obj.key, size_bytes=obj.size)
                        for obj in existing
                    ),
                )

            run.transition(StagingState.GENERATING)
            try:
                files = self._run_levels(config, tier, prefix, run)
            except Exception:
                run.transition(StagingState.FAILED)
                raise
            run.transition(StagingState.SERIALIZING)
            run.transition(StagingState.PERSISTING)
            run.transition(StagingState.DONE)

        manifest = StagingManifest(
            dataset=config.id,
            size=tier.value,
            cached=False,
            duration_ms=_elapsed_ms(started),
            files=files,
        )
        logger.info(
            "stage_finished",
            tables=len(files),
            total_size=manifest.total_size,
            duration_ms=manifest.duration_ms,
        )
        return manifest

    def _run_levels(
        self,
        config: DatasetConfig,
        tier: SizeTier,
        prefix: str,
        run: StagingRun,
    ) -> tuple[StagedFile, ...]:
        needed = {parent for table in config.tables for parent in table.depends_on}
        pools = IdentifierPools()
        staged: dict[str, StagedFile] = {}

        with ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix=f"stage-{config.id}",
        ) as executor:
            for level in config.levels():
                futures: dict[Future[tuple[StagedFile, tuple[Any, ...] | None]], TableConfig] = {
                    executor.submit(
                        self._stage_table, config, table, tier, prefix, pools, run, table.name in needed
                    ): table
                    for table in level
                }
                done, pending = wait(futures, return_when=FIRST_EXCEPTION)
                for future in pending:
                    future.cancel()
                # Let already running tables settle before reporting
                wait(pending)

                failures = [
                    (futures[f], f.exception())
                    for f in futures
                    if not f.cancelled() and f.exception() is not None
                ]
                if failures:
                    failures.sort(key=lambda item: config.table_names.index(item[0].name))
                    table, exc = failures[0]
                    assert exc is not None
                    if isinstance(exc, StorageWriteError):
                        raise StorageWriteError(
                            exc.message,
                            key=exc.key,
                            completed_tables=run.completed_tables,
                            cause=exc.cause,
                        ) from exc
                    raise exc

                for future, table in futures.items():
                    staged_file, identifiers = future.result()
                    staged[table.name] = staged_file
                    if identifiers is not None:
                        pools = pools.publish(table.name, identifiers)

        return tuple(staged[name] for name in config.table_names)

    def _stage_table(
        self,
        config: DatasetConfig,
        table: TableConfig,
        tier: SizeTier,
        prefix: str,
        pools: IdentifierPools,
        run: StagingRun,
        keep_identifiers: bool,
    ) -> tuple[StagedFile, tuple[Any, ...] | None]:
        count = table.count(tier)
        key = f"{prefix}{table.name}{TABLE_FILE_SUFFIX}"
        logger = get_logger().bind(dataset=config.id, size=tier.value, table=table.name)

        try:
            run.transition(StagingState.GENERATING, table.name)
            synthesizer = table.synthesizer()
            rng = Mulberry32(config.table_seed(table.name))
            buffer = io.BytesIO()
            identifiers: list[Any] = []
            for record in synthesizer.generate_stream(count, rng, pools):
                buffer.write(record.model_dump_json().encode("utf-8"))
                buffer.write(b"\n")
                if keep_identifiers:
                    identifiers.append(synthesizer.identifier(record))

            run.transition(StagingState.SERIALIZING, table.name)
            data = buffer.getvalue()
            logger.debug("table_generated", records=count, size_bytes=len(data))

            run.transition(StagingState.PERSISTING, table.name)
            metadata = {
                "Content-Type": NDJSON_CONTENT_TYPE,
                "dataset": config.id,
                "size": tier.value,
                "table": table.name,
                "records": str(count),
                "generated_at": datetime.now(UTC).isoformat(),
            }
            self._put(key, data, metadata)
            run.transition(StagingState.DONE, table.name)
        except Exception:
            run.transition(StagingState.FAILED, table.name)
            raise

        logger.info("table_staged", key=key, records=count, size_bytes=len(data))
        staged_file = StagedFile(
            table=table.name,
            name=f"{table.name}{TABLE_FILE_SUFFIX}",
            key=key,
            size_bytes=len(data),
            records=count,
        )
        return staged_file, tuple(identifiers) if keep_identifiers else None

    def _put(self, key: str, data: bytes, metadata: dict[str, str]) -> None:
        """Write one object, retrying transient ``OSError`` failures."""
        retrying = Retrying(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self.settings.write_attempts),
            wait=wait_exponential_jitter(
                initial=self.settings.retry_initial_wait_seconds,
                max=self.settings.retry_max_wait_seconds,
                jitter=self.settings.retry_initial_wait_seconds,
            ),
            before_sleep=_log_retry(key, self.settings.write_attempts),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self.storage.put(key, data, metadata)
        except OSError as exc:
            raise StorageWriteError(
                f"Failed to write {key}",
                key=key,
                cause=f"{type(exc).__name__}: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Inspection and maintenance
    # ------------------------------------------------------------------

    def status(self, dataset: str, size: str | SizeTier) -> StagingStatus:
        """Report what is currently staged for ``dataset`` at ``size``."""
        config, tier = validate(dataset, size, self.catalog)
        prefix = staging_prefix(self.settings, config.id, tier.value)
        with staging_operation("status", dataset=config.id, size=tier.value, log_end=False):
            objects = self.storage.list(prefix)

        present = {obj.key for obj in objects}
        complete = all(f"{prefix}{name}{TABLE_FILE_SUFFIX}" in present for name in config.table_names)
        return StagingStatus(
            dataset=config.id,
            size=tier.value,
            exists=bool(objects),
            complete=complete,
            expected_tables=config.table_names,
            files=tuple(
                StoredFile(name=obj.name, key=obj.key, size_bytes=obj.size, uploaded_at=obj.uploaded_at)
                for obj in objects
            ),
        )

    def delete(self, dataset: str, size: str | SizeTier) -> DeleteResult:
        """Delete every object staged for ``dataset`` at ``size``."""
        config, tier = validate(dataset, size, self.catalog)
        prefix = staging_prefix(self.settings, config.id, tier.value)
        with staging_operation("delete", dataset=config.id, size=tier.value):
            objects = self.storage.list(prefix)
            for obj in objects:
                self.storage.delete(obj.key)
        return DeleteResult(dataset=config.id, size=tier.value, deleted=len(objects))

    def stage_all(
        self,
        size: str | SizeTier,
        datasets: list[str] | tuple[str, ...] | None = None,
    ) -> StageAllSummary:
        """Stage several datasets at one size, continuing past failures.

        Args:
            size: Size tier token, validated before any dataset is staged.
            datasets: Dataset ids to stage; defaults to the whole catalog.

        Returns:
            Manifests of successful datasets and error messages of failed ones.
        """
        tier = parse_size(size)
        results: list[StagingManifest] = []
        errors: dict[str, str] = {}

        for dataset in datasets or self.catalog.ids:
            try:
                results.append(self.stage(dataset, tier))
            except GenerationInvariantViolation:
                raise
            except (BenchStageError, OSError) as exc:
                get_logger().warning("stage_all_dataset_failed", dataset=dataset, error=str(exc))
                errors[dataset] = str(exc)

        return StageAllSummary(size=tier.value, results=tuple(results), errors=errors)

    def list_datasets(self) -> list[dict[str, Any]]:
        """Describe every dataset in the catalog."""
        return self.catalog.describe()


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def _log_retry(key: str, max_attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        log_write_retry(
            key,
            attempt=retry_state.attempt_number,
            max_attempts=max_attempts,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0.0,
            error=str(exc),
        )

    return before_sleep
