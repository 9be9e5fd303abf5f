"""Unit tests for the staging pipeline.

Tests cover:
- Fresh and cached staging runs
- Byte-identical output across runs and worker counts
- Retry and abort behaviour on storage failures
- status, delete and stage_all
"""

from __future__ import annotations

import hashlib
import json

import pytest
from structlog.testing import LogCapture

from benchstage.catalog import DatasetCatalog, DatasetConfig, SizeTier, TableConfig, tiered
from benchstage.config import StagingSettings
from benchstage.errors import (
    GenerationInvariantViolation,
    InvalidDatasetError,
    InvalidSizeTierError,
    StorageReadError,
    StorageWriteError,
)
from benchstage.generators import CommentSynthesizer, PostSynthesizer, SocialUserSynthesizer
from benchstage.pipeline import StagingPipeline, StagingRun, StagingState, staging_prefix
from benchstage.storage import NDJSON_CONTENT_TYPE, InMemoryStorage, StoredObject

pytestmark = pytest.mark.unit


class _CountingStorage(InMemoryStorage):
    """InMemoryStorage that also counts list calls."""

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.lists = 0

    def list(self, prefix: str) -> list[StoredObject]:
        self.lists += 1
        return super().list(prefix)


class _UnlistableStorage(InMemoryStorage):
    """InMemoryStorage whose listing fails under one dataset's prefix."""

    def __init__(self, dataset: str, error: Exception) -> None:
        super().__init__()
        self.dataset = dataset
        self.error = error

    def list(self, prefix: str) -> list[StoredObject]:
        if prefix.startswith(f"{self.dataset}/"):
            raise self.error
        return super().list(prefix)


@pytest.fixture
def mini_catalog() -> DatasetCatalog:
    """A three-level dataset small enough to stage in every test."""
    return DatasetCatalog(
        [
            DatasetConfig(
                id="mini",
                name="Mini Social",
                family="oltp",
                seed=42,
                tables=(
                    TableConfig(name="users", synthesizer=SocialUserSynthesizer, counts=tiered(10)),
                    TableConfig(
                        name="posts",
                        synthesizer=PostSynthesizer,
                        counts=tiered(20),
                        depends_on=("users",),
                    ),
                    TableConfig(
                        name="comments",
                        synthesizer=CommentSynthesizer,
                        counts=tiered(10),
                        depends_on=("posts", "users"),
                    ),
                ),
            )
        ]
    )


def _digests(storage: InMemoryStorage, prefix: str) -> dict[str, str]:
    return {obj.key: hashlib.sha256(storage.get(obj.key)).hexdigest() for obj in storage.list(prefix)}


def _lines(storage: InMemoryStorage, key: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in storage.get(key).decode("utf-8").splitlines()]


class TestStagingRun:
    """Tests for the staging state machine."""

    def test_forward_transitions(self) -> None:
        run = StagingRun("imdb", "1mb", ("title_basics",))

        run.transition(StagingState.GENERATING, "title_basics")
        run.transition(StagingState.SERIALIZING, "title_basics")
        run.transition(StagingState.PERSISTING, "title_basics")
        run.transition(StagingState.DONE, "title_basics")

        assert run.completed_tables == ("title_basics",)
        assert run.history[-1] == ("title_basics", StagingState.DONE)

    def test_backward_transition_rejected(self) -> None:
        run = StagingRun("imdb", "1mb", ("title_basics",))
        run.transition(StagingState.GENERATING)

        with pytest.raises(ValueError, match="Cannot move run from generating to checking"):
            run.transition(StagingState.CHECKING)

    def test_terminal_states_are_final(self) -> None:
        run = StagingRun("imdb", "1mb", ())
        run.transition(StagingState.FAILED)

        with pytest.raises(ValueError):
            run.transition(StagingState.DONE)


class TestStage:
    """Tests for StagingPipeline.stage."""

    def test_stage_clickbench(self, pipeline: StagingPipeline, memory_storage: InMemoryStorage) -> None:
        manifest = pipeline.stage("clickbench", "1mb")

        assert manifest.dataset == "clickbench"
        assert manifest.size == "1mb"
        assert manifest.cached is False
        assert len(manifest.files) == 1
        staged = manifest.files[0]
        assert staged.key == "clickbench/1mb/hits.jsonl"
        assert staged.name == "hits.jsonl"
        assert staged.records == 2000
        assert manifest.total_size == staged.size_bytes == len(memory_storage.get(staged.key))

        rows = _lines(memory_storage, staged.key)
        assert len(rows) == 2000
        assert "WatchID" in rows[0]

    def test_metadata_written(self, pipeline: StagingPipeline, memory_storage: InMemoryStorage) -> None:
        pipeline.stage("clickbench", SizeTier.ONE_MB)

        metadata = memory_storage.metadata("clickbench/1mb/hits.jsonl")
        assert metadata["Content-Type"] == NDJSON_CONTENT_TYPE
        assert metadata["dataset"] == "clickbench"
        assert metadata["size"] == "1mb"
        assert metadata["table"] == "hits"
        assert metadata["records"] == "2000"
        assert "generated_at" in metadata

    def test_output_is_deterministic(self, settings: StagingSettings) -> None:
        """Two runs into separate stores produce byte-identical files."""
        first, second = InMemoryStorage(), InMemoryStorage()

        StagingPipeline(first, settings=settings).stage("imdb", "1mb")
        StagingPipeline(second, settings=settings).stage("imdb", "1mb")

        assert _digests(first, "imdb/1mb/") == _digests(second, "imdb/1mb/")
        assert len(_digests(first, "imdb/1mb/")) == 3

    def test_worker_count_does_not_change_output(
        self, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        serial, parallel = InMemoryStorage(), InMemoryStorage()
        parallel_settings = settings.model_copy(update={"max_workers": 4})

        StagingPipeline(serial, mini_catalog, settings).stage("mini", "10mb")
        StagingPipeline(parallel, mini_catalog, parallel_settings).stage("mini", "10mb")

        assert _digests(serial, "mini/10mb/") == _digests(parallel, "mini/10mb/")

    def test_references_resolve(self, pipeline: StagingPipeline, memory_storage: InMemoryStorage) -> None:
        """Child tables only reference identifiers of their parents."""
        pipeline.stage("imdb", "1mb")

        tconsts = {row["tconst"] for row in _lines(memory_storage, "imdb/1mb/title_basics.jsonl")}
        for row in _lines(memory_storage, "imdb/1mb/name_basics.jsonl"):
            known_for = str(row["knownForTitles"])
            assert {t for t in known_for.split(",") if t} <= tconsts
        for row in _lines(memory_storage, "imdb/1mb/title_ratings.jsonl"):
            assert row["tconst"] in tconsts

    def test_files_listed_in_declaration_order(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        manifest = StagingPipeline(memory_storage, mini_catalog, settings).stage("mini", "1mb")

        assert [f.table for f in manifest.files] == ["users", "posts", "comments"]
        assert [f.records for f in manifest.files] == [10, 20, 10]

    def test_key_prefix(self, memory_storage: InMemoryStorage, mini_catalog: DatasetCatalog) -> None:
        settings = StagingSettings(storage_backend="memory", key_prefix="/bench/")

        manifest = StagingPipeline(memory_storage, mini_catalog, settings).stage("mini", "1mb")

        assert manifest.files[0].key == "bench/mini/1mb/users.jsonl"
        assert staging_prefix(settings, "mini", "1mb") == "bench/mini/1mb/"

    def test_stage_finished_logged(
        self,
        memory_storage: InMemoryStorage,
        settings: StagingSettings,
        mini_catalog: DatasetCatalog,
        log_output: LogCapture,
    ) -> None:
        StagingPipeline(memory_storage, mini_catalog, settings).stage("mini", "1mb")

        finished = [e for e in log_output.entries if e["event"] == "stage_finished"]
        assert len(finished) == 1
        assert finished[0]["dataset"] == "mini"
        assert finished[0]["tables"] == 3


class TestCache:
    """Tests for cached staging runs."""

    def test_second_run_is_cached(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)
        fresh = pipeline.stage("mini", "1mb")
        writes = memory_storage.writes

        cached = pipeline.stage("mini", "1mb")

        assert cached.cached is True
        assert memory_storage.writes == writes
        assert {f.key for f in cached.files} == {f.key for f in fresh.files}
        assert cached.total_size == fresh.total_size
        assert all(f.records is None for f in cached.files)

    def test_partial_staging_is_regenerated(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)
        pipeline.stage("mini", "1mb")
        memory_storage.delete("mini/1mb/comments.jsonl")

        manifest = pipeline.stage("mini", "1mb")

        assert manifest.cached is False
        assert len(memory_storage.list("mini/1mb/")) == 3


class TestValidation:
    """Invalid requests fail before storage is touched."""

    def test_invalid_dataset(self, settings: StagingSettings) -> None:
        storage = _CountingStorage()

        with pytest.raises(InvalidDatasetError):
            StagingPipeline(storage, settings=settings).stage("tpch", "1mb")

        assert storage.lists == 0
        assert storage.attempts == 0

    def test_invalid_size(self, settings: StagingSettings) -> None:
        storage = _CountingStorage()

        with pytest.raises(InvalidSizeTierError):
            StagingPipeline(storage, settings=settings).stage("imdb", "2mb")

        assert storage.lists == 0
        assert storage.attempts == 0


class TestStorageFailures:
    """Tests for retry and abort on write failures."""

    def test_transient_failures_are_retried(
        self, settings: StagingSettings, mini_catalog: DatasetCatalog, log_output: LogCapture
    ) -> None:
        storage = InMemoryStorage(transient_failures=2)

        manifest = StagingPipeline(storage, mini_catalog, settings).stage("mini", "1mb")

        assert len(manifest.files) == 3
        assert storage.writes == 3
        assert storage.attempts == 5
        retries = [e for e in log_output.entries if e["event"] == "storage_put_retry"]
        assert len(retries) == 2

    def test_persistent_failure_aborts_run(
        self, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        """A table that never persists aborts the run and names what was written."""
        storage = InMemoryStorage(fail_keys=["posts.jsonl"])

        with pytest.raises(StorageWriteError) as exc_info:
            StagingPipeline(storage, mini_catalog, settings).stage("mini", "1mb")

        error = exc_info.value
        assert error.key == "mini/1mb/posts.jsonl"
        assert error.completed_tables == ("users",)
        assert error.cause is not None and "OSError" in error.cause
        # users once, posts for every attempt, comments never
        assert storage.attempts == 1 + settings.write_attempts
        assert [o.name for o in storage.list("mini/1mb/")] == ["users.jsonl"]

    def test_failure_logs_stage_failed(
        self, settings: StagingSettings, mini_catalog: DatasetCatalog, log_output: LogCapture
    ) -> None:
        storage = InMemoryStorage(fail_keys=["users.jsonl"])

        with pytest.raises(StorageWriteError):
            StagingPipeline(storage, mini_catalog, settings).stage("mini", "1mb")

        assert any(e["event"] == "stage_failed" for e in log_output.entries)

    def test_list_failure_raises_read_error(self, settings: StagingSettings) -> None:
        storage = _UnlistableStorage("clickbench", ConnectionError("list timed out"))

        with pytest.raises(StorageReadError) as exc_info:
            StagingPipeline(storage, settings=settings).stage("clickbench", "1mb")

        assert exc_info.value.prefix == "clickbench/1mb/"
        assert exc_info.value.cause == "ConnectionError: list timed out"
        assert storage.attempts == 0


class TestStatusAndDelete:
    """Tests for status and delete."""

    def test_status_before_and_after(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)

        before = pipeline.status("mini", "1mb")
        pipeline.stage("mini", "1mb")
        after = pipeline.status("mini", "1mb")

        assert before.exists is False
        assert before.complete is False
        assert after.exists is True
        assert after.complete is True
        assert after.expected_tables == ("users", "posts", "comments")
        assert len(after.files) == 3
        assert after.total_size == sum(f.size_bytes for f in after.files)

    def test_status_incomplete(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)
        pipeline.stage("mini", "1mb")
        memory_storage.delete("mini/1mb/posts.jsonl")

        report = pipeline.status("mini", "1mb")

        assert report.exists is True
        assert report.complete is False

    def test_delete(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)
        pipeline.stage("mini", "1mb")
        pipeline.stage("mini", "10mb")

        result = pipeline.delete("mini", "1mb")

        assert result.deleted == 3
        assert memory_storage.list("mini/1mb/") == []
        assert len(memory_storage.list("mini/10mb/")) == 3

    def test_status_validates_request(self, pipeline: StagingPipeline) -> None:
        with pytest.raises(InvalidDatasetError):
            pipeline.status("tpch", "1mb")


class TestStageAll:
    """Tests for stage_all."""

    def test_failures_recorded_and_others_staged(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        pipeline = StagingPipeline(memory_storage, mini_catalog, settings)

        summary = pipeline.stage_all("1mb", ["tpch", "mini"])

        assert summary.size == "1mb"
        assert summary.successful == 1
        assert summary.failed == 1
        assert summary.total == 2
        assert "Invalid dataset: tpch" in summary.errors["tpch"]
        assert summary.results[0].dataset == "mini"

    def test_storage_errors_recorded_and_others_staged(self, settings: StagingSettings) -> None:
        """A dataset whose prefix cannot be listed does not stop the rest."""
        storage = _UnlistableStorage("clickbench", ConnectionError("list timed out"))

        summary = StagingPipeline(storage, settings=settings).stage_all("1mb", ["clickbench", "imdb"])

        assert summary.successful == 1
        assert summary.results[0].dataset == "imdb"
        assert "list timed out" in summary.errors["clickbench"]
        assert storage.list("imdb/1mb/")

    def test_invariant_violation_propagates(self, settings: StagingSettings) -> None:
        storage = _UnlistableStorage("clickbench", GenerationInvariantViolation("users"))

        with pytest.raises(GenerationInvariantViolation):
            StagingPipeline(storage, settings=settings).stage_all("1mb", ["clickbench", "imdb"])

    def test_defaults_to_whole_catalog(
        self, memory_storage: InMemoryStorage, settings: StagingSettings, mini_catalog: DatasetCatalog
    ) -> None:
        summary = StagingPipeline(memory_storage, mini_catalog, settings).stage_all(SizeTier.ONE_MB)

        assert [r.dataset for r in summary.results] == ["mini"]
        assert summary.errors == {}

    def test_invalid_size_raises(self, pipeline: StagingPipeline) -> None:
        with pytest.raises(InvalidSizeTierError):
            pipeline.stage_all("3mb")

    def test_list_datasets(self, pipeline: StagingPipeline) -> None:
        assert [d["id"] for d in pipeline.list_datasets()] == [
            "clickbench",
            "imdb",
            "ecommerce",
            "saas",
            "social",
        ]
