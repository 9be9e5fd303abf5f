"""Unit tests for storage gateways."""

from __future__ import annotations

from pathlib import Path

import pytest
from pyarrow import fs

from benchstage.config import StagingSettings
from benchstage.storage import (
    NDJSON_CONTENT_TYPE,
    ArrowFileSystemStorage,
    InMemoryStorage,
    StorageGateway,
    create_storage,
)

pytestmark = pytest.mark.unit

METADATA = {"Content-Type": NDJSON_CONTENT_TYPE}


class TestInMemoryStorage:
    """Tests for InMemoryStorage."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryStorage(), StorageGateway)

    def test_put_get_roundtrip(self) -> None:
        storage = InMemoryStorage()

        storage.put("imdb/1mb/title_basics.jsonl", b"{}\n", METADATA)

        assert storage.get("imdb/1mb/title_basics.jsonl") == b"{}\n"
        assert storage.metadata("imdb/1mb/title_basics.jsonl")["Content-Type"] == NDJSON_CONTENT_TYPE
        assert storage.writes == 1
        assert len(storage) == 1

    def test_list_filters_and_sorts(self) -> None:
        storage = InMemoryStorage()
        storage.put("imdb/1mb/b.jsonl", b"bb", METADATA)
        storage.put("imdb/1mb/a.jsonl", b"a", METADATA)
        storage.put("imdb/10mb/a.jsonl", b"a", METADATA)

        listed = storage.list("imdb/1mb/")

        assert [o.key for o in listed] == ["imdb/1mb/a.jsonl", "imdb/1mb/b.jsonl"]
        assert [o.name for o in listed] == ["a.jsonl", "b.jsonl"]
        assert listed[1].size == 2

    def test_delete_ignores_missing(self) -> None:
        storage = InMemoryStorage()
        storage.put("k", b"x", METADATA)

        storage.delete("k")
        storage.delete("k")

        assert storage.list("") == []

    def test_get_missing_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            InMemoryStorage().get("missing")

    def test_fail_keys_always_fail(self) -> None:
        storage = InMemoryStorage(fail_keys=["orders.jsonl"])

        with pytest.raises(OSError, match="rejected"):
            storage.put("ecommerce/1mb/orders.jsonl", b"x", METADATA)

        assert storage.attempts == 1
        assert storage.writes == 0

    def test_transient_failures_then_success(self) -> None:
        storage = InMemoryStorage(transient_failures=1)

        with pytest.raises(ConnectionError):
            storage.put("k", b"x", METADATA)
        storage.put("k", b"x", METADATA)

        assert storage.attempts == 2
        assert storage.writes == 1


class TestArrowFileSystemStorage:
    """Tests for ArrowFileSystemStorage on the local filesystem."""

    @pytest.fixture
    def storage(self, tmp_path: Path) -> ArrowFileSystemStorage:
        return ArrowFileSystemStorage(fs.LocalFileSystem(), tmp_path.as_posix())

    def test_satisfies_protocol(self, storage: ArrowFileSystemStorage) -> None:
        assert isinstance(storage, StorageGateway)

    def test_put_creates_directories(self, storage: ArrowFileSystemStorage, tmp_path: Path) -> None:
        storage.put("imdb/1mb/title_basics.jsonl", b'{"a":1}\n', METADATA)

        assert (tmp_path / "imdb" / "1mb" / "title_basics.jsonl").read_bytes() == b'{"a":1}\n'
        assert storage.get("imdb/1mb/title_basics.jsonl") == b'{"a":1}\n'

    def test_list_under_prefix(self, storage: ArrowFileSystemStorage) -> None:
        storage.put("imdb/1mb/b.jsonl", b"bb", METADATA)
        storage.put("imdb/1mb/a.jsonl", b"a", METADATA)
        storage.put("imdb/10mb/a.jsonl", b"a", METADATA)

        listed = storage.list("imdb/1mb/")

        assert [o.key for o in listed] == ["imdb/1mb/a.jsonl", "imdb/1mb/b.jsonl"]
        assert [o.size for o in listed] == [1, 2]
        assert all(o.uploaded_at is not None for o in listed)

    def test_list_missing_prefix_is_empty(self, storage: ArrowFileSystemStorage) -> None:
        assert storage.list("clickbench/1gb/") == []

    def test_delete(self, storage: ArrowFileSystemStorage) -> None:
        storage.put("imdb/1mb/a.jsonl", b"a", METADATA)

        storage.delete("imdb/1mb/a.jsonl")
        storage.delete("imdb/1mb/a.jsonl")

        assert storage.list("imdb/1mb/") == []


class TestCreateStorage:
    """Tests for create_storage."""

    def test_memory_backend(self) -> None:
        storage = create_storage(StagingSettings(storage_backend="memory"))

        assert isinstance(storage, InMemoryStorage)

    def test_local_backend_creates_root(self, tmp_path: Path) -> None:
        root = tmp_path / "staged"

        storage = create_storage(StagingSettings(storage_backend="local", storage_root=str(root)))

        assert isinstance(storage, ArrowFileSystemStorage)
        assert root.is_dir()
        assert storage.root == root.resolve().as_posix()
