"""Storage gateway over ``pyarrow.fs`` filesystems.

One implementation covers local disk and S3-compatible object stores
(AWS, R2, MinIO, LocalStack). Keys are POSIX paths relative to ``root``.
"""

from __future__ import annotations

from collections.abc import Mapping

from pyarrow import fs

from benchstage.observability import get_logger
from benchstage.storage.base import StoredObject


class ArrowFileSystemStorage:
    """Storage gateway backed by a ``pyarrow.fs.FileSystem``.

    Object metadata is passed through to the filesystem; S3 keeps the
    standard headers (``Content-Type`` ...) and local disk drops it.

    Example:
        >>> storage = ArrowFileSystemStorage(fs.LocalFileSystem(), "/tmp/staged")
        >>> storage.put("imdb/1mb/title_basics.jsonl", data, {"Content-Type": NDJSON_CONTENT_TYPE})
    """

    def __init__(self, filesystem: fs.FileSystem, root: str) -> None:
        """Initialize the gateway.

        Args:
            filesystem: Target filesystem.
            root: Directory (or ``bucket/path``) that keys are relative to.
        """
        self.filesystem = filesystem
        self.root = root.rstrip("/")

    def _path(self, key: str) -> str:
        return f"{self.root}/{key.lstrip('/')}" if self.root else key.lstrip("/")

    def _key(self, path: str) -> str:
        if not self.root:
            return path
        return path[len(self.root) + 1 :]

    def put(self, key: str, data: bytes, metadata: Mapping[str, str]) -> None:
        path = self._path(key)
        parent = path.rsplit("/", 1)[0]
        if parent and parent != path:
            self.filesystem.create_dir(parent, recursive=True)
        with self.filesystem.open_output_stream(path, compression=None, metadata=dict(metadata)) as out:
            out.write(data)
        get_logger().debug("storage_put", key=key, size_bytes=len(data))

    def get(self, key: str) -> bytes:
        with self.filesystem.open_input_stream(self._path(key), compression=None) as stream:
            return stream.read()

    def list(self, prefix: str) -> list[StoredObject]:
        # Prefixes used by the pipeline always end at a directory boundary
        base, _, stem = self._path(prefix).rpartition("/")
        selector = fs.FileSelector(base, recursive=True, allow_not_found=True)
        objects = [
            StoredObject(key=self._key(info.path), size=info.size or 0, uploaded_at=info.mtime)
            for info in self.filesystem.get_file_info(selector)
            if info.type == fs.FileType.File
        ]
        full_prefix = self._key(self._path(prefix)) if stem else self._key(base + "/")
        return sorted(
            (obj for obj in objects if obj.key.startswith(full_prefix)),
            key=lambda obj: obj.key,
        )

    def delete(self, key: str) -> None:
        path = self._path(key)
        if self.filesystem.get_file_info(path).type == fs.FileType.NotFound:
            return
        self.filesystem.delete_file(path)
