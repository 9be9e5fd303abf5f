"""Storage gateway protocol.

The pipeline only needs three operations from object storage: write an
object with metadata, list objects under a prefix, and delete an object.
Backends raise ``OSError`` (or a subclass) for failures that may succeed
on retry.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

NDJSON_CONTENT_TYPE = "application/x-ndjson"


class StoredObject(BaseModel):
    """An object as reported by ``list``.

    Attributes:
        key: Full key, relative to the storage root.
        size: Size in bytes.
        uploaded_at: Last modification time, when the backend reports one.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    size: int = Field(..., ge=0)
    uploaded_at: datetime | None = None

    @property
    def name(self) -> str:
        """Last path component of the key."""
        return self.key.rsplit("/", 1)[-1]


@runtime_checkable
class StorageGateway(Protocol):
    """Object storage used by the staging pipeline."""

    def put(self, key: str, data: bytes, metadata: Mapping[str, str]) -> None:
        """Write ``data`` under ``key``, replacing any existing object."""
        ...

    def get(self, key: str) -> bytes:
        """Read the object under ``key``."""
        ...

    def list(self, prefix: str) -> list[StoredObject]:
        """List objects whose key starts with ``prefix``, sorted by key."""
        ...

    def delete(self, key: str) -> None:
        """Delete the object under ``key``. Missing keys are ignored."""
        ...
