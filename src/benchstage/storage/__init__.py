"""Storage gateways for staged datasets.

- StorageGateway: protocol the pipeline writes through
- InMemoryStorage: dict-backed, for tests and dry runs
- ArrowFileSystemStorage: local disk or S3-compatible via pyarrow.fs
- create_storage: build the gateway selected in StagingSettings
"""

from __future__ import annotations

from benchstage.storage.arrow import ArrowFileSystemStorage
from benchstage.storage.base import NDJSON_CONTENT_TYPE, StorageGateway, StoredObject
from benchstage.storage.factory import create_storage
from benchstage.storage.memory import InMemoryStorage

__all__ = [
    "NDJSON_CONTENT_TYPE",
    "ArrowFileSystemStorage",
    "InMemoryStorage",
    "StorageGateway",
    "StoredObject",
    "create_storage",
]
