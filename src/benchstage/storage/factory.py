"""Storage gateway factory.

This module provides the create_storage() factory function for building
the gateway selected by ``StagingSettings.storage_backend``.
"""

from __future__ import annotations

from pathlib import Path

from pyarrow import fs

from benchstage.config import StagingSettings
from benchstage.observability import get_logger
from benchstage.storage.arrow import ArrowFileSystemStorage
from benchstage.storage.base import StorageGateway
from benchstage.storage.memory import InMemoryStorage


def create_storage(settings: StagingSettings) -> StorageGateway:
    """Create a storage gateway from settings.

    Args:
        settings: Staging settings. ``storage_backend`` selects:
            - memory: InMemoryStorage (nothing persisted)
            - local: local directory at ``storage_root``
            - s3: S3-compatible bucket, ``storage_root`` is ``bucket[/path]``

    Returns:
        Configured storage gateway.

    Example:
        >>> storage = create_storage(StagingSettings(storage_backend="local", storage_root="./staged"))
    """
    logger = get_logger()

    if settings.storage_backend == "memory":
        logger.debug("storage_created", backend="memory")
        return InMemoryStorage()

    if settings.storage_backend == "local":
        root = Path(settings.storage_root).expanduser().resolve()
        root.mkdir(parents=True, exist_ok=True)
        logger.debug("storage_created", backend="local", root=str(root))
        return ArrowFileSystemStorage(fs.LocalFileSystem(), root.as_posix())

    secret = settings.s3_secret_key.get_secret_value() if settings.s3_secret_key else None
    s3 = fs.S3FileSystem(
        access_key=settings.s3_access_key,
        secret_key=secret,
        region=settings.s3_region,
        endpoint_override=settings.s3_endpoint,
    )
    logger.debug(
        "storage_created",
        backend="s3",
        root=settings.storage_root,
        endpoint=settings.s3_endpoint,
    )
    return ArrowFileSystemStorage(s3, settings.storage_root.strip("/"))
