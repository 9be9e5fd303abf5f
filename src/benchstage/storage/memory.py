"""In-process storage gateway.

Keeps objects in a dict. Used by tests and by ``--storage memory`` runs
that only need the manifest. Supports injected write failures so retry
and abort paths can be exercised.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from types import MappingProxyType

from benchstage.storage.base import StoredObject


class InMemoryStorage:
    """Thread-safe dict-backed storage.

    Attributes:
        writes: Number of successful ``put`` calls.
        attempts: Number of ``put`` calls, failed ones included.

    Example:
        >>> storage = InMemoryStorage(transient_failures=1)
        >>> storage.put("a.jsonl", b"{}\\n", {})  # raises ConnectionError
        >>> storage.put("a.jsonl", b"{}\\n", {})  # succeeds
    """

    def __init__(
        self,
        *,
        fail_keys: Iterable[str] = (),
        transient_failures: int = 0,
    ) -> None:
        """Initialize the store.

        Args:
            fail_keys: Keys (or key suffixes) whose writes always fail.
            transient_failures: Number of initial writes that fail before
                writes start succeeding.
        """
        self._objects: dict[str, tuple[bytes, Mapping[str, str], datetime]] = {}
        self._lock = threading.Lock()
        self._fail_keys = tuple(fail_keys)
        self._transient_failures = transient_failures
        self.writes = 0
        self.attempts = 0

    def put(self, key: str, data: bytes, metadata: Mapping[str, str]) -> None:
        with self._lock:
            self.attempts += 1
            if any(key.endswith(suffix) for suffix in self._fail_keys):
                raise OSError(f"Write rejected for {key}")
            if self._transient_failures > 0:
                self._transient_failures -= 1
                raise ConnectionError(f"Transient write failure for {key}")
            self._objects[key] = (bytes(data), MappingProxyType(dict(metadata)), datetime.now(UTC))
            self.writes += 1

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._objects[key][0]
            except KeyError:
                raise FileNotFoundError(key) from None

    def metadata(self, key: str) -> Mapping[str, str]:
        """Metadata stored with ``key``."""
        with self._lock:
            try:
                return self._objects[key][1]
            except KeyError:
                raise FileNotFoundError(key) from None

    def list(self, prefix: str) -> list[StoredObject]:
        with self._lock:
            return [
                StoredObject(key=key, size=len(data), uploaded_at=uploaded_at)
                for key, (data, _, uploaded_at) in sorted(self._objects.items())
                if key.startswith(prefix)
            ]

    def delete(self, key: str) -> None:
        with self._lock:
            self._objects.pop(key, None)

    def __len__(self) -> int:
        return len(self._objects)
