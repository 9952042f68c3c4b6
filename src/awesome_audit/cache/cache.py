"""Memoizing cache with wall-clock expiry for expensive, rate-limited calls.

:meth:`DiskCache.get_or_compute` returns the stored result for an
identifier while it is younger than ``max_age_seconds``; otherwise it
calls the producer, stores the result, and returns it. There is no
eviction: stale entries stay in storage until the next computation for
the same identifier overwrites them.

Cache keys are SHA-256 hashes of the identifier so that arbitrary strings
(full request URLs) map to filesystem-safe names.

Results are serialised with :mod:`pickle`, so anything picklable can be
cached. Only point the cache at directories you trust.

No locking is done. At most one process is expected to use a cache
directory at a time.
"""

from __future__ import annotations

import hashlib
import pickle
import time
from typing import Any, Callable, Optional, TypeVar

from awesome_audit.cache.storage import StorageBackend, StoredPayload
from awesome_audit.exceptions import CacheError

T = TypeVar("T")

_UNPICKLE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    TypeError,
    ValueError,
)


class DiskCache:
    """TTL-based memoization over a pluggable :class:`StorageBackend`.

    Args:
        storage: Where payloads are kept.
        clock: Returns the current time as a POSIX timestamp. Must agree
            with the backend's notion of ``written_at`` (file mtimes are
            wall-clock time).

    Example::

        cache = DiskCache(FileStorage("/tmp/audit-cache"))
        body = cache.get_or_compute(url, lambda: download(url), 3600)
    """

    def __init__(
        self,
        storage: StorageBackend,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._clock = clock

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    @staticmethod
    def make_key(identifier: str) -> str:
        """Derive the storage key for *identifier*."""
        return hashlib.sha256(identifier.encode("utf-8")).hexdigest()

    def get_or_compute(
        self,
        identifier: str,
        compute: Callable[[], T],
        max_age_seconds: int,
    ) -> T:
        """Return the cached result for *identifier*, recomputing when stale.

        A stored entry is used only while its age is strictly less than
        *max_age_seconds*. Exceptions raised by *compute* propagate and
        leave storage untouched.

        Raises:
            CacheError: If storage cannot be read or written, or a stored
                payload cannot be deserialised.
        """
        key = self.make_key(identifier)
        stored = self._read(key)

        if stored is not None and self._clock() - stored.written_at < max_age_seconds:
            try:
                return pickle.loads(stored.data)
            except _UNPICKLE_ERRORS as exc:
                raise CacheError(f"Corrupt cache entry {key}: {exc}") from exc

        value = compute()
        self._write(key, pickle.dumps(value))
        return value

    def stats(self) -> dict[str, Any]:
        """Return backend name, location, and entry count."""
        try:
            size = self._storage.count()
        except OSError as exc:
            raise CacheError(f"Cannot inspect cache at {self._storage.location}: {exc}") from exc
        return {
            "backend": self._storage.name,
            "location": self._storage.location,
            "size": size,
        }

    def close(self) -> None:
        """Release the storage backend's resources."""
        self._storage.close()

    def _read(self, key: str) -> Optional[StoredPayload]:
        try:
            return self._storage.read(key)
        except OSError as exc:
            raise CacheError(f"Cannot read cache entry {key}: {exc}") from exc

    def _write(self, key: str, data: bytes) -> None:
        try:
            self._storage.write(key, data)
        except OSError as exc:
            raise CacheError(f"Cannot write cache entry {key}: {exc}") from exc
