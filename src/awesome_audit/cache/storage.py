"""Storage backends for :class:`~awesome_audit.cache.DiskCache`.

A backend stores opaque byte payloads under string keys and reports when
each payload was last written. It knows nothing about serialisation or
expiry; both live in the cache itself.

* :class:`FileStorage` -- one file per key, file mtime as the write time.
  This is the default and what CI caches between runs.
* :class:`DiskcacheStorage` -- a :mod:`diskcache` directory, for users who
  already keep other tooling caches there.
* :class:`MemoryStorage` -- an in-process dict, for tests.
"""

from __future__ import annotations

import os
import sqlite3
import tempfile
import time
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Protocol

import diskcache

from awesome_audit.exceptions import CacheError


class StoredPayload(NamedTuple):
    """A payload as read back from storage."""

    written_at: float
    data: bytes


class StorageBackend(Protocol):
    """Interface every cache storage backend implements."""

    name: str

    @property
    def location(self) -> str: ...

    def read(self, key: str) -> Optional[StoredPayload]: ...

    def write(self, key: str, data: bytes) -> None: ...

    def count(self) -> int: ...

    def close(self) -> None: ...


class FileStorage:
    """One file per cache key inside *directory*.

    The file name is the key and the file modification time is the only
    staleness signal. The directory is created on first write. Read and
    write failures raise :class:`OSError`.
    """

    name = "files"

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def location(self) -> str:
        return str(self._directory)

    def read(self, key: str) -> Optional[StoredPayload]:
        path = self._directory / key
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        return StoredPayload(written_at=mtime, data=path.read_bytes())

    def write(self, key: str, data: bytes) -> None:
        """Write *data* atomically using temp file + rename."""
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / key

        fd, tmp_path = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def count(self) -> int:
        if not self._directory.is_dir():
            return 0
        return sum(
            1 for p in self._directory.iterdir() if p.is_file() and not p.name.startswith(".")
        )

    def close(self) -> None:
        pass


class DiskcacheStorage:
    """Payloads stored as ``(written_at, data)`` in a :class:`diskcache.Cache`.

    Entries are written without a diskcache expiry; freshness is decided by
    the caller from ``written_at`` like for every other backend.
    """

    name = "diskcache"

    def __init__(self, directory: str | Path, clock: Callable[[], float] = time.time) -> None:
        self._directory = Path(directory)
        self._clock = clock
        self._cache: Optional[diskcache.Cache] = None

    @property
    def location(self) -> str:
        return str(self._directory)

    def read(self, key: str) -> Optional[StoredPayload]:
        try:
            value = self._open().get(key)
        except sqlite3.Error as exc:
            raise CacheError(f"Cannot read cache entry {key}: {exc}") from exc
        if value is None:
            return None
        written_at, data = value
        return StoredPayload(written_at=written_at, data=data)

    def write(self, key: str, data: bytes) -> None:
        try:
            self._open().set(key, (self._clock(), data))
        except sqlite3.Error as exc:
            raise CacheError(f"Cannot write cache entry {key}: {exc}") from exc

    def count(self) -> int:
        if not self._directory.is_dir():
            return 0
        return len(self._open())

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    def _open(self) -> diskcache.Cache:
        # diskcache creates its directory on open, so defer until first use.
        if self._cache is None:
            self._cache = diskcache.Cache(str(self._directory))
        return self._cache


class MemoryStorage:
    """In-process storage keyed by cache key. Nothing survives the process."""

    name = "memory"

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, StoredPayload] = {}

    @property
    def location(self) -> str:
        return "memory"

    def read(self, key: str) -> Optional[StoredPayload]:
        return self._entries.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._entries[key] = StoredPayload(written_at=self._clock(), data=data)

    def count(self) -> int:
        return len(self._entries)

    def close(self) -> None:
        pass
