"""TTL-based result caching for awesome-audit.

This package provides :class:`DiskCache`, a memoizing cache that keeps
GitHub API responses for a fixed freshness window so repeated audits stay
under the API rate limit, together with its storage backends.

:func:`create_cache` builds the cache selected by
:class:`~awesome_audit.models.CacheSettings`.
"""

from __future__ import annotations

import time
from typing import Callable

from awesome_audit.cache.cache import DiskCache
from awesome_audit.cache.storage import (
    DiskcacheStorage,
    FileStorage,
    MemoryStorage,
    StorageBackend,
    StoredPayload,
)
from awesome_audit.config import resolve_cache_dir
from awesome_audit.models import AuditSettings


def create_cache(settings: AuditSettings, clock: Callable[[], float] = time.time) -> DiskCache:
    """Build the :class:`DiskCache` configured by ``settings.cache``."""
    backend = settings.cache.backend
    storage: StorageBackend
    if backend == "memory":
        storage = MemoryStorage(clock=clock)
    elif backend == "diskcache":
        storage = DiskcacheStorage(resolve_cache_dir(settings), clock=clock)
    else:
        storage = FileStorage(resolve_cache_dir(settings))
    return DiskCache(storage, clock=clock)


__all__ = [
    "DiskCache",
    "DiskcacheStorage",
    "FileStorage",
    "MemoryStorage",
    "StorageBackend",
    "StoredPayload",
    "create_cache",
]
