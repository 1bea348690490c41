"""TTL cache

Keys have no eviction policy beyond TTL. Expired entries are evicted when
read or when a caller runs ``cleanup()``; nothing calls it automatically.
"""

import logging
from typing import Callable, Generic, TypeVar

from .rate_limiter import now_ms
from .stores import CacheEntry, CacheStore, InMemoryCacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Key/value cache with per-entry expiry"""

    def __init__(
        self,
        default_ttl_seconds: float = 300,
        store: CacheStore | None = None,
        clock: Callable[[], float] = now_ms,
        name: str = "cache",
    ):
        """
        Args:
            default_ttl_seconds: TTL used when ``set`` is called without one
            store: entry store (in-memory if omitted)
            clock: returns the current time in epoch milliseconds
            name: label used in log records
        """
        self.default_ttl_ms = default_ttl_seconds * 1000
        self.store = store if store is not None else InMemoryCacheStore()
        self.clock = clock
        self.name = name

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if absent or expired"""
        entry = self.store.get(key)
        if entry is None:
            return None
        if self.clock() > entry.expires_at:
            self.store.discard(key, entry)
            return None
        return entry.value

    def set(self, key: str, value: T, ttl_seconds: float | None = None) -> None:
        ttl_ms = ttl_seconds * 1000 if ttl_seconds else self.default_ttl_ms
        self.store.set(key, CacheEntry(value=value, expires_at=self.clock() + ttl_ms))

    def delete(self, key: str) -> bool:
        return self.store.delete(key)

    def clear(self) -> None:
        self.store.clear()

    def cleanup(self) -> int:
        """Evict all expired entries (call periodically in long-running processes)

        Returns:
            number of entries evicted
        """
        now = self.clock()
        cleaned = 0
        for key, entry in self.store.items():
            if now > entry.expires_at and self.store.discard(key, entry):
                cleaned += 1
        if cleaned:
            logger.debug("Evicted %d expired entries from %s", cleaned, self.name)
        return cleaned

    def size(self) -> int:
        return len(self.store)
