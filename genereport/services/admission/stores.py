"""Backing stores for admission control

RateLimiter and TTLCache never touch process-global state directly; they
receive a store. The in-memory stores below are the single-instance default.
A shared key-value store can be dropped in behind the same interface when
several instances must share quotas.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """Cached value with its absolute expiry (epoch milliseconds)"""

    value: T
    expires_at: float


class RateLimitStore(ABC):
    """Key -> list of request timestamps (epoch milliseconds)"""

    @abstractmethod
    def update(self, key: str, fn: Callable[[list[float]], tuple[list[float], Any]]) -> Any:
        """Atomically read-modify-write one bucket

        Args:
            key: bucket key (``feature:identifier``)
            fn: receives the current timestamps and returns
                (new timestamps, value to hand back to the caller)

        Returns:
            the second element returned by ``fn``
        """

    @abstractmethod
    def clear(self) -> None:
        pass


class CacheStore(ABC):
    """Key -> CacheEntry"""

    @abstractmethod
    def get(self, key: str) -> CacheEntry | None:
        pass

    @abstractmethod
    def set(self, key: str, entry: CacheEntry) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    def discard(self, key: str, entry: CacheEntry) -> bool:
        """Delete `key` only if it still holds `entry`"""

    @abstractmethod
    def items(self) -> Iterator[tuple[str, CacheEntry]]:
        """Snapshot of all entries"""

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class InMemoryRateLimitStore(RateLimitStore):
    """Per-process buckets; resets on restart"""

    def __init__(self):
        self._buckets: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def update(self, key: str, fn: Callable[[list[float]], tuple[list[float], Any]]) -> Any:
        with self._lock:
            new_timestamps, value = fn(list(self._buckets.get(key, [])))
            if new_timestamps:
                self._buckets[key] = new_timestamps
            else:
                self._buckets.pop(key, None)
            return value

    def clear(self) -> None:
        with self._lock:
            self._buckets.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._buckets


class InMemoryCacheStore(CacheStore):
    """Per-process dict guarded by a lock"""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def discard(self, key: str, entry: CacheEntry) -> bool:
        with self._lock:
            if self._entries.get(key) is entry:
                del self._entries[key]
                return True
            return False

    def items(self) -> Iterator[tuple[str, CacheEntry]]:
        with self._lock:
            snapshot = list(self._entries.items())
        return iter(snapshot)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
