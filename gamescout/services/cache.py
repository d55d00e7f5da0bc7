"""Bounded in-memory cache with lazy time-based expiry."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_CAPACITY = 100


@dataclass(slots=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TimedCache(Generic[K, V]):
    """Insertion-ordered cache with a fixed capacity and per-entry TTL.

    Eviction is FIFO: when a new key would exceed ``capacity`` the entry
    inserted earliest is dropped, regardless of how recently it was read.
    Expiry is only checked on ``get``, so an expired entry that is never
    read again keeps occupying a slot until it is pushed out by overflow.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: K, value: V) -> None:
        if key not in self._entries and len(self._entries) >= self.capacity:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        # Overwrites keep the key's original insertion slot.
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def delete(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["CacheEntry", "TimedCache", "DEFAULT_CAPACITY", "DEFAULT_TTL_SECONDS"]
