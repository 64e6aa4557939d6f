"""
Bounded in-memory caches.

Every cache in the engine maps a composite string key to a computed value
and evicts in insertion order once it grows past its capacity.

IMPORTANT:
    This is FIFO, not LRU. Reads never promote an entry.
    A hot key inserted early is evicted before a cold key inserted late.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Generic, Iterator, List, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for one cache."""
    name: str
    size: int
    capacity: int
    hits: int
    misses: int

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        return self.hits / self.lookups if self.lookups else 0.0


class BoundedCache(Generic[K, V]):
    """
    Insertion-ordered cache with a hard capacity.

    put() inserts then evicts the oldest entries until the size is back
    within capacity, so len(cache) <= capacity holds after every call.
    Overwriting an existing key keeps its original position.
    """

    def __init__(self, capacity: int, name: str = "cache") -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = int(capacity)
        self._name = name
        self._lock = Lock()
        self._data: OrderedDict[K, V] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            if key in self._data:
                self._hits += 1
                return self._data[key]
            self._misses += 1
            return None

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = value
            while len(self._data) > self._capacity:
                self._data.popitem(last=False)

    def retain_first(self, count: int) -> None:
        """Drop everything except the `count` oldest entries."""
        with self._lock:
            while len(self._data) > count:
                self._data.popitem(last=True)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def reset_stats(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0

    def keys(self) -> List[K]:
        with self._lock:
            return list(self._data.keys())

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                name=self._name,
                size=len(self._data),
                capacity=self._capacity,
                hits=self._hits,
                misses=self._misses,
            )

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())
