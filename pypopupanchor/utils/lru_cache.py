"""Least-recently-used cache with hit/miss statistics.

Used to keep sampled terrain heights per entity so the terrain provider is
queried once per feature rather than once per frame.
"""

import dataclasses
from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclasses.dataclass(slots=True)
class CacheStats:
    hits: int
    misses: int
    hit_ratio: float
    size: int
    max_size: int


class LRUCache(Generic[K, V]):
    """
    Fixed-capacity mapping that evicts the least recently used entry.
    Both reads (get) and writes (set) refresh an entry's recency; has() does not.
    """

    def __init__(self, max_size: int):
        if max_size < 1:
            raise ValueError(f"LRUCache max_size must be at least 1, got {max_size}")
        self._max_size = max_size
        self._entries: "OrderedDict[K, V]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: K) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"LRUCache(size={len(self._entries)}, max_size={self._max_size})"

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        if key in self._entries:
            self._hits += 1
            self._entries.move_to_end(key)
            return self._entries[key]
        self._misses += 1
        return default

    def set(self, key: K, value: V) -> None:
        # Re-inserting an existing key must not evict anything else
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_size:
            self._entries.popitem(last=False)
        self._entries[key] = value

    def has(self, key: K) -> bool:
        return key in self._entries

    def keys(self) -> list:
        """Keys from least to most recently used."""
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> CacheStats:
        total = self._hits + self._misses
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            hit_ratio=self._hits / total if total > 0 else 0.0,
            size=len(self._entries),
            max_size=self._max_size,
        )
