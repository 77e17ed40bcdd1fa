"""IdentityCache — bounded, thread-safe LRU map from token to node id.

Read-through only: an entry is a copy of an immutable ``(token, layer)
→ id`` row, so entries never go stale and are evicted for capacity
alone. A miss says nothing about whether the node exists.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for one cache."""

    hits: int
    misses: int
    size: int
    capacity: int


class IdentityCache:
    """LRU cache of token → node id with a fixed capacity.

    A capacity of 0 disables the cache: every ``get`` misses and ``put``
    is a no-op.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            msg = f"Cache capacity must be >= 0, got {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._entries: OrderedDict[str, int] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, token: str) -> int | None:
        """Return the cached id for *token*, or None on miss."""
        with self._lock:
            node_id = self._entries.get(token)
            if node_id is None:
                self._misses += 1
                return None
            self._entries.move_to_end(token)
            self._hits += 1
            return node_id

    def put(self, token: str, node_id: int) -> None:
        """Record *token* → *node_id*, evicting the least recently used entry."""
        if self._capacity == 0:
            return
        with self._lock:
            self._entries[token] = node_id
            self._entries.move_to_end(token)
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                capacity=self._capacity,
            )

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
