"""Bounded in-memory TTL cache for upstream lookups. No Redis needed.

Entries expire a fixed time after insertion and the oldest insertion is
evicted once ``max_entries`` is exceeded. Reads never bump recency, so
insertion order is the eviction order.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
an id may be fetched twice (once per worker). Within a worker all access
happens on the event loop thread and no method awaits, so mutations are
never observed half-done.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class CacheEntry:
    value: Any
    inserted_at: float
    last_accessed_at: float


class TTLCache:
    def __init__(
        self,
        max_entries: int = 500,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._max_entries = int(max_entries)
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.inserted_at < self._ttl

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        now = self._clock()
        if not self._is_fresh(entry, now):
            del self._store[key]
            return None
        return entry.value

    def has(self, key: str) -> bool:
        """Freshness check with the same expiry rule as get()."""
        entry = self._store.get(key)
        return entry is not None and self._is_fresh(entry, self._clock())

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        if key in self._store:
            self._store.move_to_end(key)
        elif len(self._store) >= self._max_entries:
            self._store.popitem(last=False)
        self._store[key] = CacheEntry(value=value, inserted_at=now, last_accessed_at=now)

    def remaining_ttl(self, key: str) -> float | None:
        """Seconds left before `key` expires, or None if it is not stored.

        Zero once the entry has expired but is still physically present
        (see keys()).
        """
        entry = self._store.get(key)
        if entry is None:
            return None
        return max(0.0, self._ttl - (self._clock() - entry.inserted_at))

    def keys(self) -> list[str]:
        """All stored keys, oldest first. May include expired entries."""
        return list(self._store)

    def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
