"""In-memory result cache for encoded placeholder images.

:class:`LRUCache` maps cache keys to encoded image bytes with a bounded
capacity (least-recently-used eviction) and a time-to-live.  It is safe to
share between threads: every operation holds a single lock for the few
dictionary operations it performs.

The cache is never a correctness boundary.  A miss only means the image has
to be generated again.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A stored value and its timestamps (in ``clock`` units)."""

    key: str
    value: bytes
    inserted_at: float
    last_accessed_at: float


class LRUCache:
    """Thread-safe LRU cache with time-based expiry.

    Attributes:
        max_items (int):
            Capacity.  Storing a new key into a full cache evicts the least
            recently used entry.
        ttl_seconds (float):
            Lifetime of an entry.  An entry whose age exceeds it is reported
            as a miss and dropped, even if capacity never evicted it.
        update_age_on_get (bool):
            When ``True`` a hit resets the entry's age as well as its
            recency, so frequently requested images stay cached.
    """

    def __init__(
        self,
        max_items: int = 10000,
        ttl_seconds: float = 3600.0,
        *,
        update_age_on_get: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self.max_items = max_items
        self.ttl_seconds = float(ttl_seconds)
        self.update_age_on_get = update_age_on_get
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        born = entry.last_accessed_at if self.update_age_on_get else entry.inserted_at
        return now - born > self.ttl_seconds

    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under *key*, or ``None`` on a miss."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._is_expired(entry, now):
                del self._entries[key]
                self._misses += 1
                return None

            entry.last_accessed_at = now
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def put(self, key: str, value: bytes) -> None:
        """Store *value* under *key*, replacing any previous value."""
        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(key, value, now, now)
            self._entries.move_to_end(key)

            while len(self._entries) > self.max_items:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s.", evicted)

    def __contains__(self, key: object) -> bool:
        # Does not refresh recency.
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._is_expired(entry, self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop every entry and reset the hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict:
        """Snapshot of size, limits and hit/miss counters."""
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.max_items,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
            }
