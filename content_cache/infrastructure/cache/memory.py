from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson

from content_cache.expiry import is_expired, remaining_ttl
from content_cache.infrastructure.cache.base import CacheBackend

logger = logging.getLogger(__name__)

# Sentinel for cache misses to allow caching None values
MISSING = object()


@dataclass(slots=True)
class CacheEntry:
    """Internal cache entry. Never handed out to callers."""

    value: Any
    stored_at: float
    hit_count: int = 0


@dataclass(frozen=True, slots=True)
class EntryInfo:
    """Read-only diagnostic view of one entry."""

    key: str
    age_seconds: float
    remaining_seconds: float
    hit_count: int


class MemoryBackend(CacheBackend):
    """Bounded in-memory store with per-key TTL lookup and oldest-first eviction.

    The TTL of each entry is not stored with it; ``ttl_for_key`` resolves it
    from the key (its namespace prefix) whenever expiry is evaluated.
    """

    def __init__(
        self,
        ttl_for_key: Callable[[str], float],
        maxsize: int = 100,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._data: dict[str, CacheEntry] = {}
        self._maxsize = maxsize
        self._ttl_for_key = ttl_for_key
        self._clock = clock
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def get(self, key: str) -> Any:
        """Get a value from the cache. Returns MISSING on miss."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                self._misses += 1
                return MISSING
            if is_expired(entry.stored_at, self._ttl_for_key(key), self._clock()):
                del self._data[key]
                self._misses += 1
                return MISSING
            self._hits += 1
            entry.hit_count += 1
            return entry.value

    def contains(self, key: str) -> bool:
        """True if a live entry exists. Leaves counters and entries untouched."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return False
            return not is_expired(entry.stored_at, self._ttl_for_key(key), self._clock())

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._data:
                # Re-insert so iteration order follows write order
                del self._data[key]
            elif len(self._data) >= self._maxsize:
                self._evict_oldest()

            self._data[key] = CacheEntry(value=value, stored_at=self._clock())

    def _evict_oldest(self) -> None:
        # min() keeps the first of equal timestamps, i.e. the earliest write
        oldest_key, _ = min(self._data.items(), key=lambda item: item[1].stored_at)
        del self._data[oldest_key]
        self._evictions += 1
        logger.debug("Cache eviction: %s", oldest_key)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._data:
                del self._data[key]
                return True
            return False

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            to_remove = [k for k in self._data if k.startswith(prefix)]
            for k in to_remove:
                del self._data[k]
            return len(to_remove)

    def delete_all(self) -> int:
        """Drop every entry but keep the hit/miss counters."""
        with self._lock:
            count = len(self._data)
            self._data.clear()
            return count

    def purge_expired(self) -> int:
        """Remove every expired entry.

        An entry whose TTL cannot be evaluated is logged and left in place
        for the next pass; it never aborts the scan.
        """
        removed = 0
        with self._lock:
            now = self._clock()
            for key, entry in list(self._data.items()):
                try:
                    expired = is_expired(entry.stored_at, self._ttl_for_key(key), now)
                except Exception as e:
                    logger.warning("Skipping cache entry %s during sweep: %s", key, e)
                    continue
                if expired:
                    del self._data[key]
                    removed += 1
        return removed

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def reset_stats(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def snapshot(self) -> list[EntryInfo]:
        """Describe every stored entry, expired ones included."""
        with self._lock:
            now = self._clock()
            return [
                EntryInfo(
                    key=key,
                    age_seconds=now - entry.stored_at,
                    remaining_seconds=remaining_ttl(entry.stored_at, self._ttl_for_key(key), now),
                    hit_count=entry.hit_count,
                )
                for key, entry in self._data.items()
            ]

    def approximate_size_bytes(self) -> int:
        """Length of the serialized entry set. O(n); for diagnostics only."""
        with self._lock:
            items = list(self._data.items())
        try:
            return len(orjson.dumps(items, default=str, option=orjson.OPT_NON_STR_KEYS))
        except TypeError:
            # e.g. recursion limit on deeply nested values
            logger.debug("Falling back to repr-based size estimate", exc_info=True)
            return sum(len(key) + len(repr(entry)) for key, entry in items)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._data),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
