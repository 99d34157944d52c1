from __future__ import annotations

from content_cache.infrastructure.cache.base import CacheBackend
from content_cache.infrastructure.cache.memory import (
    MISSING,
    CacheEntry,
    EntryInfo,
    MemoryBackend,
)

__all__ = ["MISSING", "CacheBackend", "CacheEntry", "EntryInfo", "MemoryBackend"]
