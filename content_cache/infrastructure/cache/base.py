from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    """Abstract base class for content cache storage backends."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Get a value from the cache. Returns the MISSING sentinel on a miss."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any entry under the same key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache. Returns True if deleted."""
        pass

    @abstractmethod
    def delete_prefix(self, prefix: str) -> int:
        """Remove all entries whose key starts with prefix. Returns count removed."""
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """Remove expired entries without touching hit/miss counters."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all values and statistics."""
        pass

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        """Get statistics for the cache backend."""
        pass
