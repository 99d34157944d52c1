"""In-process, namespaced TTL cache for content-management front ends."""

from content_cache.cache import CacheStats, ContentCache, EntrySummary
from content_cache.errors import (
    ConfigurationError,
    ContentCacheError,
    UnknownMutationError,
    UnknownNamespaceError,
    ValidationError,
)
from content_cache.keys import FilterId, Identifier, LiteralId, derive_key
from content_cache.registry import CascadeTable, NamespaceRegistry

__version__ = "0.1.0"

__all__ = [
    "CacheStats",
    "CascadeTable",
    "ConfigurationError",
    "ContentCache",
    "ContentCacheError",
    "EntrySummary",
    "FilterId",
    "Identifier",
    "LiteralId",
    "NamespaceRegistry",
    "UnknownMutationError",
    "UnknownNamespaceError",
    "ValidationError",
    "derive_key",
    "__version__",
]
