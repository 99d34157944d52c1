"""Unified exception hierarchy for the content cache.

All content-cache exceptions inherit from ContentCacheError, so callers can
catch one type at their boundary.

Exception Hierarchy:
    ContentCacheError (base)
    +-- ConfigurationError - Invalid namespace/cascade tables or config files
    +-- RegistryError - Lookups against the runtime tables
    |   +-- UnknownNamespaceError - Namespace not registered
    |   +-- UnknownMutationError - Mutation kind has no cascade
    +-- ValidationError - Identifier cannot be turned into a key

Usage:
    from content_cache.errors import UnknownNamespaceError

    try:
        cache.get("post-detial", slug)
    except UnknownNamespaceError as e:
        logger.error("Cache misuse: %s (code: %s)", e.message, e.code)
"""

# --- base ---
from content_cache.errors.base import (
    ConfigurationError,
    ContentCacheError,
    ErrorCode,
)

# --- domain errors ---
from content_cache.errors.domain import (
    RegistryError,
    UnknownMutationError,
    UnknownNamespaceError,
    ValidationError,
)

# --- convenience factories ---
from content_cache.errors.factories import (
    duplicate_filter_key,
    invalid_identifier,
    unknown_mutation,
    unknown_namespace,
    unserializable_filter,
)

__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "ContentCacheError",
    # Configuration errors
    "ConfigurationError",
    # Registry errors
    "RegistryError",
    "UnknownNamespaceError",
    "UnknownMutationError",
    # Validation errors
    "ValidationError",
    # Convenience functions
    "unknown_namespace",
    "unknown_mutation",
    "invalid_identifier",
    "unserializable_filter",
    "duplicate_filter_key",
]
