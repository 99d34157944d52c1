"""Registry and validation error classes."""

from __future__ import annotations

from typing import Any

from content_cache.errors.base import ContentCacheError, ErrorCode

# Registry Errors


class RegistryError(ContentCacheError):
    """Base class for namespace and cascade lookup failures.

    These are programmer errors: a caller named a namespace or mutation kind
    that was never registered. They are raised at call time instead of
    falling back to a default TTL.
    """

    default_message = "Registry lookup failed"
    default_code = ErrorCode.REG_UNKNOWN_NAMESPACE

    def __init__(
        self,
        message: str | None = None,
        *,
        name: str | None = None,
        known: list[str] | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if name is not None:
            details["name"] = name
        if known is not None:
            details["known"] = known
        super().__init__(message, code=code, details=details, cause=cause)


class UnknownNamespaceError(RegistryError):
    """Raised when a namespace is not present in the registry."""

    default_message = "Unknown cache namespace"
    default_code = ErrorCode.REG_UNKNOWN_NAMESPACE


class UnknownMutationError(RegistryError):
    """Raised when a mutation kind has no cascade entry."""

    default_message = "Unknown mutation kind"
    default_code = ErrorCode.REG_UNKNOWN_MUTATION


# Validation Errors


class ValidationError(ContentCacheError):
    """Raised when an identifier cannot be turned into a cache key."""

    default_message = "Invalid cache identifier"
    default_code = ErrorCode.VAL_INVALID_IDENTIFIER

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value_type"] = type(value).__name__
        super().__init__(message, code=code, details=details, cause=cause)
