"""Convenience factory functions for common error scenarios.

Provides shorthand functions for creating commonly-used error instances
with appropriate error codes and details pre-filled.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from content_cache.errors.base import ErrorCode
from content_cache.errors.domain import (
    UnknownMutationError,
    UnknownNamespaceError,
    ValidationError,
)


def unknown_namespace(namespace: str, known: Iterable[str] = ()) -> UnknownNamespaceError:
    """Create an UnknownNamespaceError for an unregistered namespace."""
    return UnknownNamespaceError(
        f"Namespace not registered: {namespace!r}",
        name=namespace,
        known=sorted(known),
    )


def unknown_mutation(kind: str, known: Iterable[str] = ()) -> UnknownMutationError:
    """Create an UnknownMutationError for a mutation kind without a cascade."""
    return UnknownMutationError(
        f"No cascade registered for mutation kind: {kind!r}",
        name=kind,
        known=sorted(known),
    )


def invalid_identifier(value: Any) -> ValidationError:
    """Create a ValidationError for an identifier of the wrong type."""
    return ValidationError(
        f"Identifier must be a string or a mapping, got {type(value).__name__}",
        field="identifier",
        value=value,
    )


def unserializable_filter(key: str, cause: Exception) -> ValidationError:
    """Create a ValidationError for a filter value that cannot be serialized."""
    return ValidationError(
        f"Filter value for {key!r} cannot be serialized",
        field=key,
        code=ErrorCode.VAL_UNSERIALIZABLE,
        cause=cause,
    )


def duplicate_filter_key(key: str) -> ValidationError:
    """Create a ValidationError for filter keys that collide once stringified."""
    return ValidationError(
        f"Filter has more than one key that renders as {key!r}",
        field=key,
    )
