"""Logging helpers for the content cache."""

from content_cache.observability.logging import (
    StructuredFormatter,
    configure_plain_logging,
    configure_structured_logging,
    log_event,
    timed_operation,
)

__all__ = [
    "StructuredFormatter",
    "configure_plain_logging",
    "configure_structured_logging",
    "log_event",
    "timed_operation",
]
