"""Structured logging and timing utilities for the content cache.

Provides:
- StructuredFormatter: JSON log formatter for structured log output
- timed_operation: Context manager that logs operation timing
- log_event: Helper for structured event logging with metrics

Usage:
    from content_cache.observability.logging import timed_operation, log_event

    with timed_operation(logger, "cache.sweep") as ctx:
        ctx["removed"] = backend.purge_expired()

    log_event(logger, "cache.invalidate.cascade", kind="post-mutated", removed=12)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import orjson


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs log records as single-line JSON with standard fields:
    timestamp, level, logger, message, plus any extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, "event_type", None):
            entry["event"] = record.event_type  # type: ignore[attr-defined]
        if getattr(record, "metrics", None):
            entry["metrics"] = record.metrics  # type: ignore[attr-defined]
        if getattr(record, "metadata", None):
            entry["metadata"] = record.metadata  # type: ignore[attr-defined]

        if record.exc_info and record.exc_info[1]:
            entry["error"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }

        return orjson.dumps(entry, default=str).decode("utf-8")


def _split_fields(fields: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    numeric = (int, float)
    metrics = {
        k: v for k, v in fields.items() if isinstance(v, numeric) and not isinstance(v, bool)
    }
    metadata = {k: v for k, v in fields.items() if k not in metrics}
    return metrics, metadata


@contextmanager
def timed_operation(
    log: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra: Any,
) -> Iterator[dict[str, Any]]:
    """Context manager that logs operation completion with timing.

    Args:
        log: Logger instance.
        operation: Operation name (e.g., "cache.sweep").
        level: Log level for the completion message.
        **extra: Additional key-value pairs included in the log.

    Yields:
        dict that can be updated with additional metrics during the operation.
    """
    ctx: dict[str, Any] = {}
    start = time.perf_counter()
    try:
        yield ctx
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.error(
            "%s failed after %.1fms",
            operation,
            elapsed_ms,
            exc_info=True,
            extra={
                "event_type": f"{operation}.failed",
                "metrics": {"latency_ms": round(elapsed_ms, 1)},
                "metadata": extra,
            },
        )
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    metrics, metadata = _split_fields({**extra, **ctx})
    log.log(
        level,
        "%s completed in %.1fms",
        operation,
        elapsed_ms,
        extra={
            "event_type": f"{operation}.complete",
            "metrics": {"latency_ms": round(elapsed_ms, 1), **metrics},
            "metadata": metadata,
        },
    )


def log_event(
    log: logging.Logger,
    event_type: str,
    level: int = logging.INFO,
    message: str | None = None,
    **fields: Any,
) -> None:
    """Log a structured event with typed fields.

    Numeric values go to metrics, everything else to metadata.
    """
    metrics, metadata = _split_fields(fields)
    log.log(
        level,
        message or event_type,
        extra={
            "event_type": event_type,
            "metrics": metrics or None,
            "metadata": metadata or None,
        },
    )


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logger with structured JSON output.

    Call this once at application startup.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger()
    root.setLevel(level)
    # Replace existing handlers to avoid duplicate output
    root.handlers = [handler]


def configure_plain_logging(level: int = logging.INFO) -> None:
    """Configure root logger with a human-readable single-line format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        force=True,
    )
