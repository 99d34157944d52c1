"""Expiry evaluation for cache entries.

An entry stored at ``stored_at`` with a namespace TTL of ``ttl`` seconds is
live while ``now - stored_at <= ttl``. The comparison is strict, so an entry
is always valid for at least its full TTL.
"""

from __future__ import annotations


def is_expired(stored_at: float, ttl: float, now: float) -> bool:
    return now - stored_at > ttl


def remaining_ttl(stored_at: float, ttl: float, now: float) -> float:
    """Seconds of validity left, clamped at zero."""
    return max(0.0, ttl - (now - stored_at))
