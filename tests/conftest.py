"""Pytest configuration for content cache tests.

Provides a manual clock so TTL behavior is tested without sleeping, and a
cache fixture that never starts the background sweeper thread.
"""

import pytest

from content_cache import ContentCache, NamespaceRegistry
from content_cache.config import reset_config


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    """ContentCache over the default tables, sweeper not started."""
    c = ContentCache(max_entries=100, clock=clock, start_sweeper=False)
    yield c
    c.destroy()


@pytest.fixture
def small_registry():
    return NamespaceRegistry([("cat", 60.0), ("other", 3600.0)])


@pytest.fixture(autouse=True)
def _reset_config_singleton():
    reset_config()
    yield
    reset_config()
