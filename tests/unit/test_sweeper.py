"""Tests for content_cache/sweeper.py - the background expiry sweeper."""

import logging
import threading
import time
from unittest.mock import MagicMock

import pytest

from content_cache import ContentCache
from content_cache.infrastructure.cache import MemoryBackend
from content_cache.registry import HOUR
from content_cache.sweeper import ExpirySweeper


def wait_until(predicate, timeout=2.0, interval=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class TestSweepNow:
    def test_removes_expired_entries(self, clock):
        backend = MemoryBackend(ttl_for_key=lambda key: 10.0, clock=clock)
        backend.set("a:1", 1)
        backend.set("a:2", 2)
        clock.advance(11)
        sweeper = ExpirySweeper(backend, interval=60)
        assert sweeper.sweep_now() == 2
        assert len(backend) == 0
        assert sweeper.stats()["sweeps"] == 1

    def test_does_not_touch_counters(self, clock):
        backend = MemoryBackend(ttl_for_key=lambda key: 10.0, clock=clock)
        backend.set("a:1", 1)
        backend.get("a:1")
        clock.advance(11)
        ExpirySweeper(backend).sweep_now()
        stats = backend.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 0

    def test_empty_store(self, clock):
        backend = MemoryBackend(ttl_for_key=lambda key: 10.0, clock=clock)
        assert ExpirySweeper(backend).sweep_now() == 0

    @pytest.mark.parametrize("interval", [0, -1])
    def test_interval_must_be_positive(self, interval):
        with pytest.raises(ValueError):
            ExpirySweeper(MagicMock(), interval=interval)


class TestBackgroundLoop:
    @pytest.mark.timeout(10)
    def test_sweeps_periodically(self, clock):
        cache = ContentCache(clock=clock, sweep_interval=0.02)
        try:
            cache.set("comments", "p1", ["c"])
            cache.set("categories", "all", ["news"])
            clock.advance(HOUR)
            assert wait_until(lambda: len(cache) == 1)
            assert cache.has("categories", "all")
            stats = cache.stats()
            assert (stats.hits, stats.misses) == (0, 0)
        finally:
            cache.destroy()

    @pytest.mark.timeout(10)
    def test_failure_is_logged_and_loop_continues(self, caplog):
        outcomes = iter([RuntimeError("boom")])

        def purge():
            error = next(outcomes, None)
            if error is not None:
                raise error
            return 0

        backend = MagicMock()
        backend.purge_expired.side_effect = purge
        sweeper = ExpirySweeper(backend, interval=0.02)
        with caplog.at_level(logging.WARNING, logger="content_cache.sweeper"):
            sweeper.start()
            try:
                assert wait_until(lambda: backend.purge_expired.call_count >= 3)
            finally:
                sweeper.stop()
        assert sweeper.stats()["failures"] == 1
        assert sweeper.stats()["sweeps"] >= 2
        assert any("Cache sweep failed" in r.getMessage() for r in caplog.records)

    @pytest.mark.timeout(10)
    def test_no_sweep_after_stop(self):
        backend = MagicMock()
        backend.purge_expired.return_value = 0
        sweeper = ExpirySweeper(backend, interval=0.02)
        sweeper.start()
        sweeper.stop()
        calls = backend.purge_expired.call_count
        time.sleep(0.1)
        assert backend.purge_expired.call_count == calls


class TestLifecycle:
    @pytest.mark.timeout(10)
    def test_start_is_idempotent(self):
        sweeper = ExpirySweeper(MagicMock(), interval=3600)
        sweeper.start()
        first = sweeper._thread
        sweeper.start()
        assert sweeper._thread is first
        sweeper.stop()

    @pytest.mark.timeout(10)
    def test_stop_is_idempotent(self):
        sweeper = ExpirySweeper(MagicMock(), interval=3600)
        sweeper.stop()
        sweeper.start()
        assert sweeper.is_running
        sweeper.stop()
        sweeper.stop()
        assert not sweeper.is_running

    @pytest.mark.timeout(10)
    def test_stop_does_not_wait_for_interval(self):
        sweeper = ExpirySweeper(MagicMock(), interval=3600)
        sweeper.start()
        started = time.monotonic()
        sweeper.stop()
        assert time.monotonic() - started < 1.0

    @pytest.mark.timeout(10)
    def test_thread_is_daemon(self):
        sweeper = ExpirySweeper(MagicMock(), interval=3600, name="test-sweeper")
        sweeper.start()
        try:
            assert sweeper._thread.daemon
            assert sweeper._thread.name == "test-sweeper"
        finally:
            sweeper.stop()

    @pytest.mark.timeout(10)
    def test_thread_outliving_stop_exits_after_restart(self):
        entered = threading.Event()
        release = threading.Event()

        def slow_purge():
            entered.set()
            release.wait(5.0)
            return 0

        backend = MagicMock()
        backend.purge_expired.side_effect = slow_purge
        sweeper = ExpirySweeper(backend, interval=0.01)
        sweeper.start()
        old_thread = sweeper._thread
        assert entered.wait(5.0)

        # join times out while the sweep is still running
        sweeper.stop(timeout=0.05)
        assert old_thread.is_alive()

        sweeper.start()
        new_thread = sweeper._thread
        release.set()
        try:
            assert wait_until(lambda: not old_thread.is_alive())
            assert new_thread.is_alive()
        finally:
            sweeper.stop()
        assert not new_thread.is_alive()

    @pytest.mark.timeout(10)
    def test_can_restart_after_stop(self):
        sweeper = ExpirySweeper(MagicMock(), interval=3600)
        sweeper.start()
        sweeper.stop()
        sweeper.start()
        assert sweeper.is_running
        sweeper.stop()
