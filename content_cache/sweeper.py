"""Background expiry sweeper.

Lazy expiry only runs when an entry is read again, so namespaces that are
written but never re-read would keep dead entries until evicted. The sweeper
walks the whole store on a fixed period and drops expired entries. It goes
through ``CacheBackend.purge_expired``, which takes the backend lock and
never touches the hit/miss counters.
"""

from __future__ import annotations

import logging
import threading

from content_cache.infrastructure.cache.base import CacheBackend
from content_cache.observability.logging import timed_operation

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 60.0


class ExpirySweeper:
    """Runs ``purge_expired`` on a daemon thread every ``interval`` seconds."""

    def __init__(
        self,
        backend: CacheBackend,
        interval: float = DEFAULT_SWEEP_INTERVAL,
        name: str = "content-cache-sweeper",
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        self._backend = backend
        self._interval = interval
        self._name = name
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._sweeps = 0
        self._failures = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background loop. No-op if already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            # One event per thread; a thread outliving stop() keeps its set event
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), name=self._name, daemon=True
            )
            self._thread.start()
        logger.debug("Started %s (interval=%.1fs)", self._name, self._interval)

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the background loop and wait for it to exit. Idempotent."""
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            logger.debug("Stopped %s", self._name)

    def sweep_now(self) -> int:
        """Run one sweep synchronously. Returns the number of entries removed."""
        with timed_operation(logger, "cache.sweep") as ctx:
            removed = self._backend.purge_expired()
            ctx["removed"] = removed
        self._sweeps += 1
        return removed

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                self.sweep_now()
            except Exception as e:
                self._failures += 1
                # timed_operation already logged the traceback
                logger.warning("Cache sweep failed, retrying next cycle: %s", e)

    def stats(self) -> dict[str, int | float | bool]:
        return {
            "running": self.is_running,
            "interval_seconds": self._interval,
            "sweeps": self._sweeps,
            "failures": self._failures,
        }
