"""Content cache: namespaced TTL cache with cascading invalidation.

A ContentCache owns one bounded in-memory store, a namespace/TTL registry, a
mutation cascade table and a background sweeper. It is constructed
explicitly and handed to whichever facades need it; ``destroy()`` (or leaving
a ``with`` block) stops the sweeper and drops all state.

Usage:
    cache = ContentCache(max_entries=200)

    posts = cache.get("post-list", {"page": 1, "category": "news"})
    if posts is None:
        posts = api.list_posts(page=1, category="news")
        cache.set("post-list", {"category": "news", "page": 1}, posts)

    cache.invalidate_cascade("post-mutated")
    cache.destroy()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from content_cache.errors import ConfigurationError
from content_cache.infrastructure.cache.memory import MISSING, MemoryBackend
from content_cache.keys import Identifier, derive_key, namespace_of, namespace_prefix
from content_cache.observability.logging import log_event
from content_cache.registry import CascadeTable, NamespaceRegistry
from content_cache.sweeper import DEFAULT_SWEEP_INTERVAL, ExpirySweeper

if TYPE_CHECKING:
    from content_cache.config import CacheConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

IdentifierLike = str | Mapping[str, Any] | Identifier

BYTES_PER_KB = 1024


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time statistics for a ContentCache."""

    hits: int
    misses: int
    entries: int
    approximate_size_bytes: int
    evictions: int = 0
    max_entries: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    @property
    def size_kb(self) -> float:
        return self.approximate_size_bytes / BYTES_PER_KB

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "hit_rate": self.hit_rate}


@dataclass(frozen=True)
class EntrySummary:
    """Diagnostic view of one cached entry."""

    key: str
    namespace: str
    age_seconds: float
    remaining_seconds: float
    hit_count: int


class ContentCache:
    """Process-local, multi-namespace TTL cache.

    All storage operations are atomic with respect to each other and to the
    sweeper. ``get_or_fetch`` is not: two concurrent misses for the same key
    may both fetch, and the later write wins.
    """

    def __init__(
        self,
        max_entries: int = 100,
        *,
        registry: NamespaceRegistry | None = None,
        cascades: CascadeTable | None = None,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
        start_sweeper: bool = True,
    ) -> None:
        if registry is None:
            registry = NamespaceRegistry()
            if cascades is None:
                cascades = CascadeTable(registry=registry)
        elif cascades is None:
            # The default cascades name the default namespaces only
            cascades = CascadeTable(())
        for kind, namespaces in cascades.items():
            for namespace in namespaces:
                if namespace not in registry:
                    raise ConfigurationError(
                        f"Cascade {kind!r} names unregistered namespace {namespace!r}",
                        config_key=kind,
                    )
        self._registry = registry
        self._cascades = cascades
        self._backend = MemoryBackend(
            ttl_for_key=self._ttl_for_key,
            maxsize=max_entries,
            clock=clock,
        )
        self._sweeper = ExpirySweeper(self._backend, interval=sweep_interval)
        self._destroy_lock = threading.Lock()
        self._destroyed = False
        if start_sweeper:
            self._sweeper.start()

    @classmethod
    def from_config(cls, config: CacheConfig, **kwargs: Any) -> ContentCache:
        """Build a cache from a loaded CacheConfig. ``kwargs`` override fields."""
        registry = config.build_registry()
        options: dict[str, Any] = {
            "registry": registry,
            "cascades": config.build_cascades(registry),
            "sweep_interval": config.sweep_interval_seconds,
            "start_sweeper": config.start_sweeper,
        }
        options.update(kwargs)
        return cls(config.max_entries, **options)

    # -- tables ---------------------------------------------------------

    @property
    def registry(self) -> NamespaceRegistry:
        return self._registry

    @property
    def cascades(self) -> CascadeTable:
        return self._cascades

    @property
    def sweeper(self) -> ExpirySweeper:
        return self._sweeper

    @property
    def max_entries(self) -> int:
        return self._backend.maxsize

    def _ttl_for_key(self, key: str) -> float:
        return self._registry.ttl_for(namespace_of(key))

    def _key(self, namespace: str, identifier: IdentifierLike) -> str:
        self._registry.require(namespace)
        return derive_key(namespace, identifier)

    # -- reads and writes -----------------------------------------------

    def get(self, namespace: str, identifier: IdentifierLike, default: Any = None) -> Any:
        """Return the live value for (namespace, identifier), or ``default``.

        Records a hit or a miss. An expired entry is deleted and counts as a
        miss.
        """
        value = self._backend.get(self._key(namespace, identifier))
        if value is MISSING:
            return default
        return value

    def set(self, namespace: str, identifier: IdentifierLike, value: Any) -> None:
        """Store ``value``, restarting its TTL and resetting its hit count."""
        self._backend.set(self._key(namespace, identifier), value)

    def preload(self, namespace: str, identifier: IdentifierLike, value: Any) -> None:
        """Seed the cache with data fetched ahead of the first read."""
        self.set(namespace, identifier, value)

    def has(self, namespace: str, identifier: IdentifierLike) -> bool:
        """True if a live entry exists. Does not count as a hit or miss."""
        return self._backend.contains(self._key(namespace, identifier))

    def get_or_fetch(
        self,
        namespace: str,
        identifier: IdentifierLike,
        fetch: Callable[[], T],
    ) -> T:
        """Return the cached value, or call ``fetch`` and cache its result.

        Exceptions from ``fetch`` propagate and nothing is stored.
        """
        key = self._key(namespace, identifier)
        value = self._backend.get(key)
        if value is not MISSING:
            return value
        result = fetch()
        self._backend.set(key, result)
        return result

    # -- invalidation ---------------------------------------------------

    def invalidate_key(self, namespace: str, identifier: IdentifierLike) -> bool:
        """Drop one entry. Returns whether it existed."""
        return self._backend.delete(self._key(namespace, identifier))

    def invalidate_namespace(self, namespace: str) -> int:
        """Drop every entry of one namespace. Returns the number removed."""
        self._registry.require(namespace)
        removed = self._backend.delete_prefix(namespace_prefix(namespace))
        if removed:
            log_event(
                logger,
                "cache.invalidate.namespace",
                level=logging.DEBUG,
                namespace=namespace,
                removed=removed,
            )
        return removed

    def invalidate_prefix(self, namespace: str, identifier_prefix: str) -> int:
        """Drop entries of ``namespace`` whose literal identifier starts with a prefix.

        Useful for hierarchical literal identifiers such as ``"uploads/2/20"``.
        """
        self._registry.require(namespace)
        return self._backend.delete_prefix(namespace_prefix(namespace) + identifier_prefix)

    def invalidate_namespaces(self, namespaces: Iterable[str]) -> int:
        """Drop several namespaces. All names are checked before any removal."""
        names = [self._registry.require(ns) for ns in namespaces]
        return sum(self.invalidate_namespace(ns) for ns in names)

    def invalidate_cascade(self, mutation_kind: str) -> int:
        """Drop every namespace the mutation kind affects."""
        namespaces = self._cascades.namespaces_for(mutation_kind)
        removed = self.invalidate_namespaces(namespaces)
        log_event(
            logger,
            "cache.invalidate.cascade",
            message=f"Invalidated cache for mutation {mutation_kind}",
            kind=mutation_kind,
            namespaces=list(namespaces),
            removed=removed,
        )
        return removed

    def invalidate_all(self) -> int:
        """Drop every entry but keep the hit/miss counters."""
        removed = self._backend.delete_all()
        log_event(logger, "cache.invalidate.all", removed=removed)
        return removed

    def clear(self) -> None:
        """Drop every entry and reset all counters."""
        self._backend.clear()

    # -- instrumentation ------------------------------------------------

    def stats(self) -> CacheStats:
        raw = self._backend.stats()
        return CacheStats(
            hits=raw["hits"],
            misses=raw["misses"],
            entries=raw["entries"],
            approximate_size_bytes=self._backend.approximate_size_bytes(),
            evictions=raw["evictions"],
            max_entries=raw["maxsize"],
        )

    def hit_rate(self) -> float:
        """Fraction of reads that hit, in [0, 1]. 0.0 before any read."""
        return self._backend.stats()["hit_rate"]

    def reset_stats(self) -> None:
        """Zero the hit/miss/eviction counters, keeping the entries."""
        self._backend.reset_stats()

    def entries(self) -> list[EntrySummary]:
        """Describe each stored entry, including ones waiting to be swept."""
        return [
            EntrySummary(
                key=info.key,
                namespace=namespace_of(info.key),
                age_seconds=info.age_seconds,
                remaining_seconds=info.remaining_seconds,
                hit_count=info.hit_count,
            )
            for info in self._backend.snapshot()
        ]

    def sweep(self) -> int:
        """Run one expiry sweep now. Returns the number of entries removed."""
        return self._sweeper.sweep_now()

    # -- lifecycle ------------------------------------------------------

    def destroy(self) -> None:
        """Stop the sweeper and clear all state. Safe to call repeatedly."""
        with self._destroy_lock:
            if self._destroyed:
                return
            self._destroyed = True
        self._sweeper.stop()
        self._backend.clear()
        logger.debug("Content cache destroyed")

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def __enter__(self) -> ContentCache:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def __len__(self) -> int:
        return len(self._backend)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(entries={len(self._backend)}, "
            f"max_entries={self._backend.maxsize}, namespaces={len(self._registry)})"
        )
