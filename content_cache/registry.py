"""Namespace/TTL registry and mutation cascade table.

Both tables are plain data built once at construction and read-only
afterwards. A ContentCache receives them as arguments, so tests can build
small tables in isolation.

Usage:
    from content_cache.registry import NamespaceRegistry, CascadeTable

    registry = NamespaceRegistry([("post-detail", timedelta(days=7))])
    cascades = CascadeTable([("post-mutated", ["post-detail"])], registry=registry)
    registry.ttl_for("post-detail")   # 604800.0
    cascades.namespaces_for("post-mutated")  # ("post-detail",)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import timedelta

from content_cache.errors import ConfigurationError, unknown_mutation, unknown_namespace

KEY_SEPARATOR = ":"

MINUTE = 60.0
HOUR = 60 * MINUTE
DAY = 24 * HOUR

TTLValue = float | int | timedelta


# Public blog: content changes rarely, so list/detail TTLs are long.
BLOG_NAMESPACE_TTLS: tuple[tuple[str, float], ...] = (
    ("post-detail", 7 * DAY),
    ("post-list", 24 * HOUR),
    ("featured", 3 * DAY),
    ("popular", 24 * HOUR),
    ("categories", 7 * DAY),
    ("tags", 7 * DAY),
    ("search", 4 * HOUR),
    ("comments", 15 * MINUTE),
)

CMS_NAMESPACE_TTLS: tuple[tuple[str, float], ...] = (
    ("cms-pages", 1 * HOUR),
    ("cms-categories", 2 * HOUR),
    ("cms-themes", 2 * HOUR),
)

MEDIA_NAMESPACE_TTLS: tuple[tuple[str, float], ...] = (
    ("media-metadata", 2 * HOUR),
    ("media-thumbs", 4 * HOUR),
    ("media-folder-list", 2 * HOUR),
)

SERVICES_NAMESPACE_TTLS: tuple[tuple[str, float], ...] = (
    ("services-list", 4 * HOUR),
    ("service-detail", 4 * HOUR),
    ("services-featured", 6 * HOUR),
    ("services-by-category", 4 * HOUR),
    ("services-search", 30 * MINUTE),
)

DEFAULT_NAMESPACE_TTLS: tuple[tuple[str, float], ...] = (
    BLOG_NAMESPACE_TTLS + CMS_NAMESPACE_TTLS + MEDIA_NAMESPACE_TTLS + SERVICES_NAMESPACE_TTLS
)

# List, detail and derived views all embed post content; posts render
# category and tag names inline.
BLOG_CASCADES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("post-mutated", ("post-list", "post-detail", "featured", "popular", "search")),
    ("comment-mutated", ("comments",)),
    ("category-mutated", ("categories", "post-list")),
    ("tag-mutated", ("tags", "post-list")),
)

CONTENT_CASCADES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("page-mutated", ("cms-pages",)),
    ("media-mutated", ("media-metadata", "media-thumbs", "media-folder-list")),
    (
        "service-mutated",
        (
            "services-list",
            "service-detail",
            "services-featured",
            "services-by-category",
            "services-search",
        ),
    ),
)

DEFAULT_CASCADES: tuple[tuple[str, tuple[str, ...]], ...] = BLOG_CASCADES + CONTENT_CASCADES


def _to_seconds(name: str, ttl: TTLValue) -> float:
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    elif isinstance(ttl, (int, float)) and not isinstance(ttl, bool):
        seconds = float(ttl)
    else:
        raise ConfigurationError(
            f"TTL for namespace {name!r} must be seconds or a timedelta",
            config_key=name,
        )
    if seconds <= 0:
        raise ConfigurationError(
            f"TTL for namespace {name!r} must be positive, got {seconds}",
            config_key=name,
        )
    return seconds


def _pairs(source: Mapping[str, object] | Iterable[tuple[str, object]]) -> Iterator[tuple[str, object]]:
    if isinstance(source, Mapping):
        yield from source.items()
    else:
        yield from source


class NamespaceRegistry:
    """Read-only mapping of namespace name to TTL in seconds."""

    def __init__(
        self,
        entries: Mapping[str, TTLValue] | Iterable[tuple[str, TTLValue]] = DEFAULT_NAMESPACE_TTLS,
    ) -> None:
        ttls: dict[str, float] = {}
        for name, ttl in _pairs(entries):
            if not isinstance(name, str) or not name:
                raise ConfigurationError("Namespace names must be non-empty strings")
            if KEY_SEPARATOR in name:
                raise ConfigurationError(
                    f"Namespace {name!r} must not contain {KEY_SEPARATOR!r}",
                    config_key=name,
                )
            if name in ttls:
                raise ConfigurationError(f"Duplicate namespace {name!r}", config_key=name)
            ttls[name] = _to_seconds(name, ttl)  # type: ignore[arg-type]
        if not ttls:
            raise ConfigurationError("Namespace registry is empty")
        self._ttls = ttls

    def ttl_for(self, namespace: str) -> float:
        """Return the TTL in seconds, failing fast on unregistered namespaces."""
        try:
            return self._ttls[namespace]
        except KeyError:
            raise unknown_namespace(namespace, self._ttls) from None

    def require(self, namespace: str) -> str:
        """Return ``namespace`` unchanged if registered, raise otherwise."""
        self.ttl_for(namespace)
        return namespace

    def namespaces(self) -> tuple[str, ...]:
        return tuple(self._ttls)

    def items(self) -> tuple[tuple[str, float], ...]:
        return tuple(self._ttls.items())

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._ttls

    def __iter__(self) -> Iterator[str]:
        return iter(self._ttls)

    def __len__(self) -> int:
        return len(self._ttls)

    def __repr__(self) -> str:
        return f"NamespaceRegistry({len(self._ttls)} namespaces)"


class CascadeTable:
    """Maps a mutation kind to the ordered namespaces it invalidates.

    When ``registry`` is given, every namespace a cascade names must be
    registered; a typo is reported at construction rather than silently
    leaving stale entries behind.
    """

    def __init__(
        self,
        entries: Mapping[str, Iterable[str]] | Iterable[tuple[str, Iterable[str]]] = DEFAULT_CASCADES,
        *,
        registry: NamespaceRegistry | None = None,
    ) -> None:
        cascades: dict[str, tuple[str, ...]] = {}
        for kind, namespaces in _pairs(entries):
            if not isinstance(kind, str) or not kind:
                raise ConfigurationError("Mutation kinds must be non-empty strings")
            if kind in cascades:
                raise ConfigurationError(f"Duplicate mutation kind {kind!r}", config_key=kind)
            if isinstance(namespaces, str):
                raise ConfigurationError(
                    f"Cascade for {kind!r} must be a sequence of namespaces, not a string",
                    config_key=kind,
                )
            # dict.fromkeys keeps first-seen order and drops repeats
            ordered = tuple(dict.fromkeys(namespaces))  # type: ignore[arg-type]
            if registry is not None:
                missing = [ns for ns in ordered if ns not in registry]
                if missing:
                    raise ConfigurationError(
                        f"Cascade {kind!r} names unregistered namespaces: {', '.join(missing)}",
                        config_key=kind,
                        details={"missing": missing},
                    )
            cascades[kind] = ordered
        self._cascades = cascades

    def namespaces_for(self, kind: str) -> tuple[str, ...]:
        try:
            return self._cascades[kind]
        except KeyError:
            raise unknown_mutation(kind, self._cascades) from None

    def kinds(self) -> tuple[str, ...]:
        return tuple(self._cascades)

    def items(self) -> tuple[tuple[str, tuple[str, ...]], ...]:
        return tuple(self._cascades.items())

    def __contains__(self, kind: object) -> bool:
        return kind in self._cascades

    def __len__(self) -> int:
        return len(self._cascades)

    def __repr__(self) -> str:
        return f"CascadeTable({len(self._cascades)} mutation kinds)"
