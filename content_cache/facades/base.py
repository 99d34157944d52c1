from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

if TYPE_CHECKING:
    from content_cache.cache import ContentCache, IdentifierLike

T = TypeVar("T")

Fetcher = Callable[[], T]


class CacheFacade:
    """Base for domain facades that pin a subset of namespaces.

    Subclasses list the namespaces they read and write; construction fails
    fast if the cache they are given does not register all of them.
    """

    namespaces: ClassVar[tuple[str, ...]] = ()

    def __init__(self, cache: ContentCache) -> None:
        for namespace in self.namespaces:
            cache.registry.require(namespace)
        self._cache = cache

    @property
    def cache(self) -> ContentCache:
        return self._cache

    def _cached(self, namespace: str, identifier: IdentifierLike, fetch: Fetcher[T]) -> T:
        return self._cache.get_or_fetch(namespace, identifier, fetch)

    def invalidate_all(self) -> int:
        """Drop every entry in this facade's namespaces."""
        return self._cache.invalidate_namespaces(self.namespaces)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.namespaces)})"


def page_filter(page: int, **filters: Any) -> dict[str, Any]:
    """Build a list/search filter mapping with a page number."""
    return {**filters, "page": page}
