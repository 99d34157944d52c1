"""CMS pages facade over the content cache."""

from __future__ import annotations

from typing import TypeVar

from content_cache.facades.base import CacheFacade, Fetcher

T = TypeVar("T")

DEFAULT_PAGE = "home"


class CmsPagesCache(CacheFacade):
    namespaces = ("cms-pages", "cms-categories", "cms-themes")

    def page(self, fetch: Fetcher[T], slug: str = DEFAULT_PAGE) -> T:
        return self._cached("cms-pages", slug, fetch)

    def categories(self, fetch: Fetcher[T]) -> T:
        return self._cached("cms-categories", "all", fetch)

    def theme(self, fetch: Fetcher[T], name: str = "active") -> T:
        return self._cached("cms-themes", name, fetch)

    def invalidate_page(self, slug: str | None = None) -> int:
        """Drop one page, or every page when ``slug`` is None."""
        if slug is not None:
            return int(self._cache.invalidate_key("cms-pages", slug))
        return self._cache.invalidate_cascade("page-mutated")
