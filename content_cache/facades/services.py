"""Services catalogue facade over the content cache."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from content_cache.facades.base import CacheFacade, Fetcher, page_filter

T = TypeVar("T")


class ServicesCache(CacheFacade):
    namespaces = (
        "services-list",
        "service-detail",
        "services-featured",
        "services-by-category",
        "services-search",
    )

    def services(self, fetch: Fetcher[T], filters: Mapping[str, Any] | None = None) -> T:
        return self._cached("services-list", filters or {}, fetch)

    def service(self, slug: str, fetch: Fetcher[T]) -> T:
        return self._cached("service-detail", slug, fetch)

    def featured(self, fetch: Fetcher[T]) -> T:
        return self._cached("services-featured", "all", fetch)

    def by_category(self, category: str, fetch: Fetcher[T], page: int = 1) -> T:
        return self._cached("services-by-category", page_filter(page, category=category), fetch)

    def search(self, query: str, fetch: Fetcher[T], page: int = 1) -> T:
        return self._cached("services-search", page_filter(page, q=query.strip().lower()), fetch)

    def is_cached(self, slug: str) -> bool:
        return self._cache.has("service-detail", slug)

    def on_mutation(self) -> int:
        return self._cache.invalidate_cascade("service-mutated")
