"""Blog facade over the content cache.

Reads go through ``get_or_fetch``: a miss calls the supplied fetcher (usually
a blog API call) and stores its result. Admin mutations call ``on_mutation``
so list, detail and derived views drop together.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Literal, TypeVar

from content_cache.facades.base import CacheFacade, Fetcher, page_filter

logger = logging.getLogger(__name__)

T = TypeVar("T")

BlogMutation = Literal["post", "comment", "category", "tag"]

ALL_ITEMS = "all"


class BlogCache(CacheFacade):
    namespaces = (
        "post-detail",
        "post-list",
        "featured",
        "popular",
        "categories",
        "tags",
        "search",
        "comments",
    )

    def post(self, slug: str, fetch: Fetcher[T]) -> T:
        return self._cached("post-detail", slug, fetch)

    def posts(self, filters: Mapping[str, Any], fetch: Fetcher[T]) -> T:
        """Post listing for a filter set (page, category, tag, sort...)."""
        return self._cached("post-list", filters, fetch)

    def featured(self, fetch: Fetcher[T], limit: int = 5) -> T:
        return self._cached("featured", {"limit": limit}, fetch)

    def popular(self, fetch: Fetcher[T], limit: int = 5) -> T:
        return self._cached("popular", {"limit": limit}, fetch)

    def categories(self, fetch: Fetcher[T]) -> T:
        return self._cached("categories", ALL_ITEMS, fetch)

    def tags(self, fetch: Fetcher[T]) -> T:
        return self._cached("tags", ALL_ITEMS, fetch)

    def search(self, query: str, fetch: Fetcher[T], page: int = 1) -> T:
        return self._cached("search", page_filter(page, q=query.strip().lower()), fetch)

    def comments(self, post_id: str, fetch: Fetcher[T]) -> T:
        return self._cached("comments", post_id, fetch)

    def on_mutation(self, kind: BlogMutation) -> int:
        """Invalidate everything that embeds content of the mutated kind."""
        logger.info("Invalidating blog cache for %s mutation", kind)
        return self._cache.invalidate_cascade(f"{kind}-mutated")

    def forget_post(self, slug: str) -> bool:
        """Drop one post's detail entry, e.g. after a draft preview."""
        return self._cache.invalidate_key("post-detail", slug)
