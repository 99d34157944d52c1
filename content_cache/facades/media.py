"""Media library facade over the content cache.

Folder listings use literal identifiers of the form ``folder/page/limit`` so
that one folder's pages can be dropped together with a prefix invalidation.
"""

from __future__ import annotations

from typing import TypeVar

from content_cache.facades.base import CacheFacade, Fetcher

T = TypeVar("T")

ROOT_FOLDER = "root"


def folder_listing_id(folder: str, page: int, limit: int) -> str:
    return f"{folder}/{page}/{limit}"


class MediaFolderCache(CacheFacade):
    namespaces = ("media-metadata", "media-thumbs", "media-folder-list")

    def folder_list(
        self,
        fetch: Fetcher[T],
        folder: str = ROOT_FOLDER,
        page: int = 1,
        limit: int = 20,
    ) -> T:
        return self._cached("media-folder-list", folder_listing_id(folder, page, limit), fetch)

    def metadata(self, image_id: str, fetch: Fetcher[T]) -> T:
        return self._cached("media-metadata", image_id, fetch)

    def thumbnail(self, image_id: str, fetch: Fetcher[T]) -> T:
        return self._cached("media-thumbs", image_id, fetch)

    def invalidate_folder(self, folder: str | None = None) -> int:
        """Drop every cached page of one folder, or of all folders."""
        if folder is None:
            return self._cache.invalidate_namespace("media-folder-list")
        return self._cache.invalidate_prefix("media-folder-list", f"{folder}/")

    def invalidate_image(self, image_id: str) -> int:
        removed = int(self._cache.invalidate_key("media-metadata", image_id))
        removed += int(self._cache.invalidate_key("media-thumbs", image_id))
        return removed

    def on_upload(self) -> int:
        """An upload, move or delete changes listings and metadata alike."""
        return self._cache.invalidate_cascade("media-mutated")
