"""Domain facades: thin consumers that pin namespaces of a shared ContentCache."""

from content_cache.facades.base import CacheFacade
from content_cache.facades.blog import BlogCache
from content_cache.facades.cms import CmsPagesCache
from content_cache.facades.media import MediaFolderCache
from content_cache.facades.services import ServicesCache

__all__ = ["BlogCache", "CacheFacade", "CmsPagesCache", "MediaFolderCache", "ServicesCache"]
