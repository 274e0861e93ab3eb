"""Cache-aware gallery service: the cache's only caller in the library."""

from __future__ import annotations

import logging
from datetime import timedelta

from gallery_cache.cache.query_cache import QueryResultCache
from gallery_cache.config import GalleryConfig
from gallery_cache.models.image import Image, ImageFilters
from gallery_cache.protocols.fetcher import ImageFetcher
from gallery_cache.storage import InMemorySnapshotStore, JsonFileSnapshotStore

from .api import GalleryApiClient

logger = logging.getLogger(__name__)


class CachedGallery:
    """Serves image listings from a ``QueryResultCache`` and keeps it in step
    with mutations made through the API.

    Listings fall through to the fetcher only on a cache miss. After a
    successful mutation the cache is patched (delete, refresh) or cleared
    (upload, since a new image may belong to any cached view).

    Parameters:
        fetcher: Answers listings on a miss. Upload, delete and refresh need
            a ``GalleryApiClient``; any ``ImageFetcher`` is enough for reads.
        cache: The cache to read through and keep consistent.
    """

    __slots__ = ("_cache", "_fetcher")

    def __init__(self, fetcher: ImageFetcher, cache: QueryResultCache) -> None:
        self._fetcher = fetcher
        self._cache = cache

    @classmethod
    def from_config(cls, config: GalleryConfig) -> CachedGallery:
        """Wire an API client and a file- or memory-backed cache from settings."""
        store = (
            JsonFileSnapshotStore(config.cache_path)
            if config.cache_path is not None
            else InMemorySnapshotStore()
        )
        cache = QueryResultCache(store, default_ttl=config.default_ttl)
        api = GalleryApiClient(config.api_url, timeout=config.request_timeout)
        return cls(api, cache)

    @property
    def cache(self) -> QueryResultCache:
        return self._cache

    async def get_images(
        self,
        filters: ImageFilters | None = None,
        *,
        ttl: timedelta | None = None,
        refresh: bool = False,
    ) -> list[Image]:
        """List images through the cache.

        Parameters:
            filters: Query to run. None lists all images.
            ttl: Lifetime for a newly cached result; None uses the cache default.
            refresh: Skip the lookup and always fetch (the result is still stored).
        """
        filters = filters if filters is not None else ImageFilters()
        if not refresh:
            cached = self._cache.lookup(filters)
            if cached is not None:
                return cached

        images = await self._fetcher.fetch(filters)
        # No await between here and the end of store().
        self._cache.store(filters, images, ttl=ttl)
        return images

    async def upload_image(
        self,
        *,
        title: str,
        category: str,
        tags: list[str],
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> Image:
        image = await self._api.upload_image(
            title=title,
            category=category,
            tags=tags,
            filename=filename,
            content=content,
            content_type=content_type,
        )
        self._cache.clear()
        return image

    async def delete_image(self, image_id: str) -> None:
        await self._api.delete_image(image_id)
        self._cache.remove_image(image_id)

    async def refresh_image(self, image_id: str) -> Image:
        """Re-fetch one image and patch every cached listing that holds it."""
        image = await self._api.get_image(image_id)
        replaced = self._cache.update_image(image)
        logger.debug("Refreshed image %s in %d cached listings", image_id, replaced)
        return image

    @property
    def _api(self) -> GalleryApiClient:
        if not isinstance(self._fetcher, GalleryApiClient):
            msg = f"{type(self._fetcher).__name__} does not support mutations"
            raise TypeError(msg)
        return self._fetcher

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fetcher={self._fetcher!r}, cache={self._cache!r})"
