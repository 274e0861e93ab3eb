"""Fetcher protocol definitions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gallery_cache.models.image import Image, ImageFilters


@runtime_checkable
class ImageFetcher(Protocol):
    """Protocol for the network call that a cache miss falls through to."""

    async def fetch(self, filters: ImageFilters) -> list[Image]:
        """List the images matching ``filters``.

        Parameters:
            filters: The query to run. An empty ``ImageFilters`` lists
                every image.

        Returns:
            The matching images in the order the backend returned them.

        Raises:
            FetchError: If the backend could not answer the query.
        """
        ...
