"""Example: Cached image listings. Run with: python examples/cached_gallery.py

Shows how a ``CachedGallery`` answers repeated listings from a
``QueryResultCache`` and keeps it consistent after a delete.

Any object with an ``async fetch(filters) -> list[Image]`` method can stand
in for the HTTP client -- here an in-process catalogue plays that role.
"""

from __future__ import annotations

import asyncio
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from gallery_cache.cache.query_cache import QueryResultCache
from gallery_cache.client.gallery import CachedGallery
from gallery_cache.models.image import Image, ImageFilters
from gallery_cache.storage.json_file_store import JsonFileSnapshotStore

# ---------------------------------------------------------------------------
# In-process catalogue
# ---------------------------------------------------------------------------

CATALOGUE = [
    Image(
        id=f"img-{n}",
        url=f"https://cdn.example.com/img-{n}.jpg",
        title=title,
        category=category,
        tags=tags,
        uploaded_at=datetime(2024, 1, n, tzinfo=UTC),
    )
    for n, (title, category, tags) in enumerate(
        [
            ("Misty lake", "nature", ["water", "morning"]),
            ("Night market", "city", ["night", "food"]),
            ("Pine forest", "nature", ["trees"]),
        ],
        start=1,
    )
]


class CatalogueFetcher:
    """Filters the catalogue the way the API would, and counts round trips."""

    def __init__(self) -> None:
        self.round_trips = 0

    async def fetch(self, filters: ImageFilters) -> list[Image]:
        self.round_trips += 1
        return [
            image
            for image in CATALOGUE
            if (not filters.categories or image.category in filters.categories)
            and (not filters.tags or set(image.tags) & set(filters.tags))
        ]


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        cache_file = Path(tmp) / "gallery_cache.json"
        fetcher = CatalogueFetcher()
        gallery = CachedGallery(fetcher, QueryResultCache(JsonFileSnapshotStore(cache_file)))

        nature = ImageFilters(categories=["nature"])
        for _ in range(3):
            images = await gallery.get_images(nature)
        print(f"nature: {[i.title for i in images]} after {fetcher.round_trips} round trip(s)")

        # Mixed filters are never cached.
        mixed = ImageFilters(categories=["nature"], tags=["night"])
        await gallery.get_images(mixed)
        await gallery.get_images(mixed)
        print(f"mixed filters: {fetcher.round_trips} round trips so far")

        # A restarted process picks the listing up from disk.
        restarted = QueryResultCache(JsonFileSnapshotStore(cache_file))
        print(f"after restart: {len(restarted.lookup(nature) or [])} nature images cached")

        # Patch the cache as if img-1 had been deleted through the API.
        gallery.cache.remove_image("img-1")
        print(f"after delete: {[i.title for i in gallery.cache.lookup(nature)]}")

        for info in gallery.cache.entries():
            print(f"  {info.partition}[{info.key}] size={info.size} fresh={info.fresh}")


if __name__ == "__main__":
    asyncio.run(main())
