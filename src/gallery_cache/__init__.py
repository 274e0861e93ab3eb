"""gallery-cache: Image gallery client with a persistent query cache.

Cache:
    QueryResultCache, CacheKey, resolve_cache_key, date_range_key, DEFAULT_TTL

Client:
    GalleryApiClient, CachedGallery, ApiResponse

Configuration:
    GalleryConfig, DEFAULT_CONFIG

Protocols (extension points):
    ImageFetcher, SnapshotStore

Storage:
    JsonFileSnapshotStore, InMemorySnapshotStore

Models & Types:
    Image, ImageFilters, CacheEntry, CacheEntryInfo, CachePartition,
    CacheSnapshot, CacheStats

Exceptions:
    GalleryCacheError, StorageError, FetchError, ImageNotFoundError
"""

from importlib.metadata import PackageNotFoundError, version

from gallery_cache.cache import (
    DEFAULT_TTL,
    CacheKey,
    QueryResultCache,
    date_range_key,
    resolve_cache_key,
)
from gallery_cache.client import ApiResponse, CachedGallery, GalleryApiClient
from gallery_cache.config import DEFAULT_CONFIG, GalleryConfig
from gallery_cache.exceptions import (
    FetchError,
    GalleryCacheError,
    ImageNotFoundError,
    StorageError,
)
from gallery_cache.models import (
    CacheEntry,
    CacheEntryInfo,
    CachePartition,
    CacheSnapshot,
    CacheStats,
    Image,
    ImageFilters,
)
from gallery_cache.protocols import ImageFetcher, SnapshotStore
from gallery_cache.storage import InMemorySnapshotStore, JsonFileSnapshotStore

try:
    __version__ = version("gallery-cache")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_TTL",
    "ApiResponse",
    "CacheEntry",
    "CacheEntryInfo",
    "CacheKey",
    "CachePartition",
    "CacheSnapshot",
    "CacheStats",
    "CachedGallery",
    "FetchError",
    "GalleryApiClient",
    "GalleryCacheError",
    "GalleryConfig",
    "Image",
    "ImageFetcher",
    "ImageFilters",
    "ImageNotFoundError",
    "InMemorySnapshotStore",
    "JsonFileSnapshotStore",
    "QueryResultCache",
    "SnapshotStore",
    "StorageError",
    "date_range_key",
    "resolve_cache_key",
]
