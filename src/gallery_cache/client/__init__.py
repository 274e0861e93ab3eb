"""Network-facing side of gallery-cache: the API client and the cached service."""

from .api import ApiResponse, GalleryApiClient
from .gallery import CachedGallery

__all__ = [
    "ApiResponse",
    "CachedGallery",
    "GalleryApiClient",
]
