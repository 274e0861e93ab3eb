"""Core data models for gallery-cache."""

from .cache import CacheEntry, CacheEntryInfo, CachePartition, CacheSnapshot, CacheStats
from .image import Image, ImageFilters

__all__ = [
    "CacheEntry",
    "CacheEntryInfo",
    "CachePartition",
    "CacheSnapshot",
    "CacheStats",
    "Image",
    "ImageFilters",
]
