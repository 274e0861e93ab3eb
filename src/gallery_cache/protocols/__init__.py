"""Protocol definitions for gallery-cache's pluggable collaborators."""

from .fetcher import ImageFetcher
from .storage import SnapshotStore

__all__ = [
    "ImageFetcher",
    "SnapshotStore",
]
