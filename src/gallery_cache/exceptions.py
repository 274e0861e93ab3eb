"""Custom exceptions for gallery-cache."""

from __future__ import annotations

__all__ = [
    "FetchError",
    "GalleryCacheError",
    "ImageNotFoundError",
    "StorageError",
]


class GalleryCacheError(Exception):
    """Base exception for all gallery-cache errors."""


class StorageError(GalleryCacheError):
    """Raised when the durable snapshot store cannot be read or written."""


class FetchError(GalleryCacheError):
    """Raised when the gallery API rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ImageNotFoundError(FetchError):
    """Raised when the API reports that an image id does not exist."""
