"""Client configuration models and presets."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_API_URL = "http://localhost:5001/api"
DEFAULT_CACHE_PATH = Path("~/.cache/gallery-cache/image_gallery_cache.json")


class GalleryConfig(BaseModel):
    """Settings shared by the API client, the query cache and the CLI.

    Attributes:
        api_url: Base URL of the gallery API (without the ``/images`` suffix).
        cache_path: File backing the query cache. None keeps the cache in
            memory for the lifetime of the process.
        default_ttl: Lifetime of cached listings stored without an explicit TTL.
        request_timeout: HTTP timeout in seconds.
    """

    api_url: str = DEFAULT_API_URL
    cache_path: Path | None = DEFAULT_CACHE_PATH
    default_ttl: timedelta = Field(default=timedelta(minutes=5))
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("default_ttl")
    @classmethod
    def _ttl_must_be_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            msg = f"default_ttl must be positive, got {value}"
            raise ValueError(msg)
        return value


DEFAULT_CONFIG = GalleryConfig()

# Keeps nothing on disk; useful for scripts and tests.
EPHEMERAL_CONFIG = GalleryConfig(cache_path=None)
