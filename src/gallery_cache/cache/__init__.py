"""Query result caching for image listings."""

from .keys import CacheKey, date_range_key, resolve_cache_key
from .query_cache import DEFAULT_TTL, QueryResultCache

__all__ = [
    "DEFAULT_TTL",
    "CacheKey",
    "QueryResultCache",
    "date_range_key",
    "resolve_cache_key",
]
