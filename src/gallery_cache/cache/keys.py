"""Classification of "list images" queries into cache partitions and keys."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import NamedTuple

from gallery_cache.models.cache import CachePartition
from gallery_cache.models.image import ImageFilters

ALL_KEY = "all"
NULL_BOUND = "null"


class CacheKey(NamedTuple):
    """Address of one cache entry: a partition plus a key within it."""

    partition: CachePartition
    key: str


def date_range_key(start: datetime | None, end: datetime | None) -> str:
    """Build the canonical key for a date range.

    Each bound is converted to UTC and rendered as ISO-8601, or as
    ``"null"`` when absent, and the two are joined with ``"_"``. Naive
    bounds are taken to be UTC. The order of the bounds is significant.
    """
    return f"{_canonical_bound(start)}_{_canonical_bound(end)}"


def _canonical_bound(value: datetime | None) -> str:
    if value is None:
        return NULL_BOUND
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC).isoformat()
    return value.astimezone(UTC).isoformat()


def resolve_cache_key(filters: ImageFilters | None) -> CacheKey | None:
    """Map a query to its cache address, first match wins.

    1. no filter: the ``all`` partition;
    2. exactly one category and nothing else: ``by_category``;
    3. exactly one tag and nothing else: ``by_tag``;
    4. any start or end date, whatever else is set: ``by_date_range``;
    5. anything else: ``None``, meaning the query is never cached.
    """
    if filters is None or filters.is_empty:
        return CacheKey(CachePartition.ALL, ALL_KEY)

    if len(filters.categories) == 1 and not filters.tags and not filters.has_date_range:
        return CacheKey(CachePartition.BY_CATEGORY, filters.categories[0])

    if len(filters.tags) == 1 and not filters.categories and not filters.has_date_range:
        return CacheKey(CachePartition.BY_TAG, filters.tags[0])

    if filters.has_date_range:
        return CacheKey(
            CachePartition.BY_DATE_RANGE,
            date_range_key(filters.start_date, filters.end_date),
        )

    return None
