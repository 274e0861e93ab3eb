"""Time-expiring, write-through cache for "list images" query results."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from pydantic import ValidationError

from gallery_cache.exceptions import StorageError
from gallery_cache.models.cache import (
    CacheEntry,
    CacheEntryInfo,
    CachePartition,
    CacheSnapshot,
    CacheStats,
)
from gallery_cache.models.image import Image, ImageFilters
from gallery_cache.protocols.storage import SnapshotStore
from gallery_cache.storage.memory_store import InMemorySnapshotStore

from .keys import resolve_cache_key

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class QueryResultCache:
    """Memoizes image listings per query shape for a bounded time window.

    Queries are classified by :func:`~gallery_cache.cache.keys.resolve_cache_key`
    into four partitions (all images, one category, one tag, a date range).
    Other shapes are forced misses: never served from, nor stored in, the
    cache.

    Entries expire lazily: a stale entry stays in the snapshot but readers
    treat it as absent. Every mutating call writes the whole snapshot to the
    ``SnapshotStore`` before returning. If that write fails the in-memory
    state keeps the change and ``StorageError`` is raised.

    All operations hold a single lock for their full duration, including the
    durable write, so no caller can observe a partially applied mutation.

    Parameters:
        store: Durable backing store. Defaults to an ``InMemorySnapshotStore``.
        default_ttl: Lifetime given to entries stored without an explicit
            ``ttl``. Must be positive. Default 5 minutes.
        clock: Returns the current time as an aware ``datetime``.

    Example::

        cache = QueryResultCache(JsonFileSnapshotStore("cache.json"))
        images = cache.lookup(filters)
        if images is None:
            images = await api.fetch(filters)
            cache.store(filters, images)
    """

    __slots__ = (
        "_clock",
        "_default_ttl",
        "_forced_misses",
        "_hits",
        "_lock",
        "_misses",
        "_persist_failures",
        "_snapshot",
        "_store",
        "_stores",
    )

    def __init__(
        self,
        store: SnapshotStore | None = None,
        *,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if default_ttl <= timedelta(0):
            msg = f"default_ttl must be positive, got {default_ttl}"
            raise ValueError(msg)
        self._store: SnapshotStore = store if store is not None else InMemorySnapshotStore()
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._forced_misses = 0
        self._stores = 0
        self._persist_failures = 0

        self._snapshot = self._load()

    @property
    def default_ttl(self) -> timedelta:
        return self._default_ttl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def lookup(self, filters: ImageFilters | None = None) -> list[Image] | None:
        """Return the cached images for a query, or None on a miss.

        A miss is a forced-miss query shape, no entry, or a stale entry.
        A fresh entry holding an empty list is a hit and returns ``[]``.
        The stored list itself is returned, not a copy.
        """
        cache_key = resolve_cache_key(filters)
        with self._lock:
            if cache_key is None:
                self._forced_misses += 1
                logger.debug("Cache bypass for uncacheable query shape: %s", filters)
                return None

            entry = self._snapshot.get(cache_key.partition, cache_key.key)
            if entry is None:
                self._misses += 1
                logger.debug("Cache miss for %s[%s]", cache_key.partition, cache_key.key)
                return None

            if not entry.is_fresh(self._clock()):
                self._misses += 1
                logger.debug("Cache entry expired for %s[%s]", cache_key.partition, cache_key.key)
                return None

            self._hits += 1
            logger.debug(
                "Cache hit for %s[%s] (%d images)",
                cache_key.partition,
                cache_key.key,
                len(entry.data),
            )
            return entry.data

    # ------------------------------------------------------------------
    # Mutations (write-through)
    # ------------------------------------------------------------------

    def store(
        self,
        filters: ImageFilters | None,
        images: Iterable[Image],
        ttl: timedelta | None = None,
    ) -> None:
        """Cache the result of a query, replacing any previous entry.

        Parameters:
            filters: The query that produced ``images``.
            images: The fetched images, in display order.
            ttl: Lifetime of the entry. None means use the default TTL.

        Raises:
            ValueError: If ``ttl`` is not positive.
            StorageError: If the snapshot could not be persisted.
        """
        effective_ttl = ttl if ttl is not None else self._default_ttl
        if effective_ttl <= timedelta(0):
            msg = f"ttl must be positive, got {effective_ttl}"
            raise ValueError(msg)

        cache_key = resolve_cache_key(filters)
        if cache_key is None:
            logger.debug("Not caching uncacheable query shape: %s", filters)
            return

        with self._lock:
            entry = CacheEntry(data=list(images), stored_at=self._clock(), ttl=effective_ttl)
            self._snapshot.put(cache_key.partition, cache_key.key, entry)
            self._stores += 1
            logger.debug(
                "Cached %d images under %s[%s] (ttl=%s)",
                len(entry.data),
                cache_key.partition,
                cache_key.key,
                effective_ttl,
            )
            self._persist()

    def update_image(self, image: Image) -> int:
        """Replace every cached copy of ``image`` (matched by id) in place.

        Fresh and stale entries alike are patched; order and length of each
        list are preserved. Returns the number of copies replaced.
        """
        with self._lock:
            replaced = 0
            for _partition, _key, entry in self._snapshot.iter_entries():
                for index, cached in enumerate(entry.data):
                    if cached.id == image.id:
                        entry.data[index] = image
                        replaced += 1
            logger.debug("Updated %d cached copies of image %s", replaced, image.id)
            self._persist()
            return replaced

    def remove_image(self, image_id: str) -> int:
        """Drop every cached copy of an image. Returns the number removed."""
        with self._lock:
            removed = 0
            for _partition, _key, entry in self._snapshot.iter_entries():
                kept = [cached for cached in entry.data if cached.id != image_id]
                removed += len(entry.data) - len(kept)
                entry.data = kept
            logger.debug("Removed %d cached copies of image %s", removed, image_id)
            self._persist()
            return removed

    def clear(self) -> None:
        """Discard every entry in every partition."""
        with self._lock:
            count = len(self._snapshot.iter_entries())
            self._snapshot = CacheSnapshot()
            logger.info("Cache cleared: %d entries removed", count)
            self._persist()

    def purge_expired(self) -> int:
        """Delete stale entries from the snapshot. Returns the count removed.

        Readers already ignore stale entries; this only reclaims space.
        """
        with self._lock:
            now = self._clock()
            stale = [
                (partition, key)
                for partition, key, entry in self._snapshot.iter_entries()
                if not entry.is_fresh(now)
            ]
            for partition, key in stale:
                self._snapshot.drop(partition, key)
            if stale:
                logger.info("Purged %d expired cache entries", len(stale))
                self._persist()
            return len(stale)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        """Return usage counters and per-partition entry counts."""
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                forced_misses=self._forced_misses,
                stores=self._stores,
                persist_failures=self._persist_failures,
                entries={
                    partition: len(self._snapshot.partition(partition))
                    for partition in CachePartition
                },
            )

    def entries(self) -> list[CacheEntryInfo]:
        """Describe every held entry, stale ones included."""
        with self._lock:
            now = self._clock()
            return [
                CacheEntryInfo(
                    partition=partition,
                    key=key,
                    size=len(entry.data),
                    stored_at=entry.stored_at,
                    ttl=entry.ttl,
                    age=entry.age(now),
                    fresh=entry.is_fresh(now),
                )
                for partition, key, entry in self._snapshot.iter_entries()
            ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> CacheSnapshot:
        """Read the snapshot from the store, falling back to an empty cache."""
        try:
            blob = self._store.load()
        except StorageError:
            logger.warning("Could not read cache snapshot; starting empty", exc_info=True)
            return CacheSnapshot()

        if blob is None or not blob.strip():
            return CacheSnapshot()

        try:
            snapshot = CacheSnapshot.model_validate_json(blob)
        except ValidationError as e:
            logger.warning(
                "Discarding corrupt cache snapshot (%d errors); starting empty",
                e.error_count(),
            )
            return CacheSnapshot()

        logger.debug("Loaded %d cache entries", len(snapshot.iter_entries()))
        return snapshot

    def _persist(self) -> None:
        """Write the full snapshot to the store. Caller must hold the lock."""
        blob = self._snapshot.model_dump_json()
        try:
            self._store.save(blob)
        except StorageError:
            self._persist_failures += 1
            logger.error(
                "Failed to persist cache snapshot; in-memory cache is ahead of %r",
                self._store,
            )
            raise

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshot.iter_entries())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(default_ttl={self._default_ttl}, "
            f"entries={len(self._snapshot.iter_entries())}, store={self._store!r})"
        )
