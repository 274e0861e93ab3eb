"""Cache entry and snapshot models."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from .image import Image


class CachePartition(StrEnum):
    """The four key spaces of the query cache."""

    ALL = "all"
    BY_CATEGORY = "by_category"
    BY_TAG = "by_tag"
    BY_DATE_RANGE = "by_date_range"


class CacheEntry(BaseModel):
    """A cached list of images with the time it was stored and its lifetime."""

    data: list[Image] = Field(default_factory=list)
    stored_at: AwareDatetime
    ttl: timedelta

    @field_validator("ttl")
    @classmethod
    def _ttl_must_be_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            msg = f"ttl must be positive, got {value}"
            raise ValueError(msg)
        return value

    def age(self, now: datetime) -> timedelta:
        return now - self.stored_at

    def is_fresh(self, now: datetime) -> bool:
        """An entry is fresh while ``now - stored_at <= ttl``."""
        return self.age(now) <= self.ttl


class CacheSnapshot(BaseModel):
    """Every partition of the query cache, as persisted to durable storage."""

    all: CacheEntry | None = None
    by_category: dict[str, CacheEntry] = Field(default_factory=dict)
    by_tag: dict[str, CacheEntry] = Field(default_factory=dict)
    by_date_range: dict[str, CacheEntry] = Field(default_factory=dict)

    def partition(self, name: CachePartition) -> dict[str, CacheEntry]:
        """Return the keyed mapping for a partition.

        The ``all`` partition holds a single entry under a constant key, so a
        one-element (or empty) view is returned for it. Writes to that view
        are not reflected; use :meth:`put` instead.
        """
        if name is CachePartition.ALL:
            return {} if self.all is None else {CachePartition.ALL.value: self.all}
        return getattr(self, name.value)

    def get(self, name: CachePartition, key: str) -> CacheEntry | None:
        return self.partition(name).get(key)

    def put(self, name: CachePartition, key: str, entry: CacheEntry) -> None:
        if name is CachePartition.ALL:
            self.all = entry
        else:
            getattr(self, name.value)[key] = entry

    def drop(self, name: CachePartition, key: str) -> None:
        if name is CachePartition.ALL:
            self.all = None
        else:
            getattr(self, name.value).pop(key, None)

    def iter_entries(self) -> list[tuple[CachePartition, str, CacheEntry]]:
        """List every held entry across all partitions, fresh or stale."""
        return [
            (name, key, entry)
            for name in CachePartition
            for key, entry in self.partition(name).items()
        ]

    @property
    def is_empty(self) -> bool:
        return not self.iter_entries()


class CacheEntryInfo(BaseModel):
    """Summary of one cached entry, for inspection and diagnostics."""

    partition: CachePartition
    key: str
    size: int = Field(ge=0)
    stored_at: datetime
    ttl: timedelta
    age: timedelta
    fresh: bool


class CacheStats(BaseModel):
    """Counters describing how the query cache has been used."""

    hits: int = 0
    misses: int = 0
    forced_misses: int = 0
    stores: int = 0
    persist_failures: int = 0
    entries: dict[CachePartition, int] = Field(default_factory=dict)

    @property
    def total_lookups(self) -> int:
        return self.hits + self.misses + self.forced_misses

    @property
    def hit_rate(self) -> float:
        total = self.total_lookups
        return self.hits / total if total > 0 else 0.0
