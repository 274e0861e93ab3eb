"""Shared fixtures for gallery-cache tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from gallery_cache.cache.query_cache import QueryResultCache
from gallery_cache.exceptions import StorageError
from gallery_cache.models.image import Image
from gallery_cache.storage.memory_store import InMemorySnapshotStore

EPOCH = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """A manually advanced clock for deterministic freshness checks."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingSnapshotStore(InMemorySnapshotStore):
    """Snapshot store whose writes fail once ``fail`` is set."""

    __slots__ = ("fail",)

    def __init__(self, blob: str | None = None) -> None:
        super().__init__(blob)
        self.fail = False

    def save(self, blob: str) -> None:
        if self.fail:
            raise StorageError("disk full")
        super().save(blob)


def build_image(
    image_id: str,
    *,
    title: str | None = None,
    category: str = "nature",
    tags: list[str] | None = None,
    uploaded_at: datetime = EPOCH,
) -> Image:
    return Image(
        id=image_id,
        url=f"https://cdn.example.com/images/{image_id}.jpg",
        title=title if title is not None else f"Image {image_id}",
        category=category,
        tags=tags if tags is not None else ["outdoor"],
        uploaded_at=uploaded_at,
        storage_path=f"images/{image_id}.jpg",
    )


@pytest.fixture
def make_image() -> Callable[..., Image]:
    """Factory for Image records with sensible test defaults."""
    return build_image


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def cache(snapshot_store: InMemorySnapshotStore, clock: FakeClock) -> QueryResultCache:
    """A QueryResultCache on an in-memory store and a fake clock."""
    return QueryResultCache(snapshot_store, clock=clock)


@pytest.fixture
def failing_store() -> FailingSnapshotStore:
    return FailingSnapshotStore()
