"""Tests for image, filter and cache models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from gallery_cache.models.cache import CacheEntry, CachePartition, CacheSnapshot
from gallery_cache.models.image import Image, ImageFilters

NOW = datetime(2024, 3, 1, tzinfo=UTC)


class TestImage:
    def test_accepts_wire_names(self) -> None:
        image = Image.model_validate(
            {
                "id": "a1",
                "url": "https://cdn/a1.jpg",
                "title": "Lake",
                "category": "nature",
                "tags": ["water"],
                "uploadedAt": "2024-03-01T00:00:00Z",
                "storagePath": "images/a1.jpg",
            }
        )
        assert image.uploaded_at == NOW
        assert image.storage_path == "images/a1.jpg"

    def test_dumps_wire_names_by_alias(self, make_image) -> None:
        data = make_image("a1").model_dump(by_alias=True)
        assert "uploadedAt" in data
        assert "storagePath" in data

    def test_accepts_document_timestamp(self) -> None:
        image = Image.model_validate(
            {
                "id": "a1",
                "url": "u",
                "title": "t",
                "category": "c",
                "uploadedAt": {"_seconds": 1709251200, "_nanoseconds": 500_000_000},
            }
        )
        assert image.uploaded_at == NOW + timedelta(milliseconds=500)

    def test_storage_path_optional(self) -> None:
        image = Image(id="a1", url="u", title="t", category="c", uploaded_at=NOW)
        assert image.storage_path is None
        assert image.tags == []


class TestImageFilters:
    def test_empty(self) -> None:
        assert ImageFilters().is_empty
        assert not ImageFilters(tags=["x"]).is_empty

    def test_query_params(self) -> None:
        filters = ImageFilters(
            categories=["a", "b"],
            tags=["x"],
            start_date=NOW,
            end_date=NOW + timedelta(days=1),
        )
        assert filters.to_query_params() == {
            "category": "a,b",
            "tags": "x",
            "startDate": "2024-03-01T00:00:00+00:00",
            "endDate": "2024-03-02T00:00:00+00:00",
        }

    def test_no_params_when_empty(self) -> None:
        assert ImageFilters().to_query_params() == {}


class TestCacheEntry:
    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            CacheEntry(stored_at=NOW, ttl=timedelta(0))

    def test_naive_stored_at_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CacheEntry(stored_at=datetime(2024, 1, 1), ttl=timedelta(minutes=5))

    def test_freshness_boundary(self) -> None:
        entry = CacheEntry(stored_at=NOW, ttl=timedelta(seconds=10))
        assert entry.is_fresh(NOW + timedelta(seconds=10))
        assert not entry.is_fresh(NOW + timedelta(seconds=10, microseconds=1))


class TestCacheSnapshot:
    def test_empty_snapshot(self) -> None:
        snapshot = CacheSnapshot()
        assert snapshot.is_empty
        assert snapshot.partition(CachePartition.ALL) == {}

    def test_put_get_drop_all(self) -> None:
        snapshot = CacheSnapshot()
        entry = CacheEntry(stored_at=NOW, ttl=timedelta(minutes=1))
        snapshot.put(CachePartition.ALL, "all", entry)
        assert snapshot.get(CachePartition.ALL, "all") is entry
        snapshot.drop(CachePartition.ALL, "all")
        assert snapshot.all is None

    def test_json_round_trip(self, make_image) -> None:
        snapshot = CacheSnapshot()
        entry = CacheEntry(data=[make_image("a1")], stored_at=NOW, ttl=timedelta(minutes=5))
        snapshot.put(CachePartition.BY_TAG, "sunset", entry)
        snapshot.put(CachePartition.BY_DATE_RANGE, "null_null", entry)

        restored = CacheSnapshot.model_validate_json(snapshot.model_dump_json())
        assert restored == snapshot
