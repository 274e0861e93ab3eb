"""Image records and the filters used to list them."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Image(BaseModel):
    """A single gallery image as returned by the API.

    Field names follow Python conventions; the camelCase names used on the
    wire (``uploadedAt``, ``storagePath``) are accepted on input and emitted
    by ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    url: str
    title: str
    category: str
    tags: list[str] = Field(default_factory=list)
    uploaded_at: datetime
    storage_path: str | None = None

    @field_validator("uploaded_at", mode="before")
    @classmethod
    def _from_document_timestamp(cls, value: Any) -> Any:
        """Accept the ``{"_seconds", "_nanoseconds"}`` form of stored timestamps."""
        if isinstance(value, dict) and "_seconds" in value:
            seconds = value["_seconds"] + value.get("_nanoseconds", 0) / 1e9
            return datetime.fromtimestamp(seconds, tz=UTC)
        return value


class ImageFilters(BaseModel):
    """Filter dimensions for a "list images" query.

    An empty ``ImageFilters()`` means "all images".
    """

    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def is_empty(self) -> bool:
        """True when no filter dimension is active."""
        return (
            not self.categories
            and not self.tags
            and self.start_date is None
            and self.end_date is None
        )

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def to_query_params(self) -> dict[str, str]:
        """Encode the filters as the API's query-string parameters."""
        params: dict[str, str] = {}
        if self.categories:
            params["category"] = ",".join(self.categories)
        if self.tags:
            params["tags"] = ",".join(self.tags)
        if self.start_date is not None:
            params["startDate"] = self.start_date.isoformat()
        if self.end_date is not None:
            params["endDate"] = self.end_date.isoformat()
        return params
