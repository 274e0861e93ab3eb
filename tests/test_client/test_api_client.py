"""Tests for gallery_cache.client.api.GalleryApiClient.

Requests are answered by an ``httpx.MockTransport`` so no network is used.
"""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime

import httpx
import pytest

from gallery_cache.client.api import GalleryApiClient
from gallery_cache.exceptions import FetchError, ImageNotFoundError
from gallery_cache.models.image import ImageFilters
from gallery_cache.protocols.fetcher import ImageFetcher

BASE_URL = "https://api.example.com/api"


def _image_json(image_id: str, **overrides: object) -> dict:
    data = {
        "id": image_id,
        "url": f"https://cdn.example.com/{image_id}.jpg",
        "title": f"Image {image_id}",
        "category": "nature",
        "tags": ["outdoor"],
        "uploadedAt": "2024-03-01T12:00:00Z",
        "storagePath": f"images/{image_id}.jpg",
    }
    data.update(overrides)
    return data


def _envelope(data: object, code: str = "SUCCESS", status: str = "ok") -> dict:
    return {"code": code, "status": status, "data": data}


class Recorder:
    """Mock transport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body: object = None) -> None:
        self.status_code = status_code
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


def _client(handler) -> GalleryApiClient:
    return GalleryApiClient(BASE_URL + "/", transport=httpx.MockTransport(handler))


class TestGalleryApiClient:
    def test_protocol_compliance(self) -> None:
        assert isinstance(GalleryApiClient(BASE_URL), ImageFetcher)

    def test_strips_trailing_slash(self) -> None:
        assert GalleryApiClient(BASE_URL + "/").base_url == BASE_URL

    @pytest.mark.asyncio
    async def test_list_images_without_filters(self) -> None:
        recorder = Recorder(body=_envelope([_image_json("a1"), _image_json("a2")]))
        images = await _client(recorder).list_images()

        assert [i.id for i in images] == ["a1", "a2"]
        request = recorder.requests[0]
        assert request.method == "GET"
        assert str(request.url) == f"{BASE_URL}/images"

    @pytest.mark.asyncio
    async def test_list_images_encodes_filters(self) -> None:
        recorder = Recorder(body=_envelope([]))
        filters = ImageFilters(
            categories=["nature", "city"],
            tags=["sunset"],
            start_date=datetime(2024, 1, 1, tzinfo=UTC),
            end_date=datetime(2024, 2, 1, tzinfo=UTC),
        )
        assert await _client(recorder).fetch(filters) == []

        params = recorder.requests[0].url.params
        assert params["category"] == "nature,city"
        assert params["tags"] == "sunset"
        assert params["startDate"] == "2024-01-01T00:00:00+00:00"
        assert params["endDate"] == "2024-02-01T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_get_image(self) -> None:
        recorder = Recorder(body=_envelope(_image_json("a1", title="Lake")))
        image = await _client(recorder).get_image("a1")
        assert image.title == "Lake"
        assert recorder.requests[0].url.path == "/api/images/a1"

    @pytest.mark.asyncio
    async def test_get_image_not_found(self) -> None:
        recorder = Recorder(404, _envelope(None, code="NOT_FOUND", status="Image not found"))
        with pytest.raises(ImageNotFoundError, match="Image not found") as exc_info:
            await _client(recorder).get_image("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_upload_sends_base64_payload(self) -> None:
        recorder = Recorder(201, _envelope(_image_json("new1", title="Cat")))
        image = await _client(recorder).upload_image(
            title="Cat",
            category="animals",
            tags=["cute"],
            filename="cat.png",
            content=b"\x89PNG",
        )

        assert image.id == "new1"
        body = json.loads(recorder.requests[0].content)
        assert body["title"] == "Cat"
        assert body["category"] == "animals"
        assert body["tags"] == ["cute"]
        assert body["file"]["name"] == "cat.png"
        assert body["file"]["type"] == "image/png"
        assert base64.b64decode(body["file"]["data"]) == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_upload_unknown_extension(self) -> None:
        recorder = Recorder(201, _envelope(_image_json("new1")))
        await _client(recorder).upload_image(
            title="t", category="c", tags=[], filename="blob", content=b"x"
        )
        body = json.loads(recorder.requests[0].content)
        assert body["file"]["type"] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_delete_image(self) -> None:
        recorder = Recorder(body=_envelope(None))
        await _client(recorder).delete_image("a1")
        assert recorder.requests[0].method == "DELETE"
        assert recorder.requests[0].url.path == "/api/images/a1"

    @pytest.mark.asyncio
    async def test_server_error_raises_fetch_error(self) -> None:
        recorder = Recorder(500, _envelope(None, code="ERROR", status="Failed to retrieve images"))
        with pytest.raises(FetchError, match="Failed to retrieve images") as exc_info:
            await _client(recorder).list_images()
        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "ERROR"

    @pytest.mark.asyncio
    async def test_error_code_with_200_raises(self) -> None:
        recorder = Recorder(200, _envelope(None, code="ERROR", status="nope"))
        with pytest.raises(FetchError):
            await _client(recorder).list_images()

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad gateway</html>")

        with pytest.raises(FetchError) as exc_info:
            await _client(handler).list_images()
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_raises_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError, match="connection refused"):
            await _client(handler).list_images()

    @pytest.mark.asyncio
    async def test_malformed_record_raises_fetch_error(self) -> None:
        recorder = Recorder(body=_envelope([{"id": "a1"}]))
        with pytest.raises(FetchError, match="malformed"):
            await _client(recorder).list_images()

    @pytest.mark.asyncio
    async def test_non_list_data_raises_fetch_error(self) -> None:
        recorder = Recorder(body=_envelope({"id": "a1"}))
        with pytest.raises(FetchError, match="Expected a list"):
            await _client(recorder).list_images()
