"""HTTP client for the gallery API.

Every endpoint answers with the envelope ``{"code", "status", "data"}``;
``code`` is ``"SUCCESS"`` on success and ``"ERROR"`` / ``"NOT_FOUND"``
otherwise.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from gallery_cache.exceptions import FetchError, ImageNotFoundError
from gallery_cache.models.image import Image, ImageFilters

logger = logging.getLogger(__name__)

SUCCESS_CODE = "SUCCESS"
NOT_FOUND_CODE = "NOT_FOUND"


class ApiResponse(BaseModel):
    """Response envelope shared by all gallery endpoints."""

    code: str
    status: str = ""
    data: Any = None


class GalleryApiClient:
    """Async client for the ``/images`` endpoints.

    Implements the ``ImageFetcher`` protocol through :meth:`fetch`.

    A fresh ``httpx.AsyncClient`` is opened per request. Pass ``transport``
    to route requests somewhere other than the network (for example an
    ``httpx.MockTransport`` in tests).

    Example:
        >>> api = GalleryApiClient("https://example.com/api")
        >>> images = await api.list_images(ImageFilters(categories=["nature"]))
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, filters: ImageFilters) -> list[Image]:
        return await self.list_images(filters)

    async def list_images(self, filters: ImageFilters | None = None) -> list[Image]:
        """List images, optionally filtered by category, tag and date range."""
        params = filters.to_query_params() if filters is not None else {}
        data = await self._request("GET", "/images", params=params)
        return self._parse_images(data or [])

    async def get_image(self, image_id: str) -> Image:
        """Fetch a single image.

        Raises:
            ImageNotFoundError: If no image has this id.
        """
        data = await self._request("GET", f"/images/{image_id}")
        return self._parse_image(data)

    async def upload_image(
        self,
        *,
        title: str,
        category: str,
        tags: list[str],
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> Image:
        """Upload an image file and return the created record.

        The file travels base64-encoded inside the JSON body. When
        ``content_type`` is omitted it is guessed from ``filename``.
        """
        if content_type is None:
            content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        payload = {
            "title": title,
            "category": category,
            "tags": tags,
            "file": {
                "name": filename,
                "type": content_type,
                "data": base64.b64encode(content).decode("ascii"),
            },
        }
        data = await self._request("POST", "/images", json=payload)
        image = self._parse_image(data)
        logger.info("Uploaded image %s (%s)", image.id, filename)
        return image

    async def delete_image(self, image_id: str) -> None:
        """Delete an image and its stored file.

        Raises:
            ImageNotFoundError: If no image has this id.
        """
        await self._request("DELETE", f"/images/{image_id}")
        logger.info("Deleted image %s", image_id)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and unwrap the response envelope's ``data``."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            msg = f"{method} {url} failed: {e}"
            raise FetchError(msg) from e

        try:
            envelope = ApiResponse.model_validate_json(response.content)
        except ValidationError:
            envelope = None

        code = envelope.code if envelope is not None else None
        status = envelope.status if envelope is not None else ""

        if response.status_code == 404 or code == NOT_FOUND_CODE:
            msg = status or f"Not found: {url}"
            raise ImageNotFoundError(msg, status_code=response.status_code, code=code)

        if response.is_error or envelope is None or code != SUCCESS_CODE:
            status = status or response.reason_phrase
            logger.error("%s %s returned %d: %s", method, url, response.status_code, status)
            raise FetchError(
                f"{method} {url} returned {response.status_code}: {status}",
                status_code=response.status_code,
                code=code,
            )

        return envelope.data

    @staticmethod
    def _parse_image(data: Any) -> Image:
        try:
            return Image.model_validate(data)
        except ValidationError as e:
            msg = "API returned a malformed image record"
            raise FetchError(msg) from e

    @classmethod
    def _parse_images(cls, data: Any) -> list[Image]:
        if not isinstance(data, list):
            msg = f"Expected a list of images, got {type(data).__name__}"
            raise FetchError(msg)
        return [cls._parse_image(item) for item in data]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"
