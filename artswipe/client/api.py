"""Typed async client for the ArtSwipe REST API."""

from typing import Any

import httpx

from artswipe.schemas.image import CountResponse, ImageResponse, StatsResponse


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, body: Any = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.body = body


class ArtSwipeClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the six API endpoints.

    Usage:
        async with ArtSwipeClient("http://localhost:8000") as api:
            pending = await api.get_pending()
    """

    def __init__(self, base_url: str = "", http_client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=120.0)

    async def __aenter__(self) -> "ArtSwipeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = response.text
        message = body.get("message", response.reason_phrase) if isinstance(body, dict) else body
        raise ApiError(response.status_code, message, body)

    async def get_pending(self) -> list[ImageResponse]:
        data = await self._request("GET", "/api/images/pending")
        return [ImageResponse.model_validate(item) for item in data]

    async def get_liked(self) -> list[ImageResponse]:
        data = await self._request("GET", "/api/images/liked")
        return [ImageResponse.model_validate(item) for item in data]

    async def get_stats(self) -> StatsResponse:
        return StatsResponse.model_validate(await self._request("GET", "/api/stats"))

    async def get_count(self) -> CountResponse:
        return CountResponse.model_validate(await self._request("GET", "/api/images/count"))

    async def generate(self) -> list[ImageResponse]:
        data = await self._request("POST", "/api/images/generate")
        return [ImageResponse.model_validate(item) for item in data]

    async def swipe(self, image_id: str, liked: bool) -> ImageResponse:
        data = await self._request("POST", f"/api/images/{image_id}/swipe", json={"liked": liked})
        return ImageResponse.model_validate(data)
