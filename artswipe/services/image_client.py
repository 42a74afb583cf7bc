"""Client for the fal.ai text-to-image API.

Uses the synchronous ``https://fal.run/<model>`` endpoint, which holds the
request open until the image is ready and answers with::

    {"images": [{"url": "...", "content_type": "image/jpeg", ...}], ...}
"""

import logging
from typing import Any

from artswipe.core.rest_api import fetch_url
from artswipe.main_config import GenerationConfig

logger = logging.getLogger(__name__)


class NoImageInResponseError(Exception):
    """The provider answered successfully but returned no image URL."""


class FalImageClient:
    """Generates square images and downloads the resulting assets."""

    def __init__(self, config: GenerationConfig) -> None:
        self.config = config

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/{self.config.model}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.fal_key:
            headers["Authorization"] = f"Key {self.config.fal_key.get_secret_value()}"
        return headers

    async def generate(self, prompt: str) -> str:
        """Request one image for ``prompt`` and return its URL.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses
            NoImageInResponseError: If the response carries no image URL
        """
        payload: dict[str, Any] = {
            "prompt": prompt,
            "image_size": self.config.image_size,
            "num_images": 1,
            "num_inference_steps": self.config.num_inference_steps,
        }
        data = await fetch_url(self.endpoint, method="POST", json=payload, headers=self._headers())

        images = data.get("images") if isinstance(data, dict) else None
        if images and isinstance(images[0], dict) and images[0].get("url"):
            return images[0]["url"]

        logger.warning("Provider response had no image URL (model=%s)", self.config.model)
        raise NoImageInResponseError("No image URL in generation response")

    async def download(self, url: str) -> tuple[bytes, str | None]:
        """Fetch a generated asset.

        Returns:
            ``(content, content_type)``
        """
        response = await fetch_url(url, return_json=False)
        return response.content, response.headers.get("content-type")
