"""Image generation: prompt -> provider -> blob storage -> image store.

A batch runs one independent attempt per prompt concurrently. Attempts may
fail individually; the batch only fails when every attempt failed. The total
number of images ever generated is capped by ``max_images``.
"""

import asyncio
import mimetypes
import random
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from artswipe.models.image import Image
from artswipe.repository.image_repository import ImageRepository
from artswipe.services.prompt_generator import generate_prompts

logger = structlog.get_logger(__name__)

_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}


class ImageClient(Protocol):
    model: str

    async def generate(self, prompt: str) -> str: ...

    async def download(self, url: str) -> tuple[bytes, str | None]: ...


class BlobStorage(Protocol):
    async def save(self, data: bytes, filename: str) -> str: ...

    async def delete(self, url: str) -> None: ...


class GenerationError(Exception):
    """A single generation attempt failed."""

    def __init__(self, prompt: str, reason: str) -> None:
        super().__init__(reason)
        self.prompt = prompt
        self.reason = reason


class CapacityReachedError(Exception):
    """The global image cap leaves no room for another batch."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Image limit reached ({count}/{limit})")
        self.count = count
        self.limit = limit


class BatchGenerationError(Exception):
    """Every attempt of a batch failed."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("All image generations failed")
        self.errors = list(errors)


@dataclass(frozen=True)
class Capacity:
    count: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

    @property
    def can_generate(self) -> bool:
        return self.count < self.limit


@dataclass
class BatchResult:
    created: list[Image] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _extension_for(content_type: str | None) -> str:
    if not content_type:
        return ".png"
    mime = content_type.split(";")[0].strip().lower()
    return _EXTENSIONS.get(mime) or mimetypes.guess_extension(mime) or ".png"


class GenerationService:
    """Coordinates the provider, blob storage and the image store."""

    def __init__(
        self,
        image_client: ImageClient,
        storage: BlobStorage,
        batch_size: int = 3,
        max_images: int = 100,
        rng: random.Random | None = None,
    ) -> None:
        self.image_client = image_client
        self.storage = storage
        self.batch_size = batch_size
        self.max_images = max_images
        self.rng = rng
        # Held from the capacity check until the batch is committed
        self._batch_lock = asyncio.Lock()

    async def generate_image(self, prompt: str) -> str:
        """Generate, download and store one image.

        Returns:
            Servable URL of the stored image

        Raises:
            GenerationError: If any step fails
        """
        try:
            remote_url = await self.image_client.generate(prompt)
            content, content_type = await self.image_client.download(remote_url)
            if not content:
                raise ValueError("Downloaded image is empty")
            filename = f"{uuid.uuid4()}{_extension_for(content_type)}"
            stored_url = await self.storage.save(content, filename)
        except Exception as exc:
            logger.warning("image_generation_failed", prompt=prompt, error=str(exc))
            raise GenerationError(prompt, str(exc) or type(exc).__name__) from exc

        logger.info("image_generated", image_url=stored_url, remote_url=remote_url)
        return stored_url

    async def capacity(self, repo: ImageRepository) -> Capacity:
        return Capacity(count=await repo.total_count(), limit=self.max_images)

    async def generate_batch(self, repo: ImageRepository) -> BatchResult:
        """Generate a batch of images and record the successful ones.

        The batch is shrunk to the remaining capacity. Successful attempts are
        inserted together and committed once. Batches run one at a time so
        concurrent requests cannot push the total past ``max_images``.

        Raises:
            CapacityReachedError: If no capacity remains
            BatchGenerationError: If every attempt failed
        """
        async with self._batch_lock:
            capacity = await self.capacity(repo)
            if not capacity.can_generate:
                raise CapacityReachedError(capacity.count, capacity.limit)

            size = min(self.batch_size, capacity.remaining)
            prompts = generate_prompts(size, rng=self.rng)
            logger.info(
                "batch_generation_started", size=size, count=capacity.count, limit=capacity.limit
            )

            outcomes = await asyncio.gather(
                *(self.generate_image(prompt) for prompt in prompts), return_exceptions=True
            )

            succeeded: list[tuple[str, str]] = []
            result = BatchResult()
            for prompt, outcome in zip(prompts, outcomes):
                if isinstance(outcome, GenerationError):
                    result.errors.append(outcome.reason)
                elif isinstance(outcome, BaseException):
                    raise outcome
                else:
                    succeeded.append((outcome, prompt))

            if not succeeded:
                logger.error("batch_generation_failed", errors=result.errors)
                raise BatchGenerationError(result.errors)

            try:
                result.created = list(
                    await repo.add_generated(succeeded, model=self.image_client.model)
                )
                await repo.commit()
            except Exception:
                await repo.rollback()
                await self._discard([url for url, _ in succeeded])
                raise

        if result.errors:
            logger.warning(
                "batch_generation_partial",
                created=len(result.created),
                failed=len(result.errors),
                errors=result.errors,
            )
        else:
            logger.info("batch_generation_completed", created=len(result.created))
        return result

    async def _discard(self, urls: list[str]) -> None:
        """Remove stored files that will not be recorded."""
        outcomes = await asyncio.gather(
            *(self.storage.delete(url) for url in urls), return_exceptions=True
        )
        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, Exception):
                logger.warning("stored_image_cleanup_failed", image_url=url, error=str(outcome))
