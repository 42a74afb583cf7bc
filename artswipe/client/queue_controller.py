"""Per-session swipe queue.

Keeps a local buffer of images the user has not seen yet, removes the head
optimistically on each swipe, and asks the server for more images in the
background when the buffer runs low.

States:
    loading                    initial fetch in flight
    idle-with-queue            at least one unseen image buffered
    empty-awaiting-generation  buffer drained, generation in flight
    empty-no-images            buffer drained, nothing in flight

Usage:
    async with ArtSwipeClient("http://localhost:8000") as api:
        controller = SwipeQueueController(api)
        await controller.load()
        if controller.state is QueueState.EMPTY_NO_IMAGES:
            controller.generate()
        ...
        controller.swipe(SwipeDirection.RIGHT)
"""

import asyncio
from collections import deque
from collections.abc import Coroutine, Iterable
from enum import Enum
from typing import Any

import httpx
import structlog

from artswipe.client.api import ApiError, ArtSwipeClient
from artswipe.schemas.image import ImageResponse, StatsResponse

logger = structlog.get_logger(__name__)

# Failures that are reported and left for the user to retry
_RECOVERABLE = (ApiError, httpx.HTTPError)


class QueueState(str, Enum):
    LOADING = "loading"
    IDLE_WITH_QUEUE = "idle-with-queue"
    EMPTY_AWAITING_GENERATION = "empty-awaiting-generation"
    EMPTY_NO_IMAGES = "empty-no-images"


class SwipeDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def liked(self) -> bool:
        return self is SwipeDirection.RIGHT


class SwipeQueueController:
    """Queue of unseen images for one viewing session.

    Swipes and generation requests run as background tasks on the current
    event loop; ``wait_idle()`` waits for them to settle.
    """

    def __init__(self, api: ArtSwipeClient, low_watermark: int = 1) -> None:
        self.api = api
        self.low_watermark = low_watermark
        self.liked: list[ImageResponse] = []
        self.stats: StatsResponse | None = None
        self.last_error: Exception | None = None
        self._queue: deque[ImageResponse] = deque()
        self._seen_ids: set[str] = set()
        self._loaded = False
        self._generating = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def queue(self) -> list[ImageResponse]:
        return list(self._queue)

    @property
    def current(self) -> ImageResponse | None:
        return self._queue[0] if self._queue else None

    @property
    def is_generating(self) -> bool:
        return self._generating

    @property
    def state(self) -> QueueState:
        if not self._loaded:
            return QueueState.LOADING
        if self._queue:
            return QueueState.IDLE_WITH_QUEUE
        if self._generating:
            return QueueState.EMPTY_AWAITING_GENERATION
        return QueueState.EMPTY_NO_IMAGES

    async def load(self) -> None:
        """Initial fetch of pending images.

        An empty result leaves the session in ``empty-no-images`` without
        starting a generation; the user triggers the first one.
        """
        pending = await self.api.get_pending()
        self._loaded = True
        self._enqueue(pending)
        self._maybe_replenish()

    async def refresh_pending(self) -> int:
        """Poll pending images and append the ones not seen before.

        Returns:
            Number of images appended
        """
        added = self._enqueue(await self.api.get_pending())
        # Re-evaluate only when the queue length changed, so an empty poll
        # after a generation does not immediately start another one
        if added:
            self._maybe_replenish()
        return added

    def swipe(self, direction: SwipeDirection) -> ImageResponse | None:
        """Swipe the head of the queue.

        The image leaves the queue immediately; the server call happens in
        the background and its outcome is not written back into the queue.

        Returns:
            The swiped image, or None if the queue is empty
        """
        if not self._queue:
            return None

        image = self._queue.popleft()
        self._spawn(self._send_swipe(image, direction.liked))
        self._maybe_replenish()
        return image

    def generate(self) -> bool:
        """Start a generation request unless one is already in flight.

        Returns:
            True if a request was started
        """
        if self._generating:
            return False

        self._generating = True
        self._spawn(self._run_generation())
        return True

    async def wait_idle(self) -> None:
        """Wait until no background task is pending, including follow-ups."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _enqueue(self, images: Iterable[ImageResponse]) -> int:
        added = 0
        for image in images:
            if image.id in self._seen_ids:
                continue
            self._seen_ids.add(image.id)
            self._queue.append(image)
            added += 1
        return added

    def _maybe_replenish(self) -> None:
        # Nothing seen yet means an empty first load: wait for a manual generate()
        if not self._loaded or not self._seen_ids:
            return
        if len(self._queue) <= self.low_watermark:
            self.generate()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send_swipe(self, image: ImageResponse, liked: bool) -> None:
        try:
            await self.api.swipe(image.id, liked)
        except _RECOVERABLE as exc:
            self.last_error = exc
            logger.warning("swipe_failed", image_id=image.id, liked=liked, error=str(exc))
            return

        await self._refresh_dependent_views()

    async def _refresh_dependent_views(self) -> None:
        try:
            self.liked, self.stats = await asyncio.gather(self.api.get_liked(), self.api.get_stats())
        except _RECOVERABLE as exc:
            self.last_error = exc
            logger.warning("refresh_failed", error=str(exc))

    async def _run_generation(self) -> None:
        try:
            created = await self.api.generate()
        except _RECOVERABLE as exc:
            self.last_error = exc
            logger.warning("generation_failed", error=str(exc))
            return
        finally:
            self._generating = False

        logger.info("generation_completed", created=len(created))
        try:
            await self.refresh_pending()
        except _RECOVERABLE as exc:
            self.last_error = exc
            logger.warning("refresh_failed", error=str(exc))
