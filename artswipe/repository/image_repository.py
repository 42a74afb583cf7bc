"""Image repository for database operations."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artswipe.core.base_repository import BaseRepository
from artswipe.models.base import utc_now
from artswipe.models.image import DEFAULT_MODEL, Image


@dataclass(frozen=True)
class SwipeStats:
    liked: int
    disliked: int

    @property
    def total(self) -> int:
        return self.liked + self.disliked


class ImageRepository(BaseRepository[Image, str]):
    """Repository for Image entity operations.

    Provides the image store operations: listing by swipe state,
    recording swipes and aggregate counts.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ImageRepository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(Image, session)

    async def list_pending(self) -> list[Image]:
        """Get images that have not been swiped yet, oldest first."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.liked.is_(None))
            .order_by(self.model.created_at, self.model.id)
        )
        return list(result.scalars().all())

    async def list_liked(self) -> list[Image]:
        """Get liked images, newest first."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.liked.is_(True))
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return list(result.scalars().all())

    async def add_generated(
        self, items: Sequence[tuple[str, str]], model: str = DEFAULT_MODEL
    ) -> Sequence[Image]:
        """Insert freshly generated images.

        Timestamps are stamped one microsecond apart so that insertion
        order is preserved when the batch is later sorted by creation time.

        Args:
            items: ``(image_url, prompt)`` pairs
            model: Generation model identifier

        Returns:
            Created instances, in input order
        """
        now = utc_now()
        return await self.create_many(
            [
                {
                    "image_url": image_url,
                    "prompt": prompt,
                    "model": model,
                    "created_at": now + timedelta(microseconds=index),
                }
                for index, (image_url, prompt) in enumerate(items)
            ]
        )

    async def swipe(self, image_id: str, liked: bool) -> Image | None:
        """Record a swipe decision.

        Only a pending image is updated; an image that was already swiped
        keeps its first decision and is returned unchanged.

        Args:
            image_id: Image primary key
            liked: True for like, False for dislike

        Returns:
            The image after the swipe, or None if the id is unknown
        """
        await self.update(image_id, self.model.liked.is_(None), liked=liked)
        return await self.get_by_id(image_id)

    async def get_stats(self) -> SwipeStats:
        """Count liked and disliked images. Pending images are not counted."""
        liked = await self.count(self.model.liked.is_(True))
        disliked = await self.count(self.model.liked.is_(False))
        return SwipeStats(liked=liked, disliked=disliked)

    async def total_count(self) -> int:
        """Count every image ever generated, regardless of swipe state."""
        return await self.count()
