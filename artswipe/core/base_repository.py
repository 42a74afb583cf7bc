"""
Generic repository base class for SQLAlchemy models with async CRUD operations.

Features:
    - Type-safe operations: BaseRepository[ModelType, IDType]
    - Create, read and update by primary key
    - Bulk create in a single flush
    - Filtering and counting
    - Automatic error handling with rollback

Usage:
    class ImageRepository(BaseRepository[Image, str]):
        async def list_pending(self) -> list[Image]:
            result = await self.session.execute(
                select(Image).where(Image.liked.is_(None))
            )
            return list(result.scalars().all())

    async with AsyncDBPool.get_session() as session:
        repo = ImageRepository(session)
        image = await repo.create(image_url="/generated/a.png", prompt="...")
        await repo.commit()
"""

from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

__all__ = ["BaseRepository"]

# Type variables for SQLAlchemy model and ID type
ModelType = TypeVar("ModelType")
IDType = TypeVar("IDType", int, str)


class BaseRepository(Generic[ModelType, IDType], ABC):
    """Base repository with async CRUD operations for SQLAlchemy models."""

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created instance
        """
        try:
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        else:
            return instance

    async def create_many(self, items: Sequence[dict[str, Any]]) -> Sequence[ModelType]:
        """Create multiple records.

        Args:
            items: List of field value dicts

        Returns:
            Created instances, in input order
        """
        try:
            instances = [self.model(**item) for item in items]
            self.session.add_all(instances)
            await self.session.flush()
            for instance in instances:
                await self.session.refresh(instance)
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        else:
            return instances

    async def get_by_id(self, id: IDType) -> ModelType | None:
        """Get record by ID.

        Args:
            id: Primary key

        Returns:
            Instance or None
        """
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, id: IDType, *conditions: Any, **kwargs: Any) -> int:
        """Update record by ID.

        Args:
            id: Primary key
            *conditions: Extra WHERE clauses the row must also satisfy
            **kwargs: Fields to update

        Returns:
            Number of rows updated (0 or 1)
        """
        try:
            result = await self.session.execute(
                update(self.model)
                .where(self.model.id == id, *conditions)
                .values(**kwargs)
            )
            await self.session.flush()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        else:
            return result.rowcount

    async def count(self, *conditions: Any, **filters: Any) -> int:
        """Count records.

        Args:
            *conditions: Optional SQL expressions
            **filters: Optional field-value equality filters

        Returns:
            Total count
        """
        query = select(func.count()).select_from(self.model)

        for condition in conditions:
            query = query.where(condition)
        for field, value in filters.items():
            query = query.where(getattr(self.model, field) == value)

        result = await self.session.execute(query)
        return result.scalar_one()

    async def commit(self) -> None:
        """Commit current transaction."""
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()
