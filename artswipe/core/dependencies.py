"""
FastAPI dependency injection functions for database sessions and services.

Usage in FastAPI Routes:
    from fastapi import Depends
    from artswipe.core.dependencies import get_image_repository

    @router.get("/pending")
    async def list_pending(repo: ImageRepository = Depends(get_image_repository)):
        return await repo.list_pending()

Testing with Dependency Override:
    app.dependency_overrides[get_generation_service] = lambda: fake_service
"""

from collections.abc import AsyncIterator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artswipe.main_config import get_generation_config, get_storage_config
from artswipe.repository.image_repository import ImageRepository
from artswipe.services.blob_storage import LocalBlobStorage
from artswipe.services.generation_service import GenerationService
from artswipe.services.image_client import FalImageClient

from .database import AsyncDBPool


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for async database session.

    Provides a database session that automatically handles cleanup
    and rollback on errors.
    """
    async with AsyncDBPool.get_session() as session:
        yield session


async def get_image_repository(session: AsyncSession = Depends(get_db)) -> ImageRepository:
    return ImageRepository(session)


@lru_cache
def get_generation_service() -> GenerationService:
    """Build the generation service from configuration (once per process)."""
    generation = get_generation_config()
    return GenerationService(
        image_client=FalImageClient(generation),
        storage=LocalBlobStorage(get_storage_config()),
        batch_size=generation.batch_size,
        max_images=generation.max_images,
    )
