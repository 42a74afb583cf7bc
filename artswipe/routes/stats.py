"""Swipe statistics."""

from fastapi import APIRouter, Depends

from artswipe.core.dependencies import get_image_repository
from artswipe.repository.image_repository import ImageRepository
from artswipe.schemas.image import StatsResponse

router = APIRouter(
    prefix="/api",
    tags=["stats"],
)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(repo: ImageRepository = Depends(get_image_repository)):
    stats = await repo.get_stats()
    return StatsResponse(liked=stats.liked, disliked=stats.disliked, total=stats.total)
