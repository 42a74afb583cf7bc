"""Image routes: pending/liked lists, cap status, generation and swipes."""

import structlog
from fastapi import APIRouter, Depends

from artswipe.core.dependencies import get_generation_service, get_image_repository
from artswipe.core.exceptions import ForbiddenError, InternalServerError, NotFoundError
from artswipe.repository.image_repository import ImageRepository
from artswipe.schemas.image import CountResponse, ImageResponse, SwipeRequest
from artswipe.services.generation_service import (
    BatchGenerationError,
    CapacityReachedError,
    GenerationService,
)

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/images",
    tags=["images"],
)


@router.get("/pending", response_model=list[ImageResponse])
async def list_pending_images(repo: ImageRepository = Depends(get_image_repository)):
    """Images not swiped yet, oldest first."""
    return await repo.list_pending()


@router.get("/liked", response_model=list[ImageResponse])
async def list_liked_images(repo: ImageRepository = Depends(get_image_repository)):
    """Liked images, newest first."""
    return await repo.list_liked()


@router.get("/count", response_model=CountResponse)
async def get_image_count(
    repo: ImageRepository = Depends(get_image_repository),
    service: GenerationService = Depends(get_generation_service),
):
    """Total number of images against the generation cap."""
    capacity = await service.capacity(repo)
    return CountResponse(count=capacity.count, limit=capacity.limit, can_generate=capacity.can_generate)


@router.post("/generate", response_model=list[ImageResponse])
async def generate_images(
    repo: ImageRepository = Depends(get_image_repository),
    service: GenerationService = Depends(get_generation_service),
):
    """Generate a batch of images.

    Succeeds when at least one image was created; individual failures are logged.
    """
    try:
        result = await service.generate_batch(repo)
    except CapacityReachedError as exc:
        raise ForbiddenError(
            message=f"Image limit reached: {exc.count} of {exc.limit} images have been generated",
            error_code="ImageLimitReached",
            detail={"count": exc.count, "limit": exc.limit},
        ) from exc
    except BatchGenerationError as exc:
        raise InternalServerError(
            message="All image generations failed",
            error_code="GenerationFailed",
            details=exc.errors,
        ) from exc

    return result.created


@router.post("/{image_id}/swipe", response_model=ImageResponse)
async def swipe_image(
    image_id: str,
    body: SwipeRequest,
    repo: ImageRepository = Depends(get_image_repository),
):
    """Record a like (``true``) or dislike (``false``) for one image."""
    image = await repo.swipe(image_id, body.liked)
    if image is None:
        raise NotFoundError(message="Image not found", detail={"image_id": image_id})

    await repo.commit()

    if image.liked != body.liked:
        # First decision wins; a later conflicting swipe is ignored
        logger.warning("swipe_ignored", image_id=image_id, liked=image.liked, requested=body.liked)
    else:
        logger.info("image_swiped", image_id=image_id, liked=image.liked)

    return image
