"""Request and response schemas for the image API.

JSON field names are camelCase (``imageUrl``, ``createdAt``, ``canGenerate``).
The same models are used by ``artswipe.client`` to parse responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class ImageResponse(CamelModel):
    """A generated image and its swipe state."""

    id: str
    image_url: str
    prompt: str
    model: str
    liked: bool | None = None
    created_at: datetime


class SwipeRequest(BaseModel):
    """Body of a swipe. ``liked`` must be a JSON boolean, not a truthy value."""

    liked: StrictBool = Field(..., description="True for like, False for dislike")


class StatsResponse(CamelModel):
    liked: int = Field(..., ge=0)
    disliked: int = Field(..., ge=0)
    total: int = Field(..., ge=0, description="liked + disliked; pending images excluded")


class CountResponse(CamelModel):
    count: int = Field(..., ge=0, description="Images generated so far")
    limit: int = Field(..., ge=0, description="Maximum number of images")
    can_generate: bool
