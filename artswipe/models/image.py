"""
Image model for generated images and their swipe state.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text

from .base import Base, utc_now

DEFAULT_MODEL = "fal-ai/flux/schnell"


def new_image_id() -> str:
    return str(uuid.uuid4())


class Image(Base):
    """
    A generated image.

    Attributes:
        id: UUID string, assigned at creation and never reused
        image_url: Servable path of the stored asset
        prompt: Text prompt the image was generated from
        model: Identifier of the generation model
        liked: None while pending, True when liked, False when disliked
        created_at: Creation timestamp, used for display ordering
    """

    __tablename__ = "images"

    id = Column(String(36), primary_key=True, default=new_image_id)
    image_url = Column(Text, nullable=False)
    prompt = Column(Text, nullable=False)
    model = Column(String(255), nullable=False, default=DEFAULT_MODEL)
    liked = Column(Boolean, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, liked={self.liked})>"
