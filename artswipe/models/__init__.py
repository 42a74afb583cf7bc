"""
SQLAlchemy models for the ArtSwipe image discovery service.
"""

from .base import Base
from .image import Image

__all__: list[str] = ["Base", "Image"]
