"""Repository layer for database operations.

This module contains concrete repository implementations for
data access operations.
"""

from .image_repository import ImageRepository, SwipeStats

__all__ = ["ImageRepository", "SwipeStats"]
