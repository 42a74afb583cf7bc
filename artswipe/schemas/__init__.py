"""Pydantic schemas shared by the API routes and the client."""

from .image import CountResponse, ImageResponse, StatsResponse, SwipeRequest

__all__ = ["CountResponse", "ImageResponse", "StatsResponse", "SwipeRequest"]
