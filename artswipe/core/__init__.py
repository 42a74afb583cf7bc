"""
Core infrastructure components for the application.

This module contains database configuration, base classes,
logging setup and route discovery. Request dependencies and the
lifespan live in ``artswipe.core.dependencies`` and
``artswipe.core.lifespan`` since they reach into the service layer.
"""

from .base_repository import BaseRepository
from .database import AsyncDBPool
from .logging_config import setup_logging
from .route_discovery import RouterDiscoveryError, discover_routers, register_routers

__all__ = [
    "AsyncDBPool",
    "BaseRepository",
    "RouterDiscoveryError",
    "discover_routers",
    "register_routers",
    "setup_logging",
]
