"""
Application lifespan management for FastAPI.

This module provides the lifespan context manager that handles:
- Database connection pool initialization, table creation and cleanup
- HTTP client pool initialization and cleanup
- Creation of the generated image directory
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from artswipe.core.database import AsyncDBPool
from artswipe.core.rest_api import HttpxRestClientPool
from artswipe.main_config import database_config, generation_config, storage_config
from artswipe.services.blob_storage import LocalBlobStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Startup:
        - Initialize database connection pool and create missing tables
        - Initialize HTTP client connection pool

    Shutdown:
        - Cleanup database pool
        - Cleanup HTTP client pool
    """
    await AsyncDBPool.init(database_config)
    await AsyncDBPool.create_tables()
    await HttpxRestClientPool.get_client()
    LocalBlobStorage(storage_config).ensure_directory()

    if generation_config.fal_key is None:
        logger.warning("FAL_KEY is not configured; image generation requests will fail")

    try:
        yield
    finally:
        await AsyncDBPool.dispose()
        await HttpxRestClientPool.dispose()
