"""
FastAPI application entry point with async lifespan management.

This module initializes the FastAPI application with:
- Structured logging with request correlation IDs
- Async database connection pooling (AsyncDBPool)
- CORS middleware configuration
- Automatic route discovery and registration
- Static serving of generated images
- Graceful startup/shutdown handling

Run locally:
    uvicorn artswipe.main:app --reload
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from artswipe.core import register_routers, setup_logging
from artswipe.core.exceptions import register_exception_handlers
from artswipe.core.lifespan import app_lifespan
from artswipe.main_config import cors_config, fastapi_config, settings, storage_config


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=fastapi_config.title,
        description=fastapi_config.description,
        version=fastapi_config.version,
        docs_url=fastapi_config.docs_url,
        redoc_url=fastapi_config.redoc_url,
        openapi_url=fastapi_config.openapi_url,
        root_path=fastapi_config.root_path,
        lifespan=app_lifespan,
        debug=fastapi_config.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.origins_list,
        allow_credentials=cors_config.allow_credentials,
        allow_methods=cors_config.methods_list,
        allow_headers=cors_config.headers_list,
    )

    # Adds request_id to the logging context
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        generator=lambda: uuid.uuid4().hex[:16],
        validator=None,
    )

    register_exception_handlers(app)
    register_routers(app)

    # The directory itself is created by the lifespan
    app.mount(
        storage_config.url_prefix,
        StaticFiles(directory=storage_config.directory, check_dir=False),
        name="generated",
    )

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "artswipe.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,  # Keep the structlog setup instead of uvicorn's default logging
    )
