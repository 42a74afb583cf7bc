"""Exception handlers for FastAPI application.

Provides centralized exception handling with standardized error responses.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from .http_exceptions import AppError, BadRequestError, ConflictError, InternalServerError

logger = logging.getLogger(__name__)


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle custom AppError and its subclasses.

    Args:
        request: FastAPI request
        exc: Application exception

    Returns:
        JSON response with standardized error format
    """
    error_response = exc.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_response.model_dump(exclude_none=True)),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed requests (400).

    Args:
        request: FastAPI request
        exc: Validation error

    Returns:
        JSON response listing the validation issues
    """
    bad_request = BadRequestError(
        message="Invalid request body",
        error_code="ValidationError",
        details=jsonable_encoder(exc.errors()),
    )

    error_response = bad_request.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=bad_request.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle SQLAlchemy IntegrityError (database constraints).

    Args:
        request: FastAPI request
        exc: Integrity error

    Returns:
        JSON response with constraint violation details
    """
    logger.error(f"Database integrity error: {exc}", exc_info=True)

    conflict = ConflictError(
        message="Database constraint violation",
        error_code="IntegrityError",
        detail={"database_error": str(exc.orig) if exc.orig is not None else str(exc)},
    )

    error_response = conflict.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=conflict.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (500).

    The underlying message is surfaced so the caller can decide whether to retry.

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSON response with the error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    internal_exc = InternalServerError(
        message="An unexpected error occurred",
        detail={"error": str(exc) or type(exc).__name__},
    )

    error_response = internal_exc.to_error_response(path=request.url.path)

    return JSONResponse(
        status_code=internal_exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
