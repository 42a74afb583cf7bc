"""Test cases for the error response format and exception handlers."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from artswipe.core.exceptions import (
    BadRequestError,
    ConflictError,
    ErrorResponse,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    register_exception_handlers,
)
from artswipe.schemas.image import SwipeRequest


@pytest.fixture
def app() -> FastAPI:
    """Bare application with only the exception handlers installed."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# ErrorResponse model
# =============================================================================


def test_error_response_defaults() -> None:
    error = ErrorResponse(error_code="ImageLimitReached", message="Image limit reached")

    assert error.success is False
    assert error.detail is None
    assert error.details is None
    assert error.path is None


def test_error_response_rejects_non_dict_detail() -> None:
    with pytest.raises(ValueError):
        ErrorResponse(error_code="TEST", message="Test", detail="not-a-dict")


def test_exception_to_error_response_conversion() -> None:
    exc = NotFoundError(message="Image not found", detail={"image_id": "abc"})

    error_response = exc.to_error_response(path="/api/images/abc/swipe")

    assert error_response.error_code == "NotFoundError"
    assert error_response.message == "Image not found"
    assert error_response.detail == {"image_id": "abc"}
    assert error_response.path == "/api/images/abc/swipe"


# =============================================================================
# Application errors
# =============================================================================


@pytest.mark.parametrize(
    ("exc_class", "expected_status"),
    [
        (BadRequestError, status.HTTP_400_BAD_REQUEST),
        (ForbiddenError, status.HTTP_403_FORBIDDEN),
        (NotFoundError, status.HTTP_404_NOT_FOUND),
        (ConflictError, status.HTTP_409_CONFLICT),
        (InternalServerError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    ],
)
def test_error_classes_map_to_status_and_default_code(
    app: FastAPI, client: TestClient, exc_class, expected_status
) -> None:
    @app.get("/boom")
    async def route():
        raise exc_class(message="boom")

    response = client.get("/boom")

    assert response.status_code == expected_status
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == exc_class.__name__
    assert data["message"] == "boom"
    assert data["path"] == "/boom"


def test_custom_error_code_and_detail(app: FastAPI, client: TestClient) -> None:
    @app.post("/generate")
    async def route():
        raise ForbiddenError(
            message="Image limit reached",
            error_code="ImageLimitReached",
            detail={"count": 100, "limit": 100},
        )

    data = client.post("/generate").json()

    assert data["error_code"] == "ImageLimitReached"
    assert data["detail"] == {"count": 100, "limit": 100}


def test_error_from_error_response_object(app: FastAPI, client: TestClient) -> None:
    @app.get("/lookup")
    async def route():
        raise NotFoundError(
            ErrorResponse(error_code="ImageMissing", message="No such image", detail={"image_id": "x"})
        )

    response = client.get("/lookup")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_code"] == "ImageMissing"
    assert response.json()["detail"] == {"image_id": "x"}


def test_itemized_details_are_returned(app: FastAPI, client: TestClient) -> None:
    @app.post("/generate")
    async def route():
        raise InternalServerError(
            message="All image generations failed",
            error_code="GenerationFailed",
            details=["timeout", "quota exceeded"],
        )

    data = client.post("/generate").json()

    assert data["error_code"] == "GenerationFailed"
    assert data["details"] == ["timeout", "quota exceeded"]


def test_none_values_are_excluded(app: FastAPI, client: TestClient) -> None:
    @app.get("/plain")
    async def route():
        raise NotFoundError()

    data = client.get("/plain").json()

    assert data["message"] == "Not found"
    assert "detail" not in data
    assert "details" not in data


# =============================================================================
# Validation and unexpected errors
# =============================================================================


def test_validation_errors_are_bad_requests(app: FastAPI, client: TestClient) -> None:
    @app.post("/swipe")
    async def route(body: SwipeRequest):
        return {"liked": body.liked}

    response = client.post("/swipe", json={"liked": "yes"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error_code"] == "ValidationError"
    assert data["message"] == "Invalid request body"
    assert data["details"][0]["loc"] == ["body", "liked"]


def test_validation_accepts_strict_boolean(app: FastAPI, client: TestClient) -> None:
    @app.post("/swipe")
    async def route(body: SwipeRequest):
        return {"liked": body.liked}

    response = client.post("/swipe", json={"liked": False})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"liked": False}


def test_unexpected_error_surfaces_message(app: FastAPI, client: TestClient) -> None:
    @app.get("/unexpected")
    async def route():
        raise RuntimeError("database is locked")

    response = client.get("/unexpected")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error_code"] == "InternalServerError"
    assert data["message"] == "An unexpected error occurred"
    assert data["detail"] == {"error": "database is locked"}
    assert data["path"] == "/unexpected"


def test_integrity_error_is_a_conflict(app: FastAPI, client: TestClient) -> None:
    @app.post("/images")
    async def route():
        raise IntegrityError("INSERT INTO images", {}, Exception("UNIQUE constraint failed: images.id"))

    response = client.post("/images")

    assert response.status_code == status.HTTP_409_CONFLICT
    data = response.json()
    assert data["error_code"] == "IntegrityError"
    assert data["message"] == "Database constraint violation"
    assert data["detail"] == {"database_error": "UNIQUE constraint failed: images.id"}
    assert data["path"] == "/images"
