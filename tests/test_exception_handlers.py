"""Tests for global exception handlers.

Validates that domain errors map to the right HTTP status codes with a
consistent error body, and that unexpected errors never leak details.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from imagegen.core.errors import (
    AppError,
    ImageProviderAppError,
    ProviderAuthenticationAppError,
    ValidationAppError,
)
from imagegen.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_code_for,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ValidationAppError(code="v", message="v"), 400),
            (ProviderAuthenticationAppError(code="a", message="a"), 401),
            (ImageProviderAppError(code="p", message="p"), 500),
            (AppError(code="x", message="x"), 400),
        ],
    )
    def test_status_code_for(self, error: AppError, expected: int) -> None:
        assert status_code_for(error) == expected


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400_with_details(
        self, client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(
                code="prompt_too_long",
                message="Prompt is too long",
                details={"max_value": 2000, "actual_value": 2500},
            )

        response = client.get("/test-validation")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "prompt_too_long"
        assert error["message"] == "Prompt is too long"
        assert error["details"] == {"max_value": 2000, "actual_value": 2500}
        assert "request_id" in error

    def test_provider_auth_error_returns_401(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        @app_with_handlers.get("/test-auth")
        async def test_endpoint():
            raise ProviderAuthenticationAppError(code="invalid_provider_api_key", message="Invalid API key")

        response = client.get("/test-auth")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "invalid_provider_api_key"

    def test_provider_error_returns_500_without_details(
        self, client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/test-provider")
        async def test_endpoint():
            raise ImageProviderAppError(code="image_provider_error", message="upstream failed")

        response = client.get("/test-provider")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "image_provider_error"
        assert "details" not in error


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_returns_generic_500(self) -> None:
        request = AsyncMock()
        request.url.path = "/v1/images/generate"
        request.method = "POST"

        exc = RuntimeError("provider socket closed at 10.0.0.3")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "10.0.0.3" not in data["error"]["message"]
        assert "RuntimeError" not in bytes(response.body).decode()

    def test_handlers_are_registered(self, app_with_handlers: FastAPI) -> None:
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers
