"""Tests for error handling middleware."""

import pytest
from fastapi import FastAPI, HTTPException
from httpx import AsyncClient
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.content_store.exceptions import (
    MalformedEntry,
    RepositoryUnavailable,
    WriteRejected,
)
from app.middleware.errors import ERROR_MAPPING, _status_for


@pytest.fixture(autouse=True)
def setup_test_routes(test_app: FastAPI) -> None:
    """Setup test routes for error handling tests.

    Args:
        test_app: FastAPI application for testing
    """

    @test_app.get("/api/test-error")
    async def _error_endpoint() -> None:
        raise HTTPException(status_code=400, detail="Test error")

    @test_app.get("/api/test-value-error")
    async def _value_error_endpoint() -> None:
        raise ValueError("Invalid value")

    @test_app.get("/api/test-validation")
    async def _validation_endpoint(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @test_app.get("/api/test-unavailable")
    async def _unavailable_endpoint() -> None:
        raise RepositoryUnavailable("Firestore unreachable")

    @test_app.get("/api/test-write-rejected")
    async def _write_rejected_endpoint() -> None:
        raise WriteRejected("heroTitle", "permission denied")

    @test_app.get("/api/test-malformed")
    async def _malformed_endpoint() -> None:
        raise MalformedEntry("heroTitle", 42)

    @test_app.get("/api/test-custom-error")
    async def _custom_error_endpoint() -> None:
        # Unknown exception types fall through to the middleware
        raise RuntimeError("Custom error")


@pytest.mark.asyncio
async def test_http_exception_handling(test_app_async_client: AsyncClient) -> None:
    """Test handling of HTTPException."""
    response = await test_app_async_client.get("/api/test-error")
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "HTTPException"
    assert data["message"] == "Test error"
    assert data["status_code"] == 400


@pytest.mark.asyncio
async def test_value_error_handling(test_app_async_client: AsyncClient) -> None:
    """Test handling of ValueError."""
    response = await test_app_async_client.get("/api/test-value-error")
    assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY
    data = response.json()
    assert data["error"] == "ValueError"
    assert data["message"] == "Invalid value"


@pytest.mark.asyncio
async def test_request_validation_error(test_app_async_client: AsyncClient) -> None:
    response = await test_app_async_client.get("/api/test-validation?limit=many")
    assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY
    data = response.json()
    assert data["error"] == "RequestValidationError"
    assert data["message"].startswith("query.limit:")


@pytest.mark.asyncio
async def test_unknown_route(test_app_async_client: AsyncClient) -> None:
    response = await test_app_async_client.get("/api/does-not-exist")
    assert response.status_code == HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Not Found"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("path", "error", "status_code"),
    [
        ("/api/test-unavailable", "RepositoryUnavailable", 503),
        ("/api/test-write-rejected", "WriteRejected", 502),
        ("/api/test-malformed", "MalformedEntry", 500),
    ],
)
async def test_content_store_errors(
    test_app_async_client: AsyncClient, path: str, error: str, status_code: int
) -> None:
    """Content store errors carry their own status codes."""
    response = await test_app_async_client.get(path)
    assert response.status_code == status_code
    data = response.json()
    assert data["error"] == error
    assert data["status_code"] == status_code


@pytest.mark.asyncio
async def test_write_rejected_message(test_app_async_client: AsyncClient) -> None:
    response = await test_app_async_client.get("/api/test-write-rejected")
    assert (
        response.json()["message"]
        == "Could not save content 'heroTitle': permission denied"
    )


@pytest.mark.asyncio
async def test_unexpected_error_handling(test_app_async_client: AsyncClient) -> None:
    """Unexpected errors become a 500 envelope."""
    response = await test_app_async_client.get("/api/test-custom-error")
    assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["error"] == "RuntimeError"
    assert data["message"] == "Custom error"


@pytest.mark.asyncio
async def test_error_response_carries_correlation_id(
    test_app_async_client: AsyncClient,
) -> None:
    headers = {"X-Request-ID": "test-1234abcd"}
    response = await test_app_async_client.get("/api/test-error", headers=headers)
    assert response.json()["correlation_id"] == "test-1234abcd"
    assert response.headers["X-Request-ID"] == "test-1234abcd"


def test_status_for_uses_most_specific_mapping() -> None:
    class NotFoundish(KeyError):
        pass

    assert _status_for(NotFoundish("x"), ERROR_MAPPING) == HTTP_404_NOT_FOUND
    assert _status_for(RepositoryUnavailable("down"), ERROR_MAPPING) == 503
    assert _status_for(RuntimeError("boom"), ERROR_MAPPING) == 500
