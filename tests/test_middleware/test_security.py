"""Security headers middleware tests."""

import pytest
from fastapi import FastAPI, Response
from httpx import Response as HTTPResponse
from httpx import ASGITransport, AsyncClient

from app.middleware.security import DEFAULT_SECURITY_HEADERS, SecurityHeadersMiddleware


def _app(headers: dict[str, str] | None = None) -> FastAPI:
    app = FastAPI()

    @app.get("/plain")
    async def plain() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/framed")
    async def framed() -> Response:
        return Response("ok", headers={"X-Frame-Options": "SAMEORIGIN"})

    app.add_middleware(SecurityHeadersMiddleware, headers=headers)
    return app


async def _get(app: FastAPI, path: str) -> HTTPResponse:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.mark.asyncio
async def test_default_headers_added() -> None:
    response = await _get(_app(), "/plain")

    for name, value in DEFAULT_SECURITY_HEADERS.items():
        assert response.headers[name] == value


@pytest.mark.asyncio
async def test_route_headers_are_kept() -> None:
    response = await _get(_app(), "/framed")

    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


@pytest.mark.asyncio
async def test_custom_headers_override_defaults() -> None:
    app = _app({"Strict-Transport-Security": "max-age=60", "X-Custom": "1"})

    response = await _get(app, "/plain")

    assert response.headers["Strict-Transport-Security"] == "max-age=60"
    assert response.headers["X-Custom"] == "1"


@pytest.mark.asyncio
async def test_main_app_sends_security_headers(
    test_app_async_client: AsyncClient,
) -> None:
    response = await test_app_async_client.get("/api/v1/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
