"""Application startup and shutdown events."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from prometheus_client import Counter, Histogram

from app.content_store.config import get_content_repository
from app.content_store.session import ContentSession
from app.core.config import settings
from app.core.logging import get_logger

# Prometheus metrics
REQUESTS_TOTAL = Counter(
    "app_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "app_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

REQUEST_DURATION = Histogram(
    "app_http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=["method", "path"],
)

logger = get_logger("app.core.events")


async def start_app(app: Any) -> None:
    """Build the content repository and the session the API serves from.

    The HTTP layer authorizes each write, so the shared session may edit.
    """
    repository = get_content_repository()
    app.state.content_session = ContentSession(
        repository,
        language=settings.DEFAULT_LANGUAGE,
        is_admin=True,
    )
    logger.info(
        "application_started",
        content_backend=repository.name,
        default_language=settings.DEFAULT_LANGUAGE,
        llm_provider=settings.LLM_PROVIDER,
        llm_model=settings.LLM_MODEL_NAME,
    )


async def stop_app(app: Any) -> None:
    """Close the content session, cancelling fetches still in flight."""
    session = getattr(app.state, "content_session", None)
    if session is not None:
        await session.close()
    logger.info("application_stopped")


@asynccontextmanager
async def lifespan(app: Any) -> AsyncIterator[None]:
    """Application lifespan: startup before ``yield``, shutdown after."""
    await start_app(app)
    try:
        yield
    finally:
        await stop_app(app)
