"""Correlation ID middleware for request tracking."""

import re
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.core.logging import get_logger

logger = get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Client supplied ids are echoed into headers and logs
_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def is_valid_correlation_id(value: str | None) -> bool:
    """Accept UUIDs and short opaque tokens such as ``test-1234abcd``."""
    if not value:
        return False
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return bool(_SAFE_ID.match(value))


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle request correlation IDs.

    Reuses a valid ``X-Request-ID`` sent by the client or generates one,
    then exposes it on ``request.state``, in the structlog context (with the
    request method and path) and in the response headers.
    """

    def _get_correlation_id(self, request: Request) -> str:
        header_value = request.headers.get(REQUEST_ID_HEADER, "")
        if is_valid_correlation_id(header_value):
            return header_value
        return str(uuid.uuid4())

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers
        """
        clear_contextvars()

        correlation_id = self._get_correlation_id(request)
        bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response
