"""Request metrics middleware for Prometheus monitoring."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.core.events import REQUEST_DURATION, REQUESTS_TOTAL, RESPONSES_TOTAL
from app.core.logging import get_logger

logger = get_logger()


def _path_label(request: Request) -> str:
    """Route template such as ``/api/v1/content/{key}``, else the raw path."""
    route = request.scope.get("route")
    path = getattr(route, "path", None) or request.url.path
    return str(path).rstrip("/") or "/"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect request/response metrics.

    Records:
    - Total requests by method and route
    - Total responses by status code
    - Request duration by method and route
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and record metrics.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers
        """
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        duration = time.perf_counter() - start_time
        # Route is only known once routing ran
        path = _path_label(request)
        REQUESTS_TOTAL.labels(method=request.method, path=path).inc()
        RESPONSES_TOTAL.labels(status_code=str(response.status_code)).inc()
        REQUEST_DURATION.labels(method=request.method, path=path).observe(duration)

        logger.info(
            "request_processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=round(duration, 4),
        )
        return response
