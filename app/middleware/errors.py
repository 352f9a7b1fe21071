"""Error handling middleware."""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from starlette.types import ASGIApp

from app.content_store.exceptions import ContentStoreError
from app.core.logging import get_logger

logger = get_logger()

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]

ERROR_MAPPING: ErrorMapping = {
    KeyError: HTTP_404_NOT_FOUND,
    ValueError: HTTP_422_UNPROCESSABLE_ENTITY,
    RequestValidationError: HTTP_422_UNPROCESSABLE_ENTITY,
    HTTPException: None,
    ContentStoreError: None,
}


def _status_for(exc: Exception, error_mapping: ErrorMapping) -> int:
    # Most specific mapped base class wins
    for cls in type(exc).__mro__:
        if cls in error_mapping:
            mapped = error_mapping[cls]
            if mapped is not None:
                return mapped
            break
    return int(getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR))


def _detail_for(exc: Exception) -> str:
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
    if isinstance(exc, KeyError):
        return f"'{exc.args[0]}'" if exc.args else str(exc)
    return str(exc.args[0] if exc.args else str(exc))


def create_error_response(
    error_type: str,
    detail: str,
    status_code: int,
    correlation_id: str | None,
) -> JSONResponse:
    """Create JSON error response with optional correlation ID."""
    response = JSONResponse(
        status_code=status_code,
        content={
            "error": error_type,
            "message": detail,
            "status_code": status_code,
            "correlation_id": correlation_id if correlation_id else "unknown",
        },
        media_type="application/json",
    )
    if correlation_id:
        response.headers["X-Request-ID"] = correlation_id
    return response


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle any exception and return a JSON response.

    Args:
    ----
        request: The request that caused the exception
        exc: The exception to handle

    Returns:
    -------
        A JSON response with error details
    """
    error_type = exc.__class__.__name__
    status_code = _status_for(exc, ERROR_MAPPING)
    detail = _detail_for(exc)
    correlation_id = getattr(request.state, "correlation_id", None)

    log = logger.warning
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        log = logger.error
    log(
        "request_error",
        error_type=error_type,
        error_message=detail,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        correlation_id=correlation_id,
    )
    return create_error_response(error_type, detail, status_code, correlation_id)


def register_exception_handlers(app: FastAPI) -> None:
    """Route expected exceptions through :func:`handle_exception`.

    Handled errors never reach the middleware below; it only sees
    unexpected ones.
    """
    for exc_class in (
        HTTPException,
        RequestValidationError,
        ContentStoreError,
        ValueError,
    ):
        app.add_exception_handler(exc_class, handle_exception)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware to turn unhandled errors into consistent JSON responses."""

    def __init__(self, app: ASGIApp) -> None:
        """
        Initialize middleware with error mappings.

        Args:
        ----
            app: The ASGI application
        """
        super().__init__(app)
        self.error_mapping: ErrorMapping = dict(ERROR_MAPPING)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            correlation_id = getattr(request.state, "correlation_id", None)
            status_code = _status_for(exc, self.error_mapping)
            detail = _detail_for(exc)
            logger.exception(
                "request_failed",
                error_type=exc.__class__.__name__,
                error_message=detail,
                status_code=status_code,
                path=request.url.path,
                method=request.method,
                correlation_id=correlation_id,
            )
            return create_error_response(
                exc.__class__.__name__, detail, status_code, correlation_id
            )
