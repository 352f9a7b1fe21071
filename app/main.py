"""Main FastAPI application module."""

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette import status

from app.api.v1.router import router as v1_router
from app.core.config import Settings, settings
from app.core.events import lifespan
from app.core.logging import configure_logging
from app.middleware.correlation import CorrelationMiddleware
from app.middleware.errors import ErrorHandlingMiddleware, register_exception_handlers
from app.middleware.metrics import MetricsMiddleware
from app.middleware.security import SecurityHeadersMiddleware


def create_app(config: Settings = settings) -> FastAPI:
    """Build the API application."""
    app = FastAPI(
        title=config.app_name,
        description="Editable bilingual content for the El Arte de Sanar site",
        version=config.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        default_response_class=JSONResponse,
        lifespan=lifespan,
    )

    # Added inside -> out: the last one added wraps all the others.
    # 1. Error handling
    # 2. Metrics
    # 3. Correlation (request ID on request.state and in logs)
    # 4. Security headers
    # 5. CORS (outermost)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    register_exception_handlers(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/", include_in_schema=False)
    async def root_redirect() -> Response:
        """Redirect root path to docs."""
        return RedirectResponse(
            url="/docs", status_code=status.HTTP_307_TEMPORARY_REDIRECT
        )

    app.include_router(v1_router, prefix=config.api_prefix)
    return app


configure_logging(level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

app = create_app()
