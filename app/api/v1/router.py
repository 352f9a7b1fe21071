"""API v1 router module."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.api.v1.content.router import router as content_router
from app.core.config import settings

router = APIRouter(default_response_class=JSONResponse)

router.include_router(content_router)


@router.get("/")
async def get_api_metadata() -> dict[str, str]:
    """
    Get API metadata.

    Returns information about this API and where its documentation lives.
    """
    return {
        "version": settings.version,
        "openapi_url": "/openapi.json",
        "documentation_url": "/docs",
        "api_status": "healthy",
        "implementation": f"{settings.app_name} Content API",
    }


@router.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns
    -------
        Dict containing health status and the content backend in use
    """
    session = getattr(request.app.state, "content_session", None)
    return {
        "status": (
            "healthy" if session is not None and not session.closed else "starting"
        ),
        "version": settings.version,
        "content_backend": session.repository.name if session is not None else "none",
        "correlation_id": request.state.correlation_id,
    }
