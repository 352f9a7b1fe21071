"""Content API endpoints for the site and the admin panel."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app.api.v1.content.models import (
    ContentListResponse,
    ContentResponse,
    ContentUpdate,
    ImportResult,
    TranslateRequest,
)
from app.api.v1.content.services import ContentService
from app.content_store.backup import BackupData
from app.content_store.session import ContentSession
from app.core.auth import AuthenticatedUser, get_current_user, require_admin
from app.llm import get_llm_provider
from app.llm.providers.base import BaseLLMProvider

router = APIRouter(prefix="/content", tags=["content"])


def get_content_session(request: Request) -> ContentSession:
    """Content session owned by the application lifespan."""
    return request.app.state.content_session


def get_content_service(
    session: ContentSession = Depends(get_content_session),
) -> ContentService:
    return ContentService(session)


def get_translation_provider() -> BaseLLMProvider:
    return get_llm_provider()


@router.get("", response_model=ContentListResponse)
async def list_content(
    lang: Optional[str] = Query(None, description="Language to resolve values in"),
    page: Optional[str] = Query(None, description="Only entries of this page"),
    search: Optional[str] = Query(
        None, description="Case-insensitive match on key or any language of the value"
    ),
    include_hidden: bool = Query(False, description="Include hidden entries (admins)"),
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
) -> ContentListResponse:
    """
    List stored content entries.

    Hidden entries are only included when an admin asks for them.
    """
    return await service.list_content(
        lang=lang,
        page=page,
        search=search,
        include_hidden=include_hidden and user is not None and user.is_admin,
    )


@router.get("/export", response_model=BackupData)
async def export_content(
    _: AuthenticatedUser = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
) -> BackupData:
    """Export every content entry, hidden ones included, as a JSON backup."""
    return await service.export_backup()


@router.post("/import", response_model=ImportResult)
async def import_content(
    backup: BackupData,
    _: AuthenticatedUser = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
) -> ImportResult:
    """Restore a JSON backup, merging each entry into what is stored."""
    return await service.import_backup(backup)


@router.get("/{key}", response_model=ContentResponse)
async def get_content(
    key: str,
    lang: Optional[str] = Query(None, description="Language to resolve for"),
    default: Optional[str] = Query(
        None, description="Value when nothing is stored (defaults to the UI string)"
    ),
    refresh: bool = Query(False, description="Refetch instead of using the cache"),
    service: ContentService = Depends(get_content_service),
) -> ContentResponse:
    """
    Get one content value resolved for a language.

    Never fails because of the content store: when the key is missing or the
    store is unreachable, the default is returned with ``found`` false.
    """
    return await service.get_content(key, lang=lang, default=default, refresh=refresh)


@router.put("/{key}", response_model=ContentResponse)
async def update_content(
    key: str,
    update: ContentUpdate,
    _: AuthenticatedUser = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
) -> ContentResponse:
    """Save an admin edit of one content key."""
    return await service.update_content(key, update)


@router.post("/{key}/translate", response_model=ContentResponse)
async def translate_content(
    key: str,
    body: Optional[TranslateRequest] = None,
    _: AuthenticatedUser = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
    provider: BaseLLMProvider = Depends(get_translation_provider),
) -> ContentResponse:
    """Fill the target language of a content key with a machine translation."""
    body = body or TranslateRequest()
    result = await service.translate_content(
        key, body.source_lang, body.target_lang, provider=provider
    )
    if result is None:
        raise HTTPException(status_code=404, detail=f"Content '{key}' not found")
    return result
