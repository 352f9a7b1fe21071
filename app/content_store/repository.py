"""Content repository contract and the in-memory implementation."""

import copy
from typing import Any, Optional, Protocol

from app.content_store.exceptions import MalformedEntry
from app.content_store.models import (
    ContentEntry,
    ContentType,
    ContentValue,
    encode_value,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


class ContentRepository(Protocol):
    """Key-value document store holding editable content."""

    name: str

    async def get(self, key: str) -> ContentEntry | None:
        """Fetch one entry, ``None`` when the key was never written."""
        ...

    async def set(
        self,
        key: str,
        value: ContentValue,
        *,
        type: ContentType | None = None,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        """Create or merge-update an entry."""
        ...

    async def list(self, page: str | None = None) -> list[ContentEntry]:
        """List entries, optionally restricted to one page label."""
        ...


def build_document_update(
    value: ContentValue,
    type: ContentType | None = None,
    visible: bool | None = None,
    page: str | None = None,
) -> dict[str, Any]:
    """Fields written by a merge ``set``; unspecified fields are left alone."""
    update: dict[str, Any] = {"value": encode_value(value)}
    if type is not None:
        update["type"] = type.value
    if visible is not None:
        update["visible"] = visible
    if page is not None:
        update["page"] = page
    return update


class InMemoryContentRepository:
    """Dictionary-backed repository for local development and tests.

    Documents are kept in their stored shape so the same decoding path runs
    as with Firestore.
    """

    name = "memory"

    def __init__(self, documents: Optional[dict[str, dict[str, Any]]] = None):
        self.documents: dict[str, dict[str, Any]] = copy.deepcopy(documents or {})

    async def get(self, key: str) -> ContentEntry | None:
        document = self.documents.get(key)
        if document is None:
            return None
        return ContentEntry.from_document(key, document)

    async def set(
        self,
        key: str,
        value: ContentValue,
        *,
        type: ContentType | None = None,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        update = build_document_update(value, type=type, visible=visible, page=page)
        self.documents.setdefault(key, {}).update(copy.deepcopy(update))

    async def list(self, page: str | None = None) -> list[ContentEntry]:
        entries = []
        for key in sorted(self.documents):
            document = self.documents[key]
            if page is not None and document.get("page") != page:
                continue
            try:
                entries.append(ContentEntry.from_document(key, document))
            except MalformedEntry as exc:
                logger.warning("content_entry_skipped", key=key, error=str(exc))
        return entries
