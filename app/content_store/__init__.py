"""Editable content store: cached, bilingual, in-place editable site content."""

from app.content_store.cache import ContentCache
from app.content_store.coordinator import ContentFetchCoordinator
from app.content_store.exceptions import (
    ContentStoreError,
    MalformedEntry,
    NotAuthorized,
    RepositoryError,
    RepositoryUnavailable,
    WriteRejected,
)
from app.content_store.locale import normalize_language, resolve
from app.content_store.models import (
    ContentEntry,
    ContentType,
    ContentValue,
    Localized,
    MediaUrl,
    Text,
)
from app.content_store.repository import ContentRepository, InMemoryContentRepository
from app.content_store.session import ContentSession, EditableContent

__all__ = [
    "ContentCache",
    "ContentEntry",
    "ContentFetchCoordinator",
    "ContentRepository",
    "ContentSession",
    "ContentStoreError",
    "ContentType",
    "ContentValue",
    "EditableContent",
    "InMemoryContentRepository",
    "Localized",
    "MalformedEntry",
    "MediaUrl",
    "NotAuthorized",
    "RepositoryError",
    "RepositoryUnavailable",
    "Text",
    "WriteRejected",
    "normalize_language",
    "resolve",
]
