"""Firestore-backed content repository."""

from typing import Any

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from app.content_store.exceptions import MalformedEntry, RepositoryUnavailable
from app.content_store.models import ContentEntry, ContentType, ContentValue
from app.content_store.repository import build_document_update
from app.core.logging import get_logger

logger = get_logger(__name__)


class FirestoreContentRepository:
    """Stores one document per content key in a Firestore collection.

    Document shape: ``{value, type, visible, page}`` where ``value`` is a
    string or a ``{es, en}`` map.
    """

    name = "firestore"

    def __init__(self, client: Any, collection: str = "content") -> None:
        """Initialize repository.

        Args:
            client: ``google.cloud.firestore.AsyncClient`` instance
            collection: Name of the collection holding content documents
        """
        self.client = client
        self.collection = collection

    def _document(self, key: str) -> Any:
        return self.client.collection(self.collection).document(key)

    async def get(self, key: str) -> ContentEntry | None:
        """Fetch one content document.

        Raises:
            RepositoryUnavailable: If Firestore cannot be reached
            MalformedEntry: If the stored value has an unexpected shape
        """
        try:
            snapshot = await self._document(key).get()
        except google_exceptions.GoogleAPIError as exc:
            raise RepositoryUnavailable(f"Error getting content '{key}': {exc}") from exc

        if not snapshot.exists:
            return None
        return ContentEntry.from_document(key, snapshot.to_dict() or {})

    async def set(
        self,
        key: str,
        value: ContentValue,
        *,
        type: ContentType | None = None,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        """Merge the given fields into the content document.

        Raises:
            RepositoryUnavailable: If Firestore rejects or cannot take the write
        """
        update = build_document_update(value, type=type, visible=visible, page=page)
        try:
            await self._document(key).set(update, merge=True)
        except google_exceptions.GoogleAPIError as exc:
            raise RepositoryUnavailable(f"Error setting content '{key}': {exc}") from exc

    async def list(self, page: str | None = None) -> list[ContentEntry]:
        """List content documents, skipping malformed ones.

        Raises:
            RepositoryUnavailable: If Firestore cannot be reached
        """
        query: Any = self.client.collection(self.collection)
        if page is not None:
            query = query.where(filter=FieldFilter("page", "==", page))

        entries: list[ContentEntry] = []
        try:
            async for snapshot in query.stream():
                try:
                    entries.append(
                        ContentEntry.from_document(snapshot.id, snapshot.to_dict() or {})
                    )
                except MalformedEntry as exc:
                    logger.warning(
                        "content_entry_skipped", key=snapshot.id, error=str(exc)
                    )
        except google_exceptions.GoogleAPIError as exc:
            raise RepositoryUnavailable(f"Error listing content: {exc}") from exc

        return sorted(entries, key=lambda entry: entry.id)


def create_firestore_client(
    project_id: str | None = None, credentials_path: str | None = None
) -> Any:
    """Return an async Firestore client bound to the Firebase app."""
    from firebase_admin import firestore_async

    from app.core.firebase import get_firebase_app

    return firestore_async.client(get_firebase_app(project_id, credentials_path))
