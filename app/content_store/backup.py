"""Export and import of all editable content as JSON."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from app.content_store.models import ContentEntry, ContentType
from app.content_store.repository import ContentRepository
from app.core.logging import get_logger

logger = get_logger(__name__)


class BackupItem(BaseModel):
    """One content document in a backup file."""

    id: str = Field(min_length=1)
    value: str | dict[str, str]
    type: ContentType = ContentType.TEXT
    visible: bool = True
    page: str | None = None

    def to_entry(self) -> ContentEntry:
        """Validate the stored shape through the same path as a repository read.

        Raises:
            MalformedEntry: If the value does not match the declared type
        """
        return ContentEntry.from_document(
            self.id, self.model_dump(exclude={"id"}, mode="json")
        )


class BackupData(BaseModel):
    """Backup file layout."""

    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    content: list[BackupItem] = Field(default_factory=list)


async def export_content(repository: ContentRepository) -> BackupData:
    """Snapshot every content entry, hidden ones included."""
    entries = await repository.list()
    items = [
        BackupItem(id=entry.id, **entry.to_document()) for entry in entries
    ]
    logger.info("content_exported", count=len(items))
    return BackupData(content=items)


async def import_content(
    repository: ContentRepository, backup: BackupData
) -> list[ContentEntry]:
    """Write every entry of ``backup`` (merge), returning what was written.

    Entries are validated before the first write so a bad file writes nothing.

    Raises:
        MalformedEntry: If any item is invalid
        RepositoryError: If a write fails part way
    """
    entries = [item.to_entry() for item in backup.content]
    for entry in entries:
        await repository.set(
            entry.id,
            entry.value,
            type=entry.type,
            visible=entry.visible,
            page=entry.page,
        )
    logger.info("content_imported", count=len(entries))
    return entries
