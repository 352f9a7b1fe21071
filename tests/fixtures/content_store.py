"""Content store fixtures for tests."""

from typing import Any, AsyncGenerator, Generator, Optional

import pytest
import pytest_asyncio

from app.content_store.config import reset_content_repository
from app.content_store.exceptions import RepositoryUnavailable
from app.content_store.models import ContentEntry, ContentType, ContentValue
from app.content_store.repository import InMemoryContentRepository
from app.content_store.session import ContentSession


class RecordingRepository(InMemoryContentRepository):
    """In-memory repository that counts calls and can be told to fail."""

    name = "recording"

    def __init__(self, documents: Optional[dict[str, dict[str, Any]]] = None):
        super().__init__(documents)
        self.get_calls: list[str] = []
        self.set_calls: list[tuple[str, ContentValue]] = []
        self.fail_get = False
        self.fail_set = False
        # Fail every write after this many have succeeded
        self.fail_set_after: Optional[int] = None

    async def get(self, key: str) -> ContentEntry | None:
        self.get_calls.append(key)
        if self.fail_get:
            raise RepositoryUnavailable("Firestore unreachable")
        return await super().get(key)

    async def set(
        self,
        key: str,
        value: ContentValue,
        *,
        type: ContentType | None = None,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        self.set_calls.append((key, value))
        if self.fail_set or (
            self.fail_set_after is not None
            and len(self.set_calls) > self.fail_set_after
        ):
            raise RepositoryUnavailable("permission denied")
        await super().set(key, value, type=type, visible=visible, page=page)

    async def list(self, page: str | None = None) -> list[ContentEntry]:
        if self.fail_get:
            raise RepositoryUnavailable("Firestore unreachable")
        return await super().list(page=page)


@pytest.fixture
def content_documents() -> dict[str, dict[str, Any]]:
    """Stored documents as they look in the ``content`` collection."""
    return {
        "heroTitle": {
            "value": {"es": "Bienvenido", "en": "Welcome"},
            "type": "text",
            "visible": True,
            "page": "home",
        },
        "heroSubtitle1": {"value": "Un espacio sagrado", "type": "text", "page": "home"},
        "guidesPageTitle": {"value": {"es": "Nuestros Guías", "en": ""}, "page": "guides"},
        "heroVideo": {"value": "https://cdn.example.com/hero.mp4", "type": "media"},
        "draftNotice": {"value": "Próximamente", "visible": False, "page": "home"},
    }


@pytest.fixture
def memory_repository(
    content_documents: dict[str, dict[str, Any]],
) -> RecordingRepository:
    """Repository preloaded with :func:`content_documents`."""
    return RecordingRepository(content_documents)


@pytest_asyncio.fixture
async def content_session(
    memory_repository: RecordingRepository,
) -> AsyncGenerator[ContentSession, None]:
    """Visitor session (cannot edit)."""
    session = ContentSession(memory_repository, language="es")
    yield session
    await session.close()


@pytest_asyncio.fixture
async def admin_session(
    memory_repository: RecordingRepository,
) -> AsyncGenerator[ContentSession, None]:
    """Admin session (may edit)."""
    session = ContentSession(memory_repository, language="es", is_admin=True)
    yield session
    await session.close()


@pytest.fixture(autouse=True)
def auto_reset_content_repository() -> Generator[None, None, None]:
    """Automatically reset the repository singleton between tests."""
    reset_content_repository()
    yield
    reset_content_repository()
