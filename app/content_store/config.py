"""Configuration for content store."""

from typing import Optional

from app.content_store.repository import ContentRepository, InMemoryContentRepository
from app.core.config import Settings, settings as default_settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global instance
_repository_instance: Optional[ContentRepository] = None


def get_content_repository(config: Settings | None = None) -> ContentRepository:
    """Get the configured content repository instance.

    Reads ``CONTENT_BACKEND`` from settings:
    - ``firestore``: Firestore collection ``CONTENT_COLLECTION``
    - ``memory``: process-local dictionary (development and tests)

    Returns:
        The shared repository instance

    Raises:
        ValueError: If the backend name is unknown
    """
    global _repository_instance

    if _repository_instance is None:
        _repository_instance = _create_repository(config or default_settings)

    return _repository_instance


def set_content_repository(repository: ContentRepository) -> None:
    """Install a repository instance. Used by tools and tests."""
    global _repository_instance
    _repository_instance = repository


def reset_content_repository() -> None:
    """Reset repository singleton. Used for testing."""
    global _repository_instance
    _repository_instance = None


def _create_repository(config: Settings) -> ContentRepository:
    """Create repository based on configuration."""
    backend = config.CONTENT_BACKEND.lower()

    if backend == "memory":
        logger.info("content_repository_created", backend="memory")
        return InMemoryContentRepository()

    if backend == "firestore":
        from app.content_store.firestore import (
            FirestoreContentRepository,
            create_firestore_client,
        )

        client = create_firestore_client(
            project_id=config.FIREBASE_PROJECT_ID,
            credentials_path=config.FIREBASE_CREDENTIALS_PATH,
        )
        logger.info(
            "content_repository_created",
            backend="firestore",
            collection=config.CONTENT_COLLECTION,
        )
        return FirestoreContentRepository(client, collection=config.CONTENT_COLLECTION)

    raise ValueError(f"Unknown CONTENT_BACKEND: {config.CONTENT_BACKEND}")
