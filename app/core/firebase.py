"""Firebase Admin SDK initialization."""

import firebase_admin
from firebase_admin import credentials

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def get_firebase_app(
    project_id: str | None = None, credentials_path: str | None = None
) -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use.

    Uses the service account file at ``credentials_path`` when given and
    Application Default Credentials otherwise.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    project_id = project_id or settings.FIREBASE_PROJECT_ID
    credentials_path = credentials_path or settings.FIREBASE_CREDENTIALS_PATH
    cred = (
        credentials.Certificate(credentials_path)
        if credentials_path
        else credentials.ApplicationDefault()
    )
    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("firebase_initialized", project_id=project_id)
    return app
