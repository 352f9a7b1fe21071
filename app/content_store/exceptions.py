"""Errors raised by the editable content store."""

from typing import Any


class ContentStoreError(Exception):
    """Base class for content store errors."""


class RepositoryError(ContentStoreError):
    """The content repository failed to serve a request."""

    status_code = 503


class RepositoryUnavailable(RepositoryError):
    """Network or auth failure while reaching the document store."""


class WriteRejected(ContentStoreError):
    """A content write failed and its optimistic update was rolled back."""

    status_code = 502

    def __init__(self, key: str, reason: str = "write rejected") -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Could not save content '{key}': {reason}")


class MalformedEntry(ContentStoreError):
    """A stored value is neither a string nor a bilingual map."""

    status_code = 500

    def __init__(self, key: str, raw: Any) -> None:
        self.key = key
        self.raw = raw
        super().__init__(
            f"Content '{key}' has an unsupported value of type {type(raw).__name__}"
        )


class NotAuthorized(ContentStoreError):
    """A write was attempted from a session without edit rights."""

    status_code = 403

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Not allowed to edit content '{key}'")
