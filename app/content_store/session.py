"""Editable content sessions and the handles editable surfaces render from.

A :class:`ContentSession` owns one cache for the lifetime of a page or
service session. Surfaces mount a key with :meth:`ContentSession.use_content`
and get an :class:`EditableContent` handle whose ``value`` is available
immediately (the caller default) and is replaced once the fetch resolves.

Example::

    async with ContentSession(repository, language="en", is_admin=True) as session:
        title = session.use_content("heroTitle", "Bienvenido")
        title.subscribe(print)          # re-render on change
        await title.save("Welcome home", lang="en")
"""

from collections.abc import Callable, Mapping
from typing import Any, Union

from app.content_store.cache import ContentCache
from app.content_store.coordinator import ContentFetchCoordinator
from app.content_store.exceptions import NotAuthorized
from app.content_store.locale import normalize_language, resolve
from app.content_store.models import (
    LANGUAGES,
    ContentType,
    ContentValue,
    Localized,
    MediaUrl,
    Text,
    coerce_value,
)
from app.content_store.repository import ContentRepository
from app.core.logging import get_logger

logger = get_logger(__name__)

Renderer = Callable[[str], None]
EditorValue = Union[str, Mapping[str, Any], ContentValue]


def apply_edit(
    current: ContentValue | None,
    text: str,
    lang: str | None = None,
    active_lang: str = "es",
) -> ContentValue:
    """Compute the value stored after editing ``current`` to read ``text``.

    Media values take ``text`` as the new URL. Without ``lang``, a bilingual
    value changes in ``active_lang`` and anything else becomes plain text.
    With ``lang``, the result is bilingual; a plain-text value keeps its
    text for the other language.

    Raises:
        ValueError: If the edited language is not supported
    """
    if isinstance(current, MediaUrl):
        return MediaUrl(text)
    if lang is None:
        if isinstance(current, Localized):
            return current.with_language(normalize_language(active_lang), text)
        return Text(text)

    lang = normalize_language(lang)
    if lang not in LANGUAGES:
        raise ValueError(f"Unsupported language: {lang}")
    if isinstance(current, Localized):
        base = current
    elif isinstance(current, Text):
        base = Localized(es=current.text, en=current.text)
    else:
        base = Localized()
    return base.with_language(lang, text)


class EditableContent:
    """Handle held by one mounted editable surface."""

    def __init__(self, session: "ContentSession", key: str, default: str) -> None:
        self.session = session
        self.key = key
        self.default = default
        self._renderers: list[Renderer] = []
        self._closed = False
        self._unsubscribe = session.cache.subscribe(key, self._on_cache_change)
        session.coordinator.request(key, default)

    @property
    def raw(self) -> ContentValue | None:
        """Unresolved cached value, ``None`` until something is cached."""
        return self.session.cache.get(self.key)

    @property
    def value(self) -> str:
        """String to render for the session's active language."""
        return resolve(self.raw, self.session.language, self.default)

    @property
    def editable(self) -> bool:
        return self.session.is_admin and not self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, renderer: Renderer) -> None:
        """Call ``renderer`` with the new display value after every change."""
        self._renderers.append(renderer)

    def refresh(self) -> None:
        """Refetch the key from the repository."""
        self.session.coordinator.refresh(self.key, self.default)

    async def save(self, text: str, lang: str | None = None) -> None:
        """Save an edit made in place.

        With ``lang`` only that language of a bilingual value changes; a
        plain-text value becomes bilingual, keeping its text for the other
        language. Media values always take ``text`` as the new URL.
        """
        current = self.raw
        if current is None:
            # Fetch still in flight or failed: edit what is actually stored
            current = await self.session.stored_value(self.key)
        new_value = apply_edit(current, text, lang, self.session.language)
        await self.session.set_content(self.key, new_value)

    def close(self) -> None:
        """Unmount: late results still reach the cache but not this handle."""
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self._renderers.clear()
        self.session._detach(self)

    def _on_cache_change(self, key: str, value: ContentValue | None) -> None:
        self._render()

    def _render(self) -> None:
        if self._closed:
            return
        display = self.value
        for renderer in list(self._renderers):
            renderer(display)


class ContentSession:
    """Owns the content cache for one page or service session.

    Create it at the session root and close it on teardown (or use it as an
    async context manager); closing cancels in-flight fetches and drops the
    cache.
    """

    def __init__(
        self,
        repository: ContentRepository,
        language: str = "es",
        is_admin: bool = False,
    ) -> None:
        self.repository = repository
        self.cache = ContentCache()
        self.coordinator = ContentFetchCoordinator(repository, self.cache)
        self.is_admin = is_admin
        self._language = normalize_language(language)
        self._handles: list[EditableContent] = []
        self._closed = False

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        """Switch language; handles re-resolve from the cache without fetching."""
        lang = normalize_language(value)
        if lang == self._language:
            return
        self._language = lang
        for handle in list(self._handles):
            handle._render()

    @property
    def closed(self) -> bool:
        return self._closed

    def use_content(self, key: str, default: str) -> EditableContent:
        """Mount ``key`` and return the handle a surface renders from."""
        if self._closed:
            raise RuntimeError("Content session is closed")
        handle = EditableContent(self, key, default)
        self._handles.append(handle)
        return handle

    async def set_content(
        self,
        key: str,
        new_value: EditorValue,
        *,
        visible: bool | None = None,
        page: str | None = None,
    ) -> None:
        """Write a new value for ``key`` (authorized sessions only).

        Raises:
            NotAuthorized: If the session may not edit content
            ValueError: If ``new_value`` cannot be stored
            WriteRejected: If the repository refused the write
        """
        if not self.is_admin:
            raise NotAuthorized(key)

        if isinstance(new_value, (Text, Localized, MediaUrl)):
            value = new_value
        else:
            current = self.cache.get(key)
            if current is None or self.cache.is_placeholder(key):
                current = await self.stored_value(key)
            content_type = ContentType.MEDIA if isinstance(current, MediaUrl) else None
            value = coerce_value(new_value, content_type)
        await self.coordinator.commit(key, value, visible=visible, page=page)

    async def stored_value(self, key: str) -> ContentValue | None:
        """Value stored for ``key``, read through the cache.

        ``None`` when nothing is stored or the repository could not be read.
        A placeholder default that no mounted handle renders is dropped from
        the cache again, so reads of unknown keys leave nothing behind.
        """
        value = await self.coordinator.fetch(key, "")
        if key not in self.cache:
            return None
        if self.cache.is_placeholder(key):
            if not self.cache.has_listeners(key):
                self.cache.discard(key)
            return None
        return value

    async def edit_content(
        self,
        key: str,
        value: EditorValue,
        *,
        lang: str | None = None,
        content_type: ContentType | None = None,
        visible: bool | None = None,
        page: str | None = None,
    ) -> ContentValue:
        """Apply an editor submission on top of the stored value and save it.

        Strings go through :func:`apply_edit` against the current value, so
        ``lang`` edits one language of a bilingual value. ``content_type``
        forces the stored kind: media takes the string as a URL, text turns
        a media entry back into plain text.

        Returns:
            The value that was written

        Raises:
            NotAuthorized: If the session may not edit content
            ValueError: If the submission cannot be stored
            WriteRejected: If the repository refused the write
        """
        if not self.is_admin:
            raise NotAuthorized(key)

        if not isinstance(value, str):
            new_value = coerce_value(value, content_type)
        elif content_type is ContentType.MEDIA:
            new_value = MediaUrl(value)
        else:
            current = await self.stored_value(key)
            if content_type is ContentType.TEXT and isinstance(current, MediaUrl):
                current = None
            new_value = apply_edit(current, value, lang, self.language)

        await self.coordinator.commit(key, new_value, visible=visible, page=page)
        return new_value

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for handle in list(self._handles):
            handle.close()
        await self.coordinator.close()
        self.cache.clear()
        logger.debug("content_session_closed")

    async def __aenter__(self) -> "ContentSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _detach(self, handle: EditableContent) -> None:
        if handle in self._handles:
            self._handles.remove(handle)
