"""Service layer for content API endpoints."""

from typing import Optional

from app.api.v1.content.models import (
    ContentItem,
    ContentListResponse,
    ContentResponse,
    ContentUpdate,
    ImportResult,
)
from app.content_store.backup import BackupData, export_content, import_content
from app.content_store.exceptions import MalformedEntry, RepositoryError
from app.content_store.locale import normalize_language, resolve
from app.content_store.models import (
    LANGUAGES,
    ContentEntry,
    ContentType,
    ContentValue,
    Localized,
    MediaUrl,
    Text,
    content_type_of,
    encode_value,
    value_strings,
)
from app.content_store.session import ContentSession
from app.content_store.translations import translate
from app.core.logging import get_logger
from app.llm.flows.translate import TranslateInput, translate_text
from app.llm.providers.base import BaseLLMProvider

logger = get_logger(__name__)


def _matches(entry: ContentEntry, needle: str) -> bool:
    needle = needle.casefold()
    if needle in entry.id.casefold():
        return True
    return any(needle in text.casefold() for text in value_strings(entry.value))


class ContentService:
    """Reads and edits content through the service's shared session."""

    def __init__(self, session: ContentSession):
        self.session = session

    def _response(
        self, key: str, lang: str, default: str, raw: Optional[ContentValue]
    ) -> ContentResponse:
        return ContentResponse(
            key=key,
            lang=lang,
            value=resolve(raw, lang, default),
            raw=encode_value(raw) if raw is not None else None,
            type=content_type_of(raw) if raw is not None else ContentType.TEXT,
            found=raw is not None,
        )

    async def _stored(self, key: str) -> Optional[ContentValue]:
        """Value stored for ``key``, read through the cache.

        ``None`` when nothing is stored or the repository could not be read.
        """
        return await self.session.stored_value(key)

    async def get_content(
        self,
        key: str,
        lang: Optional[str] = None,
        default: Optional[str] = None,
        refresh: bool = False,
    ) -> ContentResponse:
        """Resolve ``key`` for ``lang``.

        The default comes from the translation catalog when not given.
        Repository failures never surface here; the default is returned.
        """
        lang = normalize_language(lang or self.session.language)
        if default is None:
            default = translate(key, lang)

        if refresh:
            await self.session.coordinator.refresh(key, "")
        return self._response(key, lang, default, await self._stored(key))

    async def list_content(
        self,
        lang: Optional[str] = None,
        page: Optional[str] = None,
        search: Optional[str] = None,
        include_hidden: bool = False,
    ) -> ContentListResponse:
        """List stored entries straight from the repository.

        Raises:
            RepositoryError: If the repository cannot be listed
        """
        lang = normalize_language(lang or self.session.language)
        entries = await self.session.repository.list(page=page)

        items = []
        for entry in entries:
            if not include_hidden and not entry.visible:
                continue
            if search and not _matches(entry, search):
                continue
            items.append(
                ContentItem(
                    key=entry.id,
                    value=resolve(entry.value, lang, ""),
                    raw=encode_value(entry.value),
                    type=entry.type,
                    visible=entry.visible,
                    page=entry.page,
                )
            )
        return ContentListResponse(items=items, total=len(items), lang=lang)

    async def update_content(self, key: str, update: ContentUpdate) -> ContentResponse:
        """Apply an admin edit.

        Raises:
            ValueError: If the submitted value cannot be stored
            WriteRejected: If the repository refused the write
        """
        written = await self.session.edit_content(
            key,
            update.value,
            lang=update.lang,
            content_type=update.type,
            visible=update.visible,
            page=update.page,
        )
        lang = normalize_language(update.lang or self.session.language)
        return self._response(key, lang, "", written)

    async def translate_content(
        self,
        key: str,
        source_lang: str,
        target_lang: str,
        provider: Optional[BaseLLMProvider] = None,
    ) -> Optional[ContentResponse]:
        """Fill ``target_lang`` of ``key`` with a translation of ``source_lang``.

        Returns ``None`` when nothing is stored for ``key``.

        Raises:
            ValueError: If the value is media, has no source text, or the
                translation failed
            WriteRejected: If the repository refused the write
        """
        source_lang = normalize_language(source_lang)
        target_lang = normalize_language(target_lang)
        if target_lang not in LANGUAGES:
            raise ValueError(f"Unsupported language: {target_lang}")

        current = await self._stored(key)
        if current is None:
            return None
        if isinstance(current, MediaUrl):
            raise ValueError(f"Media content '{key}' cannot be translated")

        if isinstance(current, Text):
            base = Localized(es=current.text, en=current.text)
        else:
            base = current
        source_text = base.get(source_lang)
        if not source_text:
            raise ValueError(f"Content '{key}' has no '{source_lang}' text to translate")

        result = await translate_text(
            TranslateInput(
                text=source_text, source_lang=source_lang, target_lang=target_lang
            ),
            provider,
        )
        new_value = base.with_language(target_lang, result.translated_text)
        await self.session.set_content(key, new_value)
        logger.info(
            "content_translation_saved",
            key=key,
            source_lang=source_lang,
            target_lang=target_lang,
        )
        return self._response(key, target_lang, "", new_value)

    async def export_backup(self) -> BackupData:
        return await export_content(self.session.repository)

    async def import_backup(self, backup: BackupData) -> ImportResult:
        """Write a backup and refresh the session cache with what was written.

        Raises:
            ValueError: If an item does not match its declared type
            RepositoryError: If a write fails
        """
        try:
            entries = await import_content(self.session.repository, backup)
        except MalformedEntry as exc:
            raise ValueError(str(exc)) from exc
        except RepositoryError:
            # Writes before the failure landed; reread every imported key
            for item in backup.content:
                self.session.cache.discard(item.id)
            raise
        for entry in entries:
            self.session.cache.set(entry.id, entry.value)
        return ImportResult(imported=len(entries), keys=[entry.id for entry in entries])
