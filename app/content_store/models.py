"""Data models for content store."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from app.content_store.exceptions import MalformedEntry

LANGUAGES: tuple[str, ...] = ("es", "en")


class ContentType(str, Enum):
    """How an editable surface renders an entry."""

    TEXT = "text"
    MEDIA = "media"


@dataclass(frozen=True)
class Text:
    """Language-invariant text."""

    text: str
    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class Localized:
    """Spanish and English renditions of the same content key."""

    es: str = ""
    en: str = ""
    kind: ClassVar[str] = "localized"

    def get(self, lang: str) -> str:
        """Return the rendition for ``lang``, empty when unsupported or unset."""
        if lang not in LANGUAGES:
            return ""
        return getattr(self, lang)

    def with_language(self, lang: str, text: str) -> "Localized":
        """Return a copy with one language replaced."""
        if lang not in LANGUAGES:
            raise ValueError(f"Unsupported language: {lang}")
        return replace(self, **{lang: text})

    def as_dict(self) -> dict[str, str]:
        return {"es": self.es, "en": self.en}


@dataclass(frozen=True)
class MediaUrl:
    """URL of an uploaded or linked media file (video, image)."""

    url: str
    kind: ClassVar[str] = "media"


ContentValue = Union[Text, Localized, MediaUrl]


def content_type_of(value: ContentValue) -> ContentType:
    """Content type implied by a value variant."""
    return ContentType.MEDIA if isinstance(value, MediaUrl) else ContentType.TEXT


def decode_value(
    key: str, raw: Any, content_type: ContentType = ContentType.TEXT
) -> ContentValue:
    """Turn a stored document value into a tagged value.

    Raises:
        MalformedEntry: If the raw value has an unexpected shape
    """
    if isinstance(raw, str):
        if content_type is ContentType.MEDIA:
            return MediaUrl(raw)
        return Text(raw)

    if isinstance(raw, Mapping) and content_type is ContentType.TEXT:
        languages = {lang: raw.get(lang) for lang in LANGUAGES if lang in raw}
        if languages and all(isinstance(v, str) for v in languages.values()):
            return Localized(**languages)

    raise MalformedEntry(key, raw)


def encode_value(value: ContentValue) -> str | dict[str, str]:
    """Turn a tagged value into its stored document shape."""
    if isinstance(value, Localized):
        return value.as_dict()
    if isinstance(value, MediaUrl):
        return value.url
    return value.text


def coerce_value(
    value: Union[str, Mapping[str, Any], ContentValue],
    content_type: ContentType | None = None,
) -> ContentValue:
    """Build a tagged value from what an editor submits.

    Plain strings become ``Text`` (or ``MediaUrl`` for media entries),
    mappings become ``Localized``.
    """
    if isinstance(value, (Text, Localized, MediaUrl)):
        return value
    if isinstance(value, str):
        if content_type is ContentType.MEDIA:
            return MediaUrl(value)
        return Text(value)
    if isinstance(value, Mapping):
        if content_type is ContentType.MEDIA:
            raise ValueError("Media content takes a single URL, not a language map")
        unknown = set(value) - set(LANGUAGES)
        if unknown:
            raise ValueError(f"Unsupported languages: {', '.join(sorted(unknown))}")
        if not all(isinstance(v, str) for v in value.values()):
            raise ValueError("Language values must be strings")
        return Localized(**dict(value))
    raise ValueError(f"Unsupported content value: {type(value).__name__}")


def value_strings(value: ContentValue) -> list[str]:
    """All human-readable strings carried by a value (used for search)."""
    if isinstance(value, Localized):
        return [value.es, value.en]
    if isinstance(value, MediaUrl):
        return [value.url]
    return [value.text]


@dataclass
class ContentEntry:
    """Represents an entry in the content store."""

    id: str
    value: ContentValue
    type: ContentType = ContentType.TEXT
    visible: bool = True
    page: Optional[str] = None

    @classmethod
    def from_document(cls, key: str, data: Mapping[str, Any]) -> "ContentEntry":
        """Build an entry from a stored document.

        Raises:
            MalformedEntry: If the document value or type is unusable
        """
        raw_type = data.get("type") or ContentType.TEXT.value
        try:
            content_type = ContentType(raw_type)
        except ValueError:
            raise MalformedEntry(key, data.get("value")) from None

        return cls(
            id=key,
            value=decode_value(key, data.get("value"), content_type),
            type=content_type,
            visible=bool(data.get("visible", True)),
            page=data.get("page"),
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize the entry to its stored document shape."""
        document: dict[str, Any] = {
            "value": encode_value(self.value),
            "type": self.type.value,
            "visible": self.visible,
        }
        if self.page is not None:
            document["page"] = self.page
        return document
