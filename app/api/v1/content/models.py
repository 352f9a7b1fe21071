"""Request and response models for content API endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from app.content_store.models import ContentType

RawValue = str | dict[str, str]


class ContentResponse(BaseModel):
    """One content key resolved for a language."""

    key: str
    lang: str = Field(..., description="Language the value was resolved for")
    value: str = Field(..., description="String to render")
    raw: Optional[RawValue] = Field(
        None, description="Stored value; null when nothing is stored"
    )
    type: ContentType = ContentType.TEXT
    found: bool = Field(..., description="Whether a stored entry backs the value")


class ContentItem(BaseModel):
    """Content entry as shown in listings."""

    key: str
    value: str
    raw: RawValue
    type: ContentType
    visible: bool
    page: Optional[str] = None


class ContentListResponse(BaseModel):
    items: list[ContentItem]
    total: int
    lang: str


class ContentUpdate(BaseModel):
    """Edit submitted by an admin."""

    value: RawValue = Field(
        ..., description="Plain string or {es, en} map; a media URL for media entries"
    )
    lang: Optional[str] = Field(
        None, description="Edit only this language of a bilingual value"
    )
    type: Optional[ContentType] = None
    visible: Optional[bool] = None
    page: Optional[str] = None


class TranslateRequest(BaseModel):
    source_lang: str = Field("es", description="Language to translate from")
    target_lang: str = Field("en", description="Language to fill in")


class ImportResult(BaseModel):
    imported: int
    keys: list[str]
