"""Translate a piece of site content between Spanish and English."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.content_store.locale import normalize_language
from app.core.logging import get_logger
from app.llm import get_llm_provider
from app.llm.providers.base import BaseLLMProvider
from app.llm.providers.types import GenerateConfig

logger = get_logger(__name__)

LANGUAGE_NAMES = {"es": "Spanish", "en": "English"}

TRANSLATE_PROMPT = """Translate the following text from {source} to {target}. \
Only return the translated text.

Text to translate:
"{text}\""""

TRANSLATE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"translated_text": {"type": "string"}},
    "required": ["translated_text"],
    "additionalProperties": False,
}


class TranslateInput(BaseModel):
    """Input for :func:`translate_text`."""

    text: str = Field(description="The text to translate")
    source_lang: str = Field(description='Source language code, e.g. "es"')
    target_lang: str = Field(description='Target language code, e.g. "en"')

    @field_validator("source_lang", "target_lang")
    @classmethod
    def validate_lang(cls, v: str) -> str:
        return normalize_language(v)


class TranslateOutput(BaseModel):
    translated_text: str = ""


def build_prompt(data: TranslateInput) -> str:
    return TRANSLATE_PROMPT.format(
        source=LANGUAGE_NAMES.get(data.source_lang, data.source_lang),
        target=LANGUAGE_NAMES.get(data.target_lang, data.target_lang),
        text=data.text,
    )


async def translate_text(
    data: TranslateInput, provider: BaseLLMProvider | None = None
) -> TranslateOutput:
    """Translate ``data.text`` with the configured LLM provider.

    Empty input and same-language requests are answered without a model call.

    Raises:
        ValueError: If the provider fails
    """
    if not data.text.strip() or data.source_lang == data.target_lang:
        return TranslateOutput(translated_text=data.text)

    if provider is None:
        provider = get_llm_provider()

    response = await provider.generate(
        build_prompt(data),
        config=GenerateConfig(temperature=provider.config.temperature),
        format=TRANSLATE_SCHEMA,
    )

    translated = ""
    if isinstance(response.parsed, dict):
        translated = str(response.parsed.get("translated_text") or "")
    if not translated:
        translated = response.text.strip().strip('"')

    logger.info(
        "content_translated",
        source_lang=data.source_lang,
        target_lang=data.target_lang,
        chars=len(data.text),
    )
    return TranslateOutput(translated_text=translated)
