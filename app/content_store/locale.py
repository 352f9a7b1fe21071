"""Resolution of stored values to the string shown for a language."""

from app.content_store.models import ContentValue, Localized, MediaUrl, Text

FALLBACK_LANGUAGE = "es"


def normalize_language(tag: str | None) -> str:
    """Reduce a language tag to its primary subtag (``en-US`` -> ``en``).

    Empty tags fall back to Spanish.
    """
    if not tag:
        return FALLBACK_LANGUAGE
    primary = tag.strip().replace("_", "-").split("-", 1)[0].lower()
    return primary or FALLBACK_LANGUAGE


def resolve(raw: ContentValue | None, active_lang: str, default: str) -> str:
    """Return the string to render for ``raw`` in ``active_lang``.

    Text and media values are language invariant. Bilingual values fall
    back to Spanish, then to ``default``; so do unsupported languages.
    """
    if raw is None:
        return default
    if isinstance(raw, Text):
        return raw.text
    if isinstance(raw, MediaUrl):
        return raw.url
    if isinstance(raw, Localized):
        lang = normalize_language(active_lang)
        return raw.get(lang) or raw.get(FALLBACK_LANGUAGE) or default
    return default
