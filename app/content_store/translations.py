"""Static UI strings used as defaults for editable content."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from app.content_store.locale import FALLBACK_LANGUAGE, normalize_language
from app.core.logging import get_logger

logger = get_logger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"


@lru_cache(maxsize=8)
def load_catalog(lang: str, locales_dir: Path = LOCALES_DIR) -> dict[str, str]:
    """Load ``<locales_dir>/<lang>.json``; missing or invalid files give ``{}``."""
    path = locales_dir / f"{lang}.json"
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        logger.warning("translation_catalog_invalid", path=str(path), error=str(exc))
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


def translate(
    key: str,
    lang: str,
    default: str | None = None,
    locales_dir: Path = LOCALES_DIR,
) -> str:
    """Look up ``key`` for ``lang``, falling back to Spanish, then ``default``.

    When no default is given the key itself is returned, so a missing string
    shows up visibly instead of as an empty element.
    """
    lang = normalize_language(lang)
    for candidate in (lang, FALLBACK_LANGUAGE):
        value = load_catalog(candidate, locales_dir).get(key)
        if value:
            return value
    return default if default is not None else key
