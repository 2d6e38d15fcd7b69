"""UI strings looked up by dotted key from ``strings/<language>.json``."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

LOGGER = logging.getLogger(__name__)

STRINGS_DIR = Path(__file__).parent / "strings"
DEFAULT_LANGUAGE = "en"

_language = DEFAULT_LANGUAGE


def available_languages() -> Tuple[str, ...]:
    return tuple(sorted(path.stem for path in STRINGS_DIR.glob("*.json")))


@lru_cache(maxsize=None)
def _strings(language: str) -> Dict[str, str]:
    path = STRINGS_DIR / f"{language}.json"
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.error("Cannot load UI strings from %s: %s", path, exc)
        return {}


def set_language(language: str) -> str:
    """Switches the UI language and returns the one actually in use."""

    global _language
    if language not in available_languages():
        LOGGER.warning("UI language %s is not available, using %s", language, DEFAULT_LANGUAGE)
        language = DEFAULT_LANGUAGE
    _language = language
    return language


def current_language() -> str:
    return _language


def translate(key: str, **params: Any) -> str:
    """Text for ``key`` with ``params`` substituted.

    Keys missing from the current language come from English, and keys
    missing there come back unchanged. A template that needs a parameter
    the caller did not pass is returned as is.
    """

    text = _strings(_language).get(key) or _strings(DEFAULT_LANGUAGE).get(key, key)
    if not params:
        return text
    try:
        return text.format(**params)
    except (KeyError, IndexError, ValueError):
        LOGGER.warning("Cannot fill UI string %s with %s", key, sorted(params))
        return text
