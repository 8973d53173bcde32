"""Locale utilities: code cleanup, Babel lookup and environment detection.

Centralizes language code normalization so that stored preferences,
environment-detected locales and explicit requests are compared in one
canonical form.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "clean_language_code",
    "detect_system_language",
    "get_babel_locale",
    "normalize_locale",
]

logger = logging.getLogger(__name__)

_PSEUDO_LOCALES = frozenset({"C", "POSIX"})

_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")


def normalize_locale(locale_code: str) -> str:
    """Rewrite a hyphenated tag with underscores ("pt-BR" -> "pt_BR").

    Example:
        >>> normalize_locale("zh-Hant-TW")
        'zh_Hant_TW'
    """
    return locale_code.replace("-", "_")


def _strip_encoding(value: str) -> str:
    return value.split(".", 1)[0].split("@", 1)[0]


def clean_language_code(code: str) -> str:
    """Reduce a locale identifier to its lower-case primary language subtag.

    Region, script and encoding parts are dropped, so "fr-CA", "fr_FR.UTF-8"
    and " FR " all become "fr". Bundles are only ever published per language,
    never per region.

    Args:
        code: Any locale-like identifier

    Returns:
        Primary language subtag, or "" if nothing usable remains

    Example:
        >>> clean_language_code("pt-BR")
        'pt'
        >>> clean_language_code("de_DE.UTF-8")
        'de'
    """
    return normalize_locale(_strip_encoding(code.strip())).split("_", 1)[0].lower()


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse ``locale_code`` into a memoized Babel Locale.

    Raises:
        babel.UnknownLocaleError: No CLDR data for the code
        ValueError: The code is not a parseable identifier
    """
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def _usable(value: str | None) -> str | None:
    base = _strip_encoding(value) if value else ""
    if not base or base in _PSEUDO_LOCALES:
        return None
    return normalize_locale(base)


def detect_system_language() -> str | None:
    """Best-guess locale of the running process.

    The OS locale reported by ``locale.getlocale()`` is tried first, then
    the LC_ALL, LC_MESSAGES and LANG variables in that order. The "C" and
    "POSIX" pseudo-locales do not count. The result may name a language
    outside the supported set.

    Returns:
        Locale without encoding (e.g. "de_DE"), or None if none is set
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
    except (ValueError, AttributeError):
        system_locale = None

    for candidate in (system_locale, *(os.environ.get(var) for var in _LOCALE_ENV_VARS)):
        detected = _usable(candidate)
        if detected is not None:
            return detected

    logger.debug("No system locale detected")
    return None
