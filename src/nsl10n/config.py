"""Configuration for the namespace loader.

Provides frozen dataclasses that encapsulate the statically known parts of
a localization setup: the supported language set, the default and fallback
languages, the namespace set and the persistence key. Everything is
validated at construction so that misconfiguration fails fast instead of
surfacing as silently missing translations.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from babel import UnknownLocaleError

from nsl10n.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_NAMESPACE,
    DEFAULT_NAMESPACES,
    DEFAULT_STORAGE_KEY,
)
from nsl10n.locale_utils import clean_language_code, get_babel_locale

__all__ = ["DEFAULT_LANGUAGES", "LocalizationConfig", "SupportedLanguage"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SupportedLanguage:
    """A language the application ships translations for.

    ``name`` and ``native_name`` default to the CLDR display names obtained
    through Babel. Codes unknown to CLDR fall back to the code itself.

    Attributes:
        code: Primary language subtag, lower case (e.g. 'en', 'fr')
        name: English display name (e.g. 'French')
        native_name: Display name in the language itself (e.g. 'français')
        flag: Optional decorative flag or icon for language pickers

    Example:
        >>> SupportedLanguage("fr").native_name
        'français'
        >>> SupportedLanguage("fr", native_name="Français", flag="🇫🇷").native_name
        'Français'
    """

    code: str
    name: str | None = None
    native_name: str | None = None
    flag: str = ""

    def __post_init__(self) -> None:
        """Validate the code and fill missing display names from CLDR.

        Raises:
            ValueError: If code is empty or not a bare lower-case language subtag
        """
        if not self.code or self.code != clean_language_code(self.code):
            msg = f"Language code must be a bare lower-case language subtag, got: {self.code!r}"
            raise ValueError(msg)

        if self.name is not None and self.native_name is not None:
            return

        try:
            locale = get_babel_locale(self.code)
        except (UnknownLocaleError, ValueError):
            logger.debug("No CLDR data for language '%s'", self.code)
            english, native = self.code, self.code
        else:
            english = locale.get_display_name("en") or self.code
            native = locale.get_display_name() or self.code

        if self.name is None:
            object.__setattr__(self, "name", english)
        if self.native_name is None:
            object.__setattr__(self, "native_name", native)


DEFAULT_LANGUAGES: tuple[SupportedLanguage, ...] = (
    SupportedLanguage("en", name="English", native_name="English", flag="🇺🇸"),
    SupportedLanguage("fr", name="French", native_name="Français", flag="🇫🇷"),
)


@dataclass(frozen=True, slots=True)
class LocalizationConfig:
    """Immutable configuration for a Localization instance.

    All fields have defaults; ``LocalizationConfig()`` yields English and
    French with English as default and fallback, and the standard namespace
    set.

    Attributes:
        languages: Supported languages, as codes or SupportedLanguage records.
            Normalized to a tuple of SupportedLanguage, duplicates removed
            in order.
        default_language: Used when neither a stored nor a detected language
            is supported.
        fallback_language: Target of the single fallback hop. Defaults to
            ``default_language``.
        namespaces: Namespaces known to the application.
        default_namespace: Used by translate() when no namespace is given.
        storage_key: Persistence key for the active language preference.

    Example:
        >>> config = LocalizationConfig(languages=("en", "fr", "de"))
        >>> config.language_codes
        ('en', 'fr', 'de')
        >>> config.fallback_language
        'en'
    """

    languages: Iterable[SupportedLanguage | str] = DEFAULT_LANGUAGES
    default_language: str = DEFAULT_LANGUAGE
    fallback_language: str | None = None
    namespaces: Iterable[str] = DEFAULT_NAMESPACES
    default_namespace: str = DEFAULT_NAMESPACE
    storage_key: str = DEFAULT_STORAGE_KEY
    _by_code: dict[str, SupportedLanguage] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize collections and validate cross-field constraints.

        Raises:
            ValueError: If no languages or namespaces are configured, if the
                default or fallback language is not supported, if the default
                namespace is unknown, or if storage_key is empty
        """
        by_code: dict[str, SupportedLanguage] = {}
        for item in self.languages:
            language = item if isinstance(item, SupportedLanguage) else SupportedLanguage(item)
            by_code.setdefault(language.code, language)
        if not by_code:
            msg = "At least one supported language is required"
            raise ValueError(msg)
        object.__setattr__(self, "languages", tuple(by_code.values()))
        object.__setattr__(self, "_by_code", by_code)

        if self.default_language not in by_code:
            msg = (
                f"default_language '{self.default_language}' is not in supported "
                f"languages {tuple(by_code)}"
            )
            raise ValueError(msg)

        if self.fallback_language is None:
            object.__setattr__(self, "fallback_language", self.default_language)
        elif self.fallback_language not in by_code:
            msg = (
                f"fallback_language '{self.fallback_language}' is not in supported "
                f"languages {tuple(by_code)}"
            )
            raise ValueError(msg)

        # dict.fromkeys() removes duplicates while maintaining insertion order
        namespaces = tuple(dict.fromkeys(self.namespaces))
        if not namespaces:
            msg = "At least one namespace is required"
            raise ValueError(msg)
        object.__setattr__(self, "namespaces", namespaces)

        if self.default_namespace not in namespaces:
            msg = f"default_namespace '{self.default_namespace}' not in namespaces {namespaces}"
            raise ValueError(msg)

        if not self.storage_key:
            msg = "storage_key cannot be empty"
            raise ValueError(msg)

    @property
    def language_codes(self) -> tuple[str, ...]:
        """Supported language codes in configuration order."""
        return tuple(self._by_code)

    @property
    def resolved_fallback(self) -> str:
        """Fallback language as a plain string (never None after init)."""
        return self.fallback_language or self.default_language

    def is_supported(self, code: str) -> bool:
        """Check whether ``code`` is exactly one of the supported codes."""
        return code in self._by_code

    def get_language(self, code: str) -> SupportedLanguage | None:
        """Look up the SupportedLanguage record for ``code``."""
        return self._by_code.get(code)
