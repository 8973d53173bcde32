"""Active language ownership, precedence and change notification.

LanguagePreferenceStore is the single owner of the active language and the
only writer of its persistence key. At construction it resolves the active
language from, in order:

1. the persisted explicit choice, if present and supported;
2. the language detected from the runtime environment, if supported;
3. the configured default language.

Candidates from (1) and (2) are reduced to their primary language subtag
first ("fr-CA" -> "fr"). Explicit set_active_language() calls must name a
supported code exactly.

Subscribers form an explicit observer list and receive the new language
after each successful set_active_language().

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from nsl10n.config import LocalizationConfig
from nsl10n.enums import PreferenceSource
from nsl10n.errors import UnsupportedLanguageError
from nsl10n.locale_utils import clean_language_code, detect_system_language
from nsl10n.localization.storage import KeyValueStore, MemoryStore
from nsl10n.localization.types import LanguageCode

__all__ = ["LanguageDetector", "LanguageListener", "LanguagePreferenceStore"]

logger = logging.getLogger(__name__)

type LanguageDetector = Callable[[], str | None]
"""Returns a best-guess locale from the environment, possibly unsupported."""

type LanguageListener = Callable[[LanguageCode], None]
"""Receives the new active language after a successful change."""


class LanguagePreferenceStore:
    """Own the active language and its persisted preference.

    Example:
        >>> store = LanguagePreferenceStore(LocalizationConfig(), MemoryStore())
        >>> store.active_language
        'en'
        >>> unsubscribe = store.subscribe(lambda lang: print("now", lang))
        >>> store.set_active_language("fr")
        now fr
        >>> unsubscribe()
    """

    __slots__ = ("_active", "_config", "_detector", "_listeners", "_source", "_storage")

    def __init__(
        self,
        config: LocalizationConfig,
        storage: KeyValueStore | None = None,
        *,
        detector: LanguageDetector | None = detect_system_language,
    ) -> None:
        """Resolve the initial active language.

        Args:
            config: Supported languages, default language and storage key
            storage: Persistence boundary. Defaults to a fresh MemoryStore.
            detector: Environment detection boundary; None disables detection
        """
        self._config = config
        self._storage: KeyValueStore = storage if storage is not None else MemoryStore()
        self._detector = detector
        self._listeners: list[LanguageListener] = []
        self._active, self._source = self._resolve_initial(include_stored=True)
        logger.info("Active language '%s' (%s)", self._active, self._source)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"LanguagePreferenceStore(active={self._active!r}, source={self._source!s})"

    @property
    def config(self) -> LocalizationConfig:
        """Configuration the store validates against."""
        return self._config

    @property
    def active_language(self) -> LanguageCode:
        """Current active language (always supported)."""
        return self._active

    @property
    def source(self) -> PreferenceSource:
        """Where the current active language came from."""
        return self._source

    def get_active_language(self) -> LanguageCode:
        """Return the current active language."""
        return self._active

    def _supported_candidate(self, raw: str | None) -> LanguageCode | None:
        if not raw:
            return None
        code = clean_language_code(raw)
        return code if self._config.is_supported(code) else None

    def _read_stored(self) -> str | None:
        try:
            return self._storage.get(self._config.storage_key)
        except OSError as e:
            logger.warning("Failed to read stored language preference: %s", e)
            return None

    def _detect(self) -> str | None:
        if self._detector is None:
            return None
        try:
            return self._detector()
        except (OSError, ValueError) as e:
            logger.warning("Language detection failed: %s", e)
            return None

    def _resolve_initial(self, *, include_stored: bool) -> tuple[LanguageCode, PreferenceSource]:
        if include_stored:
            stored_raw = self._read_stored()
            stored = self._supported_candidate(stored_raw)
            if stored is not None:
                return stored, PreferenceSource.STORED
            if stored_raw:
                logger.warning("Ignoring unsupported stored language '%s'", stored_raw)

        detected_raw = self._detect()
        detected = self._supported_candidate(detected_raw)
        if detected is not None:
            return detected, PreferenceSource.DETECTED
        if detected_raw:
            logger.debug("Detected language '%s' is not supported", detected_raw)

        return self._config.default_language, PreferenceSource.DEFAULT

    def stored_language(self) -> LanguageCode | None:
        """Return the persisted preference if it names a supported language."""
        return self._supported_candidate(self._read_stored())

    def set_active_language(self, code: LanguageCode) -> None:
        """Persist and activate ``code``, then notify subscribers.

        Persistence happens first; if it raises, the active language is left
        unchanged so memory and storage never diverge.

        Args:
            code: Exact supported language code

        Raises:
            UnsupportedLanguageError: If code is not in the supported set
            OSError: If the persistence layer fails to store the value
        """
        if not self._config.is_supported(code):
            raise UnsupportedLanguageError(code, self._config.language_codes)

        self._storage.set(self._config.storage_key, code)
        previous = self._active
        self._active = code
        self._source = PreferenceSource.EXPLICIT
        logger.info("Language changed from '%s' to '%s'", previous, code)
        self._notify(code)

    def clear_preference(self) -> LanguageCode:
        """Forget the persisted choice and re-resolve from environment/default.

        Subscribers are notified only if the active language changes.

        Returns:
            The active language after re-resolution

        Raises:
            OSError: If the persistence layer fails to remove the value
        """
        self._storage.remove(self._config.storage_key)
        previous = self._active
        self._active, self._source = self._resolve_initial(include_stored=False)
        if self._active != previous:
            logger.info("Language reset from '%s' to '%s'", previous, self._active)
            self._notify(self._active)
        return self._active

    def subscribe(self, listener: LanguageListener) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Called with the new language after each change

        Returns:
            Function that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: LanguageListener) -> bool:
        """Remove a listener.

        Returns:
            True if the listener was registered
        """
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _notify(self, language: LanguageCode) -> None:
        # Snapshot: listeners may unsubscribe while being notified
        for listener in tuple(self._listeners):
            try:
                listener(language)
            except Exception:
                logger.exception("Language change listener %r failed", listener)
