"""Consumer-facing localization orchestration.

Localization wires the loader components together and exposes the
rendering boundary:

    fetcher -> FallbackResolver -> NamespaceCache -> translate()/t()
                                        ^
    LanguagePreferenceStore --(change)--+ invalidates the previous language

Key architectural decisions:
- Protocol-based ResourceFetcher injected by the application (dependency
  inversion); no resource paths are built from module names
- Active language owned by LanguagePreferenceStore and observed through an
  explicit subscription, not read from global state
- Missing translations degrade to the raw key; only UnsupportedLanguageError
  reaches callers

Key syntax:
    "title"                 key in the default namespace
    "menu.settings.title"   nested group lookup
    "dashboard:title"       namespace selected inline (configured namespaces only)

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from nsl10n.config import LocalizationConfig, SupportedLanguage
from nsl10n.constants import KEY_SEPARATOR, NAMESPACE_SEPARATOR
from nsl10n.errors import UnsupportedLanguageError
from nsl10n.formatting import interpolate
from nsl10n.localization.cache import NamespaceCache
from nsl10n.localization.fallback import FallbackResolver
from nsl10n.localization.loading import FallbackInfo, LoadSummary, ResourceFetcher
from nsl10n.localization.preferences import LanguagePreferenceStore
from nsl10n.localization.types import Bundle, LanguageCode, Namespace, TranslationKey

__all__ = ["FixedTranslator", "Localization", "lookup_key"]

logger = logging.getLogger(__name__)


def lookup_key(bundle: Bundle, key: TranslationKey) -> str | None:
    """Find the string stored under ``key`` in ``bundle``.

    A literal top-level key holding a string wins over a dotted path; any
    other literal value leaves the dotted path to decide. Lookups that end
    on a nested group rather than a string count as missing.

    Example:
        >>> lookup_key({"menu": {"title": "Menu"}}, "menu.title")
        'Menu'
        >>> lookup_key({"menu": {"title": "Menu"}}, "menu") is None
        True
    """
    value: Any = bundle.get(key)
    if not isinstance(value, str) and KEY_SEPARATOR in key:
        value = bundle
        for part in key.split(KEY_SEPARATOR):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
    return value if isinstance(value, str) else None


class Localization:
    """Namespace-scoped translations with fallback and language selection.

    Example:
        >>> fetcher = PathResourceFetcher("locales/{language}")
        >>> async with Localization(fetcher) as l10n:
        ...     await l10n.load_namespaces("common", "dashboard")
        ...     await l10n.translate("dashboard:title")
        ...     await l10n.change_language("fr")
        ...     l10n.t("welcome", variables={"name": "Anna"})
    """

    __slots__ = ("_cache", "_config", "_fetcher", "_language", "_resolver", "_store", "_unsubscribe")

    def __init__(
        self,
        fetcher: ResourceFetcher,
        config: LocalizationConfig | None = None,
        store: LanguagePreferenceStore | None = None,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            fetcher: Resource source for (language, namespace) bundles
            config: Localization configuration. Defaults to the store's
                configuration, or LocalizationConfig() without a store.
            store: Active language owner. Defaults to a store over an
                in-memory persistence layer with system language detection.
            on_fallback: Optional observer for fallback-language resolutions

        Raises:
            ValueError: If both config and store are given and disagree
        """
        if store is not None and config is not None and store.config != config:
            msg = "config does not match the configuration of the given store"
            raise ValueError(msg)
        if config is None:
            config = store.config if store is not None else LocalizationConfig()
        if store is None:
            store = LanguagePreferenceStore(config)

        self._config = config
        self._store = store
        self._fetcher = fetcher
        self._resolver = FallbackResolver(fetcher, on_fallback=on_fallback)
        self._cache = NamespaceCache(self._resolver, config.resolved_fallback)
        self._language: LanguageCode = store.active_language
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_language_changed)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"Localization(language={self._language!r}, "
            f"languages={self._config.language_codes!r}, cache={self._cache!r})"
        )

    # ------------------------------------------------------------------
    # Language selection
    # ------------------------------------------------------------------

    @property
    def config(self) -> LocalizationConfig:
        """Configuration in effect."""
        return self._config

    @property
    def store(self) -> LanguagePreferenceStore:
        """Owner of the active language."""
        return self._store

    @property
    def cache(self) -> NamespaceCache:
        """Bundle cache."""
        return self._cache

    @property
    def language(self) -> LanguageCode:
        """Current active language."""
        return self._store.active_language

    @property
    def supported_languages(self) -> tuple[SupportedLanguage, ...]:
        """Supported languages with display metadata."""
        return tuple(self._config.languages)

    def is_supported(self, code: str) -> bool:
        """Check whether ``code`` is a supported language code."""
        return self._config.is_supported(code)

    def display_name(self, code: str) -> str:
        """Native display name of a supported language, or ``code`` itself."""
        language = self._config.get_language(code)
        if language is None or not language.native_name:
            return code
        return language.native_name

    def _on_language_changed(self, language: LanguageCode) -> None:
        previous = self._language
        self._language = language
        if previous != language:
            self._cache.invalidate(previous)

    async def change_language(self, code: LanguageCode) -> None:
        """Activate ``code`` and preload the namespaces in use.

        Namespaces loaded for the previous language are loaded for the new
        one; if none were loaded, the default namespace is.

        Raises:
            UnsupportedLanguageError: If code is not supported
        """
        in_use = self._cache.loaded_namespaces(self._language)
        self._store.set_active_language(code)
        await self.load_namespaces(*(in_use or (self._config.default_namespace,)))

    # ------------------------------------------------------------------
    # Bundle access
    # ------------------------------------------------------------------

    def _language_or_active(self, language: LanguageCode | None) -> LanguageCode:
        if language is None:
            return self._store.active_language
        if not self._config.is_supported(language):
            raise UnsupportedLanguageError(language, self._config.language_codes)
        return language

    def _split_key(
        self, key: TranslationKey, namespace: Namespace | None
    ) -> tuple[Namespace, TranslationKey]:
        if namespace is None and NAMESPACE_SEPARATOR in key:
            prefix, _, rest = key.partition(NAMESPACE_SEPARATOR)
            if prefix in self._config.namespaces:
                return prefix, rest
        return namespace or self._config.default_namespace, key

    async def get_bundle(
        self, namespace: Namespace | None = None, *, language: LanguageCode | None = None
    ) -> Bundle:
        """Load (or reuse) the bundle for a namespace.

        Raises:
            UnsupportedLanguageError: If an explicit language is not supported
        """
        return await self._cache.get_bundle(
            self._language_or_active(language), namespace or self._config.default_namespace
        )

    async def load_namespaces(
        self, *namespaces: Namespace, language: LanguageCode | None = None
    ) -> dict[Namespace, Bundle]:
        """Load several namespaces concurrently.

        Args:
            *namespaces: Namespaces to load; all configured namespaces if omitted
            language: Language to load for; the active language if omitted

        Returns:
            Bundles by namespace (EMPTY_BUNDLE for unavailable ones)
        """
        target = self._language_or_active(language)
        names = tuple(dict.fromkeys(namespaces or self._config.namespaces))
        bundles = await asyncio.gather(*(self._cache.get_bundle(target, ns) for ns in names))
        return dict(zip(names, bundles, strict=True))

    async def refresh(self) -> None:
        """Drop all cached bundles and reload those loaded for the active language."""
        in_use = self._cache.loaded_namespaces(self._store.active_language)
        self._cache.invalidate_all()
        if in_use:
            await self.load_namespaces(*in_use)

    # ------------------------------------------------------------------
    # Rendering boundary
    # ------------------------------------------------------------------

    def _render(
        self,
        bundle: Bundle | None,
        key: TranslationKey,
        variables: Mapping[str, Any] | None,
        language: LanguageCode,
        namespace: Namespace,
    ) -> str:
        template = lookup_key(bundle, key) if bundle is not None else None
        if template is None:
            logger.debug("Missing key '%s' in %s/%s", key, language, namespace)
            return key
        return interpolate(template, variables, language=language)

    async def translate(
        self,
        key: TranslationKey,
        namespace: Namespace | None = None,
        variables: Mapping[str, Any] | None = None,
        *,
        language: LanguageCode | None = None,
    ) -> str:
        """Resolve and interpolate a translation, loading its namespace if needed.

        Args:
            key: Translation key (dotted for nested groups, "ns:key" allowed)
            namespace: Namespace; default namespace if omitted
            variables: Interpolation values
            language: Language; active language if omitted

        Returns:
            Interpolated string, or ``key`` when no translation exists

        Raises:
            UnsupportedLanguageError: If an explicit language is not supported
        """
        target = self._language_or_active(language)
        ns, bare_key = self._split_key(key, namespace)
        bundle = await self._cache.get_bundle(target, ns)
        return self._render(bundle, bare_key, variables, target, ns)

    def t(
        self,
        key: TranslationKey,
        namespace: Namespace | None = None,
        variables: Mapping[str, Any] | None = None,
        *,
        language: LanguageCode | None = None,
    ) -> str:
        """Synchronous translate() over already-loaded bundles.

        Returns ``key`` when the namespace has not been loaded yet; call
        load_namespaces() beforehand to avoid that.
        """
        target = self._language_or_active(language)
        ns, bare_key = self._split_key(key, namespace)
        return self._render(self._cache.peek(target, ns), bare_key, variables, target, ns)

    async def exists(
        self,
        key: TranslationKey,
        namespace: Namespace | None = None,
        *,
        language: LanguageCode | None = None,
    ) -> bool:
        """Check whether a translation exists (after fallback) for ``key``."""
        target = self._language_or_active(language)
        ns, bare_key = self._split_key(key, namespace)
        bundle = await self._cache.get_bundle(target, ns)
        return lookup_key(bundle, bare_key) is not None

    def fixed(
        self, language: LanguageCode | None = None, namespace: Namespace | None = None
    ) -> FixedTranslator:
        """Return a translator bound to a language and/or namespace.

        An unbound language follows the active language at call time.

        Raises:
            UnsupportedLanguageError: If language is given and not supported
        """
        if language is not None:
            self._language_or_active(language)
        return FixedTranslator(self, language, namespace)

    # ------------------------------------------------------------------
    # Diagnostics and lifecycle
    # ------------------------------------------------------------------

    def get_load_summary(self) -> LoadSummary:
        """Summary of every fetch attempt made so far."""
        return self._cache.get_load_summary()

    def get_cache_stats(self) -> dict[str, int | float]:
        """Cache statistics (see NamespaceCache.get_stats)."""
        return self._cache.get_stats()

    async def aclose(self) -> None:
        """Stop observing language changes and close the fetcher if closable."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        close = getattr(self._fetcher, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> Localization:
        """Enter async context; returns self."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context via aclose(). Does not suppress exceptions."""
        await self.aclose()


@dataclass(frozen=True, slots=True)
class FixedTranslator:
    """Translator bound to a language and/or namespace.

    Attributes:
        localization: Owning Localization
        language: Bound language, or None to follow the active language
        namespace: Bound namespace, or None for the default namespace

    Example:
        >>> dashboard = l10n.fixed(namespace="dashboard")
        >>> await dashboard("title")
        'Dashboard'
    """

    localization: Localization
    language: LanguageCode | None = None
    namespace: Namespace | None = None

    async def __call__(self, key: TranslationKey, variables: Mapping[str, Any] | None = None) -> str:
        """Translate ``key`` with the bound language and namespace."""
        return await self.localization.translate(
            key, self.namespace, variables, language=self.language
        )

    def t(self, key: TranslationKey, variables: Mapping[str, Any] | None = None) -> str:
        """Synchronous variant over already-loaded bundles."""
        return self.localization.t(key, self.namespace, variables, language=self.language)
