"""Namespace-scoped localization package.

Provides the full loader stack: type aliases, resource fetching, the
single-hop fallback resolver, the bundle cache, language preference
ownership and the consumer-facing orchestrator.

Submodules:
    types        - PEP 695 type aliases and the EMPTY_BUNDLE sentinel
    loading      - ResourceFetcher protocol, concrete fetchers, load results
    fallback     - FallbackResolver
    cache        - NamespaceCache (single-flight memo)
    storage      - KeyValueStore protocol, MemoryStore, JsonFileStore
    preferences  - LanguagePreferenceStore
    orchestrator - Localization, FixedTranslator

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from nsl10n.enums import LoadStatus, PreferenceSource
from nsl10n.localization.cache import NamespaceCache
from nsl10n.localization.fallback import FallbackResolver
from nsl10n.localization.loading import (
    CallbackResourceFetcher,
    FallbackInfo,
    HttpResourceFetcher,
    LoadSummary,
    MappingResourceFetcher,
    PathResourceFetcher,
    ResourceFetcher,
    ResourceLoadResult,
    parse_bundle,
)
from nsl10n.localization.orchestrator import FixedTranslator, Localization, lookup_key
from nsl10n.localization.preferences import (
    LanguageDetector,
    LanguageListener,
    LanguagePreferenceStore,
)
from nsl10n.localization.storage import JsonFileStore, KeyValueStore, MemoryStore
from nsl10n.localization.types import (
    EMPTY_BUNDLE,
    Bundle,
    BundleValue,
    LanguageCode,
    Namespace,
    TranslationKey,
    freeze_bundle,
    is_empty_sentinel,
)

__all__ = [
    # Main orchestrator
    "Localization",
    "FixedTranslator",
    "lookup_key",
    # Core components
    "NamespaceCache",
    "FallbackResolver",
    "LanguagePreferenceStore",
    # Fetcher protocol and implementations
    "ResourceFetcher",
    "MappingResourceFetcher",
    "CallbackResourceFetcher",
    "PathResourceFetcher",
    "HttpResourceFetcher",
    "parse_bundle",
    # Persistence boundary
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    # Load tracking
    "LoadStatus",
    "LoadSummary",
    "ResourceLoadResult",
    # Observability
    "FallbackInfo",
    "PreferenceSource",
    "LanguageDetector",
    "LanguageListener",
    # Types and sentinel
    "EMPTY_BUNDLE",
    "Bundle",
    "BundleValue",
    "LanguageCode",
    "Namespace",
    "TranslationKey",
    "freeze_bundle",
    "is_empty_sentinel",
]
