"""nsl10n - namespace-scoped localization loading with fallback.

Asynchronously fetches translation bundles per (language, namespace),
falls back once to a configured language when a bundle is unavailable,
memoizes results with single-flight loading, and owns the active language
with a stored -> detected -> default precedence.

Public API:
    Localization - Consumer-facing orchestrator (translate, t, change_language)
    LocalizationConfig - Supported languages, namespaces, defaults
    SupportedLanguage - Language record with CLDR display names
    LanguagePreferenceStore - Active language owner
    NamespaceCache - Bundle memo with invalidation
    FallbackResolver - Single-hop fallback around a fetcher
    PathResourceFetcher, HttpResourceFetcher, MappingResourceFetcher - Fetchers
    EMPTY_BUNDLE - Sentinel for bundles unavailable even after fallback
    interpolate - {{variable, format}} substitution

Exceptions:
    L10nError - Base exception class
    ResourceNotFoundError - Resource absent for the exact pair
    TransportError - Retrieval mechanism failed
    UnsupportedLanguageError - Language outside the supported set

Submodules:
    nsl10n.localization - Loader components, fetchers, storage
    nsl10n.formatting - Interpolation utility
    nsl10n.locale_utils - Code cleanup, Babel lookup, system language detection
"""

from .config import LocalizationConfig, SupportedLanguage
from .errors import (
    L10nError,
    MalformedResourceError,
    ResourceNotFoundError,
    TransportError,
    UnsupportedLanguageError,
)
from .formatting import interpolate
from .localization import (
    EMPTY_BUNDLE,
    FallbackResolver,
    HttpResourceFetcher,
    JsonFileStore,
    LanguagePreferenceStore,
    Localization,
    MappingResourceFetcher,
    MemoryStore,
    NamespaceCache,
    PathResourceFetcher,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("nsl10n")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "EMPTY_BUNDLE",
    "FallbackResolver",
    "HttpResourceFetcher",
    "JsonFileStore",
    "L10nError",
    "LanguagePreferenceStore",
    "Localization",
    "LocalizationConfig",
    "MalformedResourceError",
    "MappingResourceFetcher",
    "MemoryStore",
    "NamespaceCache",
    "PathResourceFetcher",
    "ResourceNotFoundError",
    "SupportedLanguage",
    "TransportError",
    "UnsupportedLanguageError",
    "__version__",
    "interpolate",
]
