"""Shared constants for nsl10n.

Centralizes the defaults used by configuration, the resource fetchers and
the rendering boundary. Placing them here avoids circular imports between
the configuration and localization packages.

Constants are grouped by domain:
- Languages: default and fallback language
- Namespaces: bundled namespace set and default namespace
- Persistence: key used for the language preference
- Transport: timeouts for remote fetchers
- Diagnostics: retention of load attempts
- Key syntax: separators understood by translate()

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Languages
    "DEFAULT_LANGUAGE",
    # Namespaces
    "DEFAULT_NAMESPACE",
    "DEFAULT_NAMESPACES",
    # Persistence
    "DEFAULT_STORAGE_KEY",
    # Transport
    "DEFAULT_FETCH_TIMEOUT",
    "RESOURCE_FILE_SUFFIX",
    # Diagnostics
    "MAX_LOAD_RESULTS",
    # Key syntax
    "KEY_SEPARATOR",
    "NAMESPACE_SEPARATOR",
]

# ============================================================================
# LANGUAGES
# ============================================================================

# Static default. Also the fallback language unless configured otherwise.
DEFAULT_LANGUAGE: str = "en"

# ============================================================================
# NAMESPACES
# ============================================================================

DEFAULT_NAMESPACE: str = "common"

DEFAULT_NAMESPACES: tuple[str, ...] = (
    "common",
    "navigation",
    "auth",
    "dashboard",
    "admin",
    "patient",
    "caregiver",
    "symptoms",
    "security",
    "profile",
)

# ============================================================================
# PERSISTENCE
# ============================================================================

# The only persistence key written by LanguagePreferenceStore.
DEFAULT_STORAGE_KEY: str = "nsl10n-language"

# ============================================================================
# TRANSPORT
# ============================================================================

# Seconds. Applied by HttpResourceFetcher only; the cache imposes no timeout.
DEFAULT_FETCH_TIMEOUT: float = 10.0

RESOURCE_FILE_SUFFIX: str = ".json"

# ============================================================================
# DIAGNOSTICS
# ============================================================================

# Most recent fetch attempts kept for get_load_summary(); older ones are dropped.
MAX_LOAD_RESULTS: int = 256

# ============================================================================
# KEY SYNTAX
# ============================================================================

# "menu.settings.title" addresses nested groups inside a bundle.
KEY_SEPARATOR: str = "."

# "dashboard:title" selects the namespace inline.
NAMESPACE_SEPARATOR: str = ":"
