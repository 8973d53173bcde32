"""Type aliases and the empty-bundle sentinel for the localization domain.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

__all__ = [
    "EMPTY_BUNDLE",
    "Bundle",
    "BundleValue",
    "LanguageCode",
    "Namespace",
    "TranslationKey",
    "freeze_bundle",
    "is_empty_sentinel",
]

type LanguageCode = str
"""Primary language subtag from the supported set (e.g., 'en', 'fr')."""

type Namespace = str
"""Name of a translation bundle (e.g., 'common', 'dashboard')."""

type TranslationKey = str
"""Key inside a bundle; dots address nested groups (e.g., 'menu.title')."""

type BundleValue = str | Mapping[str, BundleValue]
"""A literal translation or a nested group of translations."""

type Bundle = Mapping[str, BundleValue]
"""Immutable mapping from translation key to BundleValue."""


EMPTY_BUNDLE: Bundle = MappingProxyType({})
"""Sentinel returned when a bundle could not be loaded even after fallback.

Compare by identity (``bundle is EMPTY_BUNDLE``); a resource that exists but
is empty yields a different, equal-but-not-identical mapping.
"""


def is_empty_sentinel(bundle: Bundle) -> bool:
    """Check whether ``bundle`` is the failed-load sentinel."""
    return bundle is EMPTY_BUNDLE


def freeze_bundle(data: Mapping[str, BundleValue]) -> Bundle:
    """Return a read-only deep view of a validated bundle.

    Nested groups are copied into fresh dicts and wrapped in
    MappingProxyType, so no caller can mutate a cached bundle in place.

    Args:
        data: Validated mapping of str to str or nested mapping

    Returns:
        Read-only Bundle
    """
    frozen: dict[str, BundleValue] = {}
    for key, value in data.items():
        frozen[key] = value if isinstance(value, str) else freeze_bundle(value)
    return MappingProxyType(frozen)
