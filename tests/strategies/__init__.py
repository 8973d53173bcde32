"""Hypothesis strategies for nsl10n property-based testing.

Strategies are organized by domain; currently everything lives in
``tests.strategies.localization``.

Usage:
    from tests.strategies import bundles, language_sets
    from tests.strategies.localization import resource_tables, leaf_paths

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - language_sets, bundles, resource_tables
"""

from .localization import (
    bundles,
    key_segments,
    language_codes,
    language_sets,
    leaf_paths,
    namespaces,
    resource_tables,
    translation_texts,
)

__all__ = [
    "bundles",
    "key_segments",
    "language_codes",
    "language_sets",
    "leaf_paths",
    "namespaces",
    "resource_tables",
    "translation_texts",
]
