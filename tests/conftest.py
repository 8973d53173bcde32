"""Shared pytest configuration for nsl10n.

Hypothesis profiles (max_examples is set here and nowhere else):
    dev      200 examples, random seed (default for local runs)
    ci       50 examples, derandomized (chosen when CI=true)
    verbose  100 examples with per-example output

HYPOTHESIS_PROFILE overrides the automatic choice.

Tests marked ``fuzz`` only run when selected with ``pytest -m fuzz``.

Fixtures:
    resources / fetcher - en/common, en/dashboard and fr/common behind a
        CountingFetcher (see tests/helpers/fetchers.py)
    config / memory_store / store - supported {en, fr}, default and fallback
        en, nothing persisted, detection disabled
"""

from __future__ import annotations

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from nsl10n.config import LocalizationConfig
from nsl10n.localization.preferences import LanguagePreferenceStore
from nsl10n.localization.storage import MemoryStore
from tests.helpers.fetchers import CountingFetcher, sample_resources

_ALL_PHASES = (Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink)

_PROFILES: dict[str, dict[str, Any]] = {
    "dev": {"max_examples": 200},
    "ci": {"max_examples": 50, "derandomize": True, "print_blob": True},
    "verbose": {"max_examples": 100, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(_name, phases=_ALL_PHASES, **_options)


def _select_profile() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE", "")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_select_profile())


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip ``fuzz`` tests unless the marker expression asks for them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return
    skip = pytest.mark.skip(reason="fuzz test; select with: pytest -m fuzz")
    for item in items:
        if item.get_closest_marker("fuzz") is not None:
            item.add_marker(skip)


@pytest.fixture
def resources() -> dict[tuple[str, str], dict[str, Any]]:
    """en has common and dashboard; fr only has common."""
    return sample_resources()


@pytest.fixture
def fetcher(resources: dict[tuple[str, str], dict[str, Any]]) -> CountingFetcher:
    return CountingFetcher(resources)


@pytest.fixture
def config() -> LocalizationConfig:
    """Supported {en, fr}, default en, fallback en."""
    return LocalizationConfig(languages=("en", "fr"), default_language="en")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(config: LocalizationConfig, memory_store: MemoryStore) -> LanguagePreferenceStore:
    """Preference store with no stored value and detection disabled."""
    return LanguagePreferenceStore(config, memory_store, detector=None)
