"""nsl10n Example - Namespace Loading with Single-Hop Fallback.

Demonstrates real-world usage of Localization for an application whose
translations are split into namespaces and only partially translated.

Scenarios covered:
1. Partial French translations falling back to English per namespace
2. Disk-based resources with a persisted language choice
3. Injected resolver function instead of paths
4. Load summary and fallback observer for spotting untranslated namespaces

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
import tempfile
from pathlib import Path

from nsl10n import (
    JsonFileStore,
    LanguagePreferenceStore,
    Localization,
    LocalizationConfig,
    MappingResourceFetcher,
    PathResourceFetcher,
)
from nsl10n.localization import CallbackResourceFetcher, FallbackInfo

RESOURCES = {
    ("en", "common"): {"save": "Save", "welcome": "Welcome, {{name}}!"},
    ("en", "dashboard"): {"title": "Dashboard", "stats": {"users": "{{count}} users"}},
    ("fr", "common"): {"save": "Enregistrer", "welcome": "Bienvenue, {{name}} !"},
}


async def example_1_namespace_fallback() -> None:
    """Example 1: French common, English dashboard."""
    print("=" * 60)
    print("Example 1: Namespace Fallback (fr -> en)")
    print("=" * 60)

    config = LocalizationConfig(languages=("en", "fr"), default_language="en")
    store = LanguagePreferenceStore(config, detector=None)
    async with Localization(MappingResourceFetcher(RESOURCES), store=store) as l10n:
        await l10n.change_language("fr")
        await l10n.load_namespaces("common", "dashboard")

        print(l10n.t("welcome", variables={"name": "Anna"}))  # Bienvenue, Anna !
        print(l10n.t("dashboard:title"))  # Dashboard (from en)
        print(l10n.t("dashboard:stats.users", variables={"count": 3}))  # 3 users
        print(l10n.t("dashboard:missing"))  # missing (raw key)


async def example_2_disk_and_persistence(tmp_dir: Path) -> None:
    """Example 2: JSON files on disk, language remembered across restarts."""
    print("\n" + "=" * 60)
    print("Example 2: Disk Resources + Persisted Preference")
    print("=" * 60)

    for (language, namespace), bundle in RESOURCES.items():
        path = tmp_dir / "locales" / language / f"{namespace}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(bundle, ensure_ascii=False), encoding="utf-8")

    config = LocalizationConfig()
    prefs = JsonFileStore(tmp_dir / "prefs.json")
    fetcher = PathResourceFetcher(str(tmp_dir / "locales" / "{language}"))

    store = LanguagePreferenceStore(config, prefs, detector=None)
    async with Localization(fetcher, store=store) as l10n:
        print(f"First run: {l10n.language} ({store.source})")
        await l10n.change_language("fr")

    store = LanguagePreferenceStore(config, prefs, detector=None)
    async with Localization(fetcher, store=store) as l10n:
        print(f"Second run: {l10n.language} ({store.source})")
        print(await l10n.translate("save"))  # Enregistrer


async def example_3_injected_resolver() -> None:
    """Example 3: Resources served by an application-supplied coroutine."""
    print("\n" + "=" * 60)
    print("Example 3: Injected Resolver")
    print("=" * 60)

    async def from_database(language: str, namespace: str) -> dict[str, object] | None:
        await asyncio.sleep(0)  # stands in for a database round trip
        return RESOURCES.get((language, namespace))  # type: ignore[return-value]

    async with Localization(CallbackResourceFetcher(from_database)) as l10n:
        print(await l10n.translate("save", language="fr"))  # Enregistrer
        print(await l10n.translate("title", "dashboard", language="fr"))  # Dashboard


async def example_4_diagnostics() -> None:
    """Example 4: Finding untranslated namespaces."""
    print("\n" + "=" * 60)
    print("Example 4: Load Summary and Fallback Observer")
    print("=" * 60)

    def report(info: FallbackInfo) -> None:
        print(f"  fallback: {info.namespace} {info.requested_language} -> {info.resolved_language}")

    async with Localization(MappingResourceFetcher(RESOURCES), on_fallback=report) as l10n:
        await l10n.load_namespaces(language="fr")
        summary = l10n.get_load_summary()
        print(f"  {summary!r}")
        for result in summary.get_not_found():
            print(f"  [--] {result.source_path}")
        print(f"  cache: {l10n.get_cache_stats()}")


async def main() -> None:
    await example_1_namespace_fallback()
    with tempfile.TemporaryDirectory() as tmp_dir:
        await example_2_disk_and_persistence(Path(tmp_dir))
    await example_3_injected_resolver()
    await example_4_diagnostics()

    print("\n" + "=" * 60)
    print("[SUCCESS] All examples complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
