"""End-to-end scenarios over real fetchers and persistence.

Exercises the full stack (fetcher -> resolver -> cache -> orchestrator,
with LanguagePreferenceStore over a JSON file) the way an application
would wire it.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from nsl10n import (
    EMPTY_BUNDLE,
    FallbackResolver,
    HttpResourceFetcher,
    JsonFileStore,
    LanguagePreferenceStore,
    Localization,
    LocalizationConfig,
    MappingResourceFetcher,
    NamespaceCache,
    PathResourceFetcher,
    UnsupportedLanguageError,
)
from tests.helpers.fetchers import EN_COMMON, EN_DASHBOARD, FR_COMMON, CountingFetcher


@pytest.fixture
def locales(tmp_path: Path) -> Path:
    """en/{common,dashboard}.json and fr/common.json on disk."""
    root = tmp_path / "locales"
    for language, namespace, payload in (
        ("en", "common", EN_COMMON),
        ("en", "dashboard", EN_DASHBOARD),
        ("fr", "common", FR_COMMON),
    ):
        path = root / language / f"{namespace}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return root


class TestReferenceScenario:
    """Supported {en, fr}, default en, fallback en."""

    async def test_scenario(self, config: LocalizationConfig) -> None:
        """fr/dashboard falls back, fr/ghost is empty, de is rejected."""
        fetcher = MappingResourceFetcher(
            {("en", "dashboard"): EN_DASHBOARD, ("en", "common"): EN_COMMON}
        )
        cache = NamespaceCache(FallbackResolver(fetcher), config.resolved_fallback)
        store = LanguagePreferenceStore(config, detector=None)

        en_dashboard = await fetcher.fetch("en", "dashboard")
        assert await cache.get_bundle("fr", "dashboard") == en_dashboard
        assert await cache.get_bundle("fr", "ghost") is EMPTY_BUNDLE

        with pytest.raises(UnsupportedLanguageError):
            store.set_active_language("de")
        assert store.get_active_language() == "en"


class TestFilesystemApplication:
    """PathResourceFetcher plus JsonFileStore across a restart."""

    async def test_language_persists_across_restart(
        self, locales: Path, tmp_path: Path, config: LocalizationConfig
    ) -> None:
        """A chosen language is restored by the next process."""
        prefs = tmp_path / "state" / "prefs.json"

        store = LanguagePreferenceStore(config, JsonFileStore(prefs), detector=None)
        async with Localization(PathResourceFetcher(f"{locales}/{{language}}"), store=store) as app:
            assert await app.translate("save") == "Save"
            await app.change_language("fr")
            assert app.t("save") == "Enregistrer"

        restarted_store = LanguagePreferenceStore(config, JsonFileStore(prefs), detector=None)
        async with Localization(
            PathResourceFetcher(f"{locales}/{{language}}"), store=restarted_store
        ) as app:
            assert app.language == "fr"
            await app.load_namespaces("common", "dashboard")
            assert app.t("welcome", variables={"name": "Anna"}) == "Bienvenue, Anna !"
            assert app.t("dashboard:stats.users", variables={"count": 7}) == "7 users"
            assert app.t("admin:title") == "title"

    async def test_detected_region_locale(self, locales: Path, config: LocalizationConfig) -> None:
        """A detected "fr_CA" activates French."""
        store = LanguagePreferenceStore(config, detector=lambda: "fr_CA")
        async with Localization(PathResourceFetcher(f"{locales}/{{language}}"), store=store) as app:
            assert app.language == "fr"
            assert await app.translate("language.selectLanguage") == "Choisir la langue"
            assert await app.translate("language.currentLanguage") == "language.currentLanguage"

    async def test_load_summary_reports_gaps(
        self, locales: Path, store: LanguagePreferenceStore
    ) -> None:
        """Missing translations are visible in the load summary."""
        async with Localization(PathResourceFetcher(f"{locales}/{{language}}"), store=store) as app:
            await app.load_namespaces("common", "dashboard", language="fr")
            summary = app.get_load_summary()
        assert [(r.language, r.namespace) for r in summary.get_not_found()] == [
            ("fr", "dashboard")
        ]
        assert summary.get_not_found()[0].source_path.endswith("fr/dashboard.json")  # type: ignore[union-attr]


class TestHttpApplication:
    """HttpResourceFetcher behind the orchestrator."""

    async def test_outage_degrades_to_fallback_then_keys(
        self, store: LanguagePreferenceStore
    ) -> None:
        """A 503 for fr uses en; an unreachable en renders keys."""
        hits: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            hits.append(request.url.path)
            match request.url.path:
                case "/fr/common.json":
                    return httpx.Response(503)
                case "/en/common.json":
                    return httpx.Response(200, json=EN_COMMON)
                case _:
                    return httpx.Response(404)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="https://cdn.test"
        ) as client:
            fetcher = HttpResourceFetcher(
                "https://cdn.test/{language}/{namespace}.json", client=client
            )
            async with Localization(fetcher, store=store) as app:
                assert await app.translate("save", language="fr") == "Save"
                assert await app.translate("title", "profile", language="fr") == "title"
                assert app.get_load_summary().errors == 1
            assert not client.is_closed

        assert hits.count("/fr/common.json") == 1


class TestConcurrentConsumers:
    """Many consumers rendering at once share loads."""

    async def test_parallel_translate(self, resources: dict, store: LanguagePreferenceStore) -> None:
        """Fifty concurrent translate() calls cause one fetch per pair."""
        gate = asyncio.Event()
        fetcher = CountingFetcher(resources, gate=gate)
        app = Localization(fetcher, store=store)

        tasks = [
            asyncio.create_task(app.translate(key))
            for key in ("save", "welcome", "dashboard:title", "missing") * 10
        ] + [asyncio.create_task(app.translate("save", language="fr")) for _ in range(10)]
        while len(fetcher.calls) < 3:
            await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*tasks)

        assert results.count("Save") == 10
        assert results.count("Enregistrer") == 10
        assert results.count("Dashboard") == 10
        assert sorted(fetcher.calls) == [
            ("en", "common"),
            ("en", "dashboard"),
            ("fr", "common"),
        ]
        await app.aclose()
