"""Tests for locale code cleanup, Babel lookup and system language detection.

Python 3.13+.
"""

from __future__ import annotations

import locale as locale_module

import pytest
from babel import Locale, UnknownLocaleError

from nsl10n.locale_utils import (
    clean_language_code,
    detect_system_language,
    get_babel_locale,
    normalize_locale,
)


class TestNormalizeLocale:
    """BCP-47 to POSIX conversion."""

    @pytest.mark.parametrize(
        ("given", "expected"),
        [("en-US", "en_US"), ("pt-BR", "pt_BR"), ("en", "en"), ("zh-Hant-TW", "zh_Hant_TW")],
    )
    def test_hyphens_become_underscores(self, given: str, expected: str) -> None:
        """Hyphens are replaced, nothing else changes."""
        assert normalize_locale(given) == expected


class TestCleanLanguageCode:
    """Reduction to the primary language subtag."""

    @pytest.mark.parametrize(
        ("given", "expected"),
        [
            ("fr", "fr"),
            ("fr-CA", "fr"),
            ("fr_FR", "fr"),
            ("de_DE.UTF-8", "de"),
            ("sr_RS@latin", "sr"),
            (" EN ", "en"),
            ("PT-br", "pt"),
            ("", ""),
        ],
    )
    def test_cleaning(self, given: str, expected: str) -> None:
        """Region, encoding, modifier and case are dropped."""
        assert clean_language_code(given) == expected

    def test_idempotent(self) -> None:
        """Cleaning a cleaned code is a no-op."""
        assert clean_language_code(clean_language_code("es-MX.UTF-8")) == "es"


class TestGetBabelLocale:
    """Cached Babel Locale lookup."""

    def test_accepts_bcp47(self) -> None:
        """Hyphenated codes are normalized before parsing."""
        result = get_babel_locale("en-GB")
        assert isinstance(result, Locale)
        assert result.territory == "GB"

    def test_cached(self) -> None:
        """Repeated lookups return the same object."""
        assert get_babel_locale("fr") is get_babel_locale("fr")

    def test_unknown_locale_raises(self) -> None:
        """Codes without CLDR data raise UnknownLocaleError."""
        with pytest.raises(UnknownLocaleError):
            get_babel_locale("xx")


class TestDetectSystemLanguage:
    """Environment-based detection."""

    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setattr(locale_module, "getlocale", lambda: (None, None))

    def test_getlocale_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The OS-level locale is consulted first."""
        monkeypatch.setattr(locale_module, "getlocale", lambda: ("fr_FR", "UTF-8"))
        monkeypatch.setenv("LANG", "de_DE.UTF-8")
        assert detect_system_language() == "fr_FR"

    def test_env_precedence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LC_ALL overrides LC_MESSAGES which overrides LANG."""
        monkeypatch.setenv("LANG", "de_DE.UTF-8")
        assert detect_system_language() == "de_DE"
        monkeypatch.setenv("LC_MESSAGES", "es_ES.UTF-8")
        assert detect_system_language() == "es_ES"
        monkeypatch.setenv("LC_ALL", "it_IT")
        assert detect_system_language() == "it_IT"

    @pytest.mark.parametrize("value", ["C", "POSIX", "C.UTF-8"])
    def test_pseudo_locales_ignored(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        """C and POSIX do not name a language."""
        monkeypatch.setenv("LC_ALL", value)
        monkeypatch.setenv("LANG", "lv_LV.UTF-8")
        assert detect_system_language() == "lv_LV"

    def test_getlocale_value_error_falls_through(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A broken OS locale does not abort detection."""

        def broken() -> tuple[str | None, str | None]:
            raise ValueError("unknown locale")

        monkeypatch.setattr(locale_module, "getlocale", broken)
        monkeypatch.setenv("LANG", "pl_PL")
        assert detect_system_language() == "pl_PL"

    def test_nothing_detected(self) -> None:
        """No locale anywhere yields None."""
        assert detect_system_language() is None
