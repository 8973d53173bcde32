"""Tests for SupportedLanguage and LocalizationConfig.

Python 3.13+.
"""

from __future__ import annotations

import dataclasses

import pytest

from nsl10n.config import DEFAULT_LANGUAGES, LocalizationConfig, SupportedLanguage
from nsl10n.constants import DEFAULT_LANGUAGE, DEFAULT_NAMESPACE, DEFAULT_NAMESPACES


class TestSupportedLanguage:
    """Language records and CLDR display names."""

    def test_display_names_from_cldr(self) -> None:
        """Missing names are filled from Babel."""
        language = SupportedLanguage("fr")
        assert language.name == "French"
        assert language.native_name == "français"
        assert language.flag == ""

    def test_explicit_names_kept(self) -> None:
        """Given names are never overwritten."""
        language = SupportedLanguage("fr", name="French", native_name="Français", flag="🇫🇷")
        assert language.native_name == "Français"
        assert language.flag == "🇫🇷"

    def test_partial_names_filled(self) -> None:
        """Only the missing name is looked up."""
        language = SupportedLanguage("de", name="Deutsch (custom)")
        assert language.name == "Deutsch (custom)"
        assert language.native_name == "Deutsch"

    def test_unknown_code_uses_code(self) -> None:
        """Codes without CLDR data display as themselves."""
        language = SupportedLanguage("qq")
        assert language.name == "qq"
        assert language.native_name == "qq"

    @pytest.mark.parametrize("code", ["", "fr-CA", "fr_FR", "FR", " fr"])
    def test_code_must_be_bare_subtag(self, code: str) -> None:
        """Region, case and whitespace are rejected."""
        with pytest.raises(ValueError, match="bare lower-case"):
            SupportedLanguage(code)

    def test_frozen(self) -> None:
        """Records are immutable."""
        language = SupportedLanguage("en")
        with pytest.raises(dataclasses.FrozenInstanceError):
            language.code = "fr"  # type: ignore[misc]


class TestLocalizationConfigDefaults:
    """LocalizationConfig() matches the bundled defaults."""

    def test_defaults(self) -> None:
        """English and French, English default and fallback, standard namespaces."""
        config = LocalizationConfig()
        assert config.language_codes == ("en", "fr")
        assert config.languages == DEFAULT_LANGUAGES
        assert config.default_language == DEFAULT_LANGUAGE
        assert config.fallback_language == DEFAULT_LANGUAGE
        assert config.resolved_fallback == DEFAULT_LANGUAGE
        assert config.namespaces == DEFAULT_NAMESPACES
        assert config.default_namespace == DEFAULT_NAMESPACE

    def test_equal_configs_compare_equal(self) -> None:
        """Equality ignores the internal lookup table."""
        assert LocalizationConfig() == LocalizationConfig()


class TestLocalizationConfigNormalization:
    """Collections are normalized at construction."""

    def test_codes_become_records(self) -> None:
        """Plain codes are wrapped in SupportedLanguage."""
        config = LocalizationConfig(languages=["en", "de"])
        assert all(isinstance(lang, SupportedLanguage) for lang in config.languages)
        assert config.get_language("de") is not None
        assert config.get_language("de").native_name == "Deutsch"  # type: ignore[union-attr]

    def test_duplicates_removed_in_order(self) -> None:
        """The first occurrence of a code wins."""
        config = LocalizationConfig(
            languages=["fr", SupportedLanguage("en", native_name="English (US)"), "en", "fr"],
            default_language="fr",
            namespaces=["common", "auth", "common"],
        )
        assert config.language_codes == ("fr", "en")
        assert config.get_language("en").native_name == "English (US)"  # type: ignore[union-attr]
        assert config.namespaces == ("common", "auth")

    def test_explicit_fallback(self) -> None:
        """A fallback different from the default is kept."""
        config = LocalizationConfig(languages=("en", "fr"), default_language="fr",
                                    fallback_language="en")
        assert config.fallback_language == "en"
        assert config.resolved_fallback == "en"

    def test_is_supported_is_exact(self) -> None:
        """Only exact configured codes are supported."""
        config = LocalizationConfig()
        assert config.is_supported("fr")
        assert not config.is_supported("fr-CA")
        assert not config.is_supported("de")
        assert config.get_language("de") is None


class TestLocalizationConfigValidation:
    """Misconfiguration fails at construction."""

    def test_empty_languages(self) -> None:
        """At least one language is required."""
        with pytest.raises(ValueError, match="At least one supported language"):
            LocalizationConfig(languages=())

    def test_unsupported_default(self) -> None:
        """The default must be supported."""
        with pytest.raises(ValueError, match="default_language 'de'"):
            LocalizationConfig(default_language="de")

    def test_unsupported_fallback(self) -> None:
        """The fallback must be supported."""
        with pytest.raises(ValueError, match="fallback_language 'de'"):
            LocalizationConfig(fallback_language="de")

    def test_empty_namespaces(self) -> None:
        """At least one namespace is required."""
        with pytest.raises(ValueError, match="At least one namespace"):
            LocalizationConfig(namespaces=())

    def test_unknown_default_namespace(self) -> None:
        """The default namespace must be configured."""
        with pytest.raises(ValueError, match="default_namespace 'billing'"):
            LocalizationConfig(default_namespace="billing")

    def test_empty_storage_key(self) -> None:
        """The persistence key cannot be empty."""
        with pytest.raises(ValueError, match="storage_key"):
            LocalizationConfig(storage_key="")

    def test_invalid_code_in_languages(self) -> None:
        """Region-qualified codes are rejected through SupportedLanguage."""
        with pytest.raises(ValueError, match="bare lower-case"):
            LocalizationConfig(languages=("en", "fr-CA"))
