"""Tests for infrastructure.i18n.models module."""

import pytest

from infrastructure.i18n import (
    LanguageRegistry,
    PluralCategory,
    RequestLanguageContext,
    SignalSource,
    TextDirection,
    UnsupportedLanguageError,
)
from tests.factories.i18n import make_language


class TestPluralCategory:
    """Tests for PluralCategory enum."""

    def test_suffix(self):
        """suffix is the catalog key suffix."""
        assert PluralCategory.ONE.suffix == "_one"
        assert PluralCategory.OTHER.suffix == "_other"

    def test_ordered_is_canonical(self):
        """ordered() sorts in CLDR order and drops duplicates."""
        result = PluralCategory.ordered(
            [PluralCategory.OTHER, PluralCategory.ZERO, PluralCategory.OTHER]
        )
        assert result == (PluralCategory.ZERO, PluralCategory.OTHER)


class TestLanguageDescriptor:
    """Tests for LanguageDescriptor."""

    def test_is_rtl(self):
        """is_rtl reflects the direction."""
        assert make_language("ar", direction=TextDirection.RTL).is_rtl is True
        assert make_language("fr").is_rtl is False

    def test_requires(self):
        """requires() checks the plural categories."""
        lang = make_language("en")
        assert lang.requires(PluralCategory.ONE)
        assert not lang.requires(PluralCategory.FEW)

    def test_is_immutable(self):
        """Descriptors are frozen."""
        lang = make_language("fr")
        with pytest.raises(AttributeError):
            lang.code = "en"

    def test_to_dict(self):
        """to_dict() exposes labels and direction."""
        data = make_language("ar", direction=TextDirection.RTL, label="Arabic").to_dict()
        assert data["code"] == "ar"
        assert data["direction"] == "rtl"
        assert data["label"] == "Arabic"
        assert data["plural_categories"] == ["one", "other"]


class TestLanguageRegistry:
    """Tests for LanguageRegistry."""

    def test_codes_keep_configured_order(self, registry):
        """codes are in configured order."""
        assert registry.codes == ["fr", "ar", "en", "tz-ltn", "tz-tfng"]

    def test_default(self, registry):
        """default returns the default descriptor."""
        assert registry.default.code == "fr"

    def test_contains(self, registry):
        """Membership is exact."""
        assert "ar" in registry
        assert "de" not in registry
        assert None not in registry

    def test_get_unknown_raises(self, registry):
        """get() raises UnsupportedLanguageError for unknown codes."""
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            registry.get("de")
        assert exc_info.value.code == "de"
        assert "fr" in exc_info.value.supported

    def test_unsupported_language_error_is_value_error(self, registry):
        """UnsupportedLanguageError can be caught as ValueError."""
        with pytest.raises(ValueError):
            registry.get("de")

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("fr", "fr"),
            ("FR", "fr"),
            (" en ", "en"),
            ("fr-FR", "fr"),
            ("ar_DZ", "ar"),
            ("en-US;q=0.8", "en"),
            ("tz-ltn", "tz-ltn"),
            ("TZ-TFNG", "tz-tfng"),
            ("kab", "tz-ltn"),
            ("zgh-Tfng", "tz-ltn"),
            ("tmh", "tz-tfng"),
        ],
    )
    def test_match(self, registry, raw, expected):
        """match() folds case, subtags and aliases."""
        assert registry.match(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "de", "de-DE", "*", "english", 42])
    def test_match_non_members(self, registry, raw):
        """match() returns None for non-members."""
        assert registry.match(raw) is None

    def test_require(self, registry):
        """require() maps or raises."""
        assert registry.require("ar-MA") == "ar"
        with pytest.raises(UnsupportedLanguageError):
            registry.require("de")

    def test_direction(self, registry):
        """direction_of() and is_rtl() report Arabic as RTL."""
        assert registry.direction_of("ar") == TextDirection.RTL
        assert registry.is_rtl("ar-DZ") is True
        assert registry.is_rtl("fr") is False
        assert registry.is_rtl("de") is False

    def test_describe(self, registry):
        """describe() lists every language with labels and direction."""
        described = registry.describe()
        assert [d["code"] for d in described] == registry.codes
        assert described[1]["direction"] == "rtl"

    def test_rejects_unknown_default(self):
        """The default must be a supported code."""
        with pytest.raises(ValueError):
            LanguageRegistry(languages=(make_language("fr"),), default_code="en")

    def test_rejects_duplicates(self):
        """Codes must be unique."""
        with pytest.raises(ValueError):
            LanguageRegistry(
                languages=(make_language("fr"), make_language("fr")),
                default_code="fr",
            )

    def test_rejects_dangling_alias(self):
        """Aliases must point at supported codes."""
        with pytest.raises(ValueError):
            LanguageRegistry(
                languages=(make_language("fr"),),
                default_code="fr",
                aliases={"ber": "tz-ltn"},
            )

    def test_rejects_language_without_other(self):
        """Every language requires the 'other' plural category."""
        with pytest.raises(ValueError):
            LanguageRegistry(
                languages=(make_language("fr", plural_categories=[PluralCategory.ONE]),),
                default_code="fr",
            )

    def test_rejects_empty(self):
        """At least one language is required."""
        with pytest.raises(ValueError):
            LanguageRegistry(languages=(), default_code="fr")


class TestRequestLanguageContext:
    """Tests for RequestLanguageContext."""

    def test_should_persist_when_override_changes_preference(self):
        """An override differing from the stored preference is persisted."""
        context = RequestLanguageContext(
            language="ar",
            direction=TextDirection.RTL,
            source=SignalSource.OVERRIDE,
            persisted_preference="fr",
        )
        assert context.should_persist is True
        assert context.is_rtl is True

    def test_no_persist_when_override_matches_preference(self):
        """An override equal to the stored preference is not rewritten."""
        context = RequestLanguageContext(
            language="fr",
            direction=TextDirection.LTR,
            source=SignalSource.OVERRIDE,
            persisted_preference="fr",
        )
        assert context.should_persist is False

    def test_no_persist_without_override(self):
        """Only an explicit override is persisted."""
        context = RequestLanguageContext(
            language="en",
            direction=TextDirection.LTR,
            source=SignalSource.ACCEPT_LANGUAGE,
        )
        assert context.should_persist is False
