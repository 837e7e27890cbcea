"""Localization feature settings."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
import structlog

from infrastructure.configuration.base import FeatureSettings, parse_json_setting

logger = structlog.stdlib.get_logger().bind(component="config.localization")

PLURAL_CATEGORY_ORDER = ("zero", "one", "two", "few", "many", "other")


class LanguageConfig(BaseModel):
    """Configuration entry for one supported language.

    Attributes:
        code: Language code as used in catalogs, cookies and stored values.
        direction: Text direction, "ltr" or "rtl".
        plural_categories: CLDR plural categories the language requires.
        label: English display name.
        native_label: Display name in the language itself.
    """

    code: str
    direction: str = "ltr"
    plural_categories: List[str] = Field(default_factory=lambda: ["one", "other"])
    label: str = ""
    native_label: str = ""

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, v: str) -> str:
        code = v.strip().lower()
        if not code:
            raise ValueError("Language code must not be empty")
        return code

    @field_validator("direction")
    @classmethod
    def _validate_direction(cls, v: str) -> str:
        direction = v.strip().lower()
        if direction not in ("ltr", "rtl"):
            raise ValueError(f"Text direction must be 'ltr' or 'rtl', got '{v}'")
        return direction

    @field_validator("plural_categories")
    @classmethod
    def _validate_plural_categories(cls, v: List[str]) -> List[str]:
        unknown = [c for c in v if c not in PLURAL_CATEGORY_ORDER]
        if unknown:
            raise ValueError(f"Unknown plural categories: {unknown}")
        if "other" not in v:
            raise ValueError("Plural categories must include 'other'")
        return [c for c in PLURAL_CATEGORY_ORDER if c in v]


DEFAULT_LANGUAGES: List[Dict[str, Any]] = [
    {
        "code": "fr",
        "direction": "ltr",
        "plural_categories": ["one", "many", "other"],
        "label": "French",
        "native_label": "Français",
    },
    {
        "code": "ar",
        "direction": "rtl",
        "plural_categories": ["zero", "one", "two", "few", "many", "other"],
        "label": "Arabic",
        "native_label": "العربية",
    },
    {
        "code": "en",
        "direction": "ltr",
        "plural_categories": ["one", "other"],
        "label": "English",
        "native_label": "English",
    },
    {
        "code": "tz-ltn",
        "direction": "ltr",
        "plural_categories": ["one", "other"],
        "label": "Tamazight (Latin)",
        "native_label": "Tamaziɣt",
    },
    {
        "code": "tz-tfng",
        "direction": "ltr",
        "plural_categories": ["one", "other"],
        "label": "Tamazight (Tifinagh)",
        "native_label": "ⵜⴰⵎⴰⵣⵉⵖⵜ",
    },
]

DEFAULT_ALIASES: Dict[str, str] = {
    "ber": "tz-ltn",
    "kab": "tz-ltn",
    "tzm": "tz-ltn",
    "zgh": "tz-ltn",
    "tmh": "tz-tfng",
}


class LocalizationSettings(FeatureSettings):
    """Language registry and request negotiation configuration.

    Environment Variables:
        I18N_LANGUAGES: JSON list of language descriptors
            (code, direction, plural_categories, label, native_label)
        I18N_DEFAULT_LANGUAGE: Fallback language code (default: fr)
        I18N_ALIASES: JSON map of alternate codes to supported codes
        I18N_QUERY_PARAM: Query parameter carrying an explicit override
        I18N_COOKIE_NAME: Cookie holding the persisted preference
        I18N_HEADER_NAME: Custom request header carrying a language code
        I18N_COOKIE_MAX_AGE_SECONDS: Lifetime of the preference cookie

    Validation:
        - Language codes must be unique
        - The default language must be one of the configured languages
        - Every alias must point at a configured language

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        default_language = settings.localization.default_language
        codes = [lang.code for lang in settings.localization.languages]
        ```
    """

    languages: List[LanguageConfig] = Field(
        default_factory=lambda: [LanguageConfig(**lang) for lang in DEFAULT_LANGUAGES],
        alias="I18N_LANGUAGES",
        description="Supported languages with direction and plural categories",
    )
    default_language: str = Field(
        default="fr",
        alias="I18N_DEFAULT_LANGUAGE",
        description="Language used when no request signal matches",
    )
    aliases: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ALIASES),
        alias="I18N_ALIASES",
        description="Alternate codes mapped to supported language codes",
    )
    query_param: str = Field(default="lang", alias="I18N_QUERY_PARAM")
    cookie_name: str = Field(default="language", alias="I18N_COOKIE_NAME")
    header_name: str = Field(default="X-Language", alias="I18N_HEADER_NAME")
    cookie_max_age_seconds: int = Field(
        default=365 * 24 * 60 * 60,
        alias="I18N_COOKIE_MAX_AGE_SECONDS",
    )

    @field_validator("languages", mode="before")
    @classmethod
    def _parse_languages(cls, v: Optional[Any]) -> Any:
        """Parse I18N_LANGUAGES from JSON string or list."""
        v = parse_json_setting(v, "I18N_LANGUAGES")
        if v is None:
            return list(DEFAULT_LANGUAGES)
        if not isinstance(v, list):
            raise ValueError("I18N_LANGUAGES must be a JSON list of languages")
        return v

    @field_validator("aliases", mode="before")
    @classmethod
    def _parse_aliases(cls, v: Optional[Any]) -> Any:
        """Parse I18N_ALIASES from JSON string or dict."""
        v = parse_json_setting(v, "I18N_ALIASES")
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("I18N_ALIASES must be a JSON string or a mapping")
        return {str(k).strip().lower(): str(t).strip().lower() for k, t in v.items()}

    @field_validator("default_language")
    @classmethod
    def _normalize_default(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def _validate_registry(self) -> "LocalizationSettings":
        codes = [lang.code for lang in self.languages]
        if not codes:
            raise ValueError("I18N_LANGUAGES must configure at least one language")

        duplicates = sorted({c for c in codes if codes.count(c) > 1})
        if duplicates:
            raise ValueError(f"Duplicate language codes in I18N_LANGUAGES: {duplicates}")

        if self.default_language not in codes:
            raise ValueError(
                f"I18N_DEFAULT_LANGUAGE '{self.default_language}' is not one of {codes}"
            )

        dangling = {a: t for a, t in self.aliases.items() if t not in codes}
        if dangling:
            raise ValueError(f"I18N_ALIASES point at unsupported languages: {dangling}")

        shadowed = sorted(a for a in self.aliases if a in codes)
        if shadowed:
            logger.warning("alias_shadows_language_code", aliases=shadowed)

        return self
