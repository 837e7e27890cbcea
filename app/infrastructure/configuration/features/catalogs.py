"""Locale catalog maintenance settings."""

from typing import Any, List, Optional

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings, parse_json_setting


def _parse_string_list(v: Any, setting_name: str) -> Any:
    v = parse_json_setting(v, setting_name)
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    if not isinstance(v, list):
        raise ValueError(f"{setting_name} must be a JSON list of strings")
    return [str(item) for item in v]


class CatalogSettings(FeatureSettings):
    """Configuration for the catalog consistency analyzer.

    Environment Variables:
        CATALOG_DIR: Directory holding one catalog resource per language
        CATALOG_FORMAT: Catalog resource format, "json" or "yaml"
        CATALOG_REFERENCE_LANGUAGE: Language other catalogs are compared to
            (default: the registry default language)
        CATALOG_SOURCE_DIRS: JSON list of source roots scanned for keys
        CATALOG_SOURCE_EXTENSIONS: JSON list of file extensions to scan
        CATALOG_EXCLUDE_DIRS: JSON list of directory names never scanned
        CATALOG_TRANSLATION_FUNCTIONS: JSON list of lookup function names
        CATALOG_TEMPLATE_MARKER: Prefix for generated placeholder values;
            "{lang}" is replaced by the target language code

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        catalog_dir = settings.catalogs.catalog_dir
        ```
    """

    catalog_dir: str = Field(default="i18n/locales", alias="CATALOG_DIR")
    catalog_format: str = Field(default="json", alias="CATALOG_FORMAT")
    reference_language: Optional[str] = Field(
        default=None, alias="CATALOG_REFERENCE_LANGUAGE"
    )
    source_dirs: List[str] = Field(
        default_factory=lambda: ["src"], alias="CATALOG_SOURCE_DIRS"
    )
    source_extensions: List[str] = Field(
        default_factory=lambda: [".ts", ".tsx", ".js", ".jsx"],
        alias="CATALOG_SOURCE_EXTENSIONS",
    )
    exclude_dirs: List[str] = Field(
        default_factory=lambda: ["node_modules", "dist", "build", ".git"],
        alias="CATALOG_EXCLUDE_DIRS",
    )
    translation_functions: List[str] = Field(
        default_factory=lambda: ["t", "i18n.t"],
        alias="CATALOG_TRANSLATION_FUNCTIONS",
    )
    template_marker: str = Field(default="[TODO {lang}]", alias="CATALOG_TEMPLATE_MARKER")

    @field_validator("catalog_format")
    @classmethod
    def _validate_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt == "yml":
            fmt = "yaml"
        if fmt not in ("json", "yaml"):
            raise ValueError(f"CATALOG_FORMAT must be 'json' or 'yaml', got '{v}'")
        return fmt

    @field_validator("reference_language")
    @classmethod
    def _normalize_reference(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().lower()

    @field_validator("source_dirs", mode="before")
    @classmethod
    def _parse_source_dirs(cls, v: Optional[Any]) -> Any:
        return _parse_string_list(v, "CATALOG_SOURCE_DIRS")

    @field_validator("source_extensions", mode="before")
    @classmethod
    def _parse_extensions(cls, v: Optional[Any]) -> Any:
        extensions = _parse_string_list(v, "CATALOG_SOURCE_EXTENSIONS")
        return [e if e.startswith(".") else f".{e}" for e in extensions]

    @field_validator("exclude_dirs", mode="before")
    @classmethod
    def _parse_exclude_dirs(cls, v: Optional[Any]) -> Any:
        return _parse_string_list(v, "CATALOG_EXCLUDE_DIRS")

    @field_validator("translation_functions", mode="before")
    @classmethod
    def _parse_functions(cls, v: Optional[Any]) -> Any:
        functions = _parse_string_list(v, "CATALOG_TRANSLATION_FUNCTIONS")
        if not functions:
            raise ValueError("CATALOG_TRANSLATION_FUNCTIONS must not be empty")
        return functions
