"""Infrastructure configuration module - public API.

This module provides centralized configuration management using Pydantic
BaseSettings with feature-based organization.

Exports:
    Settings: Main settings class (aggregator)
    LocalizationSettings: Language registry and negotiation settings
    CatalogSettings: Catalog analyzer settings
    LanguageConfig: One configured language entry

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    default_language = settings.localization.default_language
    catalog_format = settings.catalogs.catalog_format
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features import (
    CatalogSettings,
    LanguageConfig,
    LocalizationSettings,
)

__all__ = ["Settings", "LocalizationSettings", "CatalogSettings", "LanguageConfig"]
