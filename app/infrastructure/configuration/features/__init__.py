"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.catalogs import CatalogSettings
from infrastructure.configuration.features.localization import (
    LanguageConfig,
    LocalizationSettings,
)

__all__ = [
    "CatalogSettings",
    "LanguageConfig",
    "LocalizationSettings",
]
