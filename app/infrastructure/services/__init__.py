"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    LanguageRegistryDep,
    LocalizationServiceDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_language_registry,
    get_schema_registry,
    get_localization_service,
)

__all__ = [
    "SettingsDep",
    "LanguageRegistryDep",
    "LocalizationServiceDep",
    "get_settings",
    "get_language_registry",
    "get_schema_registry",
    "get_localization_service",
]
