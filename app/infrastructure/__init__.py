"""Infrastructure modules for the localization platform.

Centralized infrastructure components:
- configuration: Settings management (Settings, LocalizationSettings, CatalogSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- i18n: Language negotiation, localized values and locale catalogs
- services: Dependency injection services (SettingsDep, LocalizationServiceDep, get_settings)
"""

# Configuration
from infrastructure.configuration import Settings

# Logging
from infrastructure.logging import configure_logging, get_module_logger

# Dependency Injection Services
from infrastructure.services import (
    SettingsDep,
    LanguageRegistryDep,
    LocalizationServiceDep,
    get_settings,
    get_language_registry,
    get_localization_service,
)

__all__ = [
    # Configuration
    "Settings",
    # Logging
    "configure_logging",
    "get_module_logger",
    # Dependency Injection Services
    "SettingsDep",
    "LanguageRegistryDep",
    "LocalizationServiceDep",
    "get_settings",
    "get_language_registry",
    "get_localization_service",
]
