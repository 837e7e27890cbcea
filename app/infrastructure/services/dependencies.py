"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.i18n.models import LanguageRegistry
from infrastructure.i18n.service import LocalizationService
from infrastructure.services.providers import (
    get_settings,
    get_language_registry,
    get_localization_service,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Language registry dependency
LanguageRegistryDep = Annotated[LanguageRegistry, Depends(get_language_registry)]

# Localization service - negotiation, resolution and merging of localized values
# Usage: localization.resolve(value, lang), localization.resolve_deep(entity, "Monument", lang)
LocalizationServiceDep = Annotated[LocalizationService, Depends(get_localization_service)]

__all__ = [
    "SettingsDep",
    "LanguageRegistryDep",
    "LocalizationServiceDep",
]
