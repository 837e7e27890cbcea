"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.i18n.factory import (
    create_language_registry,
    create_localization_service,
)
from infrastructure.i18n.models import LanguageRegistry
from infrastructure.i18n.schema import SchemaRegistry
from infrastructure.i18n.service import LocalizationService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return {"default_language": settings.localization.default_language}

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_language_registry() -> LanguageRegistry:
    """
    Get application-scoped language registry singleton.

    Built once from settings.localization; invalid language configuration
    fails here, on first use at startup.

    Returns:
        LanguageRegistry: Immutable registry of supported languages.
    """
    return create_language_registry(get_settings().localization)


@lru_cache
def get_schema_registry() -> SchemaRegistry:
    """
    Get application-scoped localized field schema registry.

    Entity modules register their schemas at startup, before the first
    call to get_localization_service():
        get_schema_registry().register(
            LocalizedFieldSchema.of("Monument", ["nom", "description"])
        )

    Returns:
        SchemaRegistry: Shared schema registry.
    """
    return SchemaRegistry()


@lru_cache
def get_localization_service() -> LocalizationService:
    """
    Get application-scoped localization service singleton.

    Returns:
        LocalizationService: Service bound to the language and schema registries.

    Usage:
        @router.get("/monuments/{monument_id}")
        def get_monument(localization: LocalizationServiceDep, language: LanguageContextDep):
            return localization.resolve_deep(monument, "Monument", language.language)
    """
    return create_localization_service(
        registry=get_language_registry(),
        schemas=get_schema_registry(),
    )
