"""Factory functions for creating i18n components.

Builds the language registry, the localization service, the catalog store
and the catalog analyzer from application settings. Invalid configuration
fails here, at startup, never later at request time.
"""

from pathlib import Path
from typing import Optional

import structlog
from infrastructure.configuration import CatalogSettings, LocalizationSettings
from infrastructure.i18n.analyzer import CatalogAnalyzer
from infrastructure.i18n.extractor import KeyExtractor
from infrastructure.i18n.loader import CatalogStore, JSONCatalogStore, YAMLCatalogStore
from infrastructure.i18n.models import (
    LanguageDescriptor,
    LanguageRegistry,
    PluralCategory,
    TextDirection,
)
from infrastructure.i18n.schema import SchemaRegistry
from infrastructure.i18n.service import LocalizationService

logger = structlog.get_logger().bind(component="i18n.factory")


def create_language_registry(
    settings: Optional[LocalizationSettings] = None,
) -> LanguageRegistry:
    """Build the language registry from localization settings.

    Args:
        settings: Localization settings (default: LocalizationSettings()
            loaded from the environment).

    Returns:
        LanguageRegistry: Immutable registry of supported languages.

    Raises:
        ValueError: If the configured languages are inconsistent.

    Usage:
        registry = create_language_registry()
        registry.match("fr-FR")  # "fr"
    """
    settings = settings or LocalizationSettings()
    languages = tuple(
        LanguageDescriptor(
            code=lang.code,
            direction=TextDirection(lang.direction),
            plural_categories=PluralCategory.ordered(
                PluralCategory(c) for c in lang.plural_categories
            ),
            label=lang.label or lang.code,
            native_label=lang.native_label or lang.label or lang.code,
        )
        for lang in settings.languages
    )
    registry = LanguageRegistry(
        languages=languages,
        default_code=settings.default_language,
        aliases=dict(settings.aliases),
    )
    logger.info(
        "language_registry_created",
        languages=registry.codes,
        default_language=registry.default_code,
    )
    return registry


def create_localization_service(
    registry: Optional[LanguageRegistry] = None,
    schemas: Optional[SchemaRegistry] = None,
) -> LocalizationService:
    """Create a LocalizationService.

    Args:
        registry: Language registry (default: built from settings).
        schemas: Localized field schemas; validated before use.

    Returns:
        LocalizationService: Configured service.

    Raises:
        SchemaError: If the schemas are inconsistent.
    """
    registry = registry or create_language_registry()
    schemas = schemas or SchemaRegistry()
    schemas.validate()
    return LocalizationService(registry=registry, schemas=schemas)


def create_catalog_store(
    catalog_dir: Path,
    catalog_format: str = "json",
) -> CatalogStore:
    """Create the catalog store for a directory and format.

    Args:
        catalog_dir: Directory holding the catalogs.
        catalog_format: "json" (<code>/translation.json) or "yaml" (<code>.yml).

    Returns:
        CatalogStore for the format.

    Raises:
        ValueError: If the format is unknown.
    """
    fmt = catalog_format.strip().lower()
    if fmt == "json":
        return JSONCatalogStore(Path(catalog_dir))
    if fmt in ("yaml", "yml"):
        return YAMLCatalogStore(Path(catalog_dir))
    raise ValueError(f"Unknown catalog format: {catalog_format}")


def create_catalog_analyzer(
    registry: Optional[LanguageRegistry] = None,
    settings: Optional[CatalogSettings] = None,
    store: Optional[CatalogStore] = None,
    reference_language: Optional[str] = None,
) -> CatalogAnalyzer:
    """Create a CatalogAnalyzer.

    Args:
        registry: Language registry (default: built from settings).
        settings: Catalog settings (default: CatalogSettings() loaded from
            the environment).
        store: Catalog store (default: built from settings).
        reference_language: Overrides settings.reference_language.

    Returns:
        CatalogAnalyzer: Configured analyzer; catalogs load on first use.

    Raises:
        UnsupportedLanguageError: If the reference language is not supported.
    """
    registry = registry or create_language_registry()
    settings = settings or CatalogSettings()
    store = store or create_catalog_store(Path(settings.catalog_dir), settings.catalog_format)
    analyzer = CatalogAnalyzer(
        registry=registry,
        store=store,
        reference_language=reference_language or settings.reference_language,
        template_marker=settings.template_marker,
    )
    logger.info(
        "catalog_analyzer_created",
        catalog_dir=str(store.catalog_dir),
        reference=analyzer.reference,
    )
    return analyzer


def create_key_extractor(settings: Optional[CatalogSettings] = None) -> KeyExtractor:
    """Create a KeyExtractor from catalog settings."""
    settings = settings or CatalogSettings()
    return KeyExtractor(
        functions=settings.translation_functions,
        extensions=settings.source_extensions,
        exclude_dirs=settings.exclude_dirs,
    )
