"""Localization service for dependency injection.

Provides a class-based interface to language negotiation and localized
value resolution for easier DI and testing.
"""

from typing import Any, Dict, List, Mapping, Optional

from infrastructure.i18n.deep import DeepResolver
from infrastructure.i18n.errors import DiagnosticCollector
from infrastructure.i18n.localized import (
    LocalizedValue,
    TranslationStatus,
    merge_localized,
    resolve_localized,
    translation_status,
)
from infrastructure.i18n.models import (
    LanguageRegistry,
    NegotiationSignals,
    RequestLanguageContext,
)
from infrastructure.i18n.resolvers import LanguageNegotiator
from infrastructure.i18n.schema import SchemaRegistry


class LocalizationService:
    """Class-based localization service.

    Thin facade over the negotiator, the localized value resolver and the
    deep resolver, all bound to one language registry and one set of
    localized field schemas.

    Usage:
        # Via dependency injection
        from infrastructure.services import LocalizationServiceDep
        from infrastructure.i18n import LanguageContextDep

        @router.get("/monuments/{monument_id}")
        def get_monument(
            monument_id: int,
            localization: LocalizationServiceDep,
            language: LanguageContextDep,
        ):
            monument = repository.get(monument_id)
            return localization.resolve_deep(monument, "Monument", language.language)

        # Direct instantiation
        service = LocalizationService(registry, schemas)
        title = service.resolve({"fr": "Bonjour", "en": "Hello"}, "ar")
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        schemas: Optional[SchemaRegistry] = None,
    ):
        """Initialize the localization service.

        Args:
            registry: Supported languages.
            schemas: Localized field schemas; an empty registry if omitted.
        """
        self.registry = registry
        self.schemas = schemas or SchemaRegistry()
        self.negotiator = LanguageNegotiator(registry)
        self.deep = DeepResolver(self.schemas, registry)

    @property
    def default_language(self) -> str:
        return self.registry.default_code

    def negotiate(
        self,
        signals: NegotiationSignals,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> RequestLanguageContext:
        """Determine the language of a request from its signals."""
        return self.negotiator.negotiate(signals, diagnostics)

    def resolve(
        self,
        value: Any,
        lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> str:
        """Resolve one localized value, falling back to the default language."""
        return resolve_localized(value, lang, self.registry.default_code, diagnostics)

    def resolve_deep(
        self,
        entity: Any,
        entity_type: str,
        lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> Any:
        """Resolve the declared localized fields of an entity or entity list."""
        return self.deep.resolve(
            entity, entity_type, lang, self.registry.default_code, diagnostics
        )

    def merge(
        self,
        existing: Any,
        patch: Any,
        active_lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> LocalizedValue:
        """Merge a language patch into a localized value.

        Raises:
            UnsupportedLanguageError: If active_lang is not supported.
        """
        return merge_localized(
            existing,
            patch,
            active_lang,
            registry=self.registry,
            diagnostics=diagnostics,
        )

    def merge_entity(
        self,
        entity: Any,
        patch: Mapping[str, Any],
        entity_type: str,
        active_lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> Dict[str, Any]:
        """Apply a partial update to an entity, merging its localized fields.

        Raises:
            UnsupportedLanguageError: If active_lang is not supported.
        """
        return self.deep.merge(entity, patch, entity_type, active_lang, diagnostics)

    def status(self, value: Any) -> TranslationStatus:
        """Translation coverage of a localized value."""
        return translation_status(value, self.registry)

    def get_languages(self) -> List[Dict[str, object]]:
        """Public list of supported languages."""
        return self.registry.describe()
