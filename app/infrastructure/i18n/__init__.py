"""Internationalization (i18n) infrastructure.

Request-time language negotiation and localized value resolution, plus the
offline locale catalog analyzer.

Public API:
    - LanguageRegistry / LanguageDescriptor: supported languages
    - LanguageNegotiator: per-request language from request signals
    - resolve_localized / merge_localized: one localized value
    - DeepResolver / resolve_deep / merge_entity: whole entity graphs
    - SchemaRegistry / LocalizedFieldSchema: declared localized fields
    - CatalogTree / CatalogStore / KeyExtractor / CatalogAnalyzer: catalogs
    - LocalizationService: DI facade

The HTTP middleware and FastAPI dependencies live in infrastructure.i18n.http.

Example:
    from infrastructure.i18n import create_localization_service

    service = create_localization_service()
    service.resolve({"fr": "Bonjour", "en": "Hello"}, "ar")  # "Bonjour"
"""

from infrastructure.i18n.analyzer import (
    CatalogAnalyzer,
    ConsistencyReport,
    LanguageDiff,
    MergeReport,
    PluralFamilyStatus,
    PluralReport,
)
from infrastructure.i18n.catalog import CatalogTree, MergeOutcome, PluralFamily, split_plural_key
from infrastructure.i18n.deep import DeepResolver, merge_entity, resolve_deep
from infrastructure.i18n.errors import (
    CatalogLockError,
    CatalogParseError,
    CatalogWriteError,
    Diagnostic,
    DiagnosticCollector,
    DiagnosticKind,
    I18nError,
    SchemaError,
    UnsupportedLanguageError,
)
from infrastructure.i18n.extractor import ExtractionResult, KeyExtractor, UnextractableKeyReference
from infrastructure.i18n.factory import (
    create_catalog_analyzer,
    create_catalog_store,
    create_key_extractor,
    create_language_registry,
    create_localization_service,
)
from infrastructure.i18n.loader import (
    CatalogLock,
    CatalogStore,
    JSONCatalogStore,
    YAMLCatalogStore,
)
from infrastructure.i18n.localized import (
    LocalizedValue,
    TranslationStatus,
    has_translation,
    is_localized_value,
    merge_localized,
    resolve_localized,
    translation_status,
)
from infrastructure.i18n.models import (
    LanguageDescriptor,
    LanguageRegistry,
    NegotiationSignals,
    PluralCategory,
    RequestLanguageContext,
    SignalSource,
    TextDirection,
)
from infrastructure.i18n.resolvers import LanguageNegotiator, parse_accept_language
from infrastructure.i18n.schema import LocalizedFieldSchema, SchemaRegistry
from infrastructure.i18n.service import LocalizationService

__all__ = [
    # Models
    "LanguageDescriptor",
    "LanguageRegistry",
    "NegotiationSignals",
    "PluralCategory",
    "RequestLanguageContext",
    "SignalSource",
    "TextDirection",
    # Errors and diagnostics
    "I18nError",
    "UnsupportedLanguageError",
    "SchemaError",
    "CatalogParseError",
    "CatalogWriteError",
    "CatalogLockError",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticKind",
    # Negotiation
    "LanguageNegotiator",
    "parse_accept_language",
    # Localized values
    "LocalizedValue",
    "TranslationStatus",
    "resolve_localized",
    "merge_localized",
    "is_localized_value",
    "has_translation",
    "translation_status",
    # Schemas and deep operations
    "LocalizedFieldSchema",
    "SchemaRegistry",
    "DeepResolver",
    "resolve_deep",
    "merge_entity",
    # Catalogs
    "CatalogTree",
    "MergeOutcome",
    "PluralFamily",
    "split_plural_key",
    "CatalogStore",
    "JSONCatalogStore",
    "YAMLCatalogStore",
    "CatalogLock",
    "KeyExtractor",
    "ExtractionResult",
    "UnextractableKeyReference",
    "CatalogAnalyzer",
    "ConsistencyReport",
    "LanguageDiff",
    "PluralReport",
    "PluralFamilyStatus",
    "MergeReport",
    # Service and factories
    "LocalizationService",
    "create_language_registry",
    "create_localization_service",
    "create_catalog_store",
    "create_catalog_analyzer",
    "create_key_extractor",
]
