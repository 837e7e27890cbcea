"""Deep resolution and merging of entity graphs.

Walks an entity (or a list of entities) using the declared localized field
schemas: localized fields are resolved to a single string for the active
language, or merged with a per-language patch. Undeclared fields pass
through untouched.
"""

from typing import Any, Dict, Mapping, Optional

import structlog
from infrastructure.i18n.errors import DiagnosticCollector, DiagnosticKind, report
from infrastructure.i18n.localized import (
    is_localized_value,
    merge_localized,
    resolve_localized,
)
from infrastructure.i18n.models import LanguageRegistry
from infrastructure.i18n.schema import LocalizedFieldSchema, SchemaRegistry

logger = structlog.get_logger().bind(component="i18n.deep")


def _as_mapping(entity: Any) -> Optional[Dict[str, Any]]:
    """Return a shallow dict copy of an entity, or None when it is not one."""
    if isinstance(entity, Mapping):
        return dict(entity)
    if hasattr(entity, "model_dump") and callable(entity.model_dump):
        return entity.model_dump()
    if hasattr(entity, "to_dict") and callable(entity.to_dict):
        return entity.to_dict()
    return None


class DeepResolver:
    """Resolves and merges localized fields across an entity graph.

    Args:
        schemas: Localized field schemas by entity type.
        registry: Optional registry; when given, only mappings keyed by
            supported codes are treated as localized values, and merges
            drop unsupported patch entries.
    """

    def __init__(
        self,
        schemas: SchemaRegistry,
        registry: Optional[LanguageRegistry] = None,
    ):
        self.schemas = schemas
        self.registry = registry

    def resolve(
        self,
        entity: Any,
        entity_type: str,
        lang: str,
        default_lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> Any:
        """Resolve every declared localized field of an entity or entity list.

        Already-resolved fields (plain strings or None) are left as they are,
        so resolving a resolved entity returns an equal entity.

        Args:
            entity: Mapping, pydantic model, object with to_dict(), or a list
                of those.
            entity_type: Entity type name of the entity.
            lang: Target language code.
            default_lang: Registry default language code.
            diagnostics: Optional collector.

        Returns:
            A new structure; the input is not mutated.
        """
        if isinstance(entity, list):
            return [
                self.resolve(item, entity_type, lang, default_lang, diagnostics)
                for item in entity
            ]

        schema = self.schemas.get(entity_type)
        data = _as_mapping(entity)
        if schema is None or data is None:
            return entity

        for name, value in data.items():
            if schema.is_localized(name):
                data[name] = self._resolve_field(
                    schema, name, value, lang, default_lang, diagnostics
                )
            elif name in schema.associations and value is not None:
                data[name] = self.resolve(
                    value, schema.associations[name], lang, default_lang, diagnostics
                )
        return data

    def merge(
        self,
        entity: Any,
        patch: Mapping[str, Any],
        entity_type: str,
        active_lang: str,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> Dict[str, Any]:
        """Apply a partial update to an entity.

        Declared localized fields are merged with merge_localized();
        associations that are mappings on both sides are merged recursively;
        every other patch field replaces the existing value.

        Args:
            entity: Current entity (mapping, pydantic model or to_dict()).
            patch: Partial update.
            entity_type: Entity type name of the entity.
            active_lang: Language of bare string patches.
            diagnostics: Optional collector.

        Returns:
            A new mapping.
        """
        data = _as_mapping(entity)
        if data is None:
            data = {}
        schema = self.schemas.get(entity_type)

        for name, value in patch.items():
            if schema is not None and schema.is_localized(name):
                data[name] = merge_localized(
                    data.get(name),
                    value,
                    active_lang,
                    registry=self.registry,
                    diagnostics=diagnostics,
                )
                continue

            if schema is not None and name in schema.associations:
                current = _as_mapping(data.get(name))
                if current is not None and isinstance(value, Mapping):
                    data[name] = self.merge(
                        current, value, schema.associations[name], active_lang, diagnostics
                    )
                    continue

            data[name] = value

        return data

    def _resolve_field(
        self,
        schema: LocalizedFieldSchema,
        name: str,
        value: Any,
        lang: str,
        default_lang: str,
        diagnostics: Optional[DiagnosticCollector],
    ) -> Any:
        if value is None or isinstance(value, str):
            return value
        if self._is_localized(value):
            return resolve_localized(value, lang, default_lang, diagnostics)
        report(
            DiagnosticKind.AMBIGUOUS_LOCALIZED_FIELD,
            f"{schema.entity_type}.{name} is declared localized but holds "
            f"a {type(value).__name__}",
            diagnostics,
            entity_type=schema.entity_type,
            field=name,
        )
        return value

    def _is_localized(self, value: Any) -> bool:
        if self.registry is not None:
            return is_localized_value(value, self.registry)
        return isinstance(value, Mapping) and all(
            entry is None or isinstance(entry, str) for entry in value.values()
        )


def resolve_deep(
    entity: Any,
    entity_type: str,
    lang: str,
    default_lang: str,
    schemas: SchemaRegistry,
    registry: Optional[LanguageRegistry] = None,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> Any:
    """Resolve the declared localized fields of an entity graph.

    See DeepResolver.resolve().
    """
    return DeepResolver(schemas, registry).resolve(
        entity, entity_type, lang, default_lang, diagnostics
    )


def merge_entity(
    entity: Any,
    patch: Mapping[str, Any],
    entity_type: str,
    active_lang: str,
    schemas: SchemaRegistry,
    registry: Optional[LanguageRegistry] = None,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> Dict[str, Any]:
    """Apply a partial update to an entity. See DeepResolver.merge()."""
    return DeepResolver(schemas, registry).merge(
        entity, patch, entity_type, active_lang, diagnostics
    )
