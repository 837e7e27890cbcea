"""Localized field schemas.

Each entity type declares which of its fields hold localized values and
which fields carry nested entities. Nothing is inferred from the shape of
the data.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

import structlog
from infrastructure.i18n.errors import SchemaError

logger = structlog.get_logger().bind(component="i18n.schema")


@dataclass(frozen=True)
class LocalizedFieldSchema:
    """Localized fields of one entity type.

    Attributes:
        entity_type: Entity type name (e.g. "Monument").
        localized_fields: Names of fields holding localized values.
        associations: Field name to entity type of the nested entity or
            entity list.
    """

    entity_type: str
    localized_fields: FrozenSet[str] = field(default_factory=frozenset)
    associations: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        entity_type: str,
        localized_fields: Iterable[str] = (),
        associations: Optional[Mapping[str, str]] = None,
    ) -> "LocalizedFieldSchema":
        """Build a schema from plain iterables."""
        return cls(
            entity_type=entity_type,
            localized_fields=frozenset(localized_fields),
            associations=dict(associations or {}),
        )

    def is_localized(self, field_name: str) -> bool:
        return field_name in self.localized_fields


class SchemaRegistry:
    """Holds the localized field schemas of all entity types.

    Usage:
        schemas = SchemaRegistry()
        schemas.register(LocalizedFieldSchema.of("Lieu", ["nom", "adresse"]))
        schemas.register(
            LocalizedFieldSchema.of("Monument", ["nom"], {"lieu": "Lieu"})
        )
        schemas.validate()
    """

    def __init__(self, schemas: Optional[Iterable[LocalizedFieldSchema]] = None):
        self._schemas: Dict[str, LocalizedFieldSchema] = {}
        for schema in schemas or []:
            self.register(schema)

    def register(self, schema: LocalizedFieldSchema) -> None:
        """Register the schema of an entity type.

        Raises:
            SchemaError: If the entity type is already registered.
        """
        if schema.entity_type in self._schemas:
            raise SchemaError(f"Schema already registered for '{schema.entity_type}'")
        self._schemas[schema.entity_type] = schema
        logger.debug(
            "schema_registered",
            entity_type=schema.entity_type,
            localized_fields=sorted(schema.localized_fields),
        )

    def get(self, entity_type: str) -> Optional[LocalizedFieldSchema]:
        return self._schemas.get(entity_type)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._schemas

    @property
    def entity_types(self) -> List[str]:
        return list(self._schemas)

    def validate(self) -> None:
        """Check that all schemas are consistent with each other.

        Raises:
            SchemaError: If an association targets an unregistered entity
                type, or a field is both localized and an association.
        """
        for schema in self._schemas.values():
            overlap = schema.localized_fields & set(schema.associations)
            if overlap:
                raise SchemaError(
                    f"{schema.entity_type}: fields {sorted(overlap)} are both "
                    "localized and associations"
                )
            for field_name, target in schema.associations.items():
                if target not in self._schemas:
                    raise SchemaError(
                        f"{schema.entity_type}.{field_name} points at unregistered "
                        f"entity type '{target}'"
                    )
