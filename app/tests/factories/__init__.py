"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_catalog_tree,
    make_language,
    make_localized_value,
    make_monument,
    make_registry,
    make_schema_registry,
    make_two_language_registry,
    read_json_catalog,
    write_json_catalogs,
)

__all__ = [
    "make_catalog_tree",
    "make_language",
    "make_localized_value",
    "make_monument",
    "make_registry",
    "make_schema_registry",
    "make_two_language_registry",
    "read_json_catalog",
    "write_json_catalogs",
]
