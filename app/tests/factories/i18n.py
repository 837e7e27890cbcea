"""Test data factories for i18n system testing.

Provides deterministic test data builders for:
- LanguageDescriptor / LanguageRegistry
- Localized values
- Localized field schemas
- Catalog trees and on-disk catalogs
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Optional

from infrastructure.i18n import (
    CatalogTree,
    LanguageDescriptor,
    LanguageRegistry,
    LocalizedFieldSchema,
    PluralCategory,
    SchemaRegistry,
    TextDirection,
)

ONE_OTHER = (PluralCategory.ONE, PluralCategory.OTHER)


def make_language(
    code: str = "fr",
    direction: TextDirection = TextDirection.LTR,
    plural_categories: Iterable[PluralCategory] = ONE_OTHER,
    label: str = "",
) -> LanguageDescriptor:
    """Create a LanguageDescriptor instance.

    Args:
        code: Language code.
        direction: Text direction.
        plural_categories: Required plural categories.
        label: English display name (defaults to the code).

    Returns:
        LanguageDescriptor instance.
    """
    return LanguageDescriptor(
        code=code,
        direction=direction,
        plural_categories=PluralCategory.ordered(plural_categories),
        label=label or code,
        native_label=label or code,
    )


def make_registry(
    languages: Optional[Iterable[LanguageDescriptor]] = None,
    default_code: str = "fr",
    aliases: Optional[Dict[str, str]] = None,
) -> LanguageRegistry:
    """Create a LanguageRegistry instance.

    Defaults to the platform languages: fr (default), ar (rtl), en, tz-ltn,
    tz-tfng, with the Tamazight aliases.
    """
    if languages is None:
        languages = [
            make_language(
                "fr",
                plural_categories=(
                    PluralCategory.ONE,
                    PluralCategory.MANY,
                    PluralCategory.OTHER,
                ),
                label="French",
            ),
            make_language(
                "ar",
                direction=TextDirection.RTL,
                plural_categories=tuple(PluralCategory),
                label="Arabic",
            ),
            make_language("en", label="English"),
            make_language("tz-ltn", label="Tamazight (Latin)"),
            make_language("tz-tfng", label="Tamazight (Tifinagh)"),
        ]
    if aliases is None:
        aliases = {
            "ber": "tz-ltn",
            "kab": "tz-ltn",
            "tzm": "tz-ltn",
            "zgh": "tz-ltn",
            "tmh": "tz-tfng",
        }
    return LanguageRegistry(
        languages=tuple(languages),
        default_code=default_code,
        aliases=dict(aliases),
    )


def make_two_language_registry(
    fr_plurals: Iterable[PluralCategory] = ONE_OTHER,
    en_plurals: Iterable[PluralCategory] = ONE_OTHER,
) -> LanguageRegistry:
    """Create a small fr/en registry with configurable plural categories."""
    return make_registry(
        languages=[
            make_language("fr", plural_categories=fr_plurals),
            make_language("en", plural_categories=en_plurals),
        ],
        default_code="fr",
        aliases={},
    )


def make_localized_value(**entries: str) -> Dict[str, str]:
    """Create a localized value; defaults to {"fr": "Bonjour", "en": "Hello"}."""
    return dict(entries) if entries else {"fr": "Bonjour", "en": "Hello"}


def make_schema_registry() -> SchemaRegistry:
    """Create schemas for a Monument with a nested Lieu and a list of Vestiges."""
    return SchemaRegistry(
        [
            LocalizedFieldSchema.of("Lieu", ["nom", "adresse"]),
            LocalizedFieldSchema.of("Vestige", ["nom"]),
            LocalizedFieldSchema.of(
                "Monument",
                ["nom", "description"],
                {"lieu": "Lieu", "vestiges": "Vestige"},
            ),
        ]
    )


def make_monument() -> dict:
    """Create a Monument entity as stored, with localized fields."""
    return {
        "id": 7,
        "nom": {"fr": "Casbah d'Alger", "ar": "قصبة الجزائر", "en": "Casbah of Algiers"},
        "description": {"fr": "Citadelle historique"},
        "annee": 1516,
        "lieu": {
            "id": 3,
            "nom": {"fr": "Alger", "en": "Algiers"},
            "adresse": {"fr": "Rue de la Casbah"},
        },
        "vestiges": [
            {"id": 1, "nom": {"fr": "Dar Aziza", "en": "Dar Aziza palace"}},
            {"id": 2, "nom": {"ar": "مسجد كتشاوة"}},
        ],
    }


def make_catalog_tree(data: Optional[dict] = None, language: str = "fr") -> CatalogTree:
    """Create a CatalogTree instance."""
    if data is None:
        data = {
            "common": {"save": "Enregistrer", "cancel": "Annuler"},
            "events": {"count_one": "{{count}} événement", "count_other": "{{count}} événements"},
        }
    return CatalogTree(data, language=language)


def write_json_catalogs(catalog_dir: Path, catalogs: Dict[str, dict]) -> Path:
    """Write {lang: tree} as <catalog_dir>/<lang>/translation.json files."""
    for code, data in catalogs.items():
        path = catalog_dir / code / "translation.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return catalog_dir


def read_json_catalog(catalog_dir: Path, code: str) -> dict:
    """Read <catalog_dir>/<code>/translation.json."""
    return json.loads((catalog_dir / code / "translation.json").read_text(encoding="utf-8"))
