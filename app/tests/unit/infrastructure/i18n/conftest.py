"""Feature-level fixtures for i18n system tests.

Provides registries, schemas and on-disk catalogs for negotiation,
resolution and catalog analysis scenarios.
"""

import pytest

from infrastructure.i18n import DiagnosticCollector, JSONCatalogStore
from tests.factories.i18n import (
    make_registry,
    make_schema_registry,
    make_two_language_registry,
    write_json_catalogs,
)


@pytest.fixture
def registry():
    """Platform language registry (fr default, ar rtl, en, tz-ltn, tz-tfng)."""
    return make_registry()


@pytest.fixture
def small_registry():
    """fr/en registry, both requiring one/other."""
    return make_two_language_registry()


@pytest.fixture
def schemas():
    """Monument / Lieu / Vestige schemas."""
    return make_schema_registry()


@pytest.fixture
def diagnostics():
    return DiagnosticCollector()


@pytest.fixture
def catalog_dir(tmp_path):
    """JSON catalogs for fr (reference) and en.

    fr has every key; en lacks "nav.about" and the "_one" plural variant.
    """
    return write_json_catalogs(
        tmp_path / "locales",
        {
            "fr": {
                "nav": {"home": "Accueil", "about": "À propos"},
                "events": {
                    "count_one": "{{count}} événement",
                    "count_other": "{{count}} événements",
                },
            },
            "en": {
                "nav": {"home": "Home"},
                "events": {"count_other": "{{count}} events"},
            },
        },
    )


@pytest.fixture
def json_store(catalog_dir):
    return JSONCatalogStore(catalog_dir)


@pytest.fixture
def source_dir(tmp_path):
    """Source tree using nav.home, nav.about, events.count and a computed key."""
    src = tmp_path / "src"
    (src / "pages").mkdir(parents=True)
    (src / "pages" / "Home.tsx").write_text(
        "\n".join(
            [
                "export const Home = () => {",
                "  const { t } = useTranslation();",
                "  return <h1>{t('nav.home')}</h1>;",
                "};",
            ]
        ),
        encoding="utf-8",
    )
    (src / "pages" / "Events.tsx").write_text(
        "\n".join(
            [
                "const title = t(\"nav.about\");",
                "const count = i18n.t('events.count', { count: n });",
                "const label = t(`status.${status}`);",
            ]
        ),
        encoding="utf-8",
    )
    (src / "node_modules").mkdir()
    (src / "node_modules" / "lib.js").write_text("t('vendor.key')", encoding="utf-8")
    return src
