import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `infrastructure.i18n`) works during pytest collection however
# pytest is invoked.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
from infrastructure.services import providers


def _clear_provider_caches():
    providers.get_settings.cache_clear()
    providers.get_language_registry.cache_clear()
    providers.get_schema_registry.cache_clear()
    providers.get_localization_service.cache_clear()


@pytest.fixture(autouse=True)
def fresh_providers():
    """Give every test freshly built application-scoped singletons."""
    _clear_provider_caches()
    yield
    _clear_provider_caches()
