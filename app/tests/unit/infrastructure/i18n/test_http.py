"""Tests for infrastructure.i18n.http module."""

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from infrastructure.configuration import LocalizationSettings
from infrastructure.i18n import LocalizationService
from infrastructure.i18n.http import (
    LanguageContextDep,
    LanguageMiddleware,
    TargetLanguageDep,
)
from infrastructure.services.providers import get_language_registry


@pytest.fixture
def client(registry):
    app = FastAPI()
    app.add_middleware(
        LanguageMiddleware,
        service=LocalizationService(registry),
        settings=LocalizationSettings(),
    )
    app.dependency_overrides[get_language_registry] = lambda: registry

    @app.get("/hello")
    async def hello(language: LanguageContextDep) -> dict:
        return {
            "language": language.language,
            "direction": language.direction.value,
            "source": language.source.value,
            "logged_language": structlog.contextvars.get_contextvars().get("language"),
        }

    @app.get("/translations/{lang}")
    def translations(lang: TargetLanguageDep) -> dict:
        return {"language": lang}

    return TestClient(app)


class TestLanguageMiddleware:
    """Tests for LanguageMiddleware."""

    def test_default_language(self, client):
        """Without signals the default language is used."""
        response = client.get("/hello")
        assert response.status_code == 200
        assert response.json()["language"] == "fr"
        assert response.json()["source"] == "default"
        assert response.headers["Content-Language"] == "fr"
        assert response.headers["X-Content-Language"] == "fr"
        assert "set-cookie" not in response.headers

    def test_query_override_sets_cookie(self, client):
        """An explicit override is persisted in the preference cookie."""
        response = client.get("/hello?lang=ar")
        assert response.json() == {
            "language": "ar",
            "direction": "rtl",
            "source": "override",
            "logged_language": "ar",
        }
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("language=ar")
        assert "Max-Age=31536000" in set_cookie

    def test_override_matching_cookie_not_rewritten(self, client):
        """No cookie is written when the preference already matches."""
        response = client.get("/hello?lang=ar", headers={"Cookie": "language=ar"})
        assert response.json()["language"] == "ar"
        assert "set-cookie" not in response.headers

    def test_cookie_preference(self, client):
        """The preference cookie beats the headers."""
        response = client.get(
            "/hello",
            headers={"Cookie": "language=en", "X-Language": "ar", "Accept-Language": "ar"},
        )
        assert response.json()["language"] == "en"
        assert response.json()["source"] == "preference"

    def test_custom_header(self, client):
        """The X-Language header beats Accept-Language."""
        response = client.get("/hello", headers={"X-Language": "kab", "Accept-Language": "en"})
        assert response.json()["language"] == "tz-ltn"

    def test_accept_language(self, client):
        """Accept-Language is used last."""
        response = client.get("/hello", headers={"Accept-Language": "de,en-US;q=0.8"})
        assert response.json()["language"] == "en"
        assert response.headers["Content-Language"] == "en"

    def test_unsupported_override_ignored(self, client):
        """An unsupported override is treated as absent."""
        response = client.get("/hello?lang=de")
        assert response.json()["language"] == "fr"
        assert "set-cookie" not in response.headers


class TestTargetLanguage:
    """Tests for the get_target_language dependency."""

    def test_supported(self, client):
        """A supported path language is normalized."""
        response = client.get("/translations/AR-dz")
        assert response.status_code == 200
        assert response.json() == {"language": "ar"}

    def test_unsupported(self, client):
        """An unsupported path language is a 400 listing supported languages."""
        response = client.get("/translations/de")
        assert response.status_code == 400
        assert "fr" in response.json()["detail"]["supported_languages"]
