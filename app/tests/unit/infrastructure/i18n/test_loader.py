"""Tests for infrastructure.i18n.loader module."""

import json
import os

import pytest
import yaml

from infrastructure.i18n import (
    CatalogLock,
    CatalogLockError,
    CatalogParseError,
    CatalogTree,
    CatalogWriteError,
    JSONCatalogStore,
    YAMLCatalogStore,
)


class TestJSONCatalogStore:
    """Tests for JSONCatalogStore."""

    def test_path_layout(self, tmp_path):
        """Catalogs live at <dir>/<code>/translation.json."""
        store = JSONCatalogStore(tmp_path)
        assert store.path_for("tz-ltn") == tmp_path / "tz-ltn" / "translation.json"

    def test_load(self, json_store):
        """load() returns the language's tree."""
        tree = json_store.load("fr")
        assert tree.language == "fr"
        assert tree.get("nav.home") == "Accueil"

    def test_load_missing_file_is_empty(self, tmp_path):
        """A language without a resource loads as an empty catalog."""
        tree = JSONCatalogStore(tmp_path).load("ar")
        assert len(tree) == 0

    def test_load_malformed_raises(self, tmp_path):
        """Malformed JSON raises CatalogParseError."""
        path = tmp_path / "en" / "translation.json"
        path.parent.mkdir()
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogParseError) as exc_info:
            JSONCatalogStore(tmp_path).load("en")
        assert exc_info.value.language == "en"
        assert exc_info.value.path == str(path)

    def test_load_non_mapping_root_raises(self, tmp_path):
        """A non-mapping root raises CatalogParseError."""
        path = tmp_path / "en" / "translation.json"
        path.parent.mkdir()
        path.write_text('["a", "b"]', encoding="utf-8")
        with pytest.raises(CatalogParseError):
            JSONCatalogStore(tmp_path).load("en")

    def test_save_is_readable_json(self, tmp_path):
        """save() writes UTF-8 JSON with placeholders preserved."""
        store = JSONCatalogStore(tmp_path)
        tree = CatalogTree({"greeting": "مرحبا {{name}}"}, language="ar")
        path = store.save(tree)
        assert json.loads(path.read_text(encoding="utf-8")) == {"greeting": "مرحبا {{name}}"}
        assert "مرحبا" in path.read_text(encoding="utf-8")

    def test_save_leaves_no_temp_files(self, json_store, catalog_dir):
        """The temporary file is renamed over the target."""
        tree = json_store.load("en")
        tree.set("nav.about", "About")
        json_store.save(tree)
        assert os.listdir(catalog_dir / "en") == ["translation.json"]
        assert json_store.load("en").get("nav.about") == "About"

    def test_save_without_language_raises(self, tmp_path):
        """A tree without a language cannot be saved."""
        with pytest.raises(ValueError):
            JSONCatalogStore(tmp_path).save(CatalogTree({"a": "b"}))

    def test_failed_write_keeps_original(self, json_store, catalog_dir, monkeypatch):
        """A failed rename leaves the previous catalog intact."""
        original = (catalog_dir / "fr" / "translation.json").read_text(encoding="utf-8")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        tree = json_store.load("fr")
        tree.set("nav.home", "Maison")
        with pytest.raises(CatalogWriteError):
            json_store.save(tree)

        assert (catalog_dir / "fr" / "translation.json").read_text(encoding="utf-8") == original
        assert os.listdir(catalog_dir / "fr") == ["translation.json"]

    def test_unencodable_value_keeps_original(self, json_store, catalog_dir):
        """A value that cannot be encoded fails cleanly and leaves no temp file."""
        original = (catalog_dir / "fr" / "translation.json").read_text(encoding="utf-8")
        tree = json_store.load("fr")
        tree.set("nav.home", "\ud800")
        with pytest.raises(CatalogWriteError):
            json_store.save(tree)

        assert (catalog_dir / "fr" / "translation.json").read_text(encoding="utf-8") == original
        assert os.listdir(catalog_dir / "fr") == ["translation.json"]


class TestYAMLCatalogStore:
    """Tests for YAMLCatalogStore."""

    def test_round_trip_layout(self, tmp_path):
        """YAML catalogs live at <dir>/<code>.yml."""
        store = YAMLCatalogStore(tmp_path)
        store.save(CatalogTree({"nav": {"home": "Accueil"}}, language="fr"))
        assert yaml.safe_load((tmp_path / "fr.yml").read_text(encoding="utf-8")) == {
            "nav": {"home": "Accueil"}
        }
        assert store.load("fr").get("nav.home") == "Accueil"

    def test_empty_file_is_empty_catalog(self, tmp_path):
        """An empty YAML file is an empty catalog."""
        (tmp_path / "en.yml").write_text("", encoding="utf-8")
        assert len(YAMLCatalogStore(tmp_path).load("en")) == 0

    def test_malformed_raises(self, tmp_path):
        """Malformed YAML raises CatalogParseError."""
        (tmp_path / "en.yml").write_text("nav: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogParseError):
            YAMLCatalogStore(tmp_path).load("en")


class TestCatalogLock:
    """Tests for CatalogLock."""

    def test_acquire_and_release(self, tmp_path):
        """The lock file exists only while the lock is held."""
        lock = CatalogLock(tmp_path / ".catalog.lock")
        with lock:
            assert lock.held
            assert (tmp_path / ".catalog.lock").exists()
        assert not lock.held
        assert not (tmp_path / ".catalog.lock").exists()

    def test_second_holder_fails(self, tmp_path):
        """A held lock cannot be taken again."""
        with CatalogLock(tmp_path / ".catalog.lock"):
            with pytest.raises(CatalogLockError):
                CatalogLock(tmp_path / ".catalog.lock").acquire()

    def test_store_lock(self, json_store, catalog_dir):
        """Stores hand out a lock inside the catalog directory."""
        assert json_store.lock().path == catalog_dir / ".catalog.lock"
