import json

import pytest

from commands import catalog_check
from tests.factories.i18n import read_json_catalog, write_json_catalogs


@pytest.fixture(autouse=True)
def two_languages(monkeypatch):
    monkeypatch.setenv("I18N_LANGUAGES", '[{"code": "fr"}, {"code": "en"}]')
    monkeypatch.setenv("I18N_DEFAULT_LANGUAGE", "fr")
    monkeypatch.setenv("I18N_ALIASES", "")


@pytest.fixture
def project(tmp_path):
    catalogs = write_json_catalogs(
        tmp_path / "locales",
        {
            "fr": {
                "nav": {"home": "Accueil", "about": "À propos"},
                "events": {
                    "count_one": "{{count}} événement",
                    "count_other": "{{count}} événements",
                },
            },
            "en": {"nav": {"home": "Home"}, "events": {"count_other": "{{count}} events"}},
        },
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.tsx").write_text(
        "t('nav.home'); t('nav.about'); t('events.count', { count });\n",
        encoding="utf-8",
    )
    return catalogs, src


def _argv(project, *extra):
    catalogs, src = project
    return ["--catalog-dir", str(catalogs), "--source", str(src), *extra]


def test_report_exits_1_when_keys_missing(project, capsys):
    assert catalog_check.main(_argv(project)) == catalog_check.EXIT_MISSING
    out = capsys.readouterr().out
    assert "Reference language: fr" in out
    assert "FR: OK" in out
    assert "- nav.about" in out
    assert "events.count (missing: one)" in out


def test_report_exits_0_when_complete(project, capsys):
    catalogs, _ = project
    write_json_catalogs(
        catalogs,
        {
            "en": {
                "nav": {"home": "Home", "about": "About"},
                "events": {"count_one": "{{count}} event", "count_other": "{{count}} events"},
            }
        },
    )
    assert catalog_check.main(_argv(project)) == catalog_check.EXIT_OK
    assert "EN: OK" in capsys.readouterr().out


def test_json_report(project, capsys):
    assert catalog_check.main(_argv(project, "--json")) == catalog_check.EXIT_MISSING
    document = json.loads(capsys.readouterr().out)
    en = document["consistency"]["languages"]["en"]
    assert en["missing"] == ["nav.about"]
    assert en["cross_language_missing"] == ["events.count_one", "nav.about"]
    assert document["plurals"]["en"][0]["missing"] == ["one"]
    assert "merge" not in document


def test_template_fills_catalogs(project):
    catalogs, _ = project
    assert catalog_check.main(_argv(project, "--template")) == catalog_check.EXIT_OK
    en = read_json_catalog(catalogs, "en")
    assert en["nav"] == {"home": "Home", "about": "[TODO en] À propos"}
    assert en["events"]["count_one"] == "[TODO en] {{count}} événement"
    assert read_json_catalog(catalogs, "fr")["nav"]["home"] == "Accueil"


def test_template_out_leaves_catalogs_untouched(project, tmp_path):
    catalogs, _ = project
    target = tmp_path / "todo" / "en.json"
    assert (
        catalog_check.main(_argv(project, "--template", "--template-out", str(target)))
        == catalog_check.EXIT_MISSING
    )
    todo = json.loads(target.read_text(encoding="utf-8"))
    assert todo == {
        "en": {
            "nav": {"about": "[TODO en] À propos"},
            "events": {"count_one": "[TODO en] {{count}} événement"},
        }
    }
    assert "about" not in read_json_catalog(catalogs, "en")["nav"]


def test_template_out_requires_template(project):
    with pytest.raises(SystemExit) as exc_info:
        catalog_check.main(_argv(project, "--template-out", "todo.json"))
    assert exc_info.value.code == 2


def test_merge_patch_file(project, tmp_path, capsys):
    catalogs, _ = project
    patch_file = tmp_path / "patch.json"
    patch_file.write_text(
        json.dumps({"en": {"nav.about": "About", "events": {"count_one": "{{count}} event"}}}),
        encoding="utf-8",
    )
    assert (
        catalog_check.main(_argv(project, "--merge", str(patch_file))) == catalog_check.EXIT_OK
    )
    assert "Merged: 2 added, 0 updated, written: en" in capsys.readouterr().out
    assert read_json_catalog(catalogs, "en")["nav"]["about"] == "About"


def test_merge_lists_refused_keys(project, tmp_path, capsys):
    catalogs, _ = project
    patch_file = tmp_path / "patch.json"
    patch_file.write_text(json.dumps({"en": {"nav": "Navigation"}}), encoding="utf-8")
    catalog_check.main(_argv(project, "--merge", str(patch_file)))
    out = capsys.readouterr().out
    assert "EN: 1 patch keys refused" in out
    assert "    - nav" in out
    assert read_json_catalog(catalogs, "en")["nav"]["home"] == "Home"


def test_merge_yaml_patch_file(project, tmp_path):
    catalogs, _ = project
    patch_file = tmp_path / "patch.yml"
    patch_file.write_text("en:\n  nav:\n    home: Start\n", encoding="utf-8")
    catalog_check.main(_argv(project, "--merge", str(patch_file)))
    assert read_json_catalog(catalogs, "en")["nav"]["home"] == "Start"


def test_bad_patch_file_is_fatal(project, tmp_path, capsys):
    patch_file = tmp_path / "patch.json"
    patch_file.write_text('["not", "a", "mapping"]', encoding="utf-8")
    assert (
        catalog_check.main(_argv(project, "--merge", str(patch_file)))
        == catalog_check.EXIT_FATAL
    )
    assert "ERROR:" in capsys.readouterr().err


def test_held_lock_is_fatal(project):
    catalogs, _ = project
    (catalogs / ".catalog.lock").write_text("", encoding="utf-8")
    assert catalog_check.main(_argv(project, "--template")) == catalog_check.EXIT_FATAL
    assert "about" not in read_json_catalog(catalogs, "en")["nav"]


def test_no_parsable_catalog_is_fatal(project):
    catalogs, _ = project
    for code in ("fr", "en"):
        (catalogs / code / "translation.json").write_text("{", encoding="utf-8")
    assert catalog_check.main(_argv(project)) == catalog_check.EXIT_FATAL


def test_unsupported_reference_is_fatal(project):
    assert catalog_check.main(_argv(project, "--reference", "de")) == catalog_check.EXIT_FATAL


def test_reference_option(project, capsys):
    catalog_check.main(_argv(project, "--reference", "en", "--json"))
    document = json.loads(capsys.readouterr().out)
    assert document["consistency"]["reference"] == "en"
    assert document["consistency"]["languages"]["fr"]["cross_language_extra"] == ["nav.about"]


def test_load_patch_file_rejects_non_tree_values(tmp_path):
    patch_file = tmp_path / "patch.json"
    patch_file.write_text('{"en": "Home"}', encoding="utf-8")
    with pytest.raises(ValueError):
        catalog_check.load_patch_file(patch_file)
