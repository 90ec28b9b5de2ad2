"""Tests for the JSON-backed state store."""

import json

import pytest

from core.exceptions import NotFoundError, ValidationError
from features.state import STATE_KINDS, StateStore
from features.state.schemas import AppSettings, StoreEntry


@pytest.fixture
def store(tmp_path):
    state_store = StateStore(tmp_path / "data")
    state_store.initialise()
    return state_store


def test_state_kinds_cover_bundled_routes():
    assert STATE_KINDS == ("settings", "auths", "proxies", "certs", "validationRules")


def test_defaults_point_save_location_at_data_dir(store, tmp_path):
    settings = store.load("settings")

    assert settings["saveFilesLocation"] == str(tmp_path / "data")
    assert settings["maxRedirects"] == 5
    assert settings["ignoreCertificateValidation"] is False
    assert store.store_dir() == tmp_path / "data" / "store"


def test_save_settings_persists_camel_case_and_extras(store, tmp_path):
    saved = store.save("settings", {"maxRedirects": 2, "theme": "dark"})

    assert saved["maxRedirects"] == 2
    assert saved["theme"] == "dark"
    on_disk = json.loads((tmp_path / "data" / "settings.json").read_text(encoding="utf-8"))
    assert on_disk["maxRedirects"] == 2

    reloaded = StateStore(tmp_path / "data").load("settings")
    assert reloaded["maxRedirects"] == 2
    assert reloaded["theme"] == "dark"


def test_partial_settings_file_is_merged_over_defaults(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "settings.json").write_text('{"maxHistoryItems": 50}', encoding="utf-8")

    settings = StateStore(data).load_settings()

    assert settings.max_history_items == 50
    assert settings.max_redirects == 5


def test_invalid_settings_file_falls_back_to_defaults(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "settings.json").write_text('{"maxRedirects": -4}', encoding="utf-8")

    settings = StateStore(data).load_settings()

    assert settings.max_redirects == 5


def test_invalid_settings_payload_raises_validation_error(store):
    with pytest.raises(ValidationError) as exc_info:
        store.save("settings", {"maxRedirects": "many"})
    assert exc_info.value.field == "maxRedirects"

    with pytest.raises(ValidationError):
        store.save("settings", ["not", "an", "object"])


def test_entries_follow_save_files_location(store, tmp_path):
    custom = tmp_path / "custom"
    store.save("settings", {"saveFilesLocation": str(custom)})

    store.save("auths", [{"id": "a1", "type": "basic", "username": "alice"}])

    assert json.loads((custom / "store" / "auth.json").read_text(encoding="utf-8")) == [
        {"id": "a1", "type": "basic", "username": "alice"}
    ]
    assert store.load("auths") == [{"id": "a1", "type": "basic", "username": "alice"}]


def test_each_kind_has_its_own_file(store):
    store.save("proxies", [StoreEntry(id="p1")])
    store.save("validationRules", [{"id": "r1", "rule": "status == 200"}])

    assert store.load("proxies") == [{"id": "p1"}]
    assert store.load("validationRules") == [{"id": "r1", "rule": "status == 200"}]
    assert store.load("certs") == []


def test_entries_require_id(store):
    with pytest.raises(ValidationError) as exc_info:
        store.save("certs", [{"id": "c1"}, {"host": "example.com"}])

    assert "index 1" in exc_info.value.message
    assert store.load("certs") == []


def test_entries_must_be_a_list(store):
    with pytest.raises(ValidationError):
        store.save("auths", {"id": "a1"})


def test_unknown_kind_raises_not_found(store):
    with pytest.raises(NotFoundError) as exc_info:
        store.load("collections")
    assert exc_info.value.resource == "collections"

    with pytest.raises(NotFoundError):
        store.save("collections", [])


def test_non_list_store_file_is_ignored(store):
    store_dir = store.store_dir()
    store_dir.mkdir(parents=True, exist_ok=True)
    (store_dir / "proxies.json").write_text('{"id": "p1"}', encoding="utf-8")

    assert store.load("proxies") == []


def test_get_settings_uses_cache_until_invalidated(store, tmp_path):
    store.save_settings(AppSettings(max_redirects=9, save_files_location=str(tmp_path)))
    (tmp_path / "data" / "settings.json").write_text('{"maxRedirects": 1}', encoding="utf-8")

    assert store.get_settings().max_redirects == 9

    store.invalidate_cache()
    assert store.get_settings().max_redirects == 1
