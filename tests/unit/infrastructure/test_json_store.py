import json

import pytest

from core.exceptions import StorageError
from infrastructure.files import JsonFileStore


def test_read_missing_file_returns_default(tmp_path):
    store = JsonFileStore(tmp_path)

    assert store.read("settings.json", {"fallback": True}) == {"fallback": True}


def test_write_creates_parents_and_replaces_atomically(tmp_path):
    store = JsonFileStore(tmp_path / "nested")

    store.write("store/auth.json", [{"id": "a1"}])
    store.write("store/auth.json", [{"id": "a2"}])

    target = tmp_path / "nested" / "store" / "auth.json"
    assert json.loads(target.read_text(encoding="utf-8")) == [{"id": "a2"}]
    assert [path.name for path in target.parent.iterdir()] == ["auth.json"]


def test_corrupt_file_falls_back_to_default(tmp_path, caplog):
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    store = JsonFileStore(tmp_path)

    assert store.read("settings.json", {}) == {}
    assert "Failed to read" in caplog.text


def test_unserialisable_data_raises_storage_error(tmp_path):
    store = JsonFileStore(tmp_path)

    with pytest.raises(StorageError) as exc_info:
        store.write("certs.json", {"value": object()})

    assert exc_info.value.operation == "write"
    assert list(tmp_path.iterdir()) == []


def test_ensure_ready_creates_root(tmp_path):
    store = JsonFileStore(tmp_path / "a" / "b")

    store.ensure_ready()

    assert (tmp_path / "a" / "b").is_dir()
