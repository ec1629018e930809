from __future__ import annotations

import json

from storefront.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore


def test_in_memory_store_get_set():
    store = InMemoryKeyValueStore({"a": "1"})
    store.set("b", "2")

    assert store.get("a") == "1"
    assert store.get("b") == "2"
    assert store.get("missing") is None


def test_file_store_persists_and_reloads(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    JsonFileKeyValueStore(path).set("lumina_wishlist", '["1"]')

    assert json.loads(path.read_text(encoding="utf-8")) == {"lumina_wishlist": '["1"]'}
    assert JsonFileKeyValueStore(path).get("lumina_wishlist") == '["1"]'


def test_file_store_tolerates_missing_file(tmp_path):
    assert JsonFileKeyValueStore(tmp_path / "absent.json").get("anything") is None


def test_file_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not valid json", encoding="utf-8")

    store = JsonFileKeyValueStore(path)
    assert store.get("lumina_wishlist") is None

    store.set("lumina_wishlist", "[]")
    assert JsonFileKeyValueStore(path).get("lumina_wishlist") == "[]"


def test_file_store_ignores_non_object_root_and_non_string_values(tmp_path):
    list_root = tmp_path / "list.json"
    list_root.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileKeyValueStore(list_root).get("0") is None

    mixed = tmp_path / "mixed.json"
    mixed.write_text(json.dumps({"keep": "yes", "drop": 3}), encoding="utf-8")
    store = JsonFileKeyValueStore(mixed)
    assert store.get("keep") == "yes"
    assert store.get("drop") is None
