"""
Unit tests for the key-value store backends.
"""

import json

import pytest

from miaaula.storage.kv_store import (
    JSONFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)


class TestMemoryStore:
    def test_save_and_load(self):
        store = MemoryKeyValueStore()
        store.save("k", [{"a": 1}])
        assert store.load("k") == [{"a": 1}]

    def test_missing_key(self):
        assert MemoryKeyValueStore().load("nope") is None

    def test_loaded_value_is_a_copy(self):
        store = MemoryKeyValueStore({"k": [1, 2]})
        store.load("k").append(3)
        assert store.load("k") == [1, 2]

    def test_rejects_unserializable_values(self):
        with pytest.raises(TypeError):
            MemoryKeyValueStore().save("k", object())

    def test_satisfies_protocol(self):
        assert isinstance(MemoryKeyValueStore(), KeyValueStore)


class TestJSONFileStore:
    def test_round_trip_through_disk(self, tmp_path):
        JSONFileKeyValueStore(tmp_path).save("reports", [{"lessonId": "Revisão"}])

        assert JSONFileKeyValueStore(tmp_path).load("reports") == [{"lessonId": "Revisão"}]
        assert "Revisão" in (tmp_path / "reports.json").read_text(encoding="utf-8")

    def test_missing_file(self, tmp_path):
        assert JSONFileKeyValueStore(tmp_path).load("nothing") is None

    def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            JSONFileKeyValueStore(tmp_path).load("broken")

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = JSONFileKeyValueStore(tmp_path)
        store.save("k", 1)
        store.save("k", 2)

        assert store.load("k") == 2
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    @pytest.mark.parametrize("key", ["", "..", "a/b", "../escape"])
    def test_rejects_path_like_keys(self, tmp_path, key):
        with pytest.raises(ValueError):
            JSONFileKeyValueStore(tmp_path).save(key, 1)

    def test_creates_data_dir(self, tmp_path):
        JSONFileKeyValueStore(tmp_path / "nested" / "data")
        assert (tmp_path / "nested" / "data").is_dir()
