"""Tests for the keyed JSON stores."""

import os
import stat

import pytest

from shared.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    history_key,
    room_key,
    user_key,
)


class TestKeys:
    def test_namespaces(self):
        assert room_key("AB12") == "room:AB12"
        assert user_key("u1") == "user:u1"
        assert history_key("u1") == "history:u1"


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return FileKeyValueStore(str(tmp_path / "store"))


class TestStoreContract:
    def test_missing_key_is_none(self, store):
        assert store.get("room:NOPE") is None

    def test_set_then_get(self, store):
        store.set("room:A", {"id": "A", "players": [{"id": "u1"}]})
        assert store.get("room:A") == {"id": "A", "players": [{"id": "u1"}]}

    def test_overwrite(self, store):
        store.set("public_rooms", [1])
        store.set("public_rooms", [1, 2])
        assert store.get("public_rooms") == [1, 2]

    def test_delete(self, store):
        store.set("room:A", {"id": "A"})
        store.delete("room:A")
        assert store.get("room:A") is None

    def test_delete_missing_is_noop(self, store):
        store.delete("room:NOPE")

    def test_reads_are_copies(self, store):
        store.set("room:A", {"players": []})
        value = store.get("room:A")
        value["players"].append("mallory")
        assert store.get("room:A") == {"players": []}


class TestFileKeyValueStore:
    def test_creates_directory_on_first_write(self, tmp_path):
        store_dir = tmp_path / "store"
        store = FileKeyValueStore(str(store_dir))
        assert not store_dir.exists()
        store.set("room:A", {"id": "A"})
        assert (store_dir / "room__A.json").exists()

    def test_owner_only_permissions(self, tmp_path):
        store_dir = tmp_path / "store"
        FileKeyValueStore(str(store_dir)).set("user:u1", {"id": "u1"})
        assert stat.S_IMODE(os.stat(store_dir).st_mode) == 0o700
        assert stat.S_IMODE(os.stat(store_dir / "user__u1.json").st_mode) == 0o600

    def test_no_temp_files_left_behind(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path))
        store.set("room:A", {"id": "A"})
        store.set("room:A", {"id": "A", "round": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["room__A.json"]

    def test_survives_new_instance(self, tmp_path):
        FileKeyValueStore(str(tmp_path)).set("history:u1", [{"id": "h1"}])
        assert FileKeyValueStore(str(tmp_path)).get("history:u1") == [{"id": "h1"}]

    def test_rejects_path_traversal(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "store"))
        with pytest.raises(ValueError, match="Path traversal rejected"):
            store.set("../escape", {})
        assert not (tmp_path / "store").exists()
