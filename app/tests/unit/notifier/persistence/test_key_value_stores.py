"""Unit tests for the key/value stores."""

import json

import pytest

from notifier.configuration import StoreSettings
from notifier.persistence import (
    NOTIFICATIONS_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    create_key_value_store,
)


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(str(tmp_path / "state" / "notifier.json"))


@pytest.mark.unit
class TestKeyValueStore:
    """Behavior shared by every backend."""

    def test_missing_key_returns_none(self, store):
        assert store.get(NOTIFICATIONS_KEY) is None

    def test_set_and_get(self, store):
        store.set(NOTIFICATIONS_KEY, [{"id": "n-1", "read": False}])

        assert store.get(NOTIFICATIONS_KEY) == [{"id": "n-1", "read": False}]

    def test_get_returns_copy(self, store):
        store.set(NOTIFICATIONS_KEY, [{"id": "n-1"}])

        value = store.get(NOTIFICATIONS_KEY)
        value.append({"id": "n-2"})

        assert store.get(NOTIFICATIONS_KEY) == [{"id": "n-1"}]

    def test_delete(self, store):
        store.set("a", 1)
        store.set("b", 2)

        store.delete("a")
        store.delete("missing")

        assert store.get("a") is None
        assert store.get("b") == 2

    def test_rejects_unserializable_value(self, store):
        with pytest.raises(TypeError):
            store.set("bad", {"value": object()})


@pytest.mark.unit
class TestJsonFileKeyValueStore:
    """File backend specifics."""

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "state.json")
        JsonFileKeyValueStore(path).set("notificationPreferences", {"x": 1})

        assert JsonFileKeyValueStore(path).get("notificationPreferences") == {"x": 1}

    def test_corrupt_document_raises_on_read(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            JsonFileKeyValueStore(str(path)).get(NOTIFICATIONS_KEY)

    def test_corrupt_document_is_replaced_on_write(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")

        JsonFileKeyValueStore(str(path)).set("k", "v")

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_empty_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("", encoding="utf-8")

        assert JsonFileKeyValueStore(str(path)).get("k") is None

    def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(str(tmp_path / "state.json"))
        store.set("a", 1)
        store.set("b", 2)

        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]


@pytest.mark.unit
class TestCreateKeyValueStore:
    """Tests for backend selection."""

    def test_memory_backend(self):
        store = create_key_value_store(StoreSettings())

        assert isinstance(store, InMemoryKeyValueStore)
        assert store.backend_name == "memory"

    def test_file_backend(self, tmp_path):
        settings = StoreSettings().model_copy(
            update={"backend": "file", "path": str(tmp_path / "s.json")}
        )

        store = create_key_value_store(settings)

        assert isinstance(store, JsonFileKeyValueStore)
        assert store.backend_name == "file"

    def test_override(self):
        settings = StoreSettings().model_copy(update={"backend": "file"})

        assert isinstance(create_key_value_store(settings, backend="memory"), InMemoryKeyValueStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            create_key_value_store(StoreSettings(), backend="redis")
