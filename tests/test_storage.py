"""Tests for the storage backends and store persistence."""

import asyncio
import json

import pytest

from finanzmanager.config import AppSettings
from finanzmanager.models.ledger import AppStore, Profile
from finanzmanager.services.storage import (
    CorruptStateError,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    LocalFileStateStorage,
    StorageError,
    StorePersistence,
    default_store,
    deserialize_store,
    serialize_store,
)
from finanzmanager.models.audit import AuditEventBuilder


class TestLocalFileStateStorage:
    """Tests for the JSON-file key-value storage."""

    def test_missing_file_reads_none(self, tmp_path):
        storage = LocalFileStateStorage(tmp_path / "storage.json")
        assert asyncio.run(storage.load_slot("key")) is None

    def test_save_and_load(self, tmp_path):
        """Test a write followed by a read."""
        path = tmp_path / "nested" / "storage.json"
        storage = LocalFileStateStorage(path)
        assert asyncio.run(storage.save_slot("key", '{"a": 1}')) is True
        assert asyncio.run(storage.load_slot("key")) == '{"a": 1}'
        assert json.loads(path.read_text(encoding="utf-8")) == {"key": '{"a": 1}'}

    def test_other_slots_are_kept(self, tmp_path):
        storage = LocalFileStateStorage(tmp_path / "storage.json")
        asyncio.run(storage.save_slot("a", "1"))
        asyncio.run(storage.save_slot("b", "2"))
        assert asyncio.run(storage.load_slot("a")) == "1"
        assert asyncio.run(storage.load_slot("b")) == "2"

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = LocalFileStateStorage(tmp_path / "storage.json")
        asyncio.run(storage.save_slot("a", "1"))
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    def test_invalid_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(StorageError):
            asyncio.run(LocalFileStateStorage(path).load_slot("key"))

    def test_non_string_slot_raises_storage_error(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text('{"key": {"nested": true}}', encoding="utf-8")
        with pytest.raises(StorageError):
            asyncio.run(LocalFileStateStorage(path).load_slot("key"))


class TestInMemoryStorage:
    """Tests for the in-memory backends."""

    def test_state_storage_counts_writes(self):
        storage = InMemoryStateStorage()
        asyncio.run(storage.save_slot("k", "v"))
        assert storage.slots == {"k": "v"}
        assert storage.write_count == 1

    def test_audit_storage_newest_first(self):
        storage = InMemoryAuditStorage()
        first = AuditEventBuilder.profile_selected("a")
        second = AuditEventBuilder.profile_selected("b")
        asyncio.run(storage.append_event(first))
        asyncio.run(storage.append_event(second))
        recent = asyncio.run(storage.get_recent_events(limit=1))
        assert recent == [second]


class TestStorePersistence:
    """Tests for loading and saving the whole store."""

    def test_default_store(self):
        """Test the first-run store."""
        store = default_store(AppSettings(default_profile_name="Mein Unternehmen", default_tax_rate=5.0))
        assert store.active_profile_id == "default"
        assert list(store.profiles) == ["default"]
        assert store.active_profile.name == "Mein Unternehmen"
        assert store.active_profile.tax_rate == 5.0

    def test_roundtrip(self):
        """Test save followed by load."""
        storage = InMemoryStateStorage()
        persistence = StorePersistence(storage, key="finanz_manager_store")
        store = AppStore(
            active_profile_id="p-1",
            profiles={"default": Profile(id="default"), "p-1": Profile(id="p-1", name="Zwei")},
        )
        size = asyncio.run(persistence.save(store))
        assert size > 0
        assert "finanz_manager_store" in storage.slots
        assert asyncio.run(persistence.load()) == store

    def test_serialized_form_uses_wire_names(self):
        text = serialize_store(default_store(AppSettings()))
        data = json.loads(text)
        assert data["activeProfileId"] == "default"
        assert "monthFilter" in data["profiles"]["default"]

    def test_load_empty_slot(self):
        persistence = StorePersistence(InMemoryStateStorage())
        assert asyncio.run(persistence.load()) is None

    @pytest.mark.parametrize("raw", [
        "{broken",
        '{"activeProfileId": "x", "profiles": {}}',
        '{"profiles": 1}',
    ])
    def test_corrupt_slot(self, raw):
        """Test undecodable stored state."""
        with pytest.raises(CorruptStateError):
            deserialize_store(raw)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
