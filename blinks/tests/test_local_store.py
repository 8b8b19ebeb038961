"""Tests for the JSON-file store and key-value state."""

import json
import threading
from datetime import datetime, timezone

import pytest
from unittest.mock import patch

from blinks.common.errors import BlinkNotFoundError, StorageError
from blinks.common.schemas import Blink, BlinkType
from blinks.storage.kv import KeyValueStore
from blinks.storage.local import LocalBlinkStore

FIXED_NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path):
    return LocalBlinkStore(tmp_path / "blinks.json", clock=lambda: FIXED_NOW)


class TestLocalBlinkStore:
    def test_empty_when_file_missing(self, store):
        assert store.list() == []

    def test_create_and_list(self, store):
        store.create(Blink(id="a", title="Buy milk"))
        store.create(Blink(id="b", type=BlinkType.QUOTE, title="Stay hungry", author="Steve Jobs"))

        blinks = store.list()
        assert [b.id for b in blinks] == ["a", "b"]
        assert blinks[1].author == "Steve Jobs"

    def test_duplicate_id_regenerated(self, store):
        store.create(Blink(id="a", title="one"))
        second = store.create(Blink(id="a", title="two"))
        assert second.id != "a"
        assert len({b.id for b in store.list()}) == 2

    def test_update_keeps_created_on(self, store):
        original = store.create(Blink(id="a", title="Buy milk"))
        edited = Blink(id="a", title="Buy oat milk", created_on=datetime(2030, 1, 1, tzinfo=timezone.utc))

        saved = store.update(edited)

        assert saved.title == "Buy oat milk"
        assert saved.created_on == original.created_on
        assert store.get("a").title == "Buy oat milk"

    def test_update_unknown(self, store):
        with pytest.raises(BlinkNotFoundError):
            store.update(Blink(id="missing", title="x"))

    def test_delete(self, store):
        store.create(Blink(id="a", title="Buy milk"))
        store.delete("a")
        assert store.list() == []

    def test_delete_unknown(self, store):
        with pytest.raises(BlinkNotFoundError):
            store.delete("missing")

    def test_toggle_completion(self, store):
        store.create(Blink(id="r", type=BlinkType.REMINDER, title="Call mom"))

        done = store.toggle_completion("r")
        assert done.is_completed is True
        assert done.completed_at == FIXED_NOW

        reopened = store.toggle_completion("r")
        assert reopened.is_completed is False
        assert reopened.completed_at is None

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "blinks.json"
        path.write_text("[not json")
        with pytest.raises(StorageError):
            LocalBlinkStore(path).list()

    def test_malformed_items_skipped(self, tmp_path):
        path = tmp_path / "blinks.json"
        path.write_text(json.dumps([
            {"id": "ok", "type": "thought", "title": "Fine"},
            {"id": "bad", "type": "thought", "title": ""},
        ]))
        assert [b.id for b in LocalBlinkStore(path).list()] == ["ok"]

    def test_concurrent_creates_keep_every_blink(self, store):
        errors = []

        def capture(i):
            try:
                store.create(Blink(id=f"b{i}", title=f"Blink {i}"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=capture, args=(i,)) for i in range(40)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.list()) == 40

    def test_failed_write_keeps_previous_file(self, store, tmp_path):
        store.create(Blink(id="a", title="Buy milk"))

        with patch("blinks.storage.kv.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.create(Blink(id="b", title="Call mom"))

        assert [b.id for b in store.list()] == ["a"]
        assert [p.name for p in tmp_path.iterdir()] == ["blinks.json"]


class TestKeyValueStore:
    def test_roundtrip(self, tmp_path):
        kv = KeyValueStore(tmp_path / "state.json")
        assert kv.get_item("missing") is None
        kv.set_item("last_cleanup_timestamp", "2025-03-14T12:00:00+00:00")
        assert kv.get_item("last_cleanup_timestamp") == "2025-03-14T12:00:00+00:00"

    def test_remove_item(self, tmp_path):
        kv = KeyValueStore(tmp_path / "state.json")
        kv.set_item("k", "v")
        kv.remove_item("k")
        assert kv.get_item("k") is None

    def test_corrupt_state_is_empty(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{{{")
        assert KeyValueStore(path).get_item("k") is None

    def test_concurrent_set_item(self, tmp_path):
        kv = KeyValueStore(tmp_path / "state.json")
        threads = [threading.Thread(target=kv.set_item, args=(f"k{i}", i)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(kv.get_item(f"k{i}") == i for i in range(20))
