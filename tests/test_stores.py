from datetime import datetime, timedelta, timezone
import os

import pytest

from trivia_app.core.models import ScoreEntry
from trivia_app.core.services.identity_store import KeyValueIdentityStore
from trivia_app.core.services.leaderboard_store import KeyValueLeaderboardStore
from trivia_app.core.storage import JsonFileStore, MemoryStore


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


def test_identity_save_then_load_returns_name():
    identity = KeyValueIdentityStore(MemoryStore())
    identity.save("alice", 7)

    assert identity.load() == "alice"


def test_identity_clear_then_load_returns_empty():
    identity = KeyValueIdentityStore(MemoryStore())
    identity.save("alice", 7)
    identity.clear()

    assert identity.load() == ""


def test_identity_expires_after_ttl():
    clock = FakeClock()
    identity = KeyValueIdentityStore(MemoryStore(), clock=clock)
    identity.save("alice", 7)

    clock.now += timedelta(days=6, hours=23)
    assert identity.load() == "alice"

    clock.now += timedelta(hours=1)
    assert identity.load() == ""


def test_identity_load_without_record_or_with_garbage_is_empty():
    store = MemoryStore()
    identity = KeyValueIdentityStore(store)
    assert identity.load() == ""

    store.set("username", {"username": "bob", "expires_at": "not a date"})
    assert identity.load() == ""

    store.set("username", "bob")
    assert identity.load() == ""


def test_leaderboard_reset_then_list_is_empty():
    leaderboard = KeyValueLeaderboardStore(MemoryStore())
    leaderboard.append(ScoreEntry("a", 1))
    leaderboard.reset_all()

    assert leaderboard.list() == []


def test_leaderboard_preserves_insertion_order_without_dedup():
    leaderboard = KeyValueLeaderboardStore(MemoryStore())
    leaderboard.append(ScoreEntry("a", 1))
    leaderboard.append(ScoreEntry("b", 2))
    leaderboard.append(ScoreEntry("a", 1))

    assert leaderboard.list() == [ScoreEntry("a", 1), ScoreEntry("b", 2), ScoreEntry("a", 1)]


def test_leaderboard_skips_malformed_rows():
    store = MemoryStore()
    store.set("scores", [{"username": "a", "score": 3}, {"username": "b"}, "junk", {"username": "c", "score": "x"}])

    assert KeyValueLeaderboardStore(store).list() == [ScoreEntry("a", 3)]


def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "data" / "storage.json"
    KeyValueLeaderboardStore(JsonFileStore(path)).append(ScoreEntry("bob", 7))
    KeyValueIdentityStore(JsonFileStore(path)).save("bob", 7)

    reopened = JsonFileStore(path)
    assert KeyValueLeaderboardStore(reopened).list() == [ScoreEntry("bob", 7)]
    assert KeyValueIdentityStore(reopened).load() == "bob"


def test_json_file_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileStore(path)

    assert store.get("scores") is None
    store.set("scores", [])
    assert store.get("scores") == []


def test_json_file_store_remove_missing_key_is_noop(tmp_path):
    store = JsonFileStore(tmp_path / "storage.json")
    store.remove("scores")

    assert not store.file_path.exists()


def test_json_file_store_write_leaves_no_temp_file(tmp_path):
    store = JsonFileStore(tmp_path / "storage.json")
    store.set("scores", [{"username": "bob", "score": 7}])
    store.set("username", {"username": "bob", "expires_at": "2030-01-01T00:00:00+00:00"})

    assert sorted(path.name for path in tmp_path.iterdir()) == ["storage.json"]
    assert store.get("scores") == [{"username": "bob", "score": 7}]


def test_json_file_store_failed_write_keeps_previous_contents(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("scores", [{"username": "bob", "score": 7}])

    def failing_replace(source, target):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", failing_replace)
    with pytest.raises(OSError):
        store.set("scores", [])

    assert store.get("scores") == [{"username": "bob", "score": 7}]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["storage.json"]
