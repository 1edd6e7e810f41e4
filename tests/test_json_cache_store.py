"""Tests for the JSON file backed cache store."""
from __future__ import annotations

import threading
from pathlib import Path

import pytest

from presence_tracker.infrastructure.repositories.json_cache_store import JsonCacheStore


def test_json_cache_store_roundtrip(tmp_path: Path) -> None:
    """A stored value should be returned unchanged, also by a new instance."""

    path = tmp_path / "cache" / "cache.json"
    value = {"IsOnline": True, "Motd": "Welcome", "PlayersMax": 20}

    JsonCacheStore(path).set("server_data_key", value)

    assert JsonCacheStore(path).get("server_data_key") == value


def test_missing_key_returns_default(tmp_path: Path) -> None:
    """Absent keys are a normal outcome and yield the supplied default."""

    store = JsonCacheStore(tmp_path / "cache.json")

    assert store.get("unknown") is None
    assert store.get("unknown", 0) == 0


def test_set_keeps_other_keys(tmp_path: Path) -> None:
    """Writing one key must not drop the others."""

    store = JsonCacheStore(tmp_path / "cache.json")
    store.set("first", 1)
    store.set("second", {"a": "b"})
    store.set("first", 2)

    assert store.get("first") == 2
    assert store.get("second") == {"a": "b"}


def test_malformed_file_is_treated_as_empty(tmp_path: Path) -> None:
    """A corrupted cache document degrades to an empty store."""

    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonCacheStore(path)

    assert store.get("anything", "fallback") == "fallback"

    store.set("anything", 3)
    assert store.get("anything") == 3


def test_concurrent_writers_keep_every_key(tmp_path: Path) -> None:
    """Threads writing distinct keys never erase each other's entries."""

    path = tmp_path / "cache.json"
    JsonCacheStore(path).set("player_data_A", {"uuid-alex": {"name": "Alex", "lastSeen": 1}})

    def _writer(number: int) -> None:
        store = JsonCacheStore(path)
        for iteration in range(200):
            store.set(f"server_data_{number}", {"IsOnline": True, "PlayersOnline": iteration})

    threads = [threading.Thread(target=_writer, args=(number,)) for number in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    store = JsonCacheStore(path)
    assert store.get("player_data_A") == {"uuid-alex": {"name": "Alex", "lastSeen": 1}}
    for number in range(3):
        assert store.get(f"server_data_{number}") == {"IsOnline": True, "PlayersOnline": 199}
    assert not (tmp_path / "cache.json.tmp").exists()


def test_failed_write_leaves_previous_document(tmp_path: Path) -> None:
    """A write that cannot be completed raises and keeps the old data intact."""

    path = tmp_path / "cache.json"
    store = JsonCacheStore(path)
    store.set("kept", 1)

    with pytest.raises(TypeError):
        store.set("broken", object())

    assert store.get("kept") == 1
    assert store.get("broken") is None
    assert not (tmp_path / "cache.json.tmp").exists()
