from __future__ import annotations

import json
from pathlib import Path

import pytest

from hiit.core.storage import (
    JsonFileStore,
    MemoryStore,
    PersistenceReadError,
    PersistenceWriteError,
    read_json_object,
    write_json_object,
)


def test_json_file_store_set_and_get(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)
    assert store.get("a") is None

    store.set("a", "1")
    store.set("b", '{"x": 2}')

    reopened = JsonFileStore(path)
    assert reopened.get("a") == "1"
    assert reopened.get("b") == '{"x": 2}'
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": '{"x": 2}'}


def test_json_file_store_ignores_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.get("a") is None

    store.set("a", "ok")
    assert store.get("a") == "ok"


def test_json_file_store_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "store.json")
    with pytest.raises(PersistenceWriteError):
        store.set("a", "1")


def test_read_json_object_round_trip() -> None:
    store = MemoryStore()
    assert read_json_object(store, "k") is None
    write_json_object(store, "k", {"n": 1, "s": None})
    assert read_json_object(store, "k") == {"n": 1, "s": None}


@pytest.mark.parametrize("raw", ["nope", "[]", "3"])
def test_read_json_object_rejects_bad_payload(raw: str) -> None:
    store = MemoryStore({"k": raw})
    with pytest.raises(PersistenceReadError):
        read_json_object(store, "k")
