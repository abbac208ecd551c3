"""Key-value persistence for streak and timer settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol


logger = logging.getLogger(__name__)


def _default_store_path() -> Path:
    return Path.home() / ".hiit-timer" / "store.json"


class PersistenceReadError(ValueError):
    """Raised when a stored payload cannot be decoded."""


class PersistenceWriteError(RuntimeError):
    """Raised when the backing store cannot be written."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys live in one JSON object file; values are strings."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_store_path()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring store %s: top-level value is not an object", self.path)
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=True, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise PersistenceWriteError(f"Unable to write {self.path}: {exc}") from exc


def read_json_object(store: KeyValueStore, key: str) -> dict[str, object] | None:
    """Return the decoded object stored under ``key``, ``None`` when absent."""
    raw = store.get(key)
    if raw is None:
        return None
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise PersistenceReadError(f"{key}: invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise PersistenceReadError(f"{key}: stored value must be an object")
    return payload


def write_json_object(store: KeyValueStore, key: str, payload: dict[str, object]) -> None:
    try:
        store.set(key, json.dumps(payload, ensure_ascii=True))
    except PersistenceWriteError:
        raise
    except OSError as exc:
        raise PersistenceWriteError(f"Unable to write {key}: {exc}") from exc
