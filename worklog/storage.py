from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .errors import StorageFailure
from .models import WorkSession

logger = logging.getLogger(__name__)


def serialize_sessions(sessions: list[WorkSession]) -> str:
    return json.dumps([item.to_dict() for item in sessions])


def deserialize_sessions(text: str | None, key: str = "") -> list[WorkSession]:
    """Decode a partition blob; malformed content reads as an empty partition."""
    if not text:
        return []
    try:
        raw = json.loads(text)
        if not isinstance(raw, list):
            raise ValueError(f"expected a list, got {type(raw).__name__}")
        if not all(isinstance(item, dict) for item in raw):
            raise ValueError("expected a list of session objects")
        return [WorkSession.from_dict(item) for item in raw]
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning("Ignoring unreadable sessions for %s: %s", key or "<unknown>", exc)
        return []


class SessionStore:
    """Date-keyed session partitions over a flat key-value document.

    Subclasses provide ``load`` and ``save`` for the whole document; every
    operation here is a full read-modify-write, so the last writer wins.
    """

    def load(self) -> dict[str, str]:
        raise NotImplementedError

    def save(self, items: dict[str, str]) -> None:
        raise NotImplementedError

    def get(self, key: str) -> list[WorkSession]:
        value = self.load().get(key)
        return deserialize_sessions(value if isinstance(value, str) else None, key)

    def set(self, key: str, sessions: list[WorkSession]) -> None:
        items = self.load()
        items[key] = serialize_sessions(sessions)
        self.save(items)
        logger.debug("Stored %d session(s) under %s", len(sessions), key)

    def list_keys(self) -> list[str]:
        return list(self.load())

    def clear(self) -> None:
        self.save({})
        logger.debug("Cleared all stored sessions")


class MemoryStore(SessionStore):
    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def load(self) -> dict[str, str]:
        return dict(self.items)

    def save(self, items: dict[str, str]) -> None:
        self.items = dict(items)


class JsonFileStore(SessionStore):
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, ValueError) as exc:
            raise StorageFailure(f"Failed to read session store {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StorageFailure(f"Failed to read session store {self.path}: top level is not an object")
        logger.debug("Loaded %d partition(s) from %s", len(payload), self.path)
        return payload

    def save(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2, sort_keys=True)
        except OSError as exc:
            raise StorageFailure(f"Failed to write session store {self.path}: {exc}") from exc


def resolve_store() -> JsonFileStore:
    env_path = os.getenv("WORKLOG_DATA_FILE")
    if env_path:
        return JsonFileStore(Path(env_path).expanduser())
    return JsonFileStore(Path.home() / ".worklog" / "data.json")
