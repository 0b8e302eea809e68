"""Local storage adapters — implement StoragePort.

JsonFileStorage keeps every key in one JSON object on disk, rewritten
atomically on each change. MemoryStorage is a plain dict.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-memory implementation of StoragePort."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """File-backed implementation of StoragePort."""

    def __init__(self, path: str | None = None) -> None:
        if path is None:
            from src.config import settings
            path = settings.LOCAL_STORE_PATH

        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._items = self._read()

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Local store %s unreadable, starting empty: %s", self._path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Local store %s is not a JSON object, starting empty", self._path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._items, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self._path)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._write()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._write()
