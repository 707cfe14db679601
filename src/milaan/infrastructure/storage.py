"""Key-value slot for the little state that outlives a session.

Mirrors a browser's local storage: string values under string keys,
kept in one JSON document on disk. Only the current identity is stored
here (under :data:`IDENTITY_KEY`); everything else lives in memory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

IDENTITY_KEY = "milaan_user"
STORAGE_FILENAME = "storage.json"


class LocalStorage:
    """String key-value store backed by ``<state_dir>/storage.json``."""

    def __init__(self, state_dir: Path) -> None:
        self._path = state_dir / STORAGE_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, str]:
        if not self._path.is_file():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable storage file, starting empty: %s", self._path)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Storage file is not a JSON object, starting empty: %s", self._path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
