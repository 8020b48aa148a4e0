# src/taskflow/storage/local_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "darkMode"


class LocalStore:
    """
    Small persistent key-value store: one JSON object on disk.

    - reads are best-effort (missing/corrupt file -> empty)
    - writes go to a temp file and are swapped in with os.replace
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read local store %s; starting empty.", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()


class Preferences:
    """User preferences persisted in a LocalStore."""

    def __init__(self, store: LocalStore, *, dark_mode_default: bool = False) -> None:
        self._store = store
        self._dark_mode_default = dark_mode_default

    @property
    def dark_mode(self) -> bool:
        raw = self._store.get(DARK_MODE_KEY)
        return raw if isinstance(raw, bool) else self._dark_mode_default

    @dark_mode.setter
    def dark_mode(self, value: bool) -> None:
        self._store.set(DARK_MODE_KEY, bool(value))
        logger.debug("Preference darkMode=%s saved to %s", bool(value), self._store.path)

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        return self.dark_mode
