"""Key-value persistence used by the identity and leaderboard stores."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string-keyed store holding JSON-compatible values."""

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Process-local store; contents vanish with the process."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    The file is re-read on every access so that edits made by another
    process are picked up. A missing or corrupt file reads as empty.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)

    def _read(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable storage file %s", self._file_path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s without a top-level object", self._file_path)
            return {}
        return data

    def _write(self, values: dict[str, Any]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        # Readers only ever see a complete file.
        temp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        temp_path.write_text(json.dumps(values, indent=2), encoding="utf-8")
        try:
            os.replace(temp_path, self._file_path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
