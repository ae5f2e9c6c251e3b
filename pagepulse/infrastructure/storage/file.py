# ==============================================================================
# JSON File Storage
# ==============================================================================
"""
File-backed implementation of the KeyValueStorage interface.

All keys live in a single JSON object on disk, rewritten on every change.
Writes go through a temporary file and an atomic rename so a crash never
leaves a half-written store behind.
"""

import json
import logging
import os
from pathlib import Path

from pagepulse.base import KeyValueStorage
from pagepulse.exceptions import StorageError

logger = logging.getLogger(__name__)


class FileStorage(KeyValueStorage):
    """
    JSON file KeyValueStorage.

    A missing file is an empty store. A file that does not contain a JSON
    object is treated as empty (and logged); I/O errors raise StorageError.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def _read(self) -> dict:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Failed to decode JSON in %s, starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Unexpected content in %s, starting empty", self.path)
            return {}
        return data

    def _write(self, data: dict) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
