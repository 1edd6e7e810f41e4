"""Cache store implementation that keeps every key in a single JSON file."""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

from presence_tracker.domain.repositories.cache_store import CacheStore

logger = logging.getLogger(__name__)

_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(file_path: Path) -> threading.Lock:
    """Return the lock shared by every store writing ``file_path``."""

    key = file_path.resolve()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class JsonCacheStore(CacheStore):
    """Persist cached values as one JSON document on disk.

    Writes are serialized per file and land through an atomic replace, so a
    reader never sees a truncated document and concurrent writers of
    different keys never drop each other's entries.
    """

    def __init__(self, file_path: Path) -> None:
        """Initialize the store with the path where data will be kept."""

        self._file_path = file_path
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(file_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default`` when absent."""

        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and rewrite the JSON document."""

        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def _write(self, data: dict[str, Any]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as output_file:
                json.dump(data, output_file, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._file_path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def _read(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}

        try:
            with self._file_path.open("r", encoding="utf-8") as input_file:
                data = json.load(input_file)
        except (OSError, ValueError) as error:
            logger.warning("Cache file %s is unreadable: %s", self._file_path, error)
            return {}

        if not isinstance(data, dict):
            logger.warning("Cache file %s does not hold an object", self._file_path)
            return {}
        return data
