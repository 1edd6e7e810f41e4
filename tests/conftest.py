"""Test configuration ensuring the application package is importable."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest


def _ensure_src_on_path() -> None:
    """Add the project's ``src`` directory to ``sys.path`` when missing."""

    project_root = Path(__file__).resolve().parents[1]
    src_path = project_root / "src"
    src_path_str = str(src_path)
    if src_path_str not in sys.path:
        sys.path.insert(0, src_path_str)


_ensure_src_on_path()

from presence_tracker.domain.repositories.cache_store import CacheStore  # noqa: E402


class MemoryCacheStore(CacheStore):
    """Dictionary-backed cache store used by the tests."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.writes: list[str] = []

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.writes.append(key)
        self.data[key] = value


@pytest.fixture
def memory_cache() -> MemoryCacheStore:
    """Return an empty in-memory cache store."""

    return MemoryCacheStore()
