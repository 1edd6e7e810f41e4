"""Repository contract for the durable key-value cache."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheStore(ABC):
    """Persist JSON-compatible values under opaque string keys.

    A missing key is a normal outcome: ``get`` returns the supplied default.
    Writes are last-write-wins with no locking.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default`` when absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` replacing any previous value."""
