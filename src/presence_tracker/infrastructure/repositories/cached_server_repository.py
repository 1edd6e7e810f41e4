"""Persist presence tables and snapshots of tracked servers in the cache."""
from __future__ import annotations

import logging

from presence_tracker.domain.models.presence import PresenceTable
from presence_tracker.domain.models.server import ServerIdentity, ServerSnapshot
from presence_tracker.domain.repositories.cache_store import CacheStore
from presence_tracker.domain.services.cache_keys import player_data_key, server_data_key

logger = logging.getLogger(__name__)


class CachedServerRepository:
    """Map server snapshots and presence tables onto their derived cache keys."""

    def __init__(self, cache: CacheStore) -> None:
        """Initialize the repository with the backing cache store."""

        self._cache = cache

    def save_snapshot(self, identity: ServerIdentity, snapshot: ServerSnapshot) -> None:
        """Persist ``snapshot`` as the last known state of ``identity``."""

        self._cache.set(server_data_key(identity), snapshot.to_dict())

    def load_snapshot(self, identity: ServerIdentity) -> ServerSnapshot | None:
        """Return the last persisted snapshot, ``None`` when absent or unreadable."""

        payload = self._cache.get(server_data_key(identity))
        if payload is None:
            return None
        try:
            return ServerSnapshot.from_dict(payload)
        except ValueError as error:
            logger.warning(
                "Ignoring malformed cached snapshot for %s: %s", identity.address, error
            )
            return None

    def load_table(self, identity: ServerIdentity) -> PresenceTable:
        """Return the presence table of ``identity`` (empty when absent)."""

        return PresenceTable.from_dict(self._cache.get(player_data_key(identity), {}))

    def save_table(self, identity: ServerIdentity, table: PresenceTable) -> None:
        """Persist the presence table of ``identity``."""

        self._cache.set(player_data_key(identity), table.to_dict())
