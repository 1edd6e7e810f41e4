"""Merge a live player list into a persisted presence table."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from presence_tracker.domain.models.presence import PlayerRecord, PresenceTable
from presence_tracker.domain.models.server import OnlinePlayer

logger = logging.getLogger(__name__)


class PresenceReconciler:
    """Update last-seen bookkeeping from one successful poll.

    Entries are never removed unless ``retention_seconds`` is set, in which
    case offline players not seen within that window are dropped.
    """

    def __init__(self, retention_seconds: Optional[int] = None) -> None:
        if retention_seconds is not None and retention_seconds <= 0:
            raise ValueError("Presence retention must be a positive number of seconds.")
        self._retention_seconds = retention_seconds

    def reconcile(
        self,
        online_players: Sequence[OnlinePlayer],
        table: PresenceTable,
        now: int,
    ) -> PresenceTable:
        """Apply the live ``online_players`` to ``table`` in place and return it."""

        online_ids = set()
        for player in online_players:
            table.upsert(PlayerRecord(id=player.id, name=player.name, last_seen=now))
            online_ids.add(player.id)

        for record in table:
            if record.id in online_ids:
                continue
            # Partially initialised records are stamped with the poll time.
            if record.last_seen is None or record.last_seen == now:
                table.upsert(PlayerRecord(id=record.id, name=record.name, last_seen=now))

        if self._retention_seconds is not None:
            self._prune(table, online_ids, now - self._retention_seconds)

        return table

    @staticmethod
    def _prune(table: PresenceTable, online_ids: set[str], cutoff: int) -> None:
        for record in table:
            if record.id in online_ids or record.last_seen is None:
                continue
            if record.last_seen < cutoff:
                logger.info(
                    "Dropping presence record for %s (%s), last seen at %d",
                    record.name,
                    record.id,
                    record.last_seen,
                )
                table.remove(record.id)
