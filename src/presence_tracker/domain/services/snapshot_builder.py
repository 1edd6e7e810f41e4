"""Assemble the ordered player view handed to the rendering layer."""
from __future__ import annotations

from typing import Sequence

from presence_tracker.domain.models.presence import PresenceTable
from presence_tracker.domain.models.server import (
    OnlinePlayer,
    ServerIdentity,
    ServerSnapshot,
)
from presence_tracker.domain.models.server_view import PlayerView, ServerView


class SnapshotBuilder:
    """Order players as online first, then offline by most recent sighting."""

    def build(
        self,
        identity: ServerIdentity,
        snapshot: ServerSnapshot,
        table: PresenceTable,
        online_players: Sequence[OnlinePlayer],
        max_online: int,
    ) -> ServerView:
        """Return the display-ready view of ``identity``."""

        online_ids = list(dict.fromkeys(player.id for player in online_players))

        online_views = []
        for player_id in online_ids:
            record = table.get(player_id)
            if record is None:
                continue
            online_views.append(
                PlayerView(
                    id=record.id,
                    name=record.name,
                    is_online=True,
                    last_seen=record.last_seen,
                )
            )

        online_set = set(online_ids)
        offline_records = [record for record in table if record.id not in online_set]
        # sorted() is stable, ties keep table order; missing timestamps go last.
        offline_records = sorted(
            offline_records,
            key=lambda record: (record.last_seen is None, -(record.last_seen or 0)),
        )
        offline_views = [
            PlayerView(
                id=record.id,
                name=record.name,
                is_online=False,
                last_seen=record.last_seen,
            )
            for record in offline_records
        ]

        return ServerView(
            identity=identity,
            snapshot=snapshot,
            current_online=len(online_ids),
            max_online=max_online,
            players=online_views + offline_views,
        )
