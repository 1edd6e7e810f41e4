"""Display-ready view model consumed by the rendering layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from presence_tracker.domain.models.server import ServerIdentity, ServerSnapshot
from presence_tracker.domain.services.relative_time import format_time_since

AVATAR_URL_TEMPLATE = "https://mc-heads.net/avatar/{player_id}"


@dataclass(frozen=True)
class PlayerView:
    """One row of the player list with its online flag."""

    id: str
    name: str
    is_online: bool
    last_seen: Optional[int] = None

    @property
    def avatar_url(self) -> str:
        return AVATAR_URL_TEMPLATE.format(player_id=self.id)

    def to_dict(self, now: int) -> dict[str, Any]:
        """Serialize the row, labelling offline players with their last sighting."""

        last_seen_ago = None
        if not self.is_online and self.last_seen is not None:
            last_seen_ago = format_time_since(self.last_seen, now)

        return {
            "id": self.id,
            "name": self.name,
            "isOnline": self.is_online,
            "lastSeen": self.last_seen,
            "lastSeenAgo": last_seen_ago,
            "avatarUrl": self.avatar_url,
        }


@dataclass(frozen=True)
class ServerView:
    """Server metadata, online counters and the ordered player list."""

    identity: ServerIdentity
    snapshot: ServerSnapshot
    current_online: int
    max_online: int
    players: List[PlayerView] = field(default_factory=list)

    def to_dict(self, now: int) -> dict[str, Any]:
        """Return a JSON-serializable representation of the view."""

        return {
            "server": {
                **self.identity.to_dict(),
                "isOnline": self.snapshot.is_online,
                "motd": self.snapshot.motd,
                "version": self.snapshot.server_version,
                "playersMax": self.snapshot.players_max,
                "playersOnline": self.snapshot.players_online,
                "timestamp": self.snapshot.timestamp,
            },
            "players": {
                "online": self.current_online,
                "maxEverSeen": self.max_online,
                "entries": [player.to_dict(now) for player in self.players],
            },
        }
