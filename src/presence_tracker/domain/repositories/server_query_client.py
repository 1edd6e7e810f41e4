"""Repository abstraction for querying a remote game server."""
from __future__ import annotations

from typing import Protocol

from presence_tracker.domain.models.server import QueryResult


class ServerQueryError(Exception):
    """Signal that the remote server could not be queried."""


class ServerQueryClient(Protocol):
    """Provide live status and the player list of a remote server."""

    def query(self, hostname: str, port: int) -> QueryResult:
        """Return the server's current state, raising ``ServerQueryError`` on failure."""
