"""Domain models describing a tracked game server and its reported state."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

DEFAULT_PORT = 25565
NOT_AVAILABLE = "N/A"

_SCHEME_PATTERN = re.compile(r"^https?://")


@dataclass(frozen=True)
class ServerIdentity:
    """Identify a remote server by hostname and port."""

    hostname: str
    port: int = DEFAULT_PORT

    @property
    def normalized_hostname(self) -> str:
        """Return the hostname without scheme prefix or trailing slash."""

        return _SCHEME_PATTERN.sub("", self.hostname.rstrip("/"))

    @property
    def address(self) -> str:
        """Return the ``host:port`` form of the identity."""

        return f"{self.normalized_hostname}:{self.port}"

    @classmethod
    def parse(cls, raw: str) -> "ServerIdentity":
        """Build an identity from a ``host[:port]`` configuration string."""

        candidate = _SCHEME_PATTERN.sub("", raw.strip().rstrip("/"))
        if not candidate:
            raise ValueError("Server address must not be empty.")

        host, separator, raw_port = candidate.rpartition(":")
        if not separator:
            return cls(hostname=candidate)
        if not host:
            raise ValueError(f"Server address '{raw}' is missing a hostname.")

        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"Server port in '{raw}' must be an integer.") from None
        if not 0 < port < 65536:
            raise ValueError(f"Server port in '{raw}' is out of range.")
        return cls(hostname=host, port=port)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the identity into a JSON-ready dictionary."""

        return {"hostname": self.normalized_hostname, "port": self.port}


@dataclass(frozen=True)
class OnlinePlayer:
    """A single entry of a live player list."""

    id: str
    name: str


@dataclass(frozen=True)
class QueryResult:
    """Raw answer of a server query; optional fields are ``None`` when absent."""

    is_online: bool
    motd: Optional[str] = None
    server_version: Optional[str] = None
    players_max: Optional[int] = None
    players_online: Optional[int] = None
    players: List[OnlinePlayer] = field(default_factory=list)

    @classmethod
    def offline(cls) -> "QueryResult":
        """Return the result describing an unreachable server."""

        return cls(is_online=False)


@dataclass(frozen=True)
class ServerSnapshot:
    """Point-in-time record of a server's reachability and metadata."""

    is_online: bool
    motd: str = NOT_AVAILABLE
    server_version: str = NOT_AVAILABLE
    players_max: int = 0
    players_online: int = 0
    timestamp: Optional[int] = None

    @classmethod
    def default(cls) -> "ServerSnapshot":
        """Return the zero-value snapshot served when nothing is cached."""

        return cls(is_online=False)

    @classmethod
    def from_query(cls, result: QueryResult, timestamp: int) -> "ServerSnapshot":
        """Build a snapshot from a successful query, defaulting absent fields."""

        return cls(
            is_online=result.is_online,
            motd=result.motd if result.motd is not None else NOT_AVAILABLE,
            server_version=(
                result.server_version
                if result.server_version is not None
                else NOT_AVAILABLE
            ),
            players_max=result.players_max if result.players_max is not None else 0,
            players_online=(
                result.players_online if result.players_online is not None else 0
            ),
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the cached representation of the snapshot."""

        data: dict[str, Any] = {
            "IsOnline": self.is_online,
            "Motd": self.motd,
            "ServerVersion": self.server_version,
            "PlayersMax": self.players_max,
            "PlayersOnline": self.players_online,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServerSnapshot":
        """Rehydrate a snapshot from its cached representation."""

        if not isinstance(data, Mapping):
            raise ValueError("Server snapshot data must be a mapping.")

        return cls(
            is_online=bool(data.get("IsOnline", False)),
            motd=_as_text(data.get("Motd")),
            server_version=_as_text(data.get("ServerVersion")),
            players_max=_as_count(data.get("PlayersMax")),
            players_online=_as_count(data.get("PlayersOnline")),
            timestamp=_parse_optional_int(data.get("timestamp")),
        )


def _as_text(value: Any) -> str:
    """Return ``value`` as text, falling back to ``N/A``."""

    if value is None:
        return NOT_AVAILABLE
    return str(value)


def _as_count(value: Any) -> int:
    """Return ``value`` as a count, falling back to zero."""

    parsed = _parse_optional_int(value)
    return parsed if parsed is not None else 0


def _parse_optional_int(value: Any) -> Optional[int]:
    """Return an integer when possible otherwise ``None``."""

    if isinstance(value, bool):
        return None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
