"""Deterministic cache key derivation for server-scoped data."""
from __future__ import annotations

import hashlib

from presence_tracker.domain.models.server import ServerIdentity

SERVER_DATA_PREFIX = "server_data_"
PLAYER_DATA_PREFIX = "player_data_"
MAX_PLAYERS_EVER_SEEN_KEY = "minecraft_max_players_ever_seen"


def derive_cache_key(prefix: str, hostname: str, port: int) -> str:
    """Return the key for ``prefix`` data of the server at ``hostname:port``.

    ``"https://host/"`` and ``"host"`` yield the same key; the prefix is kept
    verbatim in front of the digest so distinct prefixes never collide.
    """

    sanitized_hostname = ServerIdentity(hostname, port).normalized_hostname
    digest = hashlib.md5(f"{sanitized_hostname}_{port}".encode("utf-8")).hexdigest()
    return f"{prefix}minecraft_data_{digest}"


def server_data_key(identity: ServerIdentity) -> str:
    return derive_cache_key(SERVER_DATA_PREFIX, identity.hostname, identity.port)


def player_data_key(identity: ServerIdentity) -> str:
    return derive_cache_key(PLAYER_DATA_PREFIX, identity.hostname, identity.port)
