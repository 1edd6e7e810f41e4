"""Query client speaking the Minecraft Java Edition Server List Ping protocol."""
from __future__ import annotations

import json
import logging
import re
import socket
import struct
from typing import Any, Mapping

from presence_tracker.domain.models.server import (
    OnlinePlayer,
    QueryResult,
    ServerIdentity,
)
from presence_tracker.domain.repositories.server_query_client import ServerQueryError

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = 47
STATUS_NEXT_STATE = 1
_MAX_VARINT_BYTES = 5
_FORMATTING_CODE_PATTERN = re.compile("§.")


def encode_varint(value: int) -> bytes:
    """Encode ``value`` as a protocol VarInt (two's complement for negatives)."""

    remaining = value & 0xFFFFFFFF
    encoded = bytearray()
    while True:
        byte = remaining & 0x7F
        remaining >>= 7
        if remaining:
            encoded.append(byte | 0x80)
        else:
            encoded.append(byte)
            return bytes(encoded)


def encode_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return encode_varint(len(raw)) + raw


def frame_packet(packet_id: int, payload: bytes = b"") -> bytes:
    """Prefix ``packet_id`` and ``payload`` with their total length."""

    body = encode_varint(packet_id) + payload
    return encode_varint(len(body)) + body


def build_handshake(hostname: str, port: int) -> bytes:
    payload = (
        encode_varint(PROTOCOL_VERSION)
        + encode_string(hostname)
        + struct.pack(">H", port)
        + encode_varint(STATUS_NEXT_STATE)
    )
    return frame_packet(0x00, payload)


def parse_status_response(payload: Mapping[str, Any]) -> QueryResult:
    """Convert the JSON status document of a server into a :class:`QueryResult`."""

    if not isinstance(payload, Mapping):
        raise ServerQueryError("Status response must be a JSON object.")

    version = payload.get("version")
    players = payload.get("players")
    version_name = version.get("name") if isinstance(version, Mapping) else None
    players_max = players.get("max") if isinstance(players, Mapping) else None
    players_online = players.get("online") if isinstance(players, Mapping) else None
    sample = players.get("sample") if isinstance(players, Mapping) else None

    online_players = []
    if isinstance(sample, list):
        for entry in sample:
            if not isinstance(entry, Mapping) or "id" not in entry:
                continue
            online_players.append(
                OnlinePlayer(id=str(entry["id"]), name=str(entry.get("name", "")))
            )

    description = payload.get("description")
    motd = _flatten_description(description) if description is not None else None

    return QueryResult(
        is_online=True,
        motd=motd,
        server_version=str(version_name) if version_name is not None else None,
        players_max=_optional_int(players_max),
        players_online=_optional_int(players_online),
        players=online_players,
    )


class MinecraftPingClient:
    """Retrieve live status and the player sample over a TCP status ping."""

    def __init__(self, timeout: float = 5.0) -> None:
        """Store the socket timeout applied to connect and read operations."""

        self._timeout = timeout

    def query(self, hostname: str, port: int) -> QueryResult:
        """Ping ``hostname:port`` and return its status."""

        host = ServerIdentity(hostname, port).normalized_hostname
        try:
            with socket.create_connection((host, port), timeout=self._timeout) as sock:
                sock.sendall(build_handshake(host, port))
                sock.sendall(frame_packet(0x00))
                document = self._read_status(sock)
        except OSError as error:
            raise ServerQueryError(f"Connection to {host}:{port} failed: {error}") from error

        try:
            payload = json.loads(document)
        except ValueError as error:
            raise ServerQueryError(f"Invalid status JSON from {host}:{port}") from error

        logger.debug("Status response from %s:%d: %s", host, port, payload)
        return parse_status_response(payload)

    def _read_status(self, sock: socket.socket) -> str:
        self._read_varint(sock)  # packet length
        packet_id = self._read_varint(sock)
        if packet_id != 0x00:
            raise ServerQueryError(f"Unexpected packet id {packet_id:#x} in status response.")
        length = self._read_varint(sock)
        return self._read_exact(sock, length).decode("utf-8", errors="replace")

    def _read_varint(self, sock: socket.socket) -> int:
        result = 0
        for index in range(_MAX_VARINT_BYTES):
            byte = self._read_exact(sock, 1)[0]
            result |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                return result
        raise ServerQueryError("VarInt in status response is too long.")

    @staticmethod
    def _read_exact(sock: socket.socket, size: int) -> bytes:
        chunks = bytearray()
        while len(chunks) < size:
            chunk = sock.recv(size - len(chunks))
            if not chunk:
                raise ServerQueryError("Connection closed before the response was complete.")
            chunks.extend(chunk)
        return bytes(chunks)


def _flatten_description(description: Any) -> str:
    """Return the plain text of a string or chat-component description."""

    if isinstance(description, str):
        text = description
    elif isinstance(description, Mapping):
        text = str(description.get("text", ""))
        extra = description.get("extra")
        if isinstance(extra, list):
            text += "".join(_flatten_description(part) for part in extra)
    elif isinstance(description, list):
        text = "".join(_flatten_description(part) for part in description)
    else:
        text = str(description)
    return _FORMATTING_CODE_PATTERN.sub("", text)


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
