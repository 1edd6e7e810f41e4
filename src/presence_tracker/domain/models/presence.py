"""Domain models holding per-player presence bookkeeping."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional


@dataclass(frozen=True)
class PlayerRecord:
    """Display name and last-seen time of a player ever observed online."""

    id: str
    name: str
    last_seen: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the cached representation of the record (keyed by id elsewhere)."""

        return {"name": self.name, "lastSeen": self.last_seen}


class PresenceTable:
    """Ordered mapping of player id to :class:`PlayerRecord`.

    Iteration follows the order in which players were first recorded, which
    keeps sorting of offline players deterministic.
    """

    def __init__(self, records: Optional[Mapping[str, PlayerRecord]] = None) -> None:
        self._records: Dict[str, PlayerRecord] = dict(records or {})

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._records

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PresenceTable):
            return NotImplemented
        return list(self._records.items()) == list(other._records.items())

    def __repr__(self) -> str:
        return f"PresenceTable({list(self._records.values())!r})"

    def get(self, player_id: str) -> Optional[PlayerRecord]:
        return self._records.get(player_id)

    def upsert(self, record: PlayerRecord) -> None:
        """Insert or replace ``record``; replacement keeps the original position."""

        self._records[record.id] = record

    def remove(self, player_id: str) -> None:
        self._records.pop(player_id, None)

    def ids(self) -> list[str]:
        return list(self._records)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Serialize the table as ``{id: {"name": ..., "lastSeen": ...}}``."""

        return {player_id: record.to_dict() for player_id, record in self._records.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "PresenceTable":
        """Rehydrate a table, skipping entries that are not mappings."""

        if not isinstance(data, Mapping):
            return cls()

        records: Dict[str, PlayerRecord] = {}
        for raw_id, raw_record in data.items():
            if not isinstance(raw_record, Mapping):
                continue
            player_id = str(raw_id)
            records[player_id] = PlayerRecord(
                id=player_id,
                name=str(raw_record.get("name", "")),
                last_seen=_parse_timestamp(raw_record.get("lastSeen")),
            )
        return cls(records)


def _parse_timestamp(value: Any) -> Optional[int]:
    """Return an epoch-seconds integer or ``None`` when missing or invalid."""

    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
