"""Use case running one poll cycle against a tracked server."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List

from presence_tracker.domain.models.presence import PresenceTable
from presence_tracker.domain.models.server import (
    OnlinePlayer,
    QueryResult,
    ServerIdentity,
    ServerSnapshot,
)
from presence_tracker.domain.models.server_view import ServerView
from presence_tracker.domain.repositories.server_query_client import (
    ServerQueryClient,
    ServerQueryError,
)
from presence_tracker.domain.services.max_observer import MaxObserver
from presence_tracker.domain.services.presence_reconciler import PresenceReconciler
from presence_tracker.domain.services.snapshot_builder import SnapshotBuilder
from presence_tracker.infrastructure.repositories.cached_server_repository import (
    CachedServerRepository,
)

logger = logging.getLogger(__name__)


def _epoch_seconds() -> int:
    return int(time.time())


@dataclass(frozen=True)
class PollResult:
    """Outcome of one poll cycle; always carries a usable snapshot."""

    snapshot: ServerSnapshot
    view: ServerView
    online_players: List[OnlinePlayer] = field(default_factory=list)


class PollServerUseCase:
    """Query a server, fall back to the cache on failure and refresh presence."""

    def __init__(
        self,
        query_client: ServerQueryClient,
        repository: CachedServerRepository,
        max_observer: MaxObserver,
        reconciler: PresenceReconciler | None = None,
        builder: SnapshotBuilder | None = None,
        clock: Callable[[], int] = _epoch_seconds,
    ) -> None:
        """Initialize the use case with its collaborators."""

        self._query_client = query_client
        self._repository = repository
        self._max_observer = max_observer
        self._reconciler = reconciler or PresenceReconciler()
        self._builder = builder or SnapshotBuilder()
        self._clock = clock

    def execute(self, identity: ServerIdentity) -> PollResult:
        """Run the cycle for ``identity`` without ever raising."""

        result = self._query(identity)
        now = self._clock()

        if result.is_online:
            snapshot = ServerSnapshot.from_query(result, timestamp=now)
            try:
                self._repository.save_snapshot(identity, snapshot)
            except Exception:
                logger.exception("Could not cache the snapshot of %s", identity.address)
            online_players = list(result.players)
            table = self._refresh_presence(identity, online_players, now)
            logger.info(
                "Polled %s: online, %d player(s) connected",
                identity.address,
                len(online_players),
            )
        else:
            snapshot, table = self._load_cached(identity)
            online_players = []
            logger.warning(
                "Polled %s: unreachable, serving last known snapshot", identity.address
            )

        online_count = len({player.id for player in online_players})
        try:
            max_online = self._max_observer.observe(online_count)
        except Exception:
            logger.exception("Could not update the concurrent player peak")
            max_online = online_count
        view = self._builder.build(identity, snapshot, table, online_players, max_online)
        return PollResult(snapshot=snapshot, view=view, online_players=online_players)

    def _refresh_presence(
        self, identity: ServerIdentity, online_players: List[OnlinePlayer], now: int
    ) -> PresenceTable:
        try:
            stored = self._repository.load_table(identity)
        except Exception:
            # Never persist over a table that could not be read.
            logger.exception("Could not load the presence table of %s", identity.address)
            return self._reconciler.reconcile(online_players, PresenceTable(), now)

        table = self._reconciler.reconcile(online_players, stored, now)
        try:
            self._repository.save_table(identity, table)
        except Exception:
            logger.exception("Could not cache the presence table of %s", identity.address)
        return table

    def _load_cached(self, identity: ServerIdentity) -> tuple[ServerSnapshot, PresenceTable]:
        try:
            snapshot = self._repository.load_snapshot(identity) or ServerSnapshot.default()
            table = self._repository.load_table(identity)
        except Exception:
            logger.exception("Could not read the cached state of %s", identity.address)
            return ServerSnapshot.default(), PresenceTable()
        return snapshot, table

    def _query(self, identity: ServerIdentity) -> QueryResult:
        try:
            return self._query_client.query(identity.hostname, identity.port)
        except ServerQueryError as error:
            logger.warning("Query of %s failed: %s", identity.address, error)
        except Exception:
            logger.exception("Unexpected error while querying %s", identity.address)
        return QueryResult.offline()
