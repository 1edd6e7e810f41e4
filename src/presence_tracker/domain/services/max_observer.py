"""Track the highest number of concurrent players ever observed."""
from __future__ import annotations

import logging

from presence_tracker.domain.repositories.cache_store import CacheStore
from presence_tracker.domain.services.cache_keys import MAX_PLAYERS_EVER_SEEN_KEY

logger = logging.getLogger(__name__)


class MaxObserver:
    """Maintain a monotonic, process-wide peak of concurrent players.

    The counter is shared by every tracked server and updated with a plain
    read-modify-write, so overlapping polls can lose an update.
    """

    def __init__(self, cache: CacheStore, key: str = MAX_PLAYERS_EVER_SEEN_KEY) -> None:
        self._cache = cache
        self._key = key

    def current(self) -> int:
        """Return the persisted peak, zero when nothing has been recorded."""

        stored = self._cache.get(self._key, 0)
        try:
            return max(int(stored), 0)
        except (TypeError, ValueError):
            return 0

    def observe(self, current_online_count: int) -> int:
        """Record ``current_online_count`` and return the resulting peak."""

        previous = self.current()
        peak = max(current_online_count, previous)
        if peak > previous:
            logger.info("New concurrent player peak: %d (was %d)", peak, previous)
        self._cache.set(self._key, peak)
        return peak
