"""Tests for the monotonic concurrent player peak."""
from __future__ import annotations

from presence_tracker.domain.services.cache_keys import MAX_PLAYERS_EVER_SEEN_KEY
from presence_tracker.domain.services.max_observer import MaxObserver


def test_peak_never_decreases(memory_cache) -> None:
    """Observing ``[3, 1, 5, 2]`` leaves a persisted peak of five."""

    observer = MaxObserver(memory_cache)

    for count in [3, 1, 5, 2]:
        observer.observe(count)

    assert memory_cache.get(MAX_PLAYERS_EVER_SEEN_KEY) == 5
    assert observer.current() == 5


def test_peak_defaults_to_zero(memory_cache) -> None:
    """Nothing recorded yet means a peak of zero."""

    assert MaxObserver(memory_cache).current() == 0


def test_peak_is_written_on_every_observation(memory_cache) -> None:
    """The counter is rewritten even when unchanged."""

    observer = MaxObserver(memory_cache)
    observer.observe(4)
    observer.observe(1)

    assert memory_cache.writes == [MAX_PLAYERS_EVER_SEEN_KEY, MAX_PLAYERS_EVER_SEEN_KEY]


def test_invalid_stored_peak_is_reset(memory_cache) -> None:
    """Garbage under the counter key is treated as zero."""

    memory_cache.set(MAX_PLAYERS_EVER_SEEN_KEY, "lots")

    assert MaxObserver(memory_cache).observe(2) == 2
