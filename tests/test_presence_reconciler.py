"""Tests for merging live player lists into the presence table."""
from __future__ import annotations

import pytest

from presence_tracker.domain.models.presence import PlayerRecord, PresenceTable
from presence_tracker.domain.models.server import OnlinePlayer
from presence_tracker.domain.services.presence_reconciler import PresenceReconciler

ALEX = OnlinePlayer(id="uuid-alex", name="Alex")
STEVE = OnlinePlayer(id="uuid-steve", name="Steve")


def test_new_players_are_added_with_current_time() -> None:
    """First sightings create records stamped with the poll time."""

    table = PresenceReconciler().reconcile([ALEX, STEVE], PresenceTable(), now=100)

    assert table.ids() == ["uuid-alex", "uuid-steve"]
    assert table.get("uuid-alex") == PlayerRecord("uuid-alex", "Alex", 100)


def test_player_online_in_consecutive_polls_tracks_latest_time() -> None:
    """Staying online moves ``last_seen`` forward to the newest poll."""

    reconciler = PresenceReconciler()
    table = reconciler.reconcile([ALEX], PresenceTable(), now=100)

    reconciler.reconcile([ALEX], table, now=160)

    assert table.get("uuid-alex").last_seen == 160


def test_player_going_offline_keeps_previous_sighting() -> None:
    """An absent player retains the time of the last poll that saw them."""

    reconciler = PresenceReconciler()
    table = reconciler.reconcile([ALEX, STEVE], PresenceTable(), now=100)

    reconciler.reconcile([ALEX], table, now=160)

    assert table.get("uuid-steve").last_seen == 100
    assert table.get("uuid-alex").last_seen == 160


def test_records_without_last_seen_are_stamped() -> None:
    """Partially initialised records receive the current poll time."""

    table = PresenceTable({"uuid-old": PlayerRecord("uuid-old", "Old", None)})

    PresenceReconciler().reconcile([ALEX], table, now=300)

    assert table.get("uuid-old").last_seen == 300


def test_names_are_refreshed_and_order_is_kept() -> None:
    """A renamed player keeps its position in the table."""

    table = PresenceTable(
        {
            "uuid-alex": PlayerRecord("uuid-alex", "Alexandra", 50),
            "uuid-steve": PlayerRecord("uuid-steve", "Steve", 60),
        }
    )

    PresenceReconciler().reconcile([ALEX], table, now=70)

    assert table.ids() == ["uuid-alex", "uuid-steve"]
    assert table.get("uuid-alex").name == "Alex"


def test_no_entries_are_removed_without_retention() -> None:
    """The table only grows by default."""

    table = PresenceTable({"uuid-ancient": PlayerRecord("uuid-ancient", "Ancient", 1)})

    PresenceReconciler().reconcile([], table, now=10_000_000)

    assert "uuid-ancient" in table


def test_retention_drops_stale_offline_players_only() -> None:
    """With retention enabled, long-gone offline players are pruned."""

    table = PresenceTable(
        {
            "uuid-ancient": PlayerRecord("uuid-ancient", "Ancient", 1),
            "uuid-recent": PlayerRecord("uuid-recent", "Recent", 950),
        }
    )

    PresenceReconciler(retention_seconds=100).reconcile([ALEX], table, now=1000)

    assert table.ids() == ["uuid-recent", "uuid-alex"]


def test_retention_must_be_positive() -> None:
    """A zero or negative retention window is a configuration error."""

    with pytest.raises(ValueError):
        PresenceReconciler(retention_seconds=0)


def test_table_serialization_roundtrip() -> None:
    """Tables survive conversion to and from the cached representation."""

    table = PresenceReconciler().reconcile([ALEX, STEVE], PresenceTable(), now=5)

    assert table.to_dict() == {
        "uuid-alex": {"name": "Alex", "lastSeen": 5},
        "uuid-steve": {"name": "Steve", "lastSeen": 5},
    }
    assert PresenceTable.from_dict(table.to_dict()) == table


def test_offline_record_already_stamped_now_keeps_that_time() -> None:
    """An offline record whose sighting equals the poll time stays at ``now``."""

    table = PresenceTable(
        {
            "uuid-same": PlayerRecord("uuid-same", "Same", 300),
            "uuid-older": PlayerRecord("uuid-older", "Older", 120),
        }
    )

    PresenceReconciler().reconcile([ALEX], table, now=300)

    assert table.get("uuid-same") == PlayerRecord("uuid-same", "Same", 300)
    assert table.get("uuid-older").last_seen == 120
    assert table.ids() == ["uuid-same", "uuid-older", "uuid-alex"]
