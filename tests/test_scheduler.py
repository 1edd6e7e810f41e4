"""Tests for the fixed-interval poll scheduler."""
from __future__ import annotations

import asyncio

import pytest

from presence_tracker.application.scheduler import PollScheduler


def test_run_pending_once_runs_every_registration() -> None:
    """Each registered task runs once, in registration order."""

    calls: list[str] = []
    scheduler = PollScheduler()
    scheduler.register("first", 60, lambda: calls.append("first"))
    scheduler.register("second", 60, lambda: calls.append("second"))

    scheduler.run_pending_once()

    assert calls == ["first", "second"]


def test_failing_task_does_not_stop_the_others() -> None:
    """A task raising an exception is logged and skipped."""

    calls: list[str] = []

    def _broken() -> None:
        raise RuntimeError("boom")

    scheduler = PollScheduler()
    scheduler.register("broken", 60, _broken)
    scheduler.register("healthy", 60, lambda: calls.append("healthy"))

    scheduler.run_pending_once()

    assert calls == ["healthy"]


def test_register_rejects_non_positive_interval() -> None:
    """Intervals must be positive."""

    with pytest.raises(ValueError):
        PollScheduler().register("bad", 0, lambda: None)


def test_started_scheduler_runs_tasks_until_stopped() -> None:
    """The loop runs immediately and then once per interval."""

    calls: list[int] = []
    scheduler = PollScheduler()
    scheduler.register("tick", 0.01, lambda: calls.append(1))

    async def _exercise() -> None:
        scheduler.start()
        assert scheduler.is_running
        with pytest.raises(RuntimeError):
            scheduler.register("late", 1, lambda: None)
        await asyncio.sleep(0.2)
        await scheduler.stop()

    asyncio.run(_exercise())

    assert len(calls) >= 2
    assert not scheduler.is_running
