"""Fixed-interval scheduler driving the recurring poll cycles."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledTask:
    """A recurring task and the number of seconds between two runs."""

    name: str
    interval_seconds: float
    task: Callable[[], object]


class PollScheduler:
    """Own the ``(interval, task)`` registrations built at application startup.

    Tasks are synchronous callables executed in a worker thread so that a
    blocking network query never stalls the event loop.
    """

    def __init__(self) -> None:
        self._registrations: List[ScheduledTask] = []
        self._running: List[asyncio.Task] = []

    @property
    def registrations(self) -> list[ScheduledTask]:
        return list(self._registrations)

    @property
    def is_running(self) -> bool:
        return bool(self._running)

    def register(
        self, name: str, interval_seconds: float, task: Callable[[], object]
    ) -> ScheduledTask:
        """Add a recurring ``task``; registrations are frozen once started."""

        if interval_seconds <= 0:
            raise ValueError("Schedule interval must be a positive number of seconds.")
        if self._running:
            raise RuntimeError("Cannot register tasks while the scheduler is running.")

        registration = ScheduledTask(name=name, interval_seconds=interval_seconds, task=task)
        self._registrations.append(registration)
        logger.info("Registered task %s every %s seconds", name, interval_seconds)
        return registration

    def run_pending_once(self) -> None:
        """Run every registered task once, sequentially, in the calling thread."""

        for registration in self._registrations:
            self._run_safely(registration)

    def start(self) -> None:
        """Start one loop per registration on the running event loop."""

        if self._running:
            return
        loop = asyncio.get_running_loop()
        self._running = [
            loop.create_task(self._loop(registration), name=registration.name)
            for registration in self._registrations
        ]

    async def stop(self) -> None:
        """Cancel every loop and wait for them to finish."""

        tasks, self._running = self._running, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _loop(self, registration: ScheduledTask) -> None:
        while True:
            await asyncio.to_thread(self._run_safely, registration)
            await asyncio.sleep(registration.interval_seconds)

    @staticmethod
    def _run_safely(registration: ScheduledTask) -> None:
        try:
            registration.task()
        except Exception:
            logger.exception("Scheduled task %s failed", registration.name)
