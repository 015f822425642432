"""Cancelable deferred tasks used to pace the opponent's moves."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Protocol

__all__ = [
    "Cancellable",
    "Scheduler",
    "ScheduledTask",
    "ImmediateScheduler",
    "ManualScheduler",
    "ThreadingScheduler",
]

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Callable that runs ``callback`` after ``delay`` seconds."""

    def __call__(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


@dataclass(slots=True)
class ScheduledTask:
    """Handle for a queued callback."""

    delay: float
    callback: Callable[[], None]
    cancelled: bool = False
    done: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> bool:
        """Invoke the callback unless cancelled; return whether it ran."""

        if self.cancelled or self.done:
            return False
        self.done = True
        self.callback()
        return True


class ImmediateScheduler:
    """Run callbacks synchronously, ignoring the delay."""

    def __call__(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(delay, callback)
        task.run()
        return task


@dataclass(slots=True)
class ManualScheduler:
    """Queue callbacks until the host explicitly runs them."""

    tasks: List[ScheduledTask] = field(default_factory=list)

    def __call__(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(delay, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for task in self.tasks if not task.cancelled and not task.done)

    def run_next(self) -> bool:
        """Run the oldest live task; return ``False`` when none remain."""

        while self.tasks:
            task = self.tasks.pop(0)
            if task.run():
                return True
        return False

    def run_pending(self, limit: int = 1000) -> int:
        """Run queued tasks, including ones they schedule, up to ``limit``."""

        executed = 0
        while executed < limit and self.run_next():
            executed += 1
        return executed


class ThreadingScheduler:
    """Back deferred tasks with :class:`threading.Timer` daemons."""

    def __call__(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(delay, 0.0), callback)
        timer.daemon = True
        timer.start()
        logger.debug("scheduled task in %.2fs", delay)
        return timer
