"""Cancellable delayed callbacks on the running event loop."""

from __future__ import annotations

import asyncio
from typing import Callable


class ScheduledTask:
    """Handle for a callback registered with :class:`TaskScheduler`."""

    __slots__ = ("callback", "delay", "fired", "cancelled", "_timer")

    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self.callback = callback
        self.delay = delay
        self.fired = False
        self.cancelled = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def _run(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self.callback()


class TaskScheduler:
    def schedule(self, callback: Callable[[], None], delay: float) -> ScheduledTask:
        """Run ``callback`` once after ``delay`` seconds.

        Must be called from inside a running event loop.
        """

        loop = asyncio.get_running_loop()
        task = ScheduledTask(callback, delay)
        task._timer = loop.call_later(max(delay, 0.0), task._run)
        return task

    def cancel(self, task: ScheduledTask) -> bool:
        """Cancel a task that has not fired yet. Returns False otherwise."""

        if not task.pending:
            return False
        task.cancelled = True
        if task._timer is not None:
            task._timer.cancel()
        return True


__all__ = ["ScheduledTask", "TaskScheduler"]
