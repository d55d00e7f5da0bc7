"""Shared pytest fixtures: deterministic clock, scheduler and RAWG settings."""

from __future__ import annotations

from typing import Callable

import pytest
from pydantic import SecretStr

from gamescout.config import RawgSettings


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualTask:
    def __init__(self, callback: Callable[[], None], delay: float) -> None:
        self.callback = callback
        self.delay = delay
        self.fired = False
        self.cancelled = False

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)


class ManualScheduler:
    """Scheduler double whose timers only fire when the test says so."""

    def __init__(self) -> None:
        self.tasks: list[ManualTask] = []

    def schedule(self, callback: Callable[[], None], delay: float) -> ManualTask:
        task = ManualTask(callback, delay)
        self.tasks.append(task)
        return task

    def cancel(self, task: ManualTask) -> bool:
        if not task.pending:
            return False
        task.cancelled = True
        return True

    @property
    def pending(self) -> list[ManualTask]:
        return [task for task in self.tasks if task.pending]

    def fire_pending(self) -> int:
        fired = 0
        for task in self.pending:
            task.fired = True
            task.callback()
            fired += 1
        return fired


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def rawg_settings() -> RawgSettings:
    return RawgSettings(api_key=SecretStr("test-key"), base_url="https://rawg.example/api")
