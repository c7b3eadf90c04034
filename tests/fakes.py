# tests/fakes.py

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field

from note_alarm.tasks.task_models import Task


class FakeTimer:
    def __init__(self, backend: FakeTimerBackend, period: float, callback: Callable[[], None]) -> None:
        self.backend = backend
        self.period = period
        self.callback = callback
        self.armed_at = backend.now
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimerBackend:
    """
    Manual-clock TimerBackend for deterministic scheduler tests.

    advance(seconds) moves the clock and runs every due fire in time order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []
        self._queue: list[tuple[float, int, FakeTimer]] = []
        self._seq = itertools.count()

    def call_repeating(self, period_seconds: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self, period_seconds, callback)
        self.timers.append(timer)
        heapq.heappush(self._queue, (self.now + period_seconds, next(self._seq), timer))
        return timer

    def active(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = when
            heapq.heappush(self._queue, (when + timer.period, next(self._seq), timer))
            timer.callback()
        self.now = target


class FailingTimerBackend:
    def call_repeating(self, period_seconds: float, callback: Callable[[], None]):
        raise OSError("no more timers")


@dataclass(slots=True)
class RecordingEffect:
    """AlarmEffect that records every notified task."""

    fired: list[Task] = field(default_factory=list)

    def notify(self, task: Task) -> None:
        self.fired.append(task)

    def count(self, task_id: str) -> int:
        return sum(1 for t in self.fired if t.id == task_id)


class ExplodingEffect:
    def __init__(self) -> None:
        self.calls = 0

    def notify(self, task: Task) -> None:
        self.calls += 1
        raise RuntimeError("speaker on fire")


@dataclass(slots=True)
class InMemoryBlobStore:
    data: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.writes += 1
        self.data.pop(key, None)


class InlineRunner:
    """Stands in for AlarmLoopRunner: runs every call on the caller's thread."""

    def __init__(self) -> None:
        self.calls = 0

    def call(self, fn, *args, timeout: float | None = None, **kwargs):
        self.calls += 1
        return fn(*args, **kwargs)
