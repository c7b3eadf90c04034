# src/note_alarm/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and scheduler depend on Protocols instead of concrete implementations.
This keeps timers/effects/storage swappable and makes testing easier.
"""

from collections.abc import Callable, Sequence
from typing import Protocol

from ..tasks.task_models import Task

TasksListener = Callable[[tuple[Task, ...]], None]


class AlarmEffect(Protocol):
    """
    What happens when a task's reminder fires.

    Contract:
    - fire-and-forget, must not block the caller
    - must not raise back into the scheduler (failures are handled internally)
    """

    def notify(self, task: Task) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerBackend(Protocol):
    """Host interval primitive: call `callback` every `period_seconds` until cancelled."""

    def call_repeating(self, period_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


class BlobStore(Protocol):
    """Simple key-value blob store (string values)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class TaskPersistence(Protocol):
    def load(self) -> list[Task]: ...
    def save(self, tasks: Sequence[Task]) -> None: ...
