# src/note_alarm/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..tasks.alarm_scheduler import AlarmScheduler
from ..tasks.task_store import TaskStore
from .ports import AlarmEffect, TaskPersistence


@dataclass
class AppState:
    # Settings object (config.Settings in production, SimpleNamespace in tests).
    settings: Any

    task_store: TaskStore
    scheduler: AlarmScheduler
    persistence: TaskPersistence
    alarm_effects: AlarmEffect

    unsubscribers: list[Callable[[], None]] = field(default_factory=list)
