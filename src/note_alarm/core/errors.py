# src/note_alarm/core/errors.py

from __future__ import annotations


class NoteAlarmError(Exception):
    """Base class for NoteAlarm errors."""


class ValidationError(NoteAlarmError, ValueError):
    """Rejected input (e.g. empty title). The task list is left unchanged."""


class NotFoundError(NoteAlarmError, LookupError):
    """Unknown task id, usually a stale reference from the caller."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


class SchedulerResourceError(NoteAlarmError, RuntimeError):
    """The host cannot create more timers. Fatal, callers should not retry."""
