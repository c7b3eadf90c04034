# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from note_alarm.cli.bootstrap import create_initial_state
from note_alarm.core.state import AppState
from note_alarm.tasks.alarm_scheduler import AlarmScheduler
from note_alarm.tasks.task_store import TaskStore

from .fakes import FakeTimerBackend, InMemoryBlobStore, RecordingEffect

UNIT = 1.0  # one "minute" == one second of fake clock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="NoteAlarm",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        storage_key="noteAlarmTasks",
        default_interval_minutes=5,
        interval_unit_seconds=UNIT,
        max_timers=1024,
    )


@pytest.fixture()
def timers() -> FakeTimerBackend:
    return FakeTimerBackend()


@pytest.fixture()
def effect() -> RecordingEffect:
    return RecordingEffect()


@pytest.fixture()
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture()
def scheduler(effect: RecordingEffect, timers: FakeTimerBackend) -> AlarmScheduler:
    return AlarmScheduler(effect, timers, unit_seconds=UNIT)


@pytest.fixture()
def store(scheduler: AlarmScheduler) -> TaskStore:
    """TaskStore reconciled into the scheduler on every change."""
    s = TaskStore()
    s.subscribe(scheduler.reconcile)
    return s


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    timers: FakeTimerBackend,
    effect: RecordingEffect,
    blobs: InMemoryBlobStore,
) -> AppState:
    """AppState wired through the real composition root with deterministic fakes."""
    return create_initial_state(settings=settings, timers=timers, effects=effect, blob_store=blobs)
