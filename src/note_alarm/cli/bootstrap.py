# src/note_alarm/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires store -> persistence and store -> scheduler,
- restores the saved task list (which arms the timers).

create_initial_state() arms timers, so call it on the thread that owns the timer backend.
"""

from __future__ import annotations

import logging

from ..alarms.effects import AlarmEffectHandler
from ..config import get_settings
from ..core.ports import AlarmEffect, BlobStore, TimerBackend
from ..core.state import AppState
from ..tasks.alarm_scheduler import AlarmScheduler
from ..tasks.task_persistence import BlobTaskPersistence, JsonFileBlobStore
from ..tasks.task_store import TaskStore
from ..tasks.timers import AsyncioTimerBackend

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    timers: TimerBackend | None = None,
    effects: AlarmEffect | None = None,
    blob_store: BlobStore | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Collaborators are injectable for tests; defaults are the production ones.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if effects is None:
        effects = AlarmEffectHandler(
            sound=settings.sound_enabled,
            desktop=settings.desktop_notifications,
            console_alert=settings.console_alert,
            app_name=settings.app_name,
        )

    persistence = BlobTaskPersistence(
        blob_store or JsonFileBlobStore(settings.storage_path),
        key=settings.storage_key,
        default_interval=settings.default_interval_minutes,
    )
    scheduler = AlarmScheduler(
        effects,
        timers or AsyncioTimerBackend(),
        unit_seconds=settings.interval_unit_seconds,
        max_timers=settings.max_timers,
    )
    store = TaskStore(default_interval=settings.default_interval_minutes)

    state = AppState(
        settings=settings,
        task_store=store,
        scheduler=scheduler,
        persistence=persistence,
        alarm_effects=effects,
    )

    # Persist before arming: a timer failure must not lose the user's change.
    state.unsubscribers.append(store.subscribe(persistence.save))
    state.unsubscribers.append(store.subscribe(scheduler.reconcile))

    store.load(persistence.load())
    logger.info("%s ready: %d tasks, %d alarms armed", settings.app_name, len(store), len(scheduler))
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    for unsubscribe in state.unsubscribers:
        unsubscribe()
    state.unsubscribers.clear()

    try:
        state.scheduler.shutdown()
    except Exception:
        logger.exception("Failed to disarm alarms.")

    try:
        effects = state.alarm_effects
        if hasattr(effects, "shutdown"):
            effects.shutdown()
    except Exception:
        logger.debug("Alarm effects shutdown failed.", exc_info=True)
