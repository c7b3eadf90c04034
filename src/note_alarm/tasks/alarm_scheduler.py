# src/note_alarm/tasks/alarm_scheduler.py

from __future__ import annotations

"""
Per-task alarm scheduler.

Keeps exactly one repeating timer per task:
- reconcile(tasks) disarms every live entry, then arms a fresh one per task,
- an edited task therefore restarts its countdown from the edit moment,
- a deleted task loses its entry and never fires again.

Full disarm/rearm is O(n) per change; task lists are user-sized.

Timer creation goes through an injected TimerBackend, the effect through an
injected AlarmEffect. Wire it to a TaskStore with `store.subscribe(scheduler.reconcile)`.
"""

import logging
import math
import threading
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.errors import SchedulerResourceError
from ..core.ports import AlarmEffect, TimerBackend, TimerHandle
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_MAX_TIMERS = 1024


@dataclass(slots=True, frozen=True, eq=False)
class SchedulerEntry:
    """A live timer for one task, armed with the task snapshot it will report."""

    task: Task
    interval_minutes: int
    handle: TimerHandle


class AlarmScheduler:
    def __init__(
        self,
        effect: AlarmEffect,
        timers: TimerBackend,
        *,
        unit_seconds: float = 60.0,
        max_timers: int | None = DEFAULT_MAX_TIMERS,
    ) -> None:
        if unit_seconds <= 0:
            raise ValueError("unit_seconds must be positive")
        self._effect = effect
        self._timers = timers
        self._unit_seconds = float(unit_seconds)
        self._max_timers = max_timers if max_timers and max_timers > 0 else None
        self._entries: dict[str, SchedulerEntry] = {}
        self._lock = threading.RLock()

    # ---- introspection ----

    def armed_ids(self) -> set[str]:
        with self._lock:
            return set(self._entries)

    def entries(self) -> dict[str, SchedulerEntry]:
        with self._lock:
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ---- reconciliation ----

    def reconcile(self, tasks: Sequence[Task]) -> None:
        """Make the live timer set match `tasks` exactly (disarm all, rearm all)."""
        with self._lock:
            disarmed = self._disarm_all()
            for task in tasks:
                if task.interval_minutes <= 0:
                    logger.warning("Not arming task id=%s: interval=%s", task.id, task.interval_minutes)
                    continue
                self._arm(task)
            logger.debug("Reconciled alarms: disarmed=%d armed=%d", disarmed, len(self._entries))

    def shutdown(self) -> None:
        """Disarm every timer. The scheduler can be reused by calling reconcile again."""
        with self._lock:
            n = self._disarm_all()
        logger.info("AlarmScheduler stopped (%d timers disarmed)", n)

    def _disarm_all(self) -> int:
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            entry.handle.cancel()
        return len(entries)

    def _arm(self, task: Task) -> None:
        if self._max_timers is not None and len(self._entries) >= self._max_timers:
            raise SchedulerResourceError(f"timer limit reached ({self._max_timers})")

        try:
            period = float(task.interval_minutes) * self._unit_seconds
        except OverflowError as e:
            raise SchedulerResourceError(f"interval too large for task {task.id}") from e
        if not math.isfinite(period):
            raise SchedulerResourceError(f"interval too large for task {task.id}")

        holder: list[SchedulerEntry] = []

        def fire() -> None:
            if holder:
                self._fire(holder[0])

        try:
            handle = self._timers.call_repeating(period, fire)
        except (OSError, MemoryError) as e:
            raise SchedulerResourceError(f"cannot create timer for task {task.id}: {e!r}") from e

        entry = SchedulerEntry(task=task, interval_minutes=task.interval_minutes, handle=handle)
        holder.append(entry)
        self._entries[task.id] = entry

    def _fire(self, entry: SchedulerEntry) -> None:
        with self._lock:
            # A callback that outlived its entry (disarmed mid-flight) is dropped.
            if self._entries.get(entry.task.id) is not entry:
                return

        logger.info("Alarm fired task_id=%s interval=%s", entry.task.id, entry.interval_minutes)
        try:
            self._effect.notify(entry.task)
        except Exception:
            logger.exception("Alarm effect failed task_id=%s", entry.task.id)
