# src/note_alarm/tasks/task_store.py

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable

from ..core.errors import NotFoundError, ValidationError
from ..core.ports import TasksListener
from .task_models import DEFAULT_INTERVAL_MINUTES, MAX_INTERVAL_MINUTES, Task, coerce_interval, utc_now_iso

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task list.

    The order is meaningful (display order, drag-to-reorder).

    Every successful mutation notifies subscribers with an immutable snapshot.
    Listeners run synchronously inside the store lock, so a mutation and the
    reconciliation it triggers form one critical section.
    """

    def __init__(
        self,
        *,
        default_interval: int = DEFAULT_INTERVAL_MINUTES,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._default_interval = min(max(1, int(default_interval)), MAX_INTERVAL_MINUTES)
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._tasks: list[Task] = []
        self._listeners: list[TasksListener] = []
        self._lock = threading.RLock()
        self._last_id = 0

    # ---- observation ----

    def subscribe(self, listener: TasksListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        snapshot = tuple(self._tasks)
        for listener in list(self._listeners):
            listener(snapshot)

    # ---- queries ----

    def list_tasks(self) -> tuple[Task, ...]:
        with self._lock:
            return tuple(self._tasks)

    def get(self, task_id: str) -> Task:
        with self._lock:
            return self._tasks[self._index_of(task_id)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def _find(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    def _index_of(self, task_id: str) -> int:
        idx = self._find(task_id)
        if idx < 0:
            raise NotFoundError(task_id)
        return idx

    # ---- helpers ----

    @staticmethod
    def _clean_title(title: str | None) -> str:
        clean = (title or "").strip()
        if not clean:
            raise ValidationError("title is required")
        return clean

    def _next_id(self) -> str:
        # Millisecond timestamps, bumped so an id is never issued twice.
        candidate = max(int(self._clock_ms()), self._last_id + 1)
        self._last_id = candidate
        return str(candidate)

    def _remember_id(self, task_id: str) -> None:
        if task_id.isdigit():
            self._last_id = max(self._last_id, int(task_id))

    # ---- mutations ----

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace the whole list (startup restore). Duplicate ids keep the first occurrence."""
        with self._lock:
            seen: set[str] = set()
            clean: list[Task] = []
            for t in tasks:
                if t.id in seen:
                    logger.warning("Duplicate task id on load, dropping: %s", t.id)
                    continue
                seen.add(t.id)
                self._remember_id(t.id)
                clean.append(t)
            self._tasks = clean
            logger.info("TaskStore loaded %d tasks", len(clean))
            self._emit()

    def create(self, title: str, description: str = "", interval_minutes: object = None) -> Task:
        with self._lock:
            task = Task(
                id=self._next_id(),
                title=self._clean_title(title),
                description=(description or "").strip(),
                interval_minutes=coerce_interval(interval_minutes, self._default_interval),
                created_at=utc_now_iso(),
            )
            self._tasks.append(task)
            logger.debug("Task created id=%s interval=%s", task.id, task.interval_minutes)
            self._emit()
            return task

    def update(
        self,
        task_id: str,
        title: str,
        description: str = "",
        interval_minutes: object = None,
    ) -> Task:
        with self._lock:
            idx = self._index_of(task_id)
            old = self._tasks[idx]
            task = Task(
                id=old.id,
                title=self._clean_title(title),
                description=(description or "").strip(),
                interval_minutes=coerce_interval(interval_minutes, self._default_interval),
                created_at=old.created_at,
            )
            self._tasks[idx] = task
            logger.debug("Task updated id=%s interval=%s", task.id, task.interval_minutes)
            self._emit()
            return task

    def delete(self, task_id: str) -> None:
        with self._lock:
            idx = self._index_of(task_id)
            del self._tasks[idx]
            logger.debug("Task deleted id=%s", task_id)
            self._emit()

    def reorder(self, moved_id: str, target_id: str) -> bool:
        """
        Move `moved_id` to the slot held by `target_id`.

        The target index is taken before the moved task is removed and then used
        as the insertion index in the shortened list:
          [A, B, C] reorder(A, B) -> [B, A, C]
          [A, B, C] reorder(C, A) -> [C, A, B]

        Returns False (and does not notify) if either id is missing or they are equal.
        """
        with self._lock:
            if moved_id == target_id:
                return False
            moved_idx = self._find(moved_id)
            target_idx = self._find(target_id)
            if moved_idx < 0 or target_idx < 0:
                return False

            moved = self._tasks.pop(moved_idx)
            self._tasks.insert(target_idx, moved)
            logger.debug("Task moved id=%s from=%d to=%d", moved_id, moved_idx, target_idx)
            self._emit()
            return True
