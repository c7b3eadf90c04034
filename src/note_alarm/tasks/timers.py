# src/note_alarm/tasks/timers.py

from __future__ import annotations

"""
Repeating timers on an asyncio event loop.

Fires are scheduled at absolute loop times (armed_at + k * period), so a slow
callback does not push later fires back.

Must be used from the loop's own thread (loop.call_at is not thread-safe);
the console front-end routes every command through the alarm loop thread.
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        period_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._period = float(period_seconds)
        self._callback = callback
        self._armed_at = loop.time()
        self._fires = 0
        self._cancelled = False
        self._handle: asyncio.TimerHandle | None = None
        self._schedule_next()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _schedule_next(self) -> None:
        when = self._armed_at + (self._fires + 1) * self._period
        self._handle = self._loop.call_at(when, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._fires += 1
        # Re-arm first so a failing callback does not stop the timer.
        self._schedule_next()
        try:
            self._callback()
        except Exception:
            logger.exception("Repeating timer callback failed")

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioTimerBackend:
    """TimerBackend on top of an asyncio loop (defaults to the running loop)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_repeating(self, period_seconds: float, callback: Callable[[], None]) -> RepeatingTimer:
        if period_seconds <= 0:
            raise ValueError("period_seconds must be positive")
        loop = self._loop or asyncio.get_running_loop()
        return RepeatingTimer(loop, period_seconds, callback)
