# src/note_alarm/connectors/alarm_loop.py

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AlarmLoopRunner:
    """
    Owns the asyncio loop that runs every alarm timer.

    Store mutations re-arm timers, so they must happen on this loop's thread:
    callers submit work with call() and get the result (or the exception) back.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def call(self, fn: Callable[..., T], *args, timeout: float | None = 30.0, **kwargs) -> T:
        """Run fn(*args, **kwargs) on the loop thread and wait for its result."""
        if threading.current_thread() is self.thread:
            return fn(*args, **kwargs)

        fut: concurrent.futures.Future[T] = concurrent.futures.Future()

        def run() -> None:
            if not fut.set_running_or_notify_cancel():
                return
            try:
                fut.set_result(fn(*args, **kwargs))
            except BaseException as e:
                fut.set_exception(e)

        self.loop.call_soon_threadsafe(run)
        return fut.result(timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal alarm loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_alarm_loop_in_background() -> AlarmLoopRunner:
    """
    Start the alarm event loop in a background thread.

    Why a thread:
    - console REPL is blocking (input()).
    - timers are asyncio callbacks and want their own running loop.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    async def _serve(stop_event: asyncio.Event) -> None:
        await stop_event.wait()

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_serve(stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_asyncgens())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="alarm-loop", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        raise RuntimeError("Alarm loop thread did not initialize properly.")

    logger.info("Alarm loop thread started.")
    return AlarmLoopRunner(thread=t, loop=loop, stop_event=stop_event)
