# src/note_alarm/cli/main.py

"""
CLI entrypoint.

Initializes logging, starts the alarm loop thread, builds AppState on it,
then runs the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.alarm_loop import start_alarm_loop_in_background
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.timers import AsyncioTimerBackend

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    runner = start_alarm_loop_in_background()
    # Timers are armed while restoring tasks, so build state on the loop thread.
    state = runner.call(
        create_initial_state,
        settings=settings,
        timers=AsyncioTimerBackend(runner.loop),
    )

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # Ctrl+C stays a KeyboardInterrupt inside input().
            run_console_loop(state, runner)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError, AttributeError):
                # Some platforms may not support SIGTERM, etc.
                pass
            logger.info("Console disabled. Alarms keep running. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        try:
            runner.call(shutdown_state, state, timeout=10.0)
        except Exception:
            logger.exception("Shutdown failed.")
        runner.stop()
        runner.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
