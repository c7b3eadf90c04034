# src/note_alarm/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import SchedulerResourceError
from ..core.state import AppState
from .alarm_loop import AlarmLoopRunner

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def run_console_loop(state: AppState, runner: AlarmLoopRunner) -> None:
    """
    Blocking REPL. Every command is executed on the alarm loop thread, so store
    mutations and timer re-arming never race with a firing alarm.

    Returns on /exit, EOF, Ctrl+C, or a fatal scheduler error.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands, /exit to quit.\n")

    while True:
        try:
            line = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            line = "/add " + line

        try:
            reply = runner.call(command_registry.handle, state, line, _print_ts)
        except SchedulerResourceError as e:
            logger.critical("Cannot schedule alarms, stopping: %s", e)
            _print_ts(f"[FATAL] Cannot schedule alarms: {e}")
            break
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
