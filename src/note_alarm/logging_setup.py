# src/note_alarm/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "note_alarm.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"

# Per-fire and per-reconcile chatter would interleave with the ">>> " prompt.
QUIET_ON_CONSOLE = ("note_alarm.tasks.alarm_scheduler", "note_alarm.tasks.timers")


def console_filter(record: logging.LogRecord) -> bool:
    """Own logs pass (quiet modules from WARNING); everything else from ERROR."""
    if record.name.startswith(QUIET_ON_CONSOLE):
        return record.levelno >= logging.WARNING
    if record.name.startswith("note_alarm."):
        return True
    return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/note_alarm",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """Replace root handlers with a filtered stderr handler and a full log file; returns the file path."""
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(console_filter)

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(file_level)

    for handler in (console, to_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # warnings.warn() lands in 'py.warnings', which the console shows from ERROR only.
    logging.captureWarnings(True)
    return log_file
