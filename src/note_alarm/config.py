# src/note_alarm/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import MAX_INTERVAL_MINUTES

ENV_PREFIX = "NOTEALARM"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    storage_key: str

    # ---- Tasks / scheduling ----
    default_interval_minutes: int
    interval_unit_seconds: float
    max_timers: int

    # ---- Alarm effects ----
    sound_enabled: bool
    desktop_notifications: bool
    console_alert: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "NoteAlarm") or "NoteAlarm"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/note_alarm"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")
        storage_key = _env(_k("STORAGE_KEY"), "noteAlarmTasks") or "noteAlarmTasks"

        default_interval = _env_int(_k("DEFAULT_INTERVAL_MINUTES"), 5)
        if default_interval < 1:
            default_interval = 5
        default_interval = min(default_interval, MAX_INTERVAL_MINUTES)

        unit_seconds = _env_float(_k("INTERVAL_UNIT_SECONDS"), 60.0)
        if not math.isfinite(unit_seconds) or unit_seconds <= 0:
            unit_seconds = 60.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
            data_dir=data_dir,
            storage_path=storage_path,
            storage_key=storage_key,
            default_interval_minutes=default_interval,
            interval_unit_seconds=unit_seconds,
            max_timers=max(0, _env_int(_k("MAX_TIMERS"), 1024)),
            sound_enabled=_env_bool(_k("SOUND_ENABLED"), True),
            desktop_notifications=_env_bool(_k("DESKTOP_NOTIFICATIONS"), True),
            console_alert=_env_bool(_k("CONSOLE_ALERT"), True),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings.from_env()
