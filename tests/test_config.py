# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from note_alarm.config import Settings
from note_alarm.tasks.task_models import MAX_INTERVAL_MINUTES


def test_defaults(monkeypatch) -> None:
    for name in (
        "NOTEALARM_DATA_DIR",
        "NOTEALARM_STORAGE_PATH",
        "NOTEALARM_DEFAULT_INTERVAL_MINUTES",
        "NOTEALARM_INTERVAL_UNIT_SECONDS",
        "NOTEALARM_MAX_TIMERS",
        "NOTEALARM_SOUND_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.data_dir == Path(".local/note_alarm")
    assert s.storage_path == Path(".local/note_alarm") / "storage.json"
    assert s.storage_key == "noteAlarmTasks"
    assert s.default_interval_minutes == 5
    assert s.interval_unit_seconds == 60.0
    assert s.max_timers == 1024
    assert s.sound_enabled is True


def test_env_overrides_and_bad_values(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NOTEALARM_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("NOTEALARM_STORAGE_PATH", raising=False)
    monkeypatch.setenv("NOTEALARM_DEFAULT_INTERVAL_MINUTES", "0")
    monkeypatch.setenv("NOTEALARM_INTERVAL_UNIT_SECONDS", "fast")
    monkeypatch.setenv("NOTEALARM_MAX_TIMERS", "16")
    monkeypatch.setenv("NOTEALARM_SOUND_ENABLED", "off")

    s = Settings.from_env()
    assert s.storage_path == tmp_path / "storage.json"
    assert s.default_interval_minutes == 5
    assert s.interval_unit_seconds == 60.0
    assert s.max_timers == 16
    assert s.sound_enabled is False


def test_huge_interval_settings_are_bounded(monkeypatch) -> None:
    monkeypatch.setenv("NOTEALARM_DEFAULT_INTERVAL_MINUTES", "1" + "0" * 30)
    monkeypatch.setenv("NOTEALARM_INTERVAL_UNIT_SECONDS", "inf")

    s = Settings.from_env()
    assert s.default_interval_minutes == MAX_INTERVAL_MINUTES
    assert s.interval_unit_seconds == 60.0
