# src/note_alarm/tasks/task_models.py

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

DEFAULT_INTERVAL_MINUTES = 5
# About ten years. Anything longer is clamped so the timer period stays finite.
MAX_INTERVAL_MINUTES = 5_256_000

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
_MAX_INTERVAL_DIGITS = len(str(MAX_INTERVAL_MINUTES))


def coerce_interval(raw: Any, default: int = DEFAULT_INTERVAL_MINUTES) -> int:
    """
    Normalize a user-entered reminder interval (minutes).

    Accepts ints, floats (truncated) and strings with a leading integer ("12", "7.5", "10min").
    Anything non-numeric or below 1 becomes `default`; anything above
    MAX_INTERVAL_MINUTES is clamped to it.
    """
    if raw is None or isinstance(raw, bool):
        return default

    value: int | None = None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if math.isfinite(raw):
            value = int(raw)
        elif raw > 0:
            value = MAX_INTERVAL_MINUTES
    elif isinstance(raw, str):
        m = _LEADING_INT.match(raw)
        if m:
            sign, digits = m.groups()
            digits = digits.lstrip("0") or "0"
            if len(digits) > _MAX_INTERVAL_DIGITS:
                # Skip int() on huge digit runs (it rejects >4300 digits).
                value = -1 if sign == "-" else MAX_INTERVAL_MINUTES
            else:
                value = int(sign + digits)

    if value is None or value < 1:
        return default
    return min(value, MAX_INTERVAL_MINUTES)


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2026-10-17T09:30:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    interval_minutes: int
    created_at: str

    def to_record(self) -> dict[str, Any]:
        """Persisted shape (field names are part of the storage format)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "interval": self.interval_minutes,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, rec: Any, *, default_interval: int = DEFAULT_INTERVAL_MINUTES) -> Task:
        """
        Build a Task from a persisted record.

        Raises ValueError if the record cannot describe a task (not a dict, no id, no title).
        """
        if not isinstance(rec, dict):
            raise ValueError("task record must be an object")

        raw_id = rec.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)) or str(raw_id).strip() == "":
            raise ValueError("task record has no usable id")

        title = rec.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("task record has no title")

        description = rec.get("description")
        created_at = rec.get("createdAt")

        return cls(
            id=str(raw_id),
            title=title,
            description=description if isinstance(description, str) else "",
            interval_minutes=coerce_interval(rec.get("interval"), default_interval),
            created_at=created_at if isinstance(created_at, str) else "",
        )
