# src/note_alarm/tasks/task_persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from ..core.ports import BlobStore
from .task_models import DEFAULT_INTERVAL_MINUTES, Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "noteAlarmTasks"


class JsonFileBlobStore:
    """
    Key-value blob store kept in one JSON file: {"<key>": "<blob>", ...}.

    - every write rewrites the file atomically (tmp + os.replace)
    - a missing or corrupt file reads as empty
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Blob store file is unreadable, treating as empty: %s", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Blob store file is not an object, treating as empty: %s", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            # Best-effort: task notes may be personal, keep the file private on disk.
            os.chmod(self._path, 0o600)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        self._write_all(data)


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_record() for t in tasks], ensure_ascii=False, separators=(",", ":"))


class BlobTaskPersistence:
    """
    Mirrors the task list into a BlobStore under a single key.

    load():
      - no key -> []
      - undecodable JSON / not a list -> [] (discarded, logged)
      - individual malformed records are skipped
    save():
      - empty list removes the key
      - failures are logged, never raised (the in-memory list stays authoritative)
    """

    def __init__(
        self,
        blob_store: BlobStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        default_interval: int = DEFAULT_INTERVAL_MINUTES,
    ) -> None:
        self._blobs = blob_store
        self._key = key
        self._default_interval = default_interval

    def load(self) -> list[Task]:
        try:
            raw = self._blobs.get(self._key)
        except Exception:
            logger.exception("Failed to read stored tasks (key=%s)", self._key)
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored tasks are not valid JSON; discarding (key=%s)", self._key)
            return []

        if not isinstance(data, list):
            logger.warning("Stored tasks are not a list; discarding (key=%s)", self._key)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for rec in data:
            try:
                task = Task.from_record(rec, default_interval=self._default_interval)
            except ValueError as e:
                logger.warning("Skipping malformed stored task: %s", e)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate stored task id=%s", task.id)
                continue
            seen.add(task.id)
            out.append(task)

        logger.info("Loaded %d stored tasks (key=%s)", len(out), self._key)
        return out

    def save(self, tasks: Sequence[Task]) -> None:
        try:
            if not tasks:
                self._blobs.remove(self._key)
            else:
                self._blobs.set(self._key, encode_tasks(tasks))
            logger.debug("Saved %d tasks (key=%s)", len(tasks), self._key)
        except Exception:
            logger.exception("Failed to save tasks (key=%s)", self._key)
