# src/note_alarm/alarms/effects.py

from __future__ import annotations

import logging
import queue
import sys
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "NoteAlarm Reminder"

AlertEmitter = Callable[[str], None]
TonePlayer = Callable[[int, float], None]
Notifier = Callable[[str, str], None]


@dataclass(frozen=True, slots=True)
class Tone:
    frequency_hz: int
    duration_s: float
    start_s: float  # offset from the start of the pattern


# Three beeps with increasing pitch; the last one is longer.
ALARM_PATTERN: tuple[Tone, ...] = (
    Tone(800, 0.2, 0.0),
    Tone(1000, 0.2, 0.5),
    Tone(1200, 0.4, 1.0),
)

ALERT_DELAY_S = 1.0


def play_tone(frequency_hz: int, duration_s: float) -> None:
    """Beep through the OS speaker on Windows, terminal bell elsewhere."""
    if sys.platform == "win32":
        import winsound

        winsound.Beep(int(frequency_hz), max(1, int(duration_s * 1000)))
        return
    sys.stdout.write("\a")
    sys.stdout.flush()


def desktop_notify(title: str, message: str, *, app_name: str = "NoteAlarm") -> None:
    # plyer picks the platform backend lazily; import errors surface as notify failures.
    from plyer import notification

    notification.notify(title=title, message=message, app_name=app_name, timeout=10)


def format_alert(task: Task) -> str:
    lines = ["🔔 TASK REMINDER 🔔", "", f"Task: {task.title}"]
    if task.description:
        lines.append(task.description)
    lines += ["", f"Interval: Every {task.interval_minutes} minutes"]
    return "\n".join(lines)


def _print_alert(text: str) -> None:
    ts = datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")
    print(f"\n[{ts}] {text}\n", flush=True)


class AlarmEffectHandler:
    """
    Best-effort alarm output.

    Design goals:
    - notify() never blocks: effects run in a worker thread, one alarm at a time.
    - each effect (tones, desktop notification, console alert) is optional and
      fails on its own without affecting the others.
    - nothing raises back into the scheduler.
    """

    def __init__(
        self,
        *,
        sound: bool = True,
        desktop: bool = True,
        console_alert: bool = True,
        app_name: str = "NoteAlarm",
        tone_player: TonePlayer | None = None,
        notifier: Notifier | None = None,
        emit: AlertEmitter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sound = bool(sound)
        self.desktop = bool(desktop)
        self.console_alert = bool(console_alert)
        self.app_name = app_name

        self._tone_player = tone_player or play_tone
        self._notifier = notifier or (lambda title, msg: desktop_notify(title, msg, app_name=app_name))
        self._emit = emit or _print_alert
        self._sleep = sleep
        self._clock = clock

        self._queue: queue.Queue[Task | None] = queue.Queue()
        self._stop_requested = False
        self._worker = threading.Thread(target=self._run, name="alarm-effects", daemon=True)
        self._worker.start()

        logger.info(
            "Alarm effects ready (sound=%s desktop=%s console_alert=%s)",
            self.sound,
            self.desktop,
            self.console_alert,
        )

    def notify(self, task: Task) -> None:
        """Queue an alarm for `task` (no-op after shutdown)."""
        if self._stop_requested:
            return
        self._queue.put(task)

    def wait_all(self) -> None:
        """Block until all queued alarms are processed."""
        self._queue.join()

    def shutdown(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True

        logger.info("Stopping alarm effects worker...")
        self._queue.put(None)
        self._queue.join()
        self._worker.join(timeout=2.0)
        logger.info("Alarm effects stopped.")

    # ---- worker ----

    def _run(self) -> None:
        logger.debug("Alarm effects worker started.")
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                self._deliver(item)
            except Exception:
                logger.exception("Alarm delivery crashed task_id=%s", getattr(item, "id", None))
            finally:
                self._queue.task_done()

    def _deliver(self, task: Task) -> None:
        if self.desktop:
            body = f"Task: {task.title}\n{task.description}"
            try:
                self._notifier(NOTIFICATION_TITLE, body)
            except Exception as e:
                logger.warning("Desktop notification failed: %r", e)

        # Offsets are measured from one start time; winsound.Beep blocks for the tone.
        started = self._clock()
        if self.sound:
            for tone in ALARM_PATTERN:
                self._wait_until(started, tone.start_s)
                try:
                    self._tone_player(tone.frequency_hz, tone.duration_s)
                except Exception as e:
                    logger.warning("Tone playback failed: %r", e)
                    break

        if self.console_alert:
            self._wait_until(started, ALERT_DELAY_S)
            try:
                self._emit(format_alert(task))
            except Exception:
                logger.exception("Console alert failed task_id=%s", task.id)

    def _wait_until(self, started: float, offset_s: float) -> None:
        remaining = offset_s - (self._clock() - started)
        if remaining > 0:
            self._sleep(remaining)
