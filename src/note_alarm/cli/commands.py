# src/note_alarm/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import NotFoundError, ValidationError
from ..core.state import AppState
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, str, CommandEmitter | None], str]

logger = logging.getLogger(__name__)

FIELD_SEP = "|"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation and not-found errors are turned into replies (the single
        operation is rejected); anything else propagates to the caller.
        """
        if not line.startswith("/"):
            return None

        head, _, rest = line[1:].strip().partition(" ")
        if not head:
            return "Empty command. Use /help to list available commands."

        name = head.lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, rest.strip(), emit)
        except ValidationError:
            return "Please enter a task title."
        except NotFoundError as e:
            logger.info("Stale task reference in /%s: %s", name, e.task_id)
            return f"Task {e.task_id} not found. Use /list to refresh."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_fields(text: str) -> list[str]:
    return [p.strip() for p in text.split(FIELD_SEP)]


def format_task(pos: int, task: Task) -> str:
    line = f"{pos}. [{task.id}] {task.title} (every {task.interval_minutes} min)"
    if task.description:
        line += f"\n     {task.description}"
    return line


def cmd_help(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks yet. Create your first task with /add."
    lines = [f"Your tasks ({len(tasks)}):"]
    lines += [format_task(i, t) for i, t in enumerate(tasks, start=1)]
    return "\n".join(lines)


def cmd_add(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    """
    /add <title> | <description> | <interval minutes>
    Description and interval are optional.
    """
    parts = _split_fields(args)
    title = parts[0] if parts else ""
    description = parts[1] if len(parts) > 1 else ""
    interval = parts[2] if len(parts) > 2 else None

    task = state.task_store.create(title, description, interval)
    return f"Task created [{task.id}]: {task.title} (reminds every {task.interval_minutes} min)"


def cmd_edit(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    """
    /edit <id> <title> | <description> | <interval minutes>
    Omitted parts keep their current values.
    """
    task_id, _, rest = args.partition(" ")
    if not task_id:
        return "Usage: /edit <id> <title> | <description> | <interval>"

    current = state.task_store.get(task_id)
    parts = _split_fields(rest) if rest.strip() else []

    title = parts[0] if parts and parts[0] else current.title
    description = parts[1] if len(parts) > 1 else current.description
    interval: object = parts[2] if len(parts) > 2 and parts[2] else current.interval_minutes

    task = state.task_store.update(task_id, title, description, interval)
    return f"Task updated [{task.id}]: {task.title} (reminds every {task.interval_minutes} min)"


def cmd_delete(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    task_id = args.strip()
    if not task_id:
        return "Usage: /del <id>"
    state.task_store.delete(task_id)
    return f"Task deleted [{task_id}]."


def cmd_move(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    """/move <id> <target_id> -> put task <id> into <target_id>'s slot."""
    parts = args.split()
    if len(parts) != 2:
        return "Usage: /move <id> <target_id>"
    if not state.task_store.reorder(parts[0], parts[1]):
        return "Nothing to move."
    return cmd_list(state, "", emit)


def cmd_status(state: AppState, args: str, emit: CommandEmitter | None = None) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Tasks: {len(state.task_store)}\n"
        f"  Alarms armed: {len(state.scheduler)}\n"
        f"  Minute length: {getattr(settings, 'interval_unit_seconds', 60.0)}s\n"
        f"  Storage: {getattr(settings, 'storage_path', '?')}"
    )


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "list tasks in order", aliases=["ls"])
registry.register("add", cmd_add, "add a task: /add <title> | <description> | <interval>", aliases=["new"])
registry.register("edit", cmd_edit, "edit a task: /edit <id> <title> | <description> | <interval>")
registry.register("del", cmd_delete, "delete a task: /del <id>", aliases=["rm", "delete"])
registry.register("move", cmd_move, "reorder: /move <id> <target_id>", aliases=["mv"])
registry.register("status", cmd_status, "show scheduler status")
