# src/taskledger/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ..core.state import AppState
from ..errors import AuthenticationError, IdSpaceExhausted, TaskError
from ..tasks import task_api
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task and authentication errors become a one-line reply; anything
        else propagates to the caller.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        # Keep the raw remainder so descriptions keep their spacing.
        rest = line[1:].lstrip()[len(parts[0]) :].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, [rest] if rest else [])
        except TaskError as e:
            logger.debug("/%s rejected: %s", name, e)
            return f"Error {int(e.code)} ({type(e).__name__}): {e}"
        except AuthenticationError as e:
            logger.warning("/%s: %s", name, e)
            return f"Authentication failed: {e.reason}"
        except IdSpaceExhausted as e:
            logger.error("/%s: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_ts(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_task(task: Task, me: str | None = None) -> str:
    owner = "you" if me is not None and task.owner == me else f"{task.owner[:12]}..."
    return f"#{task.id} [{task.status}] {task.description} (owner: {owner}, created {_fmt_ts(task.timestamp)})"


def _format_list(tasks: list[Task], me: str, empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t, me) for t in tasks)


def _split_id(args: list[str]) -> tuple[int, str] | None:
    """Split "<id> [rest]" -> (id, rest). None if the id is missing or not a number."""
    if not args:
        return None
    head, _, tail = args[0].partition(" ")
    try:
        task_id = int(head)
    except ValueError:
        return None
    if task_id < 0:
        return None
    return task_id, tail.strip()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_whoami(state: AppState, args: list[str]) -> str:
    mode = state.settings.auth_mode
    return f"Identity: {state.identity}\nAuth mode: {mode}"


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <description>"
    task_id = task_api.add_task(state.registry, state.key, args[0])
    return f"Added task #{task_id}."


def cmd_done(state: AppState, args: list[str]) -> str:
    parsed = _split_id(args)
    if parsed is None:
        return "Usage: /done <id>"
    task_api.complete_task(state.registry, state.key, parsed[0])
    return f"Task #{parsed[0]} completed."


def cmd_edit(state: AppState, args: list[str]) -> str:
    parsed = _split_id(args)
    if parsed is None:
        return "Usage: /edit <id> <description>"
    task_id, description = parsed
    task_api.update_description(state.registry, state.key, task_id, description)
    return f"Task #{task_id} updated."


def cmd_delete(state: AppState, args: list[str]) -> str:
    parsed = _split_id(args)
    if parsed is None:
        return "Usage: /delete <id>"
    task_api.delete_task(state.registry, state.key, parsed[0])
    return f"Task #{parsed[0]} deleted."


def cmd_transfer(state: AppState, args: list[str]) -> str:
    parsed = _split_id(args)
    if parsed is None or not parsed[1]:
        return "Usage: /transfer <id> <identity>"
    task_id, new_owner = parsed
    task_api.transfer_ownership(state.registry, state.key, task_id, new_owner)
    return f"Task #{task_id} transferred to {new_owner[:12]}..."


def cmd_get(state: AppState, args: list[str]) -> str:
    parsed = _split_id(args)
    if parsed is None:
        return "Usage: /get <id>"
    task = state.registry.get_task(parsed[0])
    if task is None:
        return f"No task #{parsed[0]}."
    return format_task(task, state.identity)


def cmd_mine(state: AppState, args: list[str]) -> str:
    tasks = state.registry.get_tasks_by_owner(state.identity)
    return _format_list(tasks, state.identity, "You have no tasks.")


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.registry.get_all()
    return _format_list(tasks, state.identity, "No tasks yet.")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show your identity (public key).")
registry.register("add", cmd_add, help_text="Create a task: /add <description>.")
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.", aliases=["complete"])
registry.register("edit", cmd_edit, help_text="Change a pending task: /edit <id> <description>.")
registry.register("delete", cmd_delete, help_text="Soft-delete a task: /delete <id>.", aliases=["rm"])
registry.register(
    "transfer", cmd_transfer, help_text="Give a task away: /transfer <id> <identity>."
)
registry.register("get", cmd_get, help_text="Show one task (deleted ones too): /get <id>.")
registry.register("mine", cmd_mine, help_text="List tasks you created.")
registry.register("list", cmd_list, help_text="List all tasks that are not deleted.", aliases=["ls"])
