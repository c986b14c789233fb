# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.confirmation import PROMPT_TEXT, PROMPT_TITLE

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

EMPTY_LIST_TEXT = "You have no tasks yet. Add one above!"


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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Plain text (without a leading /) adds a task with that title.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_board(state: AppState) -> str:
    store = state.store
    if store.loading:
        return "Loading tasks..."

    lines = ["Your Tasks:"]
    if not len(store):
        lines.append(f"  {EMPTY_LIST_TEXT}")
    for i, task in enumerate(store, start=1):
        mark = "x" if task.completed else " "
        suffix = " (saving...)" if task.is_provisional else ""
        lines.append(f"  {i:>2}. [{mark}] {task.title}{suffix}")
        if task.description:
            lines.append(f"        {task.description}")

    if state.confirmation.is_open:
        target = store.get(state.confirmation.target or "")
        name = f' "{target.title}"' if target is not None else ""
        lines.append("")
        lines.append(f"{PROMPT_TITLE} Delete{name}?")
        lines.append(f"  {PROMPT_TEXT}")
        lines.append("  /yes to delete, /no to cancel.")
    return "\n".join(lines)


def resolve_task_ref(state: AppState, ref: str) -> str | None:
    """
    Map a user reference to a task id.

    "3" is the 3rd task in the list; "id:abc" (or any non-positional text) is a task id.
    """
    ref = (ref or "").strip()
    if not ref:
        return None
    if ref.startswith("id:"):
        task_id = ref[3:]
        return task_id if task_id in state.store else None
    if ref.isdigit():
        n = int(ref)
        records = state.store.records
        if 1 <= n <= len(records):
            return records[n - 1].id
        return None
    return ref if ref in state.store else None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_board(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>                 -> add a task
    /add <title> | <description> -> add a task with a description
    """
    raw = " ".join(args)
    title, sep, description = raw.partition("|")
    if sep:
        # spaces around the separator belong to neither field
        title = title.rstrip()
        description = description.strip()
    state.draft.title = title
    state.draft.description = description

    if state.engine.submit_draft(state.draft) is None:
        return "Usage: /add <title> [| description]"
    return render_board(state)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /toggle <number|id:ID>"
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No such task: {args[0]}"
    state.engine.toggle(task_id)
    return render_board(state)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <number|id:ID>"
    if state.confirmation.is_open:
        return "Another delete is waiting for confirmation. Answer /yes or /no first."
    task_id = resolve_task_ref(state, args[0])
    if task_id is None:
        return f"No such task: {args[0]}"
    state.confirmation.request(task_id)
    return render_board(state)


def cmd_yes(state: AppState, args: list[str]) -> str:
    if not state.confirmation.is_open:
        return "Nothing to confirm."
    state.confirmation.confirm()
    return render_board(state)


def cmd_no(state: AppState, args: list[str]) -> str:
    if not state.confirmation.is_open:
        return "Nothing to cancel."
    state.confirmation.cancel()
    return "Delete cancelled."


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    if getattr(settings, "offline", False):
        service = "offline (in-memory)"
    else:
        service = str(getattr(settings, "api_url", "?"))
    return (
        "Status:\n"
        f"  Service: {service}\n"
        f"  Tasks: {len(state.store)}\n"
        f"  Operations in flight: {state.engine.in_flight}\n"
        f"  Unconfirmed new tasks: {len(state.engine.pending_creations)}"
    )


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.engine.in_flight:
        return "Wait for pending changes to settle before reloading."
    if emit:
        emit("Loading tasks...")
    outcome = await state.engine.load()
    if not outcome.ok:
        return "Reload failed; keeping the current list."
    return render_board(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].", aliases=["new"])
registry.register(
    "toggle", cmd_toggle, help_text="Mark a task complete/incomplete: /toggle <n>.", aliases=["done"]
)
registry.register("delete", cmd_delete, help_text="Delete a task (asks first): /delete <n>.", aliases=["rm"])
registry.register("yes", cmd_yes, help_text="Confirm the pending delete.", aliases=["y"])
registry.register("no", cmd_no, help_text="Cancel the pending delete.", aliases=["n"])
registry.register("status", cmd_status, help_text="Show service and pending-operation status.")
registry.register("reload", cmd_reload, help_text="Fetch the task list from the service again.")
