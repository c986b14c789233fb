# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_board
from ..core.notices import Notice
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _read_line(prompt: str) -> str:
    """
    Read one line of stdin without blocking the event loop.

    input() runs in a daemon thread, not the default executor, so a cancelled
    read (Ctrl+C) never keeps interpreter shutdown waiting for the next Enter.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _deliver(line: str | None, exc: BaseException | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def _worker() -> None:
        try:
            line: str | None = input(prompt)
            exc: BaseException | None = None
        except (EOFError, OSError) as e:
            line, exc = None, e
        try:
            loop.call_soon_threadsafe(_deliver, line, exc)
        except RuntimeError:
            # Loop already closed.
            pass

    threading.Thread(target=_worker, name="taskboard-stdin", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    """
    Interactive console: renders the store and forwards intents.

    Notices (success / failure toasts) are printed as they arrive,
    which may be while the user is typing the next command.
    """
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskboard"))

    def _on_notice(notice: Notice) -> None:
        _print_ts(notice.render())

    unsubscribe = state.notices.subscribe(_on_notice)

    _print_ts(f"[{app_name}] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_board(state), flush=True)

    try:
        while True:
            try:
                user_input = (await _read_line(PROMPT)).strip()
            except (EOFError, OSError):
                logger.info("Console input closed, exiting.")
                break
            except asyncio.CancelledError:
                logger.info("Console interrupted, exiting.")
                print()
                raise

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                response = await command_registry.handle(state, user_input, emit=_print_ts)
                if response is None:
                    # Plain text is an add intent.
                    response = await command_registry.handle(state, f"/add {user_input}")
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response:
                print(response, flush=True)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
