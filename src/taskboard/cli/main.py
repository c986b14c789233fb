# src/taskboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the task list from the service,
then runs the console REPL until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Let in-flight confirmations settle, then close the service (no exceptions escape)."""
    try:
        if state.engine.in_flight:
            logger.info("Waiting for %d pending operation(s)...", state.engine.in_flight)
        await state.engine.drain()
    except Exception:
        logger.exception("Failed to drain pending operations.")

    try:
        await state.service.aclose()
    except Exception:
        logger.debug("Task service close failed.", exc_info=True)


async def run(state: AppState) -> None:
    try:
        await state.engine.load()
        await run_console_loop(state)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
