# src/taskboard/tasks/confirmation.py

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .reconciler import Outcome, ReconciliationEngine

logger = logging.getLogger(__name__)

PROMPT_TITLE = "Are you absolutely sure?"
PROMPT_TEXT = "This action cannot be undone. This will permanently delete the task from the database."


class DeletionConfirmation:
    """
    Gate in front of destructive deletes.

    idle --request(id)--> pending(id) --cancel()--> idle
                                      --confirm()--> engine.delete(id); idle once it resolves

    confirm() closes the prompt immediately; the target is cleared when the
    delete settles, whatever its result. Only one target is tracked; the UI is
    expected not to request a second delete while one is pending.
    """

    def __init__(self, engine: ReconciliationEngine) -> None:
        self._engine = engine
        self._target: str | None = None
        self._open = False

    @property
    def target(self) -> str | None:
        return self._target

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def is_pending(self) -> bool:
        return self._target is not None

    def request(self, task_id: str) -> None:
        if self._target is not None and self._target != task_id:
            logger.debug("delete target %s replaced by %s", self._target, task_id)
        self._target = task_id
        self._open = True

    def cancel(self) -> None:
        self._target = None
        self._open = False

    def confirm(self) -> asyncio.Task[Outcome[Any]] | None:
        target = self._target
        self._open = False
        if target is None:
            return None

        task = self._engine.delete(target)
        if task is None:
            # Nothing to delete (already gone); settle immediately.
            self._target = None
            return None

        def _clear(_: asyncio.Task[Outcome[Any]]) -> None:
            # A newer request may have replaced the target meanwhile; keep that one.
            if self._target == target:
                self._target = None

        task.add_done_callback(_clear)
        return task
