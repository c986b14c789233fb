# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the task service (HTTP, or the offline demo service),
- wires store, notices, engine and delete confirmation into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.notices import NoticeLog
from ..core.ports import TaskService
from ..core.state import AppState
from ..remote.http_service import HttpTaskService
from ..remote.offline import InMemoryTaskService
from ..tasks.confirmation import DeletionConfirmation
from ..tasks.reconciler import ReconciliationEngine
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)


def create_service(settings) -> TaskService:
    if getattr(settings, "offline", False):
        logger.info("Offline mode: using the in-memory task service.")
        return InMemoryTaskService.from_settings(settings)
    logger.info("Using task service at %s", settings.api_url)
    return HttpTaskService.from_settings(settings)


def create_initial_state(*, settings=None, service: TaskService | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the service injectable makes the app easy to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if service is None:
        service = create_service(settings)

    store = TaskStore()
    notices = NoticeLog(maxlen=int(getattr(settings, "notice_history", 50)))
    engine = ReconciliationEngine(store, service, notices)

    return AppState(
        settings=settings,
        service=service,
        store=store,
        notices=notices,
        engine=engine,
        confirmation=DeletionConfirmation(engine),
    )
