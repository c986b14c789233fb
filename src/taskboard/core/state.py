# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.confirmation import DeletionConfirmation
from ..tasks.reconciler import ReconciliationEngine
from ..tasks.task_models import TaskDraft
from ..tasks.task_store import TaskStore
from .notices import NoticeLog
from .ports import TaskService


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    service: TaskService
    store: TaskStore
    notices: NoticeLog
    engine: ReconciliationEngine
    confirmation: DeletionConfirmation

    draft: TaskDraft = field(default_factory=TaskDraft)
