# src/taskboard/core/errors.py

from __future__ import annotations


class TaskBoardError(Exception):
    """Base class for taskboard errors."""


class DuplicateTaskError(TaskBoardError, ValueError):
    """A store mutation would put two records under the same identifier."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task id already present: {task_id}")
        self.task_id = task_id


class RemoteError(TaskBoardError):
    """A remote task-service operation did not complete successfully."""


class RemoteRejected(RemoteError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = int(status_code)
        self.detail = (detail or "").strip()
        msg = f"HTTP {self.status_code}"
        if self.detail:
            msg = f"{msg}: {self.detail}"
        super().__init__(msg)


class TransportFailure(RemoteError):
    """The request could not be completed (connection refused, timeout, ...)."""
