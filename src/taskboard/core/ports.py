# src/taskboard/core/ports.py

"""
Ports (interfaces) used by the core.

The reconciliation engine depends on Protocols instead of concrete implementations.
This keeps the HTTP service swappable (offline demo, test fakes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import TaskRecord
    from .notices import Notice


class TaskService(Protocol):
    """
    Remote collection service.

    Every method raises RemoteError (RemoteRejected / TransportFailure) on failure.
    """

    async def list_tasks(self) -> list[TaskRecord]: ...

    async def create_task(self, title: str, description: str) -> TaskRecord: ...

    async def update_task(self, task_id: str, *, completed: bool) -> None: ...

    async def delete_task(self, task_id: str) -> None: ...

    async def aclose(self) -> None: ...


class Notifier(Protocol):
    """Notice surface (toasts in a GUI, printed lines in the console)."""

    def notify(self, notice: Notice) -> None: ...
