# src/taskboard/remote/offline.py

from __future__ import annotations

import asyncio
import itertools
import logging
import random

from ..core.errors import RemoteRejected
from ..tasks.task_models import TaskRecord

logger = logging.getLogger(__name__)


class InMemoryTaskService:
    """
    Offline task service used for demos when no backend is running.

    Behavior:
    - durable ids come from a counter ("1", "2", ...)
    - every call sleeps `latency` seconds so optimistic updates are visible
    - with failure_rate > 0, calls randomly answer 503 to exercise rollbacks
    """

    def __init__(
        self,
        records: list[TaskRecord] | None = None,
        *,
        latency: float = 0.0,
        failure_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self._tasks: dict[str, TaskRecord] = {}
        self._ids = itertools.count(1)
        self._latency = max(0.0, float(latency))
        self._failure_rate = min(1.0, max(0.0, float(failure_rate)))
        self._rng = rng or random.Random()
        for r in records or []:
            self._tasks[r.id] = r
        if self._tasks:
            numeric = [int(k) for k in self._tasks if k.isdigit()]
            self._ids = itertools.count(max(numeric, default=0) + 1)

    @classmethod
    def from_settings(cls, settings) -> InMemoryTaskService:
        return cls(
            latency=float(getattr(settings, "offline_latency_seconds", 0.0)),
            failure_rate=float(getattr(settings, "offline_failure_rate", 0.0)),
        )

    async def _roundtrip(self, op: str) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)
        if self._failure_rate and self._rng.random() < self._failure_rate:
            logger.debug("offline service: simulated failure for %s", op)
            raise RemoteRejected(503, "simulated outage (offline mode)")

    @staticmethod
    def _not_found(task_id: str) -> RemoteRejected:
        return RemoteRejected(404, f"task {task_id} not found")

    async def list_tasks(self) -> list[TaskRecord]:
        await self._roundtrip("list")
        # Newest first, like a freshly prepended list.
        return list(reversed(list(self._tasks.values())))

    async def create_task(self, title: str, description: str) -> TaskRecord:
        await self._roundtrip("create")
        record = TaskRecord(
            id=str(next(self._ids)),
            title=title,
            description=description or None,
            completed=False,
        )
        self._tasks[record.id] = record
        return record

    async def update_task(self, task_id: str, *, completed: bool) -> None:
        await self._roundtrip("update")
        current = self._tasks.get(task_id)
        if current is None:
            raise self._not_found(task_id)
        self._tasks[task_id] = current.with_completed(completed)

    async def delete_task(self, task_id: str) -> None:
        await self._roundtrip("delete")
        if self._tasks.pop(task_id, None) is None:
            raise self._not_found(task_id)

    async def aclose(self) -> None:
        return
