# src/taskboard/tasks/reconciler.py

"""
Optimistic reconciliation of user intents against the remote task service.

Every intent runs in two phases:
1) optimistic: mutate the store synchronously, before anything is awaited,
   so store mutations happen in the order intents were accepted;
2) confirmation: await the remote call in its own asyncio.Task, then either
   confirm (keep / promote the local change) or roll back.

Rollback for update/delete restores the whole store snapshot captured at the
start of the operation. Two operations in flight at once therefore race: a
failing operation can overwrite a result another operation already confirmed.
There is no per-record locking; resolutions that target a record which is gone
are no-ops. Creates are the exception: a restore never brings back a provisional
record whose create has already resolved, and a confirmed create whose record
was rolled away is re-inserted.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ..core.errors import RemoteError, RemoteRejected, TransportFailure
from ..core.notices import Notice, NoticeLevel
from ..core.ports import Notifier, TaskService
from .task_models import TaskDraft, TaskRecord
from .task_store import TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationKind(StrEnum):
    LOAD = "load"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class _Wording:
    failure_title: str
    rejected: str
    unknown: str


_WORDING: dict[OperationKind, _Wording] = {
    OperationKind.LOAD: _Wording(
        failure_title="Failed to load tasks",
        rejected="Failed to fetch tasks. Check the task service URL.",
        unknown="An unknown error occurred while fetching tasks.",
    ),
    OperationKind.CREATE: _Wording(
        failure_title="Failed to add task",
        rejected="Failed to add task.",
        unknown="An unknown error occurred while adding the task.",
    ),
    OperationKind.UPDATE: _Wording(
        failure_title="Failed to update task",
        rejected="Server failed to update task.",
        unknown="An unknown error occurred while updating the task.",
    ),
    OperationKind.DELETE: _Wording(
        failure_title="Failed to delete task",
        rejected="Server failed to delete task.",
        unknown="An unknown error occurred while deleting the task.",
    ),
}

TRANSPORT_FAILURE_TEXT = "Could not reach the task service. Check your connection and try again."
EMPTY_TITLE_TEXT = "Task title cannot be empty."
STILL_SAVING_TEXT = "This task is still being saved. Try again in a moment."


def describe_failure(kind: OperationKind, exc: BaseException) -> str:
    """
    Human-readable detail for a failed remote operation.

    Rejections (non-success status) name the action and the server's answer;
    transport failures and anything unexpected get a generic text.
    """
    wording = _WORDING[kind]
    if isinstance(exc, RemoteRejected):
        return f"{wording.rejected} ({exc})"
    if isinstance(exc, TransportFailure):
        return TRANSPORT_FAILURE_TEXT
    if isinstance(exc, RemoteError):
        msg = str(exc).strip()
        return msg or wording.unknown
    return wording.unknown


def failure_notice(kind: OperationKind, exc: BaseException) -> Notice:
    return Notice(NoticeLevel.ERROR, _WORDING[kind].failure_title, describe_failure(kind, exc))


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Completion contract of a confirmation phase: a value on success, the error otherwise."""

    ok: bool
    value: T | None = None
    error: BaseException | None = None


class ReconciliationEngine:
    """
    Turns intents (create / toggle / delete) into optimistic store mutations
    and settles them once the remote service answers.

    Intent methods must be called from a running event loop. They return the
    asyncio.Task of the confirmation phase, or None when the intent was
    rejected or had nothing to act on.
    """

    def __init__(self, store: TaskStore, service: TaskService, notifier: Notifier) -> None:
        self._store = store
        self._service = service
        self._notifier = notifier
        self._inflight: set[asyncio.Task[Any]] = set()
        # provisional id -> record inserted for an in-flight create
        self._pending_creates: dict[str, TaskRecord] = {}
        # provisional id -> durable record (None when the create failed); kept while
        # any snapshot taken before the resolution may still be restored
        self._resolved_creates: dict[str, TaskRecord | None] = {}

    # ---- introspection ----

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def in_flight(self) -> int:
        return len(self._inflight)

    @property
    def pending_creations(self) -> dict[str, TaskRecord]:
        return dict(self._pending_creates)

    async def drain(self) -> None:
        """Wait until every confirmation phase started so far (and any they start) has settled."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # ---- generic two-phase operation ----

    def _reconcile(
        self,
        kind: OperationKind,
        *,
        target: str,
        apply: Callable[[], object],
        call: Callable[[], Awaitable[T]],
        success: Notice | None,
        confirm: Callable[[T], None] | None = None,
        rollback: Callable[[], None] | None = None,
        cleanup: Callable[[], None] | None = None,
    ) -> asyncio.Task[Outcome[Any]]:
        """
        Snapshot, apply, then confirm-or-restore.

        Without an explicit rollback the store snapshot taken right before
        `apply` is restored on failure.
        """
        snapshot = self._store.snapshot()
        apply()

        def _restore() -> None:
            self._store.restore(snapshot)
            self._reapply_creates()

        undo = rollback or _restore

        async def _settle() -> Outcome[T]:
            try:
                value = await call()
                if confirm is not None:
                    confirm(value)
            except asyncio.CancelledError:
                undo()
                raise
            except RemoteError as e:
                logger.warning("%s %s failed: %s", kind.value, target, e)
                undo()
                self._notifier.notify(failure_notice(kind, e))
                return Outcome(ok=False, error=e)
            except Exception as e:
                logger.exception("%s %s failed unexpectedly", kind.value, target)
                undo()
                self._notifier.notify(failure_notice(kind, e))
                return Outcome(ok=False, error=e)
            finally:
                if cleanup is not None:
                    cleanup()

            logger.info("%s %s confirmed", kind.value, target)
            if success is not None:
                self._notifier.notify(success)
            return Outcome(ok=True, value=value)

        task = asyncio.get_running_loop().create_task(
            _settle(), name=f"taskboard-{kind.value}-{target}"
        )
        self._inflight.add(task)
        task.add_done_callback(self._settled)
        return task

    def _settled(self, task: asyncio.Task[Any]) -> None:
        self._inflight.discard(task)
        if not self._inflight:
            # No snapshot is held any more.
            self._resolved_creates.clear()

    def _reapply_creates(self) -> None:
        """Bring provisional records put back by a snapshot restore up to date."""
        for temp_id in self._store.provisional_ids():
            if temp_id in self._pending_creates:
                continue
            created = self._resolved_creates.get(temp_id)
            if created is None or created.id in self._store:
                self._store.remove_by_id(temp_id)
            else:
                self._store.replace_id(temp_id, created)
            logger.debug("re-applied create %s after restore", temp_id)

    # ---- intents ----

    async def load(self) -> Outcome[list[TaskRecord]]:
        """Fetch the service snapshot into the store. On failure the store is left as it was."""
        self._store.loading = True
        try:
            records = await self._service.list_tasks()
            self._store.load(records)
        except Exception as e:
            if isinstance(e, RemoteError):
                logger.warning("Initial task load failed: %s", e)
            else:
                logger.exception("Initial task load failed unexpectedly")
            self._notifier.notify(failure_notice(OperationKind.LOAD, e))
            return Outcome(ok=False, error=e)
        finally:
            self._store.loading = False

        logger.info("Loaded %d tasks", len(records))
        return Outcome(ok=True, value=records)

    def create(
        self,
        title: str,
        description: str = "",
        *,
        draft: TaskDraft | None = None,
    ) -> asyncio.Task[Outcome[Any]] | None:
        """
        Insert a provisional record at the head and ask the service to create it.

        An empty (after trimming) title is rejected before any mutation and the
        draft keeps its contents. Once accepted the draft is cleared and stays
        cleared even if the service later fails.
        """
        if not (title or "").strip():
            self._notifier.notify(Notice(NoticeLevel.WARNING, EMPTY_TITLE_TEXT))
            return None

        description = description or ""
        record = TaskRecord.provisional(title, description or None)
        temp_id = record.id

        def _apply() -> None:
            self._store.insert_at_head(record)
            self._pending_creates[temp_id] = record
            if draft is not None:
                draft.clear()

        def _confirm(created: TaskRecord) -> None:
            self._resolved_creates[temp_id] = created
            if self._store.replace_id(temp_id, created):
                return
            # A restored snapshot predating the insert dropped the provisional record.
            if created.id not in self._store:
                logger.info(
                    "create confirmed as %s after provisional record %s was rolled away; re-inserting",
                    created.id,
                    temp_id,
                )
                self._store.insert_at_head(created)

        def _rollback() -> None:
            self._resolved_creates[temp_id] = None
            self._store.remove_by_id(temp_id)

        def _cleanup() -> None:
            self._pending_creates.pop(temp_id, None)

        return self._reconcile(
            OperationKind.CREATE,
            target=temp_id,
            apply=_apply,
            call=lambda: self._service.create_task(title, description),
            success=Notice(NoticeLevel.SUCCESS, "Task added successfully!"),
            confirm=_confirm,
            rollback=_rollback,
            cleanup=_cleanup,
        )

    def submit_draft(self, draft: TaskDraft) -> asyncio.Task[Outcome[Any]] | None:
        return self.create(draft.title, draft.description, draft=draft)

    def _actionable(self, task_id: str, kind: OperationKind) -> TaskRecord | None:
        current = self._store.get(task_id)
        if current is None:
            logger.debug("%s %s ignored: no such task", kind.value, task_id)
            return None
        if current.is_provisional:
            # Provisional ids are unknown to the service.
            self._notifier.notify(Notice(NoticeLevel.INFO, STILL_SAVING_TEXT))
            return None
        return current

    def toggle(self, task_id: str) -> asyncio.Task[Outcome[Any]] | None:
        """Flip `completed` now; restore the pre-toggle store if the service refuses."""
        current = self._actionable(task_id, OperationKind.UPDATE)
        if current is None:
            return None

        completed = not current.completed

        return self._reconcile(
            OperationKind.UPDATE,
            target=task_id,
            apply=lambda: self._store.update_by_id(task_id, lambda r: r.with_completed(completed)),
            call=lambda: self._service.update_task(task_id, completed=completed),
            success=Notice(NoticeLevel.SUCCESS, f'Task "{current.title}" updated!'),
        )

    def delete(self, task_id: str) -> asyncio.Task[Outcome[Any]] | None:
        """Remove now; put the whole pre-delete store back if the service refuses."""
        current = self._actionable(task_id, OperationKind.DELETE)
        if current is None:
            return None

        return self._reconcile(
            OperationKind.DELETE,
            target=task_id,
            apply=lambda: self._store.remove_by_id(task_id),
            call=lambda: self._service.delete_task(task_id),
            success=Notice(NoticeLevel.SUCCESS, "Task deleted successfully."),
        )
