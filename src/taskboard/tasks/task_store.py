# src/taskboard/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from ..core.errors import DuplicateTaskError
from .task_models import TaskRecord

logger = logging.getLogger(__name__)

Snapshot = tuple[TaskRecord, ...]
StoreListener = Callable[["TaskStore"], None]


class TaskStore:
    """
    In-memory ordered task list (display order, head first).

    Invariants:
    - at most one record per id
    - update/replace keep the record at its position

    Records are immutable, so a snapshot is just a tuple of the current list.
    Every mutation notifies subscribers; the store has no network or timer behavior.
    """

    def __init__(self, records: Iterable[TaskRecord] = ()) -> None:
        self._records: list[TaskRecord] = []
        self._loading = False
        self._listeners: list[StoreListener] = []
        initial = list(records)
        if initial:
            self._check_unique(initial)
            self._records = initial

    # ---- low-level helpers ----

    @staticmethod
    def _check_unique(records: list[TaskRecord]) -> None:
        seen: set[str] = set()
        for r in records:
            if r.id in seen:
                raise DuplicateTaskError(r.id)
            seen.add(r.id)

    def _find(self, task_id: str) -> int:
        for i, r in enumerate(self._records):
            if r.id == task_id:
                return i
        return -1

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("TaskStore listener crashed.")

    # ---- observation ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def records(self) -> Snapshot:
        return tuple(self._records)

    @property
    def loading(self) -> bool:
        return self._loading

    @loading.setter
    def loading(self, value: bool) -> None:
        value = bool(value)
        if value == self._loading:
            return
        self._loading = value
        self._changed()

    def get(self, task_id: str) -> TaskRecord | None:
        i = self._find(task_id)
        return self._records[i] if i >= 0 else None

    def index_of(self, task_id: str) -> int | None:
        i = self._find(task_id)
        return i if i >= 0 else None

    def ids(self) -> list[str]:
        return [r.id for r in self._records]

    def provisional_ids(self) -> list[str]:
        return [r.id for r in self._records if r.is_provisional]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TaskRecord]:
        return iter(tuple(self._records))

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, str) and self._find(task_id) >= 0

    # ---- mutations ----

    def load(self, records: Iterable[TaskRecord]) -> None:
        """Replace the whole list (initial snapshot). No prior state is kept."""
        new = list(records)
        self._check_unique(new)
        self._records = new
        logger.debug("TaskStore loaded %d records", len(new))
        self._changed()

    def insert_at_head(self, record: TaskRecord) -> None:
        if self._find(record.id) >= 0:
            raise DuplicateTaskError(record.id)
        self._records.insert(0, record)
        self._changed()

    def replace_id(self, old_id: str, new_record: TaskRecord) -> bool:
        """
        Swap the record stored under old_id for new_record at the same position.

        Returns False (no-op) if old_id is gone.
        """
        i = self._find(old_id)
        if i < 0:
            return False
        j = self._find(new_record.id)
        if j >= 0 and j != i:
            raise DuplicateTaskError(new_record.id)
        self._records[i] = new_record
        self._changed()
        return True

    def remove_by_id(self, task_id: str) -> TaskRecord | None:
        i = self._find(task_id)
        if i < 0:
            return None
        removed = self._records.pop(i)
        self._changed()
        return removed

    def update_by_id(
        self, task_id: str, mutator: Callable[[TaskRecord], TaskRecord]
    ) -> TaskRecord | None:
        """Apply a field-level change to one record in place. None if the id is absent."""
        i = self._find(task_id)
        if i < 0:
            return None
        updated = mutator(self._records[i])
        if updated.id != task_id:
            raise ValueError("update_by_id mutator must not change the record id")
        self._records[i] = updated
        self._changed()
        return updated

    def snapshot(self) -> Snapshot:
        return tuple(self._records)

    def restore(self, snapshot: Snapshot) -> None:
        self._records = list(snapshot)
        self._changed()
