# src/taskboard/tasks/task_models.py

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

PROVISIONAL_PREFIX = "temp-"

_provisional_seq = itertools.count(1)


class IdKind(StrEnum):
    """
    Which side issued a record's identifier.

    - PROVISIONAL: generated locally for an optimistic insert, not yet confirmed
    - DURABLE: issued by the remote service
    """

    PROVISIONAL = "provisional"
    DURABLE = "durable"


def new_provisional_id() -> str:
    """Time-derived local id; the sequence suffix keeps ids unique within one millisecond."""
    return f"{PROVISIONAL_PREFIX}{int(time.time() * 1000)}-{next(_provisional_seq)}"


def _parse_completed(raw: Any) -> bool:
    """Tolerant flag parsing: real booleans, 0/1 and "true"/"false"-style strings; anything else is False."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int):
        return raw == 1
    if isinstance(raw, str):
        return raw.strip().lower() in {"true", "1", "yes"}
    return False


@dataclass(frozen=True, slots=True)
class TaskRecord:
    id: str
    title: str
    description: str | None = None
    completed: bool = False
    id_kind: IdKind = IdKind.DURABLE

    @property
    def is_provisional(self) -> bool:
        return self.id_kind == IdKind.PROVISIONAL

    @classmethod
    def provisional(cls, title: str, description: str | None = None) -> TaskRecord:
        return cls(
            id=new_provisional_id(),
            title=title,
            description=description,
            completed=False,
            id_kind=IdKind.PROVISIONAL,
        )

    @classmethod
    def from_payload(cls, raw: Any) -> TaskRecord:
        """
        Parse a task object as returned by the service.

        Numeric ids are accepted (stored as strings). Missing id/title is a malformed payload.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"expected a task object, got {type(raw).__name__}")

        raw_id = raw.get("id")
        if raw_id is None or isinstance(raw_id, bool) or str(raw_id).strip() == "":
            raise ValueError("task object has no id")

        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"task {raw_id!r} has no title")

        description = raw.get("description")
        if description is not None and not isinstance(description, str):
            description = str(description)

        return cls(
            id=str(raw_id).strip(),
            title=title,
            description=description,
            completed=_parse_completed(raw.get("completed")),
            id_kind=IdKind.DURABLE,
        )

    def with_completed(self, completed: bool) -> TaskRecord:
        return replace(self, completed=bool(completed))

    def toggled(self) -> TaskRecord:
        return replace(self, completed=not self.completed)


@dataclass(slots=True)
class TaskDraft:
    """The add-task input fields."""

    title: str = ""
    description: str = ""

    def clear(self) -> None:
        self.title = ""
        self.description = ""

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.description
