# src/taskboard/core/notices.py

"""
User-visible notices (the toast surface).

The engine only emits notices; connectors decide how to show them.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    level: NoticeLevel
    title: str
    description: str | None = None

    def render(self) -> str:
        text = f"[{self.level.value.upper()}] {self.title}"
        if self.description:
            text = f"{text} - {self.description}"
        return text


NoticeListener = Callable[[Notice], None]


class NoticeLog:
    """Bounded in-memory notifier. Keeps the last `maxlen` notices and fans out to listeners."""

    def __init__(self, maxlen: int = 50) -> None:
        self._items: deque[Notice] = deque(maxlen=max(1, int(maxlen)))
        self._listeners: list[NoticeListener] = []

    def notify(self, notice: Notice) -> None:
        self._items.append(notice)
        logger.debug("notice %s: %s", notice.level.value, notice.title)
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("Notice listener crashed.")

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def items(self) -> list[Notice]:
        return list(self._items)

    @property
    def last(self) -> Notice | None:
        return self._items[-1] if self._items else None

    def of_level(self, level: NoticeLevel) -> list[Notice]:
        return [n for n in self._items if n.level == level]

    def clear(self) -> None:
        self._items.clear()
