"""Transient success/error notices.

Only one notice is shown at a time: showing a new one replaces the old
one and cancels its timer. A notice dismisses itself after a fixed
interval unless something replaced or dismissed it first.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

# scheduler(delay_seconds, callback) -> cancel
Scheduler = Callable[[float, Callable[[], None]], Callable[[], None]]


def threading_scheduler(delay_s: float, callback: Callable[[], None]) -> Callable[[], None]:
    """Run ``callback`` on a daemon timer thread after ``delay_s`` seconds."""
    timer = threading.Timer(delay_s, callback)
    timer.daemon = True
    timer.start()
    return timer.cancel


class NoticeKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    message: str
    kind: NoticeKind
    created_at: datetime = field(default_factory=datetime.now)


class NoticeBoard:
    """Holds the single current notice and notifies listeners on change."""

    def __init__(self, duration_s: float = 5.0, scheduler: Optional[Scheduler] = None) -> None:
        self._duration_s = duration_s
        self._scheduler = scheduler or threading_scheduler
        self._current: Optional[Notice] = None
        self._cancel: Optional[Callable[[], None]] = None
        self._listeners: List[Callable[[Optional[Notice]], None]] = []

    @property
    def current(self) -> Optional[Notice]:
        return self._current

    def set_scheduler(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler

    def subscribe(self, listener: Callable[[Optional[Notice]], None]) -> None:
        self._listeners.append(listener)

    def show_success(self, message: str) -> Notice:
        return self.show(message, NoticeKind.SUCCESS)

    def show_error(self, message: str) -> Notice:
        return self.show(message, NoticeKind.ERROR)

    def show(self, message: str, kind: NoticeKind) -> Notice:
        self._cancel_timer()
        notice = Notice(message, kind)
        self._current = notice
        if kind is NoticeKind.ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        self._notify()
        self._cancel = self._scheduler(self._duration_s, lambda: self._expire(notice))
        return notice

    def dismiss(self) -> None:
        self._cancel_timer()
        if self._current is not None:
            self._current = None
            self._notify()

    def _expire(self, notice: Notice) -> None:
        # A late timer must not remove a newer notice
        if self._current is notice:
            self._cancel = None
            self._current = None
            self._notify()

    def _cancel_timer(self) -> None:
        if self._cancel is not None:
            self._cancel()
            self._cancel = None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)
