# src/taskflow/core/notify.py

"""
Transient status banner (success / error) with timed auto-dismiss.

A new notify() supersedes the previous notification and its pending dismissal.
Visibility is derived from a monotonic clock, so `current` is correct even
without an event loop; when a loop is running, a call_later timer also clears
the banner and tells subscribers to re-render.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)

DEFAULT_DISMISS_SECONDS = 3.0


class NotificationKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Notification:
    kind: NotificationKind
    message: str
    expires_at: float


Listener = Callable[[Notification | None], None]


class NotificationChannel:
    def __init__(
        self,
        *,
        dismiss_after: float = DEFAULT_DISMISS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._dismiss_after = float(dismiss_after)
        self._clock = clock
        self._active: Notification | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Notification | None:
        n = self._active
        if n is None:
            return None
        if self._clock() >= n.expires_at:
            self._active = None
            return None
        return n

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def success(self, message: str) -> Notification:
        return self.notify(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationKind.ERROR, message)

    def notify(self, kind: NotificationKind | str, message: str) -> Notification:
        kind = NotificationKind(kind)
        self._cancel_timer()

        n = Notification(kind=kind, message=message, expires_at=self._clock() + self._dismiss_after)
        self._active = n
        log = logger.warning if kind == NotificationKind.ERROR else logger.info
        log("Notify %s: %s", kind.value, message)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timer = loop.call_later(self._dismiss_after, self._dismiss, n)

        self._emit(n)
        return n

    def close(self) -> None:
        self._cancel_timer()

    def _dismiss(self, n: Notification) -> None:
        self._timer = None
        if self._active is not n:
            return
        self._active = None
        self._emit(None)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self, n: Notification | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(n)
            except Exception:
                logger.exception("Notification listener failed.")
