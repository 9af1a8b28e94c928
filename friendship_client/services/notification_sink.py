"""Single-slot holder for the latest user-facing action outcome."""
from __future__ import annotations

import logging
from typing import Callable

from ..schemas import Notification, NotificationKind

logger = logging.getLogger(__name__)

NotificationListener = Callable[[Notification], None]


class NotificationSink:
    """Keeps only the most recent notification; every new one overwrites it.

    Listeners see each notification as it is emitted, so a consumer that
    wants history can keep its own.
    """

    def __init__(self) -> None:
        self._current: Notification | None = None
        self._listeners: list[NotificationListener] = []

    @property
    def current(self) -> Notification | None:
        return self._current

    def notify(self, message: str, kind: NotificationKind) -> Notification:
        notification = Notification(message=message, kind=NotificationKind(kind))
        self._current = notification
        logger.debug("Notification | kind=%s message=%s", notification.kind, notification.message)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationKind.SUCCESS)

    def info(self, message: str) -> Notification:
        return self.notify(message, NotificationKind.INFO)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationKind.ERROR)

    def clear(self) -> None:
        self._current = None

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


__all__ = ["NotificationSink", "NotificationListener"]
