"""
User-visible notifications.

A capture command reports progress and outcome through a ``Notifier``:
``loading`` while AI or storage calls are in flight, then ``success`` or
``failure``. The base notifier records and logs; ``ConsoleNotifier`` also
echoes to the terminal for the CLI.
"""

import logging
import sys
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Optional, TextIO

logger = logging.getLogger("blinks.common.notify")

# Notifications kept in memory per notifier
MAX_HISTORY = 100


class NotificationStyle(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    LOADING = "loading"


@dataclass
class Notification:
    style: NotificationStyle
    title: str
    message: Optional[str] = None
    visible: bool = True

    def hide(self) -> None:
        self.visible = False


class Notifier:
    """Records the most recent notifications and writes them to the log."""

    def __init__(self, max_history: int = MAX_HISTORY):
        self.notifications: Deque[Notification] = deque(maxlen=max_history)

    def _emit(self, notification: Notification) -> Notification:
        self.notifications.append(notification)
        level = logging.WARNING if notification.style == NotificationStyle.FAILURE else logging.INFO
        if notification.message:
            logger.log(level, "%s: %s", notification.title, notification.message)
        else:
            logger.log(level, "%s", notification.title)
        self.show(notification)
        return notification

    def show(self, notification: Notification) -> None:
        """Hook for surfaces that render notifications"""

    def success(self, title: str, message: Optional[str] = None) -> Notification:
        return self._emit(Notification(NotificationStyle.SUCCESS, title, message))

    def failure(self, title: str, message: Optional[str] = None) -> Notification:
        return self._emit(Notification(NotificationStyle.FAILURE, title, message))

    def loading(self, title: str, message: Optional[str] = None) -> Notification:
        return self._emit(Notification(NotificationStyle.LOADING, title, message))

    @property
    def last_failure(self) -> Optional[Notification]:
        for notification in reversed(self.notifications):
            if notification.style == NotificationStyle.FAILURE:
                return notification
        return None


class ConsoleNotifier(Notifier):
    """Notifier for the command line: failures to stderr, the rest to stdout."""

    def __init__(self, out: TextIO = None, err: TextIO = None):
        super().__init__()
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def show(self, notification: Notification) -> None:
        text = notification.title
        if notification.message:
            text = f"{text}: {notification.message}"
        if notification.style == NotificationStyle.FAILURE:
            print(f"✗ {text}", file=self._err)
        elif notification.style == NotificationStyle.SUCCESS:
            print(f"✓ {text}", file=self._out)
        else:
            print(f"… {text}", file=self._out)
