# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Out-of-band notifications shown next to, never inside, the diagnostic list."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .logging import fail, warn


class NotificationLevel(str, Enum):
    """Notification severities supported by editor notification areas."""

    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A message for the host's notification area."""

    model_config = ConfigDict(frozen=True)

    level: NotificationLevel
    headline: str
    detail: str = ""
    dismissable: bool = True


@runtime_checkable
class Notifier(Protocol):
    """Receive notifications without blocking the caller."""

    def notify(self, notification: Notification) -> None:
        """Deliver ``notification`` to the host."""
        ...


class CollectingNotifier:
    """Keep notifications in memory for hosts that render them later."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def drain(self) -> list[Notification]:
        """Return and forget every collected notification."""

        drained, self.notifications = self.notifications, []
        return drained


class ConsoleNotifier:
    """Print notifications through the rich logging helpers."""

    def __init__(self, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
        self._use_emoji = use_emoji
        self._use_color = use_color

    def notify(self, notification: Notification) -> None:
        emit = fail if notification.level is NotificationLevel.ERROR else warn
        emit(notification.headline, use_emoji=self._use_emoji, use_color=self._use_color)
        for line in notification.detail.splitlines():
            emit(f"  {line}", use_emoji=False, use_color=self._use_color)


__all__ = [
    "CollectingNotifier",
    "ConsoleNotifier",
    "Notification",
    "NotificationLevel",
    "Notifier",
]
