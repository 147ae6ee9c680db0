"""Domain entity representing a notification delivered to a user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .notification import Notification


@dataclass
class UserNotification:
    """A decoded notification together with its delivery state."""

    id: int | None
    recipient_id: int
    notification: Notification
    is_read: bool = False
    response: bool | None = None
    created_at: datetime | None = None


__all__ = ["UserNotification"]
