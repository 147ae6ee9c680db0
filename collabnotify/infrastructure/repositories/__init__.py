"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository

__all__ = [
    "NotificationRepository",
]
