"""ORM models used by the application infrastructure."""

from .notification import NotificationKindModel, NotificationModel

__all__ = [
    "NotificationKindModel",
    "NotificationModel",
]
