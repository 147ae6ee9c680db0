"""Domain entities exposed by the application."""

from .notification import (
    LEGACY_KIND_ALIASES,
    NOTIFICATION_VARIANTS,
    U64_MAX,
    ChannelInvitation,
    ChannelMessageMention,
    ContactRequest,
    ContactRequestAccepted,
    Notification,
)
from .user_notification import UserNotification

__all__ = [
    "ChannelInvitation",
    "ChannelMessageMention",
    "ContactRequest",
    "ContactRequestAccepted",
    "LEGACY_KIND_ALIASES",
    "NOTIFICATION_VARIANTS",
    "Notification",
    "U64_MAX",
    "UserNotification",
]
