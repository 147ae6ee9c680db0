"""Aggregate application use cases."""

from .notifications import (
    list_notification_history,
    notify_channel_invitation,
    notify_channel_message_mentions,
    notify_contact_request,
)

__all__ = [
    "list_notification_history",
    "notify_channel_invitation",
    "notify_channel_message_mentions",
    "notify_contact_request",
]
