"""Public helpers for emitting and reading domain notifications."""

from .events import (
    cancel_contact_request,
    notify_channel_invitation,
    notify_channel_message_mentions,
    notify_contact_request,
    respond_to_channel_invitation,
    respond_to_contact_request,
)
from .history import list_notification_history

__all__ = [
    "notify_contact_request",
    "cancel_contact_request",
    "respond_to_contact_request",
    "notify_channel_invitation",
    "respond_to_channel_invitation",
    "notify_channel_message_mentions",
    "list_notification_history",
]
