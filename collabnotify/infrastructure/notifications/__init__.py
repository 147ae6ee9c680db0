"""Notification wire helpers for the infrastructure layer."""

from .codec import (
    NotificationCodec,
    decode_notification,
    encode_notification,
    list_variant_names,
    notification_codec,
)
from .wire import WireNotification

__all__ = [
    "NotificationCodec",
    "notification_codec",
    "encode_notification",
    "decode_notification",
    "list_variant_names",
    "WireNotification",
]
