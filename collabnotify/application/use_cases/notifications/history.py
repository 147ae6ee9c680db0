"""Read helpers for a user's stored notifications."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from collabnotify.config import get_settings
from collabnotify.domain.entities import UserNotification
from collabnotify.infrastructure.repositories import NotificationRepository


def list_notification_history(
    session: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    limit: int | None = None,
) -> Sequence[UserNotification]:
    """Return the newest decodable notifications for ``user_id``."""

    if limit is None:
        limit = get_settings().notification_history_limit
    return NotificationRepository(session).list_for_user(
        user_id, limit=limit, unread_only=unread_only
    )


__all__ = ["list_notification_history"]
