"""Utility helpers to generate and persist domain notifications."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy.orm import Session

from collabnotify.domain.entities import (
    ChannelInvitation,
    ChannelMessageMention,
    ContactRequest,
    ContactRequestAccepted,
    Notification,
    UserNotification,
)
from collabnotify.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def _persist_notification(
    session: Session, *, recipient_id: int, notification: Notification
) -> UserNotification:
    saved = NotificationRepository(session).create(recipient_id, notification)
    logger.debug(
        "Stored %s notification %s for user %s",
        notification.kind,
        saved.id,
        recipient_id,
    )
    return saved


def _respond(
    session: Session,
    *,
    recipient_id: int,
    notification: Notification,
    accept: bool,
) -> UserNotification | None:
    repository = NotificationRepository(session)
    existing = repository.find(recipient_id, notification)
    if existing is None or existing.id is None:
        logger.info(
            "No %s notification found for user %s; response not recorded",
            notification.kind,
            recipient_id,
        )
        return None
    return repository.respond(existing.id, response=accept)


def notify_contact_request(
    session: Session, *, requester_id: int, recipient_id: int
) -> UserNotification:
    """Tell ``recipient_id`` that ``requester_id`` wants to become a contact."""

    return _persist_notification(
        session,
        recipient_id=recipient_id,
        notification=ContactRequest(actor_id=requester_id),
    )


def cancel_contact_request(
    session: Session, *, requester_id: int, recipient_id: int
) -> int:
    """Withdraw the pending contact request notification, if any."""

    removed = NotificationRepository(session).remove(
        recipient_id, ContactRequest(actor_id=requester_id)
    )
    if removed:
        logger.debug(
            "Removed %s contact request notification(s) for user %s", removed, recipient_id
        )
    return removed


def respond_to_contact_request(
    session: Session,
    *,
    requester_id: int,
    responder_id: int,
    accept: bool,
) -> UserNotification | None:
    """Record the answer to a contact request.

    The responder's ``ContactRequest`` notification receives the response. When
    the request is accepted the requester is notified in turn; the returned
    value is that new notification, or ``None`` when the request was declined.
    """

    _respond(
        session,
        recipient_id=responder_id,
        notification=ContactRequest(actor_id=requester_id),
        accept=accept,
    )
    if not accept:
        return None
    return _persist_notification(
        session,
        recipient_id=requester_id,
        notification=ContactRequestAccepted(actor_id=responder_id),
    )


def notify_channel_invitation(
    session: Session, *, inviter_id: int, invitee_id: int, channel_id: int
) -> UserNotification:
    """Tell ``invitee_id`` they were invited to ``channel_id``."""

    return _persist_notification(
        session,
        recipient_id=invitee_id,
        notification=ChannelInvitation(actor_id=inviter_id, channel_id=channel_id),
    )


def respond_to_channel_invitation(
    session: Session,
    *,
    inviter_id: int,
    invitee_id: int,
    channel_id: int,
    accept: bool,
) -> UserNotification | None:
    """Record whether ``invitee_id`` accepted the channel invitation."""

    return _respond(
        session,
        recipient_id=invitee_id,
        notification=ChannelInvitation(actor_id=inviter_id, channel_id=channel_id),
        accept=accept,
    )


def notify_channel_message_mentions(
    session: Session,
    *,
    sender_id: int,
    channel_id: int,
    message_id: int,
    mentioned_user_ids: Iterable[int],
) -> list[UserNotification]:
    """Notify every mentioned user once, skipping the message author."""

    notification = ChannelMessageMention(
        actor_id=sender_id, channel_id=channel_id, message_id=message_id
    )
    saved: list[UserNotification] = []
    seen: set[int] = set()
    for user_id in mentioned_user_ids:
        if user_id == sender_id or user_id in seen:
            continue
        seen.add(user_id)
        saved.append(
            _persist_notification(
                session, recipient_id=user_id, notification=notification
            )
        )
    return saved


__all__ = [
    "notify_contact_request",
    "cancel_contact_request",
    "respond_to_contact_request",
    "notify_channel_invitation",
    "respond_to_channel_invitation",
    "notify_channel_message_mentions",
]
