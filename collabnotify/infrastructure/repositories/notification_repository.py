"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Iterable

from pydantic import ValidationError
from sqlalchemy.orm import Query, Session

from collabnotify.domain.entities import Notification, UserNotification
from collabnotify.infrastructure.models import NotificationKindModel, NotificationModel
from collabnotify.infrastructure.notifications import (
    NotificationCodec,
    WireNotification,
    notification_codec,
)
from collabnotify.utils import ensure_utc, now_utc

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Store :class:`Notification` values as wire rows keyed by recipient."""

    def __init__(
        self, session: Session, *, codec: NotificationCodec = notification_codec
    ) -> None:
        self.session = session
        self.codec = codec
        self._kind_ids: dict[str, int] | None = None

    def initialize_kinds(self) -> dict[str, int]:
        """Insert any missing notification kinds and return the name to id map."""

        existing = {
            model.name: model.id
            for model in self.session.query(NotificationKindModel).all()
        }
        missing = [name for name in self.codec.list_variant_names() if name not in existing]
        if missing:
            logger.info("Registering notification kinds: %s", ", ".join(missing))
            models = [NotificationKindModel(name=name) for name in missing]
            self.session.add_all(models)
            self.session.commit()
            for model in models:
                existing[model.name] = model.id
        self._kind_ids = existing
        return dict(existing)

    def get(self, notification_id: int) -> UserNotification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[UserNotification]:
        """Return up to ``limit`` decodable notifications, newest first.

        Rows that cannot be decoded do not count towards ``limit``; further
        batches are read until the page is full or the rows run out.
        """

        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is None:
            return self._decodable(query.all())

        entities: list[UserNotification] = []
        offset = 0
        while len(entities) < limit:
            models = query.offset(offset).limit(limit).all()
            if not models:
                break
            offset += len(models)
            entities.extend(self._decodable(models))
        return entities[:limit]

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = 50
    ) -> Sequence[UserNotification]:
        return self.list_for_user(user_id, limit=limit, unread_only=True)

    def create(self, recipient_id: int, notification: Notification) -> UserNotification:
        wire = self.codec.encode(notification)
        model = NotificationModel(
            created_at=now_utc(),
            recipient_id=recipient_id,
            kind_id=self._kind_id(wire.kind),
            actor_id=wire.actor_id,
            content=wire.content,
            is_read=False,
            response=None,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return UserNotification(
            id=model.id,
            recipient_id=recipient_id,
            notification=notification,
            is_read=model.is_read,
            response=model.response,
            created_at=ensure_utc(model.created_at),
        )

    def find(
        self, recipient_id: int, notification: Notification
    ) -> UserNotification | None:
        """Return the newest stored copy of ``notification`` for ``recipient_id``."""

        model = (
            self._matching(recipient_id, notification)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .first()
        )
        return self._to_entity(model) if model else None

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> None:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return
        self.session.query(NotificationModel).filter(
            NotificationModel.id.in_(ids),
            NotificationModel.recipient_id == user_id,
        ).update({NotificationModel.is_read: True}, synchronize_session=False)
        self.session.commit()

    def respond(self, notification_id: int, *, response: bool) -> UserNotification | None:
        """Record the recipient's answer to ``notification_id`` and mark it read."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        model.response = response
        model.is_read = True
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def remove(self, recipient_id: int, notification: Notification) -> int:
        """Delete every stored copy of ``notification`` for ``recipient_id``."""

        deleted = self._matching(recipient_id, notification).delete(
            synchronize_session=False
        )
        self.session.commit()
        return deleted

    def _matching(self, recipient_id: int, notification: Notification) -> Query:
        wire = self.codec.encode(notification)
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id,
            NotificationModel.kind_id == self._kind_id(wire.kind),
            NotificationModel.content == wire.content,
        )
        if wire.actor_id is None:
            return query.filter(NotificationModel.actor_id.is_(None))
        return query.filter(NotificationModel.actor_id == wire.actor_id)

    def _kind_id(self, kind: str) -> int:
        if self._kind_ids is None or kind not in self._kind_ids:
            self.initialize_kinds()
        try:
            return self._kind_ids[kind]  # type: ignore[index]
        except KeyError as exc:
            msg = f"Notification kind '{kind}' is not registered"
            raise ValueError(msg) from exc

    def _decodable(self, models: Iterable[NotificationModel]) -> list[UserNotification]:
        entities = (self._to_entity(model) for model in models)
        return [entity for entity in entities if entity is not None]

    def _to_entity(self, model: NotificationModel) -> UserNotification | None:
        try:
            wire = WireNotification(
                kind=model.kind.name,
                actor_id=model.actor_id,
                content=model.content,
            )
        except ValidationError:
            wire = None
        notification = self.codec.decode(wire) if wire is not None else None
        if notification is None:
            logger.warning(
                "Skipping notification %s of kind '%s' that could not be decoded",
                model.id,
                model.kind.name,
            )
            return None
        return UserNotification(
            id=model.id,
            recipient_id=model.recipient_id,
            notification=notification,
            is_read=bool(model.is_read),
            response=model.response,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["NotificationRepository"]
