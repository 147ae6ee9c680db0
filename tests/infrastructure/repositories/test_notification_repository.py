"""Persistence tests for :class:`NotificationRepository` on SQLite."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from collabnotify.domain.entities import (
    ChannelInvitation,
    ChannelMessageMention,
    ContactRequest,
    ContactRequestAccepted,
)
from collabnotify.infrastructure.database import Base, initialize_database
from collabnotify.infrastructure.models import NotificationKindModel, NotificationModel
from collabnotify.infrastructure.repositories import NotificationRepository


@pytest.fixture()
def session():
    """Return a session bound to a fresh in-memory database."""

    engine = create_engine("sqlite://")
    initialize_database(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _add_raw_row(session: Session, *, kind: str, actor_id, content: str, recipient_id: int = 1) -> int:
    kind_model = session.query(NotificationKindModel).filter_by(name=kind).one_or_none()
    if kind_model is None:
        kind_model = NotificationKindModel(name=kind)
        session.add(kind_model)
        session.flush()
    model = NotificationModel(
        recipient_id=recipient_id,
        kind_id=kind_model.id,
        actor_id=actor_id,
        content=content,
    )
    session.add(model)
    session.commit()
    return model.id


def test_initialize_kinds_is_idempotent(session: Session) -> None:
    repository = NotificationRepository(session)

    first = repository.initialize_kinds()
    second = NotificationRepository(session).initialize_kinds()

    assert list(first) == [
        "ContactRequest",
        "ContactRequestAccepted",
        "ChannelInvitation",
        "ChannelMessageMention",
    ]
    assert first == second
    assert session.query(NotificationKindModel).count() == 4


def test_create_stores_wire_columns(session: Session) -> None:
    """Rows hold the promoted actor id and the residual JSON content."""

    saved = NotificationRepository(session).create(
        5, ChannelInvitation(actor_id=0, channel_id=100)
    )

    model = session.get(NotificationModel, saved.id)
    assert model.kind.name == "ChannelInvitation"
    assert model.actor_id == 0
    assert model.content == '{"channel_id":100}'
    assert model.recipient_id == 5
    assert saved.is_read is False
    assert saved.response is None
    assert saved.created_at is not None and saved.created_at.tzinfo is not None


def test_list_for_user_returns_newest_first(session: Session) -> None:
    repository = NotificationRepository(session)
    repository.create(1, ContactRequest(actor_id=2))
    repository.create(1, ChannelMessageMention(actor_id=2, channel_id=3, message_id=4))
    repository.create(7, ContactRequestAccepted(actor_id=1))

    notifications = repository.list_for_user(1)

    assert [item.notification for item in notifications] == [
        ChannelMessageMention(actor_id=2, channel_id=3, message_id=4),
        ContactRequest(actor_id=2),
    ]
    assert repository.list_for_user(1, limit=1)[0].notification.kind == "ChannelMessageMention"


def test_undecodable_rows_are_skipped(session: Session, caplog: pytest.LogCaptureFixture) -> None:
    """Rows written by newer versions or corrupted rows do not break listing."""

    repository = NotificationRepository(session)
    repository.create(1, ContactRequest(actor_id=2))
    _add_raw_row(session, kind="ProjectShared", actor_id=3, content='{"project_id":1}')
    _add_raw_row(session, kind="ChannelInvitation", actor_id=3, content="[1]")
    _add_raw_row(session, kind="ChannelInvitation", actor_id=-1, content='{"channel_id":1}')

    with caplog.at_level(logging.WARNING):
        notifications = repository.list_for_user(1)

    assert [item.notification for item in notifications] == [ContactRequest(actor_id=2)]
    assert "ProjectShared" in caplog.text
    assert caplog.text.count("could not be decoded") == 3


def test_mark_as_read_only_touches_own_notifications(session: Session) -> None:
    repository = NotificationRepository(session)
    mine = repository.create(1, ContactRequest(actor_id=2))
    theirs = repository.create(2, ContactRequest(actor_id=1))

    repository.mark_as_read([mine.id, theirs.id, None], user_id=1)

    assert repository.get(mine.id).is_read is True
    assert repository.get(theirs.id).is_read is False
    assert repository.list_unread_for_user(1) == []
    assert len(repository.list_unread_for_user(2)) == 1


def test_find_and_respond(session: Session) -> None:
    repository = NotificationRepository(session)
    repository.create(1, ChannelInvitation(actor_id=2, channel_id=3))
    repository.create(1, ChannelInvitation(actor_id=2, channel_id=4))

    found = repository.find(1, ChannelInvitation(actor_id=2, channel_id=4))
    assert found is not None
    assert found.notification == ChannelInvitation(actor_id=2, channel_id=4)
    assert repository.find(1, ChannelInvitation(actor_id=9, channel_id=4)) is None
    assert repository.find(2, ChannelInvitation(actor_id=2, channel_id=4)) is None

    answered = repository.respond(found.id, response=True)

    assert answered.response is True
    assert answered.is_read is True


def test_respond_to_missing_notification_raises(session: Session) -> None:
    with pytest.raises(ValueError):
        NotificationRepository(session).respond(404, response=False)


def test_remove_deletes_matching_rows(session: Session) -> None:
    repository = NotificationRepository(session)
    repository.create(1, ContactRequest(actor_id=2))
    repository.create(1, ContactRequest(actor_id=2))
    repository.create(1, ContactRequest(actor_id=3))

    removed = repository.remove(1, ContactRequest(actor_id=2))

    assert removed == 2
    assert [item.notification for item in repository.list_for_user(1)] == [
        ContactRequest(actor_id=3)
    ]


def test_deeply_nested_content_is_skipped(session: Session, caplog: pytest.LogCaptureFixture) -> None:
    """Content too deep to parse is treated like any other undecodable row."""

    repository = NotificationRepository(session)
    repository.create(1, ChannelInvitation(actor_id=2, channel_id=3))
    _add_raw_row(
        session,
        kind="ChannelInvitation",
        actor_id=2,
        content='{"channel_id":' + "[" * 100_000 + "]" * 100_000 + "}",
    )

    with caplog.at_level(logging.WARNING):
        notifications = repository.list_for_user(1)

    assert [item.notification for item in notifications] == [
        ChannelInvitation(actor_id=2, channel_id=3)
    ]
    assert "could not be decoded" in caplog.text


def test_limit_counts_only_decodable_rows(session: Session) -> None:
    """Undecodable rows do not shrink a page when older rows remain."""

    repository = NotificationRepository(session)
    repository.create(1, ContactRequest(actor_id=2))
    repository.create(1, ContactRequest(actor_id=3))
    _add_raw_row(session, kind="ProjectShared", actor_id=4, content="{}")
    _add_raw_row(session, kind="ContactRequest", actor_id=5, content="[]")

    page = repository.list_for_user(1, limit=2)

    assert [item.notification for item in page] == [
        ContactRequest(actor_id=3),
        ContactRequest(actor_id=2),
    ]
    assert [item.notification for item in repository.list_for_user(1, limit=1)] == [
        ContactRequest(actor_id=3)
    ]
    assert repository.list_for_user(1, limit=0) == []
