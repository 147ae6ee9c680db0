"""SQLAlchemy models for persisted notifications."""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from collabnotify.infrastructure.database import Base
from collabnotify.utils import now_utc


class NotificationKindModel(Base):
    """Lookup table holding every notification kind ever written."""

    __tablename__ = "notification_kind"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)


class NotificationModel(Base):
    """Wire-encoded notification stored for a single recipient."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    recipient_id = Column(BigInteger, nullable=False, index=True)
    kind_id = Column(Integer, ForeignKey("notification_kind.id"), nullable=False)
    actor_id = Column(BigInteger, nullable=True)
    content = Column(Text, nullable=False, default="{}")
    is_read = Column(Boolean, nullable=False, default=False)
    response = Column(Boolean, nullable=True)

    kind = relationship("NotificationKindModel", lazy="joined")


__all__ = ["NotificationKindModel", "NotificationModel"]
