"""Domain entities describing the notifications a user can receive.

Encoded notifications are stored durably, so the variant names below are part
of the persisted format. Never rename a variant or reuse its ``kind`` for a
different set of fields; when a rename is unavoidable, register the old name in
``LEGACY_KIND_ALIASES`` so previously stored rows keep decoding.

When a notification is initiated by a user, store that user's id in the
``actor_id`` field.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Annotated, Any, ClassVar, get_type_hints

from pydantic import Field, TypeAdapter

U64_MAX = 2**64 - 1

UserId = Annotated[int, Field(strict=True, ge=0, le=U64_MAX)]
ChannelId = Annotated[int, Field(strict=True, ge=0, le=U64_MAX)]
MessageId = Annotated[int, Field(strict=True, ge=0, le=U64_MAX)]


@dataclass(frozen=True)
class Notification:
    """Base class for every notification variant."""

    kind: ClassVar[str]

    def __post_init__(self) -> None:
        for name, adapter in _field_adapters(type(self)).items():
            adapter.validate_python(getattr(self, name))


@dataclass(frozen=True)
class ContactRequest(Notification):
    """A user asked to be added to the recipient's contacts."""

    kind: ClassVar[str] = "ContactRequest"

    actor_id: UserId


@dataclass(frozen=True)
class ContactRequestAccepted(Notification):
    """A user accepted the recipient's contact request."""

    kind: ClassVar[str] = "ContactRequestAccepted"

    actor_id: UserId


@dataclass(frozen=True)
class ChannelInvitation(Notification):
    """A user invited the recipient to join a channel."""

    kind: ClassVar[str] = "ChannelInvitation"

    actor_id: UserId
    channel_id: ChannelId


@dataclass(frozen=True)
class ChannelMessageMention(Notification):
    """A user mentioned the recipient in a channel message."""

    kind: ClassVar[str] = "ChannelMessageMention"

    actor_id: UserId
    channel_id: ChannelId
    message_id: MessageId


@lru_cache(maxsize=None)
def _field_adapters(variant: type[Notification]) -> dict[str, TypeAdapter[Any]]:
    hints = get_type_hints(variant, include_extras=True)
    return {field.name: TypeAdapter(hints[field.name]) for field in fields(variant)}


# Declaration order is the order exposed by ``list_variant_names``.
NOTIFICATION_VARIANTS: tuple[type[Notification], ...] = (
    ContactRequest,
    ContactRequestAccepted,
    ChannelInvitation,
    ChannelMessageMention,
)

# Former ``kind`` strings mapped to the current variant name they decode to.
LEGACY_KIND_ALIASES: dict[str, str] = {}


__all__ = [
    "ChannelId",
    "ChannelInvitation",
    "ChannelMessageMention",
    "ContactRequest",
    "ContactRequestAccepted",
    "LEGACY_KIND_ALIASES",
    "MessageId",
    "NOTIFICATION_VARIANTS",
    "Notification",
    "U64_MAX",
    "UserId",
]
