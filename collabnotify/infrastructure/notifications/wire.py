"""Pydantic model describing the flattened notification wire message."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from collabnotify.domain.entities import U64_MAX


class WireNotification(BaseModel):
    """Transport and storage representation of a notification.

    ``kind`` names the variant, ``actor_id`` carries the initiating user when
    the variant has one and ``content`` holds every other field as a JSON
    object string.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    actor_id: int | None = Field(default=None, strict=True, ge=0, le=U64_MAX)
    content: str = "{}"


__all__ = ["WireNotification"]
