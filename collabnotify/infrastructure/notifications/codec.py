"""Conversion between notification variants and their wire representation."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from collabnotify.domain.entities import (
    LEGACY_KIND_ALIASES,
    NOTIFICATION_VARIANTS,
    U64_MAX,
    Notification,
)

from .wire import WireNotification

KIND = "kind"
ACTOR_ID = "actor_id"


class NotificationCodec:
    """Encode notifications to wire triples and decode them back.

    Decoding goes through an explicit table keyed by ``kind``. Legacy names
    listed in ``aliases`` resolve to the current variant so rows written before
    a rename stay readable.
    """

    def __init__(
        self,
        variants: Iterable[type[Notification]],
        *,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._variants: dict[str, type[Notification]] = {}
        self._adapters: dict[type[Notification], TypeAdapter[Any]] = {}
        for variant in variants:
            kind = getattr(variant, KIND, None)
            if not isinstance(kind, str) or not kind:
                msg = f"Notification variant {variant.__name__} does not define a kind"
                raise ValueError(msg)
            if kind in self._variants:
                msg = f"Duplicate notification kind '{kind}'"
                raise ValueError(msg)
            self._variants[kind] = variant
            self._adapters[variant] = TypeAdapter(variant)

        self._aliases: dict[str, str] = {}
        for legacy_kind, current_kind in (aliases or {}).items():
            if legacy_kind in self._variants:
                msg = f"Alias '{legacy_kind}' shadows an existing notification kind"
                raise ValueError(msg)
            if current_kind not in self._variants:
                msg = f"Alias '{legacy_kind}' targets unknown notification kind '{current_kind}'"
                raise ValueError(msg)
            self._aliases[legacy_kind] = current_kind

        self._variant_names = tuple(self._variants)

    def encode(self, notification: Notification) -> WireNotification:
        """Return the wire representation of ``notification``."""

        payload = self._to_tagged_mapping(notification)

        kind = payload.pop(KIND, None)
        if not isinstance(kind, str):  # pragma: no cover - guarded by _to_tagged_mapping
            raise RuntimeError("Serialized notification is missing its kind")

        actor_id = None
        if _is_u64(payload.get(ACTOR_ID)):
            actor_id = payload.pop(ACTOR_ID)

        return WireNotification(
            kind=kind,
            actor_id=actor_id,
            content=json.dumps(payload, separators=(",", ":")),
        )

    def decode(self, wire: WireNotification) -> Notification | None:
        """Return the notification described by ``wire`` or ``None``.

        Unknown kinds, content that is not a JSON object and payloads that do
        not match the named variant all yield ``None``.
        """

        try:
            payload = json.loads(wire.content)
        except (TypeError, ValueError, RecursionError):
            return None
        if not isinstance(payload, dict):
            return None

        payload[KIND] = wire.kind
        if wire.actor_id is not None:
            payload[ACTOR_ID] = wire.actor_id

        variant = self.resolve_variant(wire.kind)
        if variant is None:
            return None
        try:
            return self._adapters[variant].validate_python(payload)
        except ValidationError:
            return None

    def resolve_variant(self, kind: str) -> type[Notification] | None:
        """Return the variant registered for ``kind``, following aliases."""

        current_kind = self._aliases.get(kind, kind)
        return self._variants.get(current_kind)

    def is_known_kind(self, kind: str) -> bool:
        """Return ``True`` when ``kind`` names a current or legacy variant."""

        return self.resolve_variant(kind) is not None

    def list_variant_names(self) -> tuple[str, ...]:
        """Return every current kind in declaration order."""

        return self._variant_names

    def _to_tagged_mapping(self, notification: Notification) -> dict[str, Any]:
        variant = type(notification)
        if self._variants.get(getattr(variant, KIND, None)) is not variant:
            msg = f"Unsupported notification type: {variant.__name__}"
            raise TypeError(msg)
        fields = self._adapters[variant].dump_python(notification, mode="json")
        return {KIND: variant.kind, **fields}


def _is_u64(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= U64_MAX
    )


notification_codec = NotificationCodec(
    NOTIFICATION_VARIANTS, aliases=LEGACY_KIND_ALIASES
)


def encode_notification(notification: Notification) -> WireNotification:
    """Public helper that delegates to the shared codec instance."""

    return notification_codec.encode(notification)


def decode_notification(wire: WireNotification) -> Notification | None:
    """Public helper that delegates to the shared codec instance."""

    return notification_codec.decode(wire)


def list_variant_names() -> tuple[str, ...]:
    """Return every notification kind known to the shared codec."""

    return notification_codec.list_variant_names()


__all__ = [
    "ACTOR_ID",
    "KIND",
    "NotificationCodec",
    "decode_notification",
    "encode_notification",
    "list_variant_names",
    "notification_codec",
]
