"""Envelope models exchanged over the state-events WebSocket.

Every outbound frame has the same wire shape::

    {"type": str, "data": <optional>, "timestamp": <epoch ms>}

The variants below form a closed tagged union.  Each one owns its payload
shape, and ``encode_envelope`` dispatches on the variant rather than on the
structure of ``data``.  Inbound frames are decoded into an explicit
``InboundDecodeResult`` so callers never have to catch parsing errors.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from config.server import DEFAULT_GREETING_MESSAGE
from core.exceptions import ValidationError
from core.websocket.event_types import BannerSeverity, WSEvent, state_changed_event


def current_timestamp_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


class _EnvelopeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=current_timestamp_ms)

    @property
    def event_type(self) -> str:
        raise NotImplementedError

    def payload(self) -> Optional[Dict[str, Any]]:
        return None


class ConnectedData(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class BannerData(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: BannerSeverity
    message: str


class ConnectedEnvelope(_EnvelopeBase):
    """Greeting sent to a single connection right after registration."""

    tag: Literal["connected"] = "connected"
    data: ConnectedData

    @property
    def event_type(self) -> str:
        return WSEvent.CONNECTED.value

    def payload(self) -> Dict[str, Any]:
        return self.data.model_dump()


class PongEnvelope(_EnvelopeBase):
    """Keep-alive reply; carries no payload."""

    tag: Literal["pong"] = "pong"

    @property
    def event_type(self) -> str:
        return WSEvent.PONG.value


class BannerEnvelope(_EnvelopeBase):
    """User-facing banner/toast notification."""

    tag: Literal["banner"] = "banner"
    data: BannerData

    @property
    def event_type(self) -> str:
        return WSEvent.BANNER.value

    def payload(self) -> Dict[str, Any]:
        return self.data.model_dump(mode="json")


class EntityChangedEnvelope(_EnvelopeBase):
    """``<kind>Changed`` notification; carries no payload."""

    tag: Literal["entity_changed"] = "entity_changed"
    kind: str

    @property
    def event_type(self) -> str:
        return state_changed_event(self.kind)


Envelope = Union[ConnectedEnvelope, PongEnvelope, BannerEnvelope, EntityChangedEnvelope]


def build_banner(severity: str, message: str, timestamp: int | None = None) -> BannerEnvelope:
    """Build a banner envelope, rejecting severities outside ``BannerSeverity``."""

    try:
        resolved = BannerSeverity(severity)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in BannerSeverity)
        raise ValidationError(
            f"Unknown banner severity {severity!r}; expected one of: {allowed}",
            field="severity",
        ) from exc

    return BannerEnvelope(
        data=BannerData(severity=resolved, message=message),
        timestamp=current_timestamp_ms() if timestamp is None else timestamp,
    )


def build_state_change(kind: str, timestamp: int | None = None) -> EntityChangedEnvelope:
    """Build a ``<kind>Changed`` envelope for any non-empty kind."""

    if not isinstance(kind, str) or not kind.strip():
        raise ValidationError("State kind must be a non-empty string", field="kind")

    return EntityChangedEnvelope(
        kind=kind,
        timestamp=current_timestamp_ms() if timestamp is None else timestamp,
    )


def build_greeting(
    message: str | None = None,
    timestamp: int | None = None,
) -> ConnectedEnvelope:
    return ConnectedEnvelope(
        data=ConnectedData(message=message or DEFAULT_GREETING_MESSAGE),
        timestamp=current_timestamp_ms() if timestamp is None else timestamp,
    )


def build_pong(timestamp: int | None = None) -> PongEnvelope:
    return PongEnvelope(timestamp=current_timestamp_ms() if timestamp is None else timestamp)


def envelope_to_wire(envelope: Envelope) -> Dict[str, Any]:
    """Return the wire mapping for ``envelope``; ``data`` is omitted when empty."""

    wire: Dict[str, Any] = {"type": envelope.event_type}
    payload = envelope.payload()
    if payload is not None:
        wire["data"] = payload
    wire["timestamp"] = envelope.timestamp
    return wire


def encode_envelope(envelope: Envelope) -> str:
    """Serialise an envelope to compact JSON text."""

    return json.dumps(envelope_to_wire(envelope), ensure_ascii=False, separators=(",", ":"))


class PingMessage(BaseModel):
    """Inbound keep-alive probe. Fields other than ``type`` are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: Literal["ping"]


@dataclass(frozen=True)
class InboundDecodeResult:
    """Outcome of decoding one inbound frame."""

    message: Optional[PingMessage] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.message is not None


def decode_inbound(raw: str | bytes | None) -> InboundDecodeResult:
    """Decode an inbound frame without raising.

    Only ``{"type": "ping"}`` is recognised; anything else, including
    undecodable text, yields a failed result carrying a short reason.
    """

    if raw is None or raw == "" or raw == b"":
        return InboundDecodeResult(error="empty frame")

    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        return InboundDecodeResult(error=f"invalid JSON: {exc}")

    if not isinstance(data, dict):
        return InboundDecodeResult(error=f"expected JSON object, got {type(data).__name__}")

    message_type = data.get("type")
    if not isinstance(message_type, str):
        return InboundDecodeResult(error="missing type tag")

    if message_type != WSEvent.PING:
        return InboundDecodeResult(error=f"unsupported type {message_type!r}")

    return InboundDecodeResult(message=PingMessage.model_validate(data))


__all__ = [
    "BannerData",
    "BannerEnvelope",
    "ConnectedData",
    "ConnectedEnvelope",
    "EntityChangedEnvelope",
    "Envelope",
    "InboundDecodeResult",
    "PingMessage",
    "PongEnvelope",
    "build_banner",
    "build_greeting",
    "build_pong",
    "build_state_change",
    "current_timestamp_ms",
    "decode_inbound",
    "encode_envelope",
    "envelope_to_wire",
]
