"""WebSocket event types, envelopes and the broadcast bus."""

from .broadcast import BroadcastBus
from .envelopes import (
    BannerEnvelope,
    ConnectedEnvelope,
    EntityChangedEnvelope,
    Envelope,
    InboundDecodeResult,
    PongEnvelope,
    build_banner,
    build_greeting,
    build_pong,
    build_state_change,
    current_timestamp_ms,
    decode_inbound,
    encode_envelope,
)
from .event_types import BannerSeverity, StateKind, WSEvent, state_changed_event

__all__ = [
    "BannerEnvelope",
    "BannerSeverity",
    "BroadcastBus",
    "ConnectedEnvelope",
    "EntityChangedEnvelope",
    "Envelope",
    "InboundDecodeResult",
    "PongEnvelope",
    "StateKind",
    "WSEvent",
    "build_banner",
    "build_greeting",
    "build_pong",
    "build_state_change",
    "current_timestamp_ms",
    "decode_inbound",
    "encode_envelope",
    "state_changed_event",
]
