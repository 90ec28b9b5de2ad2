"""Canonical WebSocket event types - SINGLE SOURCE OF TRUTH.

Rules:
1. Fixed event names live in ``WSEvent``
2. State-change events are open ended: ``<kind>Changed`` for any kind
3. The only inbound event the server reacts to is ``ping``
"""

from enum import StrEnum


class WSEvent(StrEnum):
    """Fixed WebSocket event types."""

    # ═══════════════════════════════════════════════════════════════════
    # CONNECTION LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════

    CONNECTED = "connected"  # Greeting sent once after registration
    PING = "ping"  # Client keepalive probe
    PONG = "pong"  # Server keepalive reply

    # ═══════════════════════════════════════════════════════════════════
    # NOTIFICATIONS
    # ═══════════════════════════════════════════════════════════════════

    BANNER = "banner"  # User-facing toast/banner


class BannerSeverity(StrEnum):
    """Closed set of banner severities understood by the UIs."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class StateKind(StrEnum):
    """State kinds emitted by the bundled routes.

    The bus accepts any kind string; this list only names the ones the
    server itself produces.
    """

    SETTINGS = "settings"
    AUTHS = "auths"
    PROXIES = "proxies"
    CERTS = "certs"
    VALIDATION_RULES = "validationRules"


STATE_CHANGED_SUFFIX = "Changed"


def state_changed_event(kind: str) -> str:
    """Return the wire event name for a change of ``kind``."""

    return f"{kind}{STATE_CHANGED_SUFFIX}"


__all__ = [
    "BannerSeverity",
    "STATE_CHANGED_SUFFIX",
    "StateKind",
    "WSEvent",
    "state_changed_event",
]
