"""Centralised logging configuration for the Wave Client server.

Configured once per process via ``setup_logging()`` (called on import of
``main``).  Levels and the optional rotating log file are driven by
``WAVE_LOG_*`` environment variables.
"""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, List, Tuple

from core.utils.env import get_bool_env, get_env

# Paths in log lines are shown relative to the project root
_PROJECT_ROOT = str(Path(__file__).resolve().parents[1]) + "/"
_ORIGINAL_LOG_RECORD_FACTORY = logging.getLogRecordFactory()
_record_factory_installed = False
_configured = False

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = (
    "websockets",
    "websockets.client",
    "websockets.server",
    "websockets.protocol",
    "httpcore",
    "httpx",
    "h11",
)


class _WebsocketProtocolFilter(logging.Filter):
    """Drop DEBUG/INFO records emitted from inside the websockets package."""

    def filter(self, record: logging.LogRecord) -> bool:
        if "websockets" in record.pathname:
            return record.levelno >= logging.WARNING
        return True


class _NoPingPongFilter(logging.Filter):
    """Drop protocol-level keepalive chatter logged by uvicorn."""

    _MARKERS = (
        "% sending keepalive ping",
        "> PING",
        "< PONG",
        "keepalive pong",
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(marker in message for marker in self._MARKERS)


def _level(env_key: str, fallback: str) -> str:
    value = (get_env(env_key) or "").strip().upper()
    if value and isinstance(getattr(logging, value, None), int):
        return value
    return fallback


def _install_record_factory() -> None:
    """Expose ``shortpathname`` on every record for the log format."""

    global _record_factory_installed
    if _record_factory_installed:
        return

    def factory(*args, **kwargs):
        record = _ORIGINAL_LOG_RECORD_FACTORY(*args, **kwargs)
        pathname = record.pathname or ""
        record.shortpathname = pathname[len(_PROJECT_ROOT):] if pathname.startswith(_PROJECT_ROOT) else pathname
        return record

    logging.setLogRecordFactory(factory)
    _record_factory_installed = True


def _log_format() -> str:
    timestamp = "%(asctime)s.%(msecs)03d" if get_bool_env("WAVE_LOG_TIME_MS") else "%(asctime)s"
    return f"{timestamp} %(levelname)s [%(shortpathname)s:%(lineno)d] - %(message)s"


def _build_handlers(root_level: str) -> Tuple[Dict[str, Any], List[str]]:
    """Return dictConfig handlers plus the names attached to the root logger."""

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": _level("WAVE_LOG_CONSOLE_LEVEL", root_level),
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    }

    log_dir = get_env("WAVE_LOG_DIR")
    if not log_dir:
        return handlers, ["console"]

    directory = Path(log_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    handlers["file"] = {
        "class": "logging.handlers.TimedRotatingFileHandler",
        "level": _level("WAVE_LOG_FILE_LEVEL", root_level),
        "formatter": "standard",
        "filename": str(directory / (get_env("WAVE_LOG_FILE") or "server.log")),
        "when": "midnight",
        "backupCount": int(get_env("WAVE_LOG_RETENTION") or "7"),
        "encoding": "utf-8",
    }
    return handlers, ["console", "file"]


def setup_logging(force: bool = False) -> None:
    """Configure root and uvicorn loggers; repeated calls are no-ops unless ``force``."""

    global _configured
    if _configured and not force:
        return

    root_level = _level("WAVE_LOG_LEVEL", "INFO")
    handlers, handler_names = _build_handlers(root_level)

    _install_record_factory()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": _log_format(), "datefmt": _DATE_FORMAT}},
            "handlers": handlers,
            "root": {"level": root_level, "handlers": handler_names},
            "loggers": {
                "uvicorn": {"level": "WARNING", "handlers": handler_names, "propagate": False},
                "uvicorn.error": {"level": "WARNING", "handlers": handler_names, "propagate": False},
                "uvicorn.access": {
                    "level": _level("WAVE_ACCESS_LOG_LEVEL", "WARNING"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }
    )
    logging.captureWarnings(True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    uvicorn_error = logging.getLogger("uvicorn.error")
    uvicorn_error.addFilter(_NoPingPongFilter())
    uvicorn_error.addFilter(_WebsocketProtocolFilter())

    _configured = True


__all__ = ["setup_logging"]
