"""State store service backing the settings and store routes.

``settings.json`` always lives in the data directory.  Auths, proxies, certs
and validation rules live in ``<saveFilesLocation>/store/`` so that they move
with the user's chosen save location.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import ValidationError as PydanticValidationError

from config.storage import SETTINGS_FILE_NAME, STORE_DIR_NAME, STORE_FILE_NAMES
from core.exceptions import NotFoundError, ValidationError
from core.websocket.event_types import StateKind
from infrastructure.files import JsonFileStore

from .schemas import AppSettings, StoreEntry

logger = logging.getLogger(__name__)

STATE_KINDS: tuple[str, ...] = tuple(kind.value for kind in StateKind)


def _first_error(exc: PydanticValidationError) -> tuple[str, str | None]:
    errors = exc.errors()
    if not errors:
        return str(exc), None
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or None
    return first.get("msg", str(exc)), location


class StateStore:
    """Load and save persisted state per entity kind."""

    def __init__(self, data_dir: Path | str) -> None:
        self._files = JsonFileStore(Path(data_dir))
        self._cached_settings: AppSettings | None = None

    @property
    def data_dir(self) -> Path:
        return self._files.root

    def initialise(self) -> None:
        """Create the data directory and warm the settings cache."""

        self._files.ensure_ready()
        settings = self.load_settings()
        logger.info("State store ready (data_dir=%s, store_dir=%s)", self.data_dir, self.store_dir(settings))

    # ==================== Settings ====================

    def default_settings(self) -> AppSettings:
        return AppSettings(save_files_location=str(self.data_dir))

    def load_settings(self) -> AppSettings:
        """Read settings from disk, merged over defaults, and refresh the cache."""

        saved = self._files.read(SETTINGS_FILE_NAME, {})
        if not isinstance(saved, dict):
            logger.warning("Ignoring %s: expected an object, got %s", SETTINGS_FILE_NAME, type(saved).__name__)
            saved = {}

        merged = {**self.default_settings().to_wire(), **saved}
        try:
            self._cached_settings = AppSettings.model_validate(merged)
        except PydanticValidationError as exc:
            logger.warning("Stored settings are invalid, using defaults: %s", exc)
            self._cached_settings = self.default_settings()
        return self._cached_settings

    def get_settings(self) -> AppSettings:
        """Return cached settings, loading from disk only when the cache is empty."""

        if self._cached_settings is not None:
            return self._cached_settings
        return self.load_settings()

    def save_settings(self, settings: AppSettings) -> AppSettings:
        self._files.write(SETTINGS_FILE_NAME, settings.to_wire())
        self._cached_settings = settings
        return settings

    def invalidate_cache(self) -> None:
        self._cached_settings = None

    # ==================== Store entries ====================

    def store_dir(self, settings: AppSettings | None = None) -> Path:
        resolved = settings or self.get_settings()
        base = Path(resolved.save_files_location).expanduser() if resolved.save_files_location else self.data_dir
        return base / STORE_DIR_NAME

    def _store_files(self) -> JsonFileStore:
        return JsonFileStore(self.store_dir())

    def load_entries(self, kind: str) -> List[Dict[str, Any]]:
        file_name = self._store_file_name(kind)
        entries = self._store_files().read(file_name, [])
        if not isinstance(entries, list):
            logger.warning("Ignoring %s: expected a list, got %s", file_name, type(entries).__name__)
            return []
        return [entry for entry in entries if isinstance(entry, dict)]

    def save_entries(self, kind: str, entries: Sequence[StoreEntry]) -> List[Dict[str, Any]]:
        file_name = self._store_file_name(kind)
        payload = [entry.to_wire() for entry in entries]
        self._store_files().write(file_name, payload)
        return payload

    # ==================== Generic access ====================

    def load(self, kind: str) -> Any:
        """Return the wire representation of state ``kind``."""

        if kind == StateKind.SETTINGS:
            return self.get_settings().to_wire()
        return self.load_entries(kind)

    def save(self, kind: str, value: Any) -> Any:
        """Validate and persist ``value`` as state ``kind``; return what was stored."""

        if kind == StateKind.SETTINGS:
            settings = value if isinstance(value, AppSettings) else self._parse_settings(value)
            return self.save_settings(settings).to_wire()

        self._store_file_name(kind)
        return self.save_entries(kind, self._parse_entries(kind, value))

    def _store_file_name(self, kind: str) -> str:
        try:
            return STORE_FILE_NAMES[kind]
        except KeyError:
            raise NotFoundError(f"Unknown state kind: {kind}", resource=kind) from None

    @staticmethod
    def _parse_settings(value: Any) -> AppSettings:
        if not isinstance(value, Mapping):
            raise ValidationError("Settings must be a JSON object", field="settings")
        try:
            return AppSettings.model_validate(dict(value))
        except PydanticValidationError as exc:
            message, location = _first_error(exc)
            raise ValidationError(f"Invalid settings: {message}", field=location) from exc

    @staticmethod
    def _parse_entries(kind: str, value: Any) -> List[StoreEntry]:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f"{kind} must be a JSON array", field=kind)

        entries: List[StoreEntry] = []
        for index, item in enumerate(value):
            if isinstance(item, StoreEntry):
                entries.append(item)
                continue
            try:
                entries.append(StoreEntry.model_validate(item))
            except PydanticValidationError as exc:
                message, _ = _first_error(exc)
                raise ValidationError(f"Invalid {kind} entry at index {index}: {message}", field=kind) from exc
        return entries


__all__ = ["STATE_KINDS", "StateStore"]
