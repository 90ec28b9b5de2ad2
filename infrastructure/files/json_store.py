"""JSON file persistence used by the state store.

Reads fall back to a caller-supplied default when the file is missing or
unreadable.  Writes go to a temporary sibling first and are moved into place
with ``os.replace`` so a reader never observes a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JsonFileStore:
    """Read and write JSON documents below ``root``."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def path_for(self, relative: str | Path) -> Path:
        return self.root / relative

    def ensure_ready(self) -> None:
        """Create the root directory if missing."""

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to create data directory {self.root}: {exc}", operation="init") from exc

    def read(self, relative: str | Path, default: Any) -> Any:
        """Return the decoded document, or ``default`` if it cannot be read."""

        path = self.path_for(relative)
        if not path.exists():
            return default

        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:  # pragma: no cover - raced deletion
            return default
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read %s, using defaults: %s", path, exc)
            return default

    def write(self, relative: str | Path, data: Any) -> None:
        """Atomically replace the document at ``relative`` with ``data``."""

        path = self.path_for(relative)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {path}: {exc}", operation="write") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


__all__ = ["JsonFileStore"]
