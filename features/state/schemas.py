"""Pydantic models for persisted application state."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from config.storage import ENCRYPTION_KEY_ENV_VAR


class AppSettings(BaseModel):
    """Application settings shared by the web UI and the editor extension.

    Unknown keys are preserved so newer clients can store settings this
    server does not model yet.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    save_files_location: str = Field(
        default="",
        alias="saveFilesLocation",
        description="Directory holding collections, environments and history",
    )
    max_redirects: int = Field(default=5, ge=0, alias="maxRedirects")
    request_timeout_seconds: int = Field(
        default=0,
        ge=0,
        alias="requestTimeoutSeconds",
        description="0 disables the timeout",
    )
    max_history_items: int = Field(default=10, ge=0, alias="maxHistoryItems")
    common_header_names: List[str] = Field(default_factory=list, alias="commonHeaderNames")
    encryption_key_env_var: str = Field(
        default=ENCRYPTION_KEY_ENV_VAR,
        alias="encryptionKeyEnvVar",
    )
    ignore_certificate_validation: bool = Field(
        default=False,
        alias="ignoreCertificateValidation",
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class StoreEntry(BaseModel):
    """One stored auth/proxy/cert/validation-rule entry.

    Only ``id`` is required; every other field is passed through as sent.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump()


__all__ = ["AppSettings", "StoreEntry"]
