"""Locations of the persisted application state."""

from __future__ import annotations

from pathlib import Path

from core.utils.env import get_env

APP_DIR_NAME = ".waveclient"
SETTINGS_FILE_NAME = "settings.json"
STORE_DIR_NAME = "store"

# Entity kind -> file name inside the store directory
STORE_FILE_NAMES = {
    "auths": "auth.json",
    "proxies": "proxies.json",
    "certs": "certs.json",
    "validationRules": "validationRules.json",
}

ENCRYPTION_KEY_ENV_VAR = "WAVECLIENT_SECRET_KEY"


def get_data_dir() -> Path:
    """Return the root directory holding settings and store files."""

    raw = get_env("WAVE_DATA_DIR")
    if raw and raw.strip():
        return Path(raw.strip()).expanduser()
    return Path.home() / APP_DIR_NAME


__all__ = [
    "APP_DIR_NAME",
    "ENCRYPTION_KEY_ENV_VAR",
    "SETTINGS_FILE_NAME",
    "STORE_DIR_NAME",
    "STORE_FILE_NAMES",
    "get_data_dir",
]
