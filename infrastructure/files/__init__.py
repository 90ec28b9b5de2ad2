"""Local filesystem persistence helpers."""

from .json_store import JsonFileStore

__all__ = ["JsonFileStore"]
