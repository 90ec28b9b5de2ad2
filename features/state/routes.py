"""REST routes for settings and stored auths, proxies, certs and validation rules.

Every successful save is followed by a ``<kind>Changed`` broadcast so that
other open UIs reload that slice of state.  Failed saves raise before the
broadcast and are turned into error envelopes by the handlers in ``main``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List

from fastapi import APIRouter, Depends

from core.pydantic_schemas import ok as api_ok
from core.websocket import BroadcastBus, StateKind
from features.events.dependencies import get_broadcast_bus
from features.state.dependencies import get_state_store
from features.state.schemas import AppSettings, StoreEntry
from features.state.service import StateStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["state"])


async def _loaded(store: StateStore, kind: StateKind, label: str) -> dict:
    data = await asyncio.to_thread(store.load, kind)
    return api_ok(f"{label} retrieved", data=data, meta={"kind": kind.value})


async def _saved(
    store: StateStore,
    bus: BroadcastBus,
    kind: StateKind,
    value: Any,
    label: str,
) -> dict:
    # Store I/O stays off the event loop serving /ws
    saved = await asyncio.to_thread(store.save, kind, value)
    delivered = await bus.emit_state_change(kind.value)
    logger.info("%s saved; notified %d client(s)", label, delivered)
    return api_ok(f"{label} saved", data=saved, meta={"kind": kind.value})


# ==================== Settings ====================


@router.get("/settings")
async def get_settings(store: StateStore = Depends(get_state_store)) -> dict:
    return await _loaded(store, StateKind.SETTINGS, "Settings")


@router.post("/settings")
async def save_settings(
    settings: AppSettings,
    store: StateStore = Depends(get_state_store),
    bus: BroadcastBus = Depends(get_broadcast_bus),
) -> dict:
    return await _saved(store, bus, StateKind.SETTINGS, settings, "Settings")


# ==================== Auths ====================


@router.get("/auths")
async def get_auths(store: StateStore = Depends(get_state_store)) -> dict:
    return await _loaded(store, StateKind.AUTHS, "Auths")


@router.post("/auths")
async def save_auths(
    auths: List[StoreEntry],
    store: StateStore = Depends(get_state_store),
    bus: BroadcastBus = Depends(get_broadcast_bus),
) -> dict:
    return await _saved(store, bus, StateKind.AUTHS, auths, "Auths")


# ==================== Proxies ====================


@router.get("/proxies")
async def get_proxies(store: StateStore = Depends(get_state_store)) -> dict:
    return await _loaded(store, StateKind.PROXIES, "Proxies")


@router.post("/proxies")
async def save_proxies(
    proxies: List[StoreEntry],
    store: StateStore = Depends(get_state_store),
    bus: BroadcastBus = Depends(get_broadcast_bus),
) -> dict:
    return await _saved(store, bus, StateKind.PROXIES, proxies, "Proxies")


# ==================== Certs ====================


@router.get("/certs")
async def get_certs(store: StateStore = Depends(get_state_store)) -> dict:
    return await _loaded(store, StateKind.CERTS, "Certs")


@router.post("/certs")
async def save_certs(
    certs: List[StoreEntry],
    store: StateStore = Depends(get_state_store),
    bus: BroadcastBus = Depends(get_broadcast_bus),
) -> dict:
    return await _saved(store, bus, StateKind.CERTS, certs, "Certs")


# ==================== Validation rules ====================


@router.get("/validation-rules")
async def get_validation_rules(store: StateStore = Depends(get_state_store)) -> dict:
    return await _loaded(store, StateKind.VALIDATION_RULES, "Validation rules")


@router.post("/validation-rules")
async def save_validation_rules(
    rules: List[StoreEntry],
    store: StateStore = Depends(get_state_store),
    bus: BroadcastBus = Depends(get_broadcast_bus),
) -> dict:
    return await _saved(store, bus, StateKind.VALIDATION_RULES, rules, "Validation rules")


__all__ = ["router"]
