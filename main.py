"""Wave Client Server - Main Application Entry Point
This is the FastAPI application factory for the Wave Client backend.
Architecture Overview:
    - REST routes for settings and the auth/proxy/cert/validation-rule store
    - A single WebSocket endpoint pushing state-change events to every UI
    - Process-wide ConnectionRegistry + BroadcastBus created in the lifespan
Entry Points:
    - /health - Health check endpoint
    - /ws - State events WebSocket
    - /api/* - RESTful state endpoints
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.server import LOCAL_ORIGIN_REGEX
from core.config import Settings, load_settings
from core.connections import ConnectionRegistry
from core.exceptions import ServiceError
from core.http.errors import build_error_response
from core.logging import setup_logging
from core.observability import register_http_request_logging
from core.websocket import BroadcastBus
from features.events import websocket_router as events_websocket_router
from features.state import StateStore
from features.state import router as state_router

setup_logging()

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory returning a configured FastAPI instance."""

    app_settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Own the registry, bus and store for the lifetime of the process."""
        # Startup
        registry = ConnectionRegistry()
        store = StateStore(app_settings.data_dir)
        await asyncio.to_thread(store.initialise)

        app.state.settings = app_settings
        app.state.connection_registry = registry
        app.state.broadcast_bus = BroadcastBus(registry)
        app.state.state_store = store
        logger.info(
            "Wave Client Server ready (env=%s, ws=ws://%s:%d/ws)",
            app_settings.environment,
            app_settings.host,
            app_settings.port,
        )
        yield
        # Shutdown
        logger.info("Application shutting down...")
        registry.clear()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Wave Client Server",
        description="Shared state API with WebSocket change notifications",
        version="1.0.0",
        lifespan=lifespan,
    )

    if app_settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(app_settings.cors_origins) or ["*"],
            allow_credentials=bool(app_settings.cors_origins),
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )
    else:
        # Development: any localhost port (React/Vite/etc.) plus configured origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(app_settings.cors_origins),
            allow_origin_regex=LOCAL_ORIGIN_REGEX,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Return a structured API envelope for service layer failures."""

        code, payload = build_error_response(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content=payload)

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, object]:
        registry: ConnectionRegistry | None = getattr(request.app.state, "connection_registry", None)
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "clients": registry.size() if registry is not None else 0,
        }

    register_http_request_logging(app)

    app.include_router(state_router)
    app.include_router(events_websocket_router)

    logger.info("Application created with state and events routers")
    return app


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    runtime_settings = load_settings()
    uvicorn.run(
        create_app(runtime_settings),
        host=runtime_settings.host,
        port=runtime_settings.port,
        log_config=None,
    )
