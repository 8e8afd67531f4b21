from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.routing import WebSocketRoute

from okey.messaging.router import MessageRouter
from okey.server.settings import OkeyServerSettings
from okey.server.websocket import websocket_endpoint
from okey.session.manager import SessionManager
from okey.session.room_store import RoomStore
from shared.dal import InMemoryKeyValueStore
from shared.db import Database, SqliteKeyValueStore
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.websockets import WebSocket

    from shared.dal.kv_store import KeyValueStore


def _build_store(settings: OkeyServerSettings) -> tuple[KeyValueStore, Database | None]:
    """Create the configured key-value backend. Returns the Database when one was opened."""
    if settings.store_backend == "sqlite":
        db = Database(settings.database_path)
        db.connect()
        return SqliteKeyValueStore(db), db
    return InMemoryKeyValueStore(), None


def create_app(
    settings: OkeyServerSettings | None = None,
    session_manager: SessionManager | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = OkeyServerSettings()

    # When the app creates its own SessionManager, it owns the DB lifecycle.
    owned_db: Database | None = None

    if session_manager is None:
        kv, owned_db = _build_store(settings)
        game_settings = settings.game_settings()
        session_manager = SessionManager(RoomStore(kv, game_settings), settings=game_settings)

    if message_router is None:
        message_router = MessageRouter(session_manager)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, message_router)

    routes = [WebSocketRoute("/ws", ws_endpoint)]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        yield
        session_manager.shutdown()
        if owned_db is not None:
            owned_db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_manager = session_manager

    logger.info("okey server ready", store_backend=settings.store_backend)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = OkeyServerSettings()
    setup_logging(log_dir=settings.log_dir, log_format=settings.log_format, level=settings.log_level)
    return create_app(settings=settings)
