from __future__ import annotations

import contextlib
import re
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from okey.logic.bot import is_bot_identity
from okey.logic.enums import GameErrorCode
from okey.logic.events import ErrorEvent
from okey.messaging.encoder import DecodeError, decode
from okey.messaging.event_payload import event_payload
from okey.messaging.protocol import ConnectionProtocol
from shared.logging import bind_game_context

logger = structlog.get_logger()

if TYPE_CHECKING:
    from okey.messaging.router import MessageRouter

_PLAYER_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
_MAX_PLAYER_ID_LENGTH = 64

# Disconnect after this many consecutive decode errors
_MAX_DECODE_ERRORS = 5


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, player_id: str, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._player_id = player_id
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def player_id(self) -> str:
        return self._player_id

    async def send_bytes(self, data: bytes) -> None:
        try:
            await self._websocket.send_bytes(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_bytes(self) -> bytes:
        try:
            return await self._websocket.receive_bytes()
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect):
            await self._websocket.close(code=code, reason=reason)


def _valid_player_id(player_id: str | None) -> bool:
    return (
        player_id is not None
        and len(player_id) <= _MAX_PLAYER_ID_LENGTH
        and _PLAYER_ID_PATTERN.match(player_id) is not None
        and not is_bot_identity(player_id)
    )


async def websocket_endpoint(websocket: WebSocket, router: MessageRouter) -> None:
    player_id = websocket.query_params.get("player_id")
    if not _valid_player_id(player_id):
        await websocket.close(code=4000, reason="invalid_player_id")
        return

    await websocket.accept()

    connection = WebSocketConnection(websocket, player_id=player_id)
    bind_game_context(connection_id=connection.connection_id, player_id=player_id)
    logger.info("websocket connected")

    decode_errors = 0
    try:
        await router.handle_connect(connection)
        while True:
            raw = await connection.receive_bytes()
            try:
                data = decode(raw)
            except DecodeError as e:
                decode_errors += 1
                logger.warning("decode error", error=str(e), strikes=decode_errors)
                await connection.send_message(
                    event_payload(ErrorEvent(code=GameErrorCode.INVALID_MESSAGE, message=str(e))),
                )
                if decode_errors >= _MAX_DECODE_ERRORS:
                    logger.info("too many decode errors, disconnecting")
                    await connection.close(code=4004, reason="too_many_decode_errors")
                    return
                continue

            decode_errors = 0
            await router.handle_message(connection, data)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        logger.info("websocket disconnected")
        await router.handle_disconnect(connection)
        structlog.contextvars.clear_contextvars()
