from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from okey.logic.enums import GameAction, GameErrorCode
from okey.logic.events import ErrorEvent
from okey.messaging.event_payload import event_payload
from okey.messaging.types import (
    DiscardTileMessage,
    DrawTileMessage,
    FinishGameMessage,
    JoinQueueMessage,
    PingMessage,
    ReconnectMessage,
    parse_client_message,
)

if TYPE_CHECKING:
    from okey.messaging.protocol import ConnectionProtocol
    from okey.session.manager import SessionManager

logger = structlog.get_logger()


_GAME_ACTION_TYPES = (DrawTileMessage, DiscardTileMessage, FinishGameMessage)


class MessageRouter:
    """
    Routes incoming messages to session manager handlers.

    This class contains pure dispatch logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def _send_error(self, connection: ConnectionProtocol, code: GameErrorCode, message: str) -> None:
        await connection.send_message(event_payload(ErrorEvent(code=code, message=message)))

    async def handle_message(
        self,
        connection: ConnectionProtocol,
        raw_message: dict[str, Any],
    ) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid message", connection_id=connection.connection_id, error=str(e))
            await self._send_error(connection, GameErrorCode.INVALID_MESSAGE, str(e))
            return

        if isinstance(message, JoinQueueMessage):
            await self._session_manager.join_queue(connection, name=message.name, rating=message.rating)
        elif isinstance(message, _GAME_ACTION_TYPES):
            await self._handle_game_action(connection, message)
        elif isinstance(message, ReconnectMessage):
            await self._session_manager.reconnect(connection, explicit=True)
        elif isinstance(message, PingMessage):
            await self._session_manager.handle_ping(connection)

    async def _handle_game_action(
        self,
        connection: ConnectionProtocol,
        message: DrawTileMessage | DiscardTileMessage | FinishGameMessage,
    ) -> None:
        """Route a game action; unexpected failures are reported to the sender only."""
        try:
            data = message.model_dump(exclude={"type", "room_id"})
            await self._session_manager.handle_game_action(
                connection=connection,
                room_id=message.room_id,
                action=GameAction(message.type.value),
                data=data,
            )
        except Exception:
            logger.exception("game action failed", connection_id=connection.connection_id)
            await self._send_error(connection, GameErrorCode.ACTION_FAILED, "Action could not be processed")

    async def handle_connect(self, connection: ConnectionProtocol) -> None:
        self._session_manager.register_connection(connection)
        await self._session_manager.reconnect(connection, explicit=False)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        self._session_manager.unregister_connection(connection)
