import asyncio
from typing import Any
from uuid import uuid4

from okey.messaging.encoder import decode, encode
from okey.messaging.protocol import ConnectionProtocol


class MockConnection(ConnectionProtocol):
    """In-memory connection that records decoded outbound messages."""

    def __init__(self, player_id: str | None = None, connection_id: str | None = None) -> None:
        self._connection_id = connection_id or str(uuid4())
        self._player_id = player_id or f"player-{uuid4().hex[:8]}"
        self._inbox: asyncio.Queue[bytes] = asyncio.Queue()
        self._outbox: list[dict[str, Any]] = []
        self._closed = False
        self.close_code: int | None = None
        self.close_reason: str | None = None

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def player_id(self) -> str:
        return self._player_id

    @property
    def sent_messages(self) -> list[dict[str, Any]]:
        return self._outbox.copy()

    def messages_of_type(self, message_type: str) -> list[dict[str, Any]]:
        return [m for m in self._outbox if m.get("type") == message_type]

    def clear(self) -> None:
        self._outbox.clear()

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def send_bytes(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Connection is closed")
        self._outbox.append(decode(data))

    async def receive_bytes(self) -> bytes:
        if self._closed:
            raise RuntimeError("Connection is closed")
        return await self._inbox.get()

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self._closed = True
        self.close_code = code
        self.close_reason = reason

    def simulate_receive_nowait(self, data: dict[str, Any]) -> None:
        """Queue a message as if the client had sent it."""
        self._inbox.put_nowait(encode(data))
