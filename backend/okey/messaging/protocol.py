"""Abstract client connection used by the session layer."""

from abc import ABC, abstractmethod
from typing import Any

from okey.messaging.encoder import decode, encode


class ConnectionProtocol(ABC):
    """
    A live client connection speaking MessagePack frames.

    connection_id is a per-socket routing handle. player_id is the stable
    identity the client presented when connecting; it survives reconnects.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str: ...

    @property
    @abstractmethod
    def player_id(self) -> str: ...

    @abstractmethod
    async def send_bytes(self, data: bytes) -> None: ...

    @abstractmethod
    async def receive_bytes(self) -> bytes: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    async def send_message(self, data: dict[str, Any]) -> None:
        await self.send_bytes(encode(data))

    async def receive_message(self) -> dict[str, Any]:
        return decode(await self.receive_bytes())
