from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from okey.messaging.protocol import ConnectionProtocol


@dataclass
class QueuedPlayer:
    """A player waiting in the matchmaking queue.

    Lifecycle:
    - Created on join_queue
    - Removed when a room is formed or the connection drops
    """

    player_id: str
    name: str
    rating: int
    connection: ConnectionProtocol

    @property
    def connection_id(self) -> str:
        return self.connection.connection_id
