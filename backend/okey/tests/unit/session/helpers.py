from okey.logic.settings import GameSettings
from okey.logic.state import GameRoom
from okey.messaging.mock import MockConnection
from okey.session.manager import SessionManager
from okey.session.room_store import RoomStore

# Long enough that no timer fires on its own during a test; timeouts are driven by hand.
TEST_SETTINGS = GameSettings(turn_seconds=120, warning_seconds=10, bot_turn_seconds=60)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def seat_room(manager: SessionManager, store: RoomStore, room: GameRoom) -> MockConnection:
    """Persist a prepared room and connect its seat-0 human."""
    await store.save_room(room)
    for player_id in room.human_player_ids():
        await store.set_active_room(player_id, room.room_id)
    player = room.players[0]
    connection = MockConnection(player_id=player.id, connection_id=player.connection_id)
    manager.register_connection(connection)
    return connection


def message_types(connection: MockConnection) -> list[str]:
    return [m["type"] for m in connection.sent_messages]
