from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import structlog

from okey.logic.enums import GameErrorCode, RoomPhase, TimeoutType
from okey.logic.events import (
    BroadcastTarget,
    ErrorEvent,
    PongEvent,
    ReconnectFailedEvent,
    SeatTarget,
    TurnTimeoutWarningEvent,
    to_room,
)
from okey.logic.game import resync_events
from okey.logic.matchmaker import fill_seats
from okey.logic.settings import GameSettings
from okey.logic.state import Player
from okey.logic.timer import TimerConfig
from okey.messaging.event_payload import event_payload, service_event_payload
from okey.session.broadcast import send_to_connections
from okey.session.coordinator import TurnCoordinator
from okey.session.models import QueuedPlayer
from okey.session.timer_manager import TimerManager
from shared.logging import bind_game_context

if TYPE_CHECKING:
    import random

    from okey.logic.enums import GameAction
    from okey.logic.events import ServiceEvent
    from okey.logic.state import GameRoom
    from okey.logic.turn import ActionResult
    from okey.messaging.protocol import ConnectionProtocol
    from okey.session.room_store import RoomStore

logger = structlog.get_logger()


class SessionManager:
    """
    Connection routing, matchmaking queue, per-room serialization, and timers.

    Room truth lives in the RoomStore. This class only keeps routing state
    (which connection belongs to which player) and ephemeral scheduling
    state (timers, locks, the queue).
    """

    def __init__(
        self,
        store: RoomStore,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        self._rng = rng
        self._coordinator = TurnCoordinator(store, rng=rng)
        self._store = store
        self._connections: dict[str, ConnectionProtocol] = {}  # connection_id -> connection
        self._player_connections: dict[str, str] = {}  # player_id -> connection_id
        self._queue: list[QueuedPlayer] = []
        self._room_locks: dict[str, asyncio.Lock] = {}  # room_id -> Lock
        self._timer_manager = TimerManager(
            on_timeout=self._handle_timeout,
            config=TimerConfig.from_settings(self._settings),
        )

    @property
    def timer_manager(self) -> TimerManager:
        return self._timer_manager

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    def _room_lock(self, room_id: str) -> asyncio.Lock:
        """Get or lazily create the per-room lock (rooms may outlive a process restart)."""
        lock = self._room_locks.get(room_id)
        if lock is None:
            lock = asyncio.Lock()
            self._room_locks[room_id] = lock
        return lock

    def _release_idle_room(self, room_id: str) -> None:
        """Forget the lock of a room that has no armed timer (finished, paused or gone)."""
        if not self._timer_manager.has_timer(room_id):
            self._room_locks.pop(room_id, None)

    def register_connection(self, connection: ConnectionProtocol) -> None:
        self._connections[connection.connection_id] = connection
        self._player_connections[connection.player_id] = connection.connection_id

    def unregister_connection(self, connection: ConnectionProtocol) -> None:
        """Drop routing for a closed connection. Room state and timers are left alone."""
        self._connections.pop(connection.connection_id, None)
        if self._player_connections.get(connection.player_id) == connection.connection_id:
            del self._player_connections[connection.player_id]
        self._queue = [q for q in self._queue if q.connection_id != connection.connection_id]

    def is_connected(self, player_id: str) -> bool:
        return player_id in self._player_connections

    async def _send_error(self, connection: ConnectionProtocol, code: GameErrorCode, message: str) -> None:
        logger.warning("session error sent to client", error_code=code, error_message=message)
        await connection.send_message(event_payload(ErrorEvent(code=code, message=message)))

    async def handle_ping(self, connection: ConnectionProtocol) -> None:
        await connection.send_message(event_payload(PongEvent()))

    # --- Matchmaking ---

    async def join_queue(self, connection: ConnectionProtocol, name: str, rating: int) -> None:
        player_id = connection.player_id
        bind_game_context(player_id=player_id)
        if await self._store.get_active_room(player_id) is not None:
            await self._send_error(connection, GameErrorCode.ALREADY_IN_GAME, "You are already in a game")
            return
        if any(q.player_id == player_id for q in self._queue):
            await self._send_error(connection, GameErrorCode.ALREADY_QUEUED, "You are already queued")
            return

        await self._store.remember_player(player_id)
        self._queue.append(QueuedPlayer(player_id=player_id, name=name, rating=rating, connection=connection))
        logger.info("player queued", rating=rating, queue_size=len(self._queue))

        if len(self._queue) >= self._settings.humans_per_room:
            matched = self._queue[: self._settings.humans_per_room]
            self._queue = self._queue[self._settings.humans_per_room :]
            await self._start_room(matched)

    async def _start_room(self, matched: list[QueuedPlayer]) -> None:
        humans = [Player(id=q.player_id, name=q.name, connection_id=q.connection_id) for q in matched]
        seats = fill_seats(humans, self._rng)
        result = await self._coordinator.create_room(seats)
        lock = self._room_lock(result.room.room_id)
        async with lock:
            await self._deliver(result.room, result.events)
            self._sync_timer(result.room)

    # --- Game actions ---

    async def handle_game_action(
        self,
        connection: ConnectionProtocol,
        room_id: str,
        action: GameAction,
        data: dict[str, Any],
    ) -> None:
        bind_game_context(player_id=connection.player_id, room_id=room_id)
        async with self._room_lock(room_id):
            result = await self._coordinator.handle_action(room_id, connection.player_id, action, data)
            if result is not None:
                await self._after_transition(result)
            self._release_idle_room(room_id)

    async def _after_transition(self, result: ActionResult) -> None:
        await self._deliver(result.room, result.events)
        self._sync_timer(result.room)

    async def _handle_timeout(self, room_id: str, timeout_type: TimeoutType, seat: int, turn_number: int) -> None:
        bind_game_context(room_id=room_id, seat=seat)
        async with self._room_lock(room_id):
            if timeout_type == TimeoutType.WARNING:
                await self._send_warning(room_id, seat, turn_number)
                return
            result = await self._coordinator.auto_move(room_id, seat, turn_number)
            if result is None:
                logger.debug("stale timer ignored", turn_number=turn_number)
            else:
                await self._after_transition(result)
            self._release_idle_room(room_id)

    async def _send_warning(self, room_id: str, seat: int, turn_number: int) -> None:
        room = await self._store.load_room(room_id)
        if room is None or not TurnCoordinator.is_current_turn(room, seat, turn_number):
            return
        warning = TurnTimeoutWarningEvent(seconds_left=self._timer_manager.config.warning_seconds, seat_index=seat)
        await self._deliver(room, [to_room(warning)])

    def _has_connected_human(self, room: GameRoom) -> bool:
        return any(
            not player.is_bot and self._seat_connection(room, seat) is not None
            for seat, player in enumerate(room.players)
        )

    def _sync_timer(self, room: GameRoom) -> None:
        """
        Cancel timers of a finished room, or arm one for the current turn if none matches it.

        A playing room with no connected human is paused instead: its timers
        are cancelled so nothing refreshes the stored expiry, and the room is
        reclaimed by TTL unless a player reconnects first.
        """
        if room.phase != RoomPhase.PLAYING:
            self._timer_manager.cancel(room.room_id)
            return
        if not self._has_connected_human(room):
            if self._timer_manager.has_timer(room.room_id):
                logger.info("room paused, no human connected", room_id=room.room_id)
            self._timer_manager.cancel(room.room_id)
            return
        if self._timer_manager.is_armed_for(room.room_id, room.turn_index, room.turn_number):
            return
        self._timer_manager.arm(
            room.room_id,
            room.turn_index,
            room.turn_number,
            is_bot=room.current_player.is_bot,
        )

    # --- Reconnection ---

    async def reconnect(self, connection: ConnectionProtocol, *, explicit: bool = True) -> None:
        """
        Resynchronize a player with their active room.

        Automatic attempts (on connect) stay silent for players who never
        queued. Explicit attempts always get an answer.
        """
        player_id = connection.player_id
        bind_game_context(player_id=player_id)
        room_id = await self._store.get_active_room(player_id)
        if room_id is None:
            if explicit or await self._store.is_known_player(player_id):
                await self._send_reconnect_failed(connection, "No active game to rejoin")
            return

        async with self._room_lock(room_id):
            room = await self._store.load_room(room_id)
            seat = room.seat_of(player_id) if room is not None else None
            if room is None or seat is None or room.phase != RoomPhase.PLAYING:
                await self._store.clear_active_room(player_id)
                await self._send_reconnect_failed(connection, "Game is no longer available")
                self._release_idle_room(room_id)
                return

            room = await self._coordinator.update_connection(room, seat, connection.connection_id)
            for event in resync_events(room, seat):
                await connection.send_message(service_event_payload(event))
            self._sync_timer(room)

        bind_game_context(room_id=room_id, seat=seat)
        logger.info("player reconnected")

    async def _send_reconnect_failed(self, connection: ConnectionProtocol, message: str) -> None:
        logger.info("reconnect failed", reason=message)
        await connection.send_message(event_payload(ReconnectFailedEvent(message=message)))

    # --- Delivery ---

    def _seat_connection(self, room: GameRoom, seat: int) -> ConnectionProtocol | None:
        connection_id = room.players[seat].connection_id
        if connection_id is None:
            return None
        return self._connections.get(connection_id)

    async def _deliver(self, room: GameRoom, events: list[ServiceEvent]) -> None:
        """Route events to the seats' live connections using typed targets."""
        for event in events:
            message = service_event_payload(event)
            if isinstance(event.target, BroadcastTarget):
                recipients = [self._seat_connection(room, seat) for seat in range(len(room.players))]
                await send_to_connections([c for c in recipients if c is not None], message)
            elif isinstance(event.target, SeatTarget):
                connection = self._seat_connection(room, event.target.seat)
                if connection is not None:
                    with contextlib.suppress(RuntimeError, OSError, ConnectionError):
                        await connection.send_message(message)

    def shutdown(self) -> None:
        self._timer_manager.cancel_all()
