"""
Room command pipeline: load from the store, apply a transition, persist.

The coordinator owns no in-memory room state. Callers serialize access per
room (SessionManager holds a lock per room id around every call).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from okey.logic.enums import DrawSource, GameAction, RoomPhase
from okey.logic.events import error_event, to_seat
from okey.logic.exceptions import GameRuleError
from okey.logic.game import deal_room, game_start_events, init_room
from okey.logic.turn import ActionResult, process_auto_move, process_discard, process_draw, process_finish
from shared.logging import bind_game_context

if TYPE_CHECKING:
    import random
    from typing import Any

    from okey.logic.state import GameRoom, Player
    from okey.session.room_store import RoomStore

logger = structlog.get_logger()


class TurnCoordinator:
    def __init__(self, store: RoomStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng

    @property
    def store(self) -> RoomStore:
        return self._store

    async def create_room(self, seats: list[Player]) -> ActionResult:
        """Deal a fresh room, persist it, and record it as every human seat's active room."""
        room = deal_room(init_room(seats), self._rng)
        await self._store.save_room(room)
        for player_id in room.human_player_ids():
            await self._store.set_active_room(player_id, room.room_id)
        logger.info("room created", room_id=room.room_id, humans=len(room.human_player_ids()))
        return ActionResult(room, game_start_events(room))

    async def handle_action(
        self,
        room_id: str,
        player_id: str,
        action: GameAction,
        data: dict[str, Any],
    ) -> ActionResult | None:
        """
        Apply one player command to a stored room.

        Returns None when the room is missing or the player is not seated
        (the command is dropped). A rejected command yields the unchanged
        room and a private error event; nothing is written.
        """
        room = await self._store.load_room(room_id)
        if room is None:
            logger.info("command for missing room dropped", room_id=room_id, action=action)
            return None
        seat = room.seat_of(player_id)
        if seat is None:
            logger.warning("command from unseated player dropped", room_id=room_id, action=action)
            return None
        bind_game_context(room_id=room_id, seat=seat)

        try:
            result = self._apply(room, seat, action, data)
        except GameRuleError as e:
            logger.warning("game rule violation", error_code=e.code, error_message=e.message, action=action)
            return ActionResult(room, [to_seat(error_event(e.code, e.message), seat)])

        await self._commit(result.room)
        return result

    @staticmethod
    def _apply(room: GameRoom, seat: int, action: GameAction, data: dict[str, Any]) -> ActionResult:
        if action == GameAction.DRAW_TILE:
            return process_draw(room, seat, DrawSource(data["source"]))
        if action == GameAction.DISCARD_TILE:
            return process_discard(room, seat, data["tile_id"])
        if action == GameAction.FINISH_GAME:
            return process_finish(room, seat, data["arranged_hand"])
        raise ValueError(f"unknown game action: {action}")

    async def auto_move(self, room_id: str, seat: int, turn_number: int) -> ActionResult | None:
        """
        Play an automated move for a timed-out seat.

        Returns None when the timer is stale: the room is gone, finished, or
        has moved past the turn the timer was armed for.
        """
        room = await self._store.load_room(room_id)
        if room is None or not self.is_current_turn(room, seat, turn_number):
            return None
        bind_game_context(room_id=room_id, seat=seat)
        result = process_auto_move(room, seat)
        logger.info("auto move played", bot=room.players[seat].is_bot)
        await self._commit(result.room)
        return result

    @staticmethod
    def is_current_turn(room: GameRoom, seat: int, turn_number: int) -> bool:
        return room.phase == RoomPhase.PLAYING and room.turn_index == seat and room.turn_number == turn_number

    async def update_connection(self, room: GameRoom, seat: int, connection_id: str) -> GameRoom:
        """Store the seat's new routing handle after a reconnect."""
        players = list(room.players)
        players[seat] = players[seat].model_copy(update={"connection_id": connection_id})
        new_room = room.model_copy(update={"players": tuple(players)})
        await self._store.save_room(new_room)
        return new_room

    async def _commit(self, room: GameRoom) -> None:
        await self._store.save_room(room)
        if room.phase == RoomPhase.FINISHED:
            for player_id in room.human_player_ids():
                await self._store.clear_active_room(player_id)
            logger.info(
                "game over",
                room_id=room.room_id,
                reason=room.end_reason,
                winner_seat=room.winner_seat,
            )
