"""
Room creation, dealing, and the per-seat views derived from a room.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog

from okey.logic.deck import create_deck, distribute, resolve_joker
from okey.logic.enums import RoomPhase
from okey.logic.events import GameRejoinedEvent, GameStartEvent, PlayerInfo, ServiceEvent, to_seat
from okey.logic.state import GameRoom, Player

if TYPE_CHECKING:
    import random

logger = structlog.get_logger()


def new_room_id() -> str:
    return str(uuid.uuid4())


def init_room(players: list[Player], room_id: str | None = None) -> GameRoom:
    """Create a room in the waiting phase with its seats fixed."""
    return GameRoom(room_id=room_id or new_room_id(), players=tuple(players))


def deal_room(room: GameRoom, rng: random.Random | None = None) -> GameRoom:
    """Shuffle, deal, and reveal the indicator. The dealer (seat 0) takes the first turn."""
    if room.phase != RoomPhase.WAITING:
        raise ValueError(f"cannot deal a room in phase {room.phase}")
    deal = distribute(create_deck(rng), rng)
    joker = resolve_joker(deal.indicator)
    logger.debug("room dealt", room_id=room.room_id, indicator=deal.indicator.id)
    return room.model_copy(
        update={
            "phase": RoomPhase.PLAYING,
            "turn_index": 0,
            "turn_number": 0,
            "hands": deal.hands,
            "draw_pile": deal.draw_pile,
            "discard_piles": ((),) * len(room.players),
            "indicator": deal.indicator,
            "joker": joker,
        },
    )


def player_infos(room: GameRoom) -> list[PlayerInfo]:
    return [
        PlayerInfo(seat_index=seat, player_id=p.id, name=p.name, score=p.score, is_bot=p.is_bot)
        for seat, p in enumerate(room.players)
    ]


def game_start_event(room: GameRoom, seat: int) -> GameStartEvent:
    if room.indicator is None or room.joker is None:
        raise ValueError(f"room {room.room_id} has not been dealt")
    return GameStartEvent(
        room_id=room.room_id,
        seat_index=seat,
        hand=list(room.hands[seat]),
        indicator=room.indicator,
        joker_identity=room.joker,
        players=player_infos(room),
        turn=room.turn_index,
    )


def game_start_events(room: GameRoom) -> list[ServiceEvent]:
    """One private game_start per seat."""
    return [to_seat(game_start_event(room, seat), seat) for seat in range(len(room.players))]


def resync_events(room: GameRoom, seat: int) -> list[ServiceEvent]:
    """Full private view for a reconnecting seat, followed by the board state game_start omits."""
    rejoined = GameRejoinedEvent(
        discard_piles=[list(pile) for pile in room.discard_piles],
        turn=room.turn_index,
        draw_pile_count=len(room.draw_pile),
    )
    return [to_seat(game_start_event(room, seat), seat), to_seat(rejoined, seat)]
