"""
Turn transitions for an Okey room.

Every transition takes an immutable GameRoom and returns an ActionResult
with the new room and the events to deliver. Rejected commands raise a
GameRuleError subclass and leave the room untouched.
"""

from typing import NamedTuple

import structlog

from okey.logic.bot import choose_discard, choose_draw_source
from okey.logic.deck import HAND_SIZE
from okey.logic.enums import DrawSource, GameEndReason, OpponentAction, RoomPhase
from okey.logic.events import (
    GameOverEvent,
    MyHandUpdatedEvent,
    OpponentActionEvent,
    ServiceEvent,
    TileDiscardedEvent,
    TileDrawnEvent,
    to_room,
    to_seat,
)
from okey.logic.exceptions import (
    AlreadyDrewError,
    EmptyPileError,
    GameFinishedError,
    GameNotStartedError,
    InvalidFinishError,
    MustDrawFirstError,
    NotYourTurnError,
    TileNotInHandError,
)
from okey.logic.hand import is_valid_hand
from okey.logic.state import GameRoom, replace_seat
from okey.logic.tiles import Tile, find_tile

logger = structlog.get_logger()


class ActionResult(NamedTuple):
    """New room state and the events produced by one transition."""

    room: GameRoom
    events: list[ServiceEvent]

    @property
    def game_over(self) -> bool:
        return self.room.phase == RoomPhase.FINISHED


def _require_turn(room: GameRoom, seat: int) -> None:
    if room.phase == RoomPhase.FINISHED:
        raise GameFinishedError("game is already finished")
    if room.phase != RoomPhase.PLAYING:
        raise GameNotStartedError("game has not started")
    if seat != room.turn_index:
        raise NotYourTurnError("not your turn")


def _has_drawn(room: GameRoom, seat: int) -> bool:
    return len(room.hands[seat]) > HAND_SIZE


def process_draw(room: GameRoom, seat: int, source: DrawSource) -> ActionResult:
    """
    Draw one tile for the seat holding the turn.

    Drawing from an empty center pile ends the game (deck exhausted) instead
    of raising.
    """
    _require_turn(room, seat)
    if _has_drawn(room, seat):
        raise AlreadyDrewError("already drew this turn")

    update: dict[str, object] = {}
    if source == DrawSource.CENTER:
        if not room.draw_pile:
            return finish_deck_exhausted(room)
        tile = room.draw_pile[-1]
        update["draw_pile"] = room.draw_pile[:-1]
    else:
        left = room.left_seat(seat)
        pile = room.discard_piles[left]
        if not pile:
            raise EmptyPileError("left discard pile is empty")
        tile = pile[-1]
        update["discard_piles"] = replace_seat(room.discard_piles, left, pile[:-1])

    update["hands"] = replace_seat(room.hands, seat, (*room.hands[seat], tile))
    new_room = room.model_copy(update=update)

    events = [to_seat(TileDrawnEvent(tile=tile, source=source), seat)]
    notice = OpponentActionEvent(action=OpponentAction.DRAW, seat_index=seat, source=source)
    events.extend(to_seat(notice, other) for other in range(len(room.players)) if other != seat)
    logger.debug("tile drawn", seat=seat, source=source, tile_id=tile.id)
    return ActionResult(new_room, events)


def process_discard(room: GameRoom, seat: int, tile_id: str) -> ActionResult:
    """Move a tile from hand to the seat's discard pile and pass the turn."""
    _require_turn(room, seat)
    if not _has_drawn(room, seat):
        raise MustDrawFirstError("draw a tile before discarding")
    hand = room.hands[seat]
    index = find_tile(hand, tile_id)
    if index is None:
        raise TileNotInHandError(f"tile {tile_id} is not in your hand")

    tile = hand[index]
    new_hand = hand[:index] + hand[index + 1 :]
    discard_piles = replace_seat(room.discard_piles, seat, (*room.discard_piles[seat], tile))
    new_turn = room.next_seat(seat)
    new_room = room.model_copy(
        update={
            "hands": replace_seat(room.hands, seat, new_hand),
            "discard_piles": discard_piles,
            "turn_index": new_turn,
            "turn_number": room.turn_number + 1,
        },
    )

    events = [
        to_room(
            TileDiscardedEvent(
                seat_index=seat,
                tile=tile,
                new_turn=new_turn,
                discard_piles=[list(pile) for pile in discard_piles],
            ),
        ),
        to_seat(MyHandUpdatedEvent(hand=list(new_hand)), seat),
    ]
    logger.debug("tile discarded", seat=seat, tile_id=tile_id, new_turn=new_turn)
    return ActionResult(new_room, events)


def _arrange_from_ids(hand: tuple[Tile, ...], arranged_ids: list[str | None]) -> list[Tile | None]:
    by_id = {tile.id: tile for tile in hand}
    seen: set[str] = set()
    arranged: list[Tile | None] = []
    for tile_id in arranged_ids:
        if tile_id is None:
            arranged.append(None)
            continue
        tile = by_id.get(tile_id)
        if tile is None:
            raise TileNotInHandError(f"tile {tile_id} is not in your hand")
        if tile_id in seen:
            raise InvalidFinishError(f"tile {tile_id} appears more than once")
        seen.add(tile_id)
        arranged.append(tile)
    if len(seen) != HAND_SIZE:
        raise InvalidFinishError(f"a finishing hand needs exactly {HAND_SIZE} tiles, got {len(seen)}")
    return arranged


def process_finish(room: GameRoom, seat: int, arranged_ids: list[str | None]) -> ActionResult:
    """
    Validate a finishing hand and end the game with this seat as the winner.

    The arrangement lists tile ids in the player's chosen order with None as
    the separator between sets. When the player holds 15 tiles, the one left
    out of the arrangement goes onto their discard pile.
    """
    _require_turn(room, seat)
    if room.joker is None:  # pragma: no cover
        raise GameNotStartedError("room has no joker")
    hand = room.hands[seat]
    arranged = _arrange_from_ids(hand, arranged_ids)
    if not is_valid_hand(arranged, room.joker):
        raise InvalidFinishError("hand is not valid for finish")

    used = {tile.id for tile in arranged if tile is not None}
    kept = tuple(tile for tile in hand if tile.id in used)
    leftover = tuple(tile for tile in hand if tile.id not in used)
    winner = room.players[seat]
    new_room = room.model_copy(
        update={
            "hands": replace_seat(room.hands, seat, kept),
            "discard_piles": replace_seat(room.discard_piles, seat, room.discard_piles[seat] + leftover),
            "phase": RoomPhase.FINISHED,
            "winner_seat": seat,
            "end_reason": GameEndReason.NORMAL_FINISH,
        },
    )
    event = GameOverEvent(
        winner_id=winner.id,
        winner_name=winner.name,
        winner_seat=seat,
        reason=GameEndReason.NORMAL_FINISH,
        revealed_hand=arranged,
    )
    return ActionResult(new_room, [to_room(event)])


def finish_deck_exhausted(room: GameRoom) -> ActionResult:
    """End the game with no winner. Hands and piles are left as they are."""
    new_room = room.model_copy(
        update={"phase": RoomPhase.FINISHED, "end_reason": GameEndReason.DECK_EXHAUSTED},
    )
    return ActionResult(new_room, [to_room(GameOverEvent(reason=GameEndReason.DECK_EXHAUSTED))])


def process_auto_move(room: GameRoom, seat: int) -> ActionResult:
    """
    Play the seat's turn automatically: draw if needed, then discard.

    Used for bot seats and for humans whose turn timer expired.
    """
    _require_turn(room, seat)
    events: list[ServiceEvent] = []
    if not _has_drawn(room, seat):
        draw = process_draw(room, seat, choose_draw_source(room, seat))
        room, events = draw.room, list(draw.events)
        if room.phase == RoomPhase.FINISHED:
            return ActionResult(room, events)
    discard = process_discard(room, seat, choose_discard(room.hands[seat]).id)
    return ActionResult(discard.room, events + discard.events)
