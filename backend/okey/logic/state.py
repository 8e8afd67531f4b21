"""
Immutable room state for an Okey game.

GameRoom is the full authoritative record persisted in the room store.
Transitions never mutate it; they return a new instance via model_copy.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from okey.logic.bot import is_bot_identity
from okey.logic.deck import NUM_SEATS
from okey.logic.enums import GameEndReason, RoomPhase
from okey.logic.tiles import JokerIdentity, Tile


class Player(BaseModel):
    """A seated player. The id is stable; connection_id is only a routing handle."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    score: int = 0
    connection_id: str | None = None

    @property
    def is_bot(self) -> bool:
        return is_bot_identity(self.id)


class GameRoom(BaseModel):
    model_config = ConfigDict(frozen=True)

    room_id: str = Field(min_length=1)
    players: tuple[Player, ...]
    phase: RoomPhase = RoomPhase.WAITING
    turn_index: int = Field(default=0, ge=0, lt=NUM_SEATS)
    turn_number: int = 0
    draw_pile: tuple[Tile, ...] = ()
    discard_piles: tuple[tuple[Tile, ...], ...] = ((),) * NUM_SEATS
    hands: tuple[tuple[Tile, ...], ...] = ((),) * NUM_SEATS
    indicator: Tile | None = None
    joker: JokerIdentity | None = None
    winner_seat: int | None = None
    end_reason: GameEndReason | None = None

    @model_validator(mode="after")
    def _check_seat_counts(self) -> Self:
        if len(self.players) != NUM_SEATS:
            raise ValueError(f"room needs exactly {NUM_SEATS} players, got {len(self.players)}")
        if len(self.hands) != NUM_SEATS or len(self.discard_piles) != NUM_SEATS:
            raise ValueError("hands and discard piles must have one entry per seat")
        if len({p.id for p in self.players}) != NUM_SEATS:
            raise ValueError("player ids must be unique within a room")
        return self

    @property
    def current_player(self) -> Player:
        return self.players[self.turn_index]

    def seat_of(self, player_id: str) -> int | None:
        for seat, player in enumerate(self.players):
            if player.id == player_id:
                return seat
        return None

    @staticmethod
    def left_seat(seat: int) -> int:
        """Seat whose discard pile `seat` may draw from (cyclic predecessor)."""
        return (seat - 1) % NUM_SEATS

    @staticmethod
    def next_seat(seat: int) -> int:
        return (seat + 1) % NUM_SEATS

    def human_player_ids(self) -> list[str]:
        return [p.id for p in self.players if not p.is_bot]

    def all_tile_ids(self) -> list[str]:
        """Every tile id held anywhere in the room, including the indicator."""
        ids = [t.id for t in self.draw_pile]
        for hand in self.hands:
            ids.extend(t.id for t in hand)
        for pile in self.discard_piles:
            ids.extend(t.id for t in pile)
        if self.indicator is not None:
            ids.append(self.indicator.id)
        return ids


def replace_seat(items: tuple, seat: int, value: object) -> tuple:
    """Return a copy of a per-seat tuple with one entry replaced."""
    return (*items[:seat], value, *items[seat + 1 :])
