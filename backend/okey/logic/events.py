"""Domain event models and service event transport container.

Domain event classes are the closed set of messages the server sends to
clients. ServiceEvent wraps one with a typed routing target. Turn
transitions build ServiceEvents through the to_seat / to_room helpers.

All layers import exclusively from this module for event types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, model_validator

from okey.logic.enums import DrawSource, GameEndReason, GameErrorCode, OpponentAction
from okey.logic.tiles import WIRE_MODEL_CONFIG, JokerIdentity, Tile

# ---------------------------------------------------------------------------
# Typed routing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BroadcastTarget:
    """Event should be sent to every seat in the room."""


@dataclass(frozen=True)
class SeatTarget:
    """Event should be sent to a specific seat."""

    seat: int


EventTarget = BroadcastTarget | SeatTarget


# ---------------------------------------------------------------------------
# Event type enum
# ---------------------------------------------------------------------------


class EventType(StrEnum):
    """Types of server-to-client events."""

    GAME_START = "game_start"
    TILE_DRAWN = "tile_drawn"
    OPPONENT_ACTION = "opponent_action"
    TILE_DISCARDED = "tile_discarded"
    MY_HAND_UPDATED = "my_hand_updated"
    TURN_TIMEOUT_WARNING = "turn_timeout_warning"
    GAME_OVER = "game_over"
    GAME_REJOINED = "game_rejoined"
    RECONNECT_FAILED = "reconnect_failed"
    ERROR = "error"
    PONG = "pong"


# ---------------------------------------------------------------------------
# Domain event models
# ---------------------------------------------------------------------------


class GameEvent(BaseModel):
    """Base class for all domain events. Serialized with camelCase field names."""

    model_config = WIRE_MODEL_CONFIG

    type: EventType


class PlayerInfo(BaseModel):
    """Public identity of a seat, sent at game start."""

    model_config = WIRE_MODEL_CONFIG

    seat_index: int
    player_id: str
    name: str
    score: int
    is_bot: bool


class GameStartEvent(GameEvent):
    """Private deal for one seat: own hand plus the public table."""

    type: Literal[EventType.GAME_START] = EventType.GAME_START
    room_id: str
    seat_index: int
    hand: list[Tile]
    indicator: Tile
    joker_identity: JokerIdentity
    players: list[PlayerInfo]
    turn: int


class TileDrawnEvent(GameEvent):
    """Sent privately to the seat that drew."""

    type: Literal[EventType.TILE_DRAWN] = EventType.TILE_DRAWN
    tile: Tile
    source: DrawSource


class OpponentActionEvent(GameEvent):
    """Public notice of another seat's draw, without tile contents."""

    type: Literal[EventType.OPPONENT_ACTION] = EventType.OPPONENT_ACTION
    action: OpponentAction
    seat_index: int
    source: DrawSource


class TileDiscardedEvent(GameEvent):
    type: Literal[EventType.TILE_DISCARDED] = EventType.TILE_DISCARDED
    seat_index: int
    tile: Tile
    new_turn: int
    discard_piles: list[list[Tile]]


class MyHandUpdatedEvent(GameEvent):
    type: Literal[EventType.MY_HAND_UPDATED] = EventType.MY_HAND_UPDATED
    hand: list[Tile]


class TurnTimeoutWarningEvent(GameEvent):
    type: Literal[EventType.TURN_TIMEOUT_WARNING] = EventType.TURN_TIMEOUT_WARNING
    seconds_left: float
    seat_index: int


class GameOverEvent(GameEvent):
    """Terminal event. Winner fields are None when the deck ran out."""

    type: Literal[EventType.GAME_OVER] = EventType.GAME_OVER
    winner_id: str | None = None
    winner_name: str | None = None
    winner_seat: int | None = None
    reason: GameEndReason
    revealed_hand: list[Tile | None] | None = None


class GameRejoinedEvent(GameEvent):
    """Board state that game_start does not carry, sent after a resync."""

    type: Literal[EventType.GAME_REJOINED] = EventType.GAME_REJOINED
    discard_piles: list[list[Tile]]
    turn: int
    draw_pile_count: int


class ReconnectFailedEvent(GameEvent):
    type: Literal[EventType.RECONNECT_FAILED] = EventType.RECONNECT_FAILED
    message: str


class ErrorEvent(GameEvent):
    """Event sent to a player when a command is rejected."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: GameErrorCode
    message: str


class PongEvent(GameEvent):
    type: Literal[EventType.PONG] = EventType.PONG


Event = (
    GameStartEvent
    | TileDrawnEvent
    | OpponentActionEvent
    | TileDiscardedEvent
    | MyHandUpdatedEvent
    | TurnTimeoutWarningEvent
    | GameOverEvent
    | GameRejoinedEvent
    | ReconnectFailedEvent
    | ErrorEvent
    | PongEvent
)


# ---------------------------------------------------------------------------
# Service event transport container
# ---------------------------------------------------------------------------


class ServiceEvent(BaseModel):
    """Event transport container for the session layer.

    Uses typed internal targets (BroadcastTarget / SeatTarget) for routing.
    """

    model_config = {"arbitrary_types_allowed": True}

    event: EventType
    data: GameEvent
    target: EventTarget = BroadcastTarget()

    @model_validator(mode="after")
    def _ensure_event_matches_data(self) -> ServiceEvent:
        if self.event.value != self.data.type.value:
            raise ValueError(
                f"ServiceEvent.event '{self.event.value}' does not match data.type '{self.data.type.value}'",
            )
        return self


def to_seat(event: GameEvent, seat: int) -> ServiceEvent:
    return ServiceEvent(event=event.type, data=event, target=SeatTarget(seat=seat))


def to_room(event: GameEvent) -> ServiceEvent:
    return ServiceEvent(event=event.type, data=event, target=BroadcastTarget())


def error_event(code: GameErrorCode, message: str) -> ErrorEvent:
    return ErrorEvent(code=code, message=message)
