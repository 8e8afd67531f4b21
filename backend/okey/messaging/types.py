from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from okey.logic.enums import DrawSource, GameAction

# ASCII control character boundaries for input validation
_SPACE_ORD = 0x20
_DEL_ORD = 0x7F

# finish_game carries 14 tiles plus at most one separator between each pair
MAX_ARRANGED_SLOTS = 27


class ClientMessageType(StrEnum):
    JOIN_QUEUE = "join_queue"
    DRAW_TILE = GameAction.DRAW_TILE.value
    DISCARD_TILE = GameAction.DISCARD_TILE.value
    FINISH_GAME = GameAction.FINISH_GAME.value
    RECONNECT = "reconnect"
    PING = "ping"


_CLIENT_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

_ROOM_ID_FIELD = Field(min_length=1, max_length=64, pattern=r"^[a-zA-Z0-9_-]+$")
TileIdField = Annotated[
    str,
    Field(min_length=1, max_length=16, pattern=r"^((red|black|blue|orange)-([1-9]|1[0-3])-[12]|fake-[12])$"),
]


class JoinQueueMessage(BaseModel):
    model_config = _CLIENT_MODEL_CONFIG

    type: Literal[ClientMessageType.JOIN_QUEUE] = ClientMessageType.JOIN_QUEUE
    name: str = Field(min_length=1, max_length=32)
    rating: int = Field(default=1000, ge=0, le=10000)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        if any(ord(c) < _SPACE_ORD or ord(c) == _DEL_ORD for c in v):
            raise ValueError("name must not contain control characters")
        return v


class DrawTileMessage(BaseModel):
    model_config = _CLIENT_MODEL_CONFIG

    type: Literal[ClientMessageType.DRAW_TILE] = ClientMessageType.DRAW_TILE
    room_id: str = _ROOM_ID_FIELD
    source: DrawSource


class DiscardTileMessage(BaseModel):
    model_config = _CLIENT_MODEL_CONFIG

    type: Literal[ClientMessageType.DISCARD_TILE] = ClientMessageType.DISCARD_TILE
    room_id: str = _ROOM_ID_FIELD
    tile_id: TileIdField


class FinishGameMessage(BaseModel):
    """Arranged hand as tile ids in display order, with None as the set separator."""

    model_config = _CLIENT_MODEL_CONFIG

    type: Literal[ClientMessageType.FINISH_GAME] = ClientMessageType.FINISH_GAME
    room_id: str = _ROOM_ID_FIELD
    arranged_hand: list[TileIdField | None] = Field(min_length=1, max_length=MAX_ARRANGED_SLOTS)


class ReconnectMessage(BaseModel):
    type: Literal[ClientMessageType.RECONNECT] = ClientMessageType.RECONNECT


class PingMessage(BaseModel):
    type: Literal[ClientMessageType.PING] = ClientMessageType.PING


GameActionMessage = DrawTileMessage | DiscardTileMessage | FinishGameMessage

ClientMessage = JoinQueueMessage | DrawTileMessage | DiscardTileMessage | FinishGameMessage | ReconnectMessage | PingMessage

_client_adapter = TypeAdapter(Annotated[ClientMessage, Field(discriminator="type")])


def parse_client_message(data: dict[str, Any]) -> ClientMessage:
    """Parse a raw dict into a typed ClientMessage, discriminated on `type`."""
    return _client_adapter.validate_python(data)
