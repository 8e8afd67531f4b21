"""
Tile representation for Okey.

A full set holds two copies of values 1-13 in each of the four colors
(104 numbered tiles) plus two fake jokers, for 106 tiles in total.

Tile ids are stable strings:
  numbered tiles: "{color}-{value}-{copy}", e.g. "red-7-2"
  fake jokers:    "fake-1", "fake-2"
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from okey.logic.enums import TileColor

MIN_VALUE = 1
MAX_VALUE = 13
COPIES_PER_TILE = 2
NUM_FAKE_JOKERS = 2
FAKE_JOKER_VALUE = 0  # placeholder value; a fake joker takes the joker identity when validated

NUM_NUMBERED_TILES = len(TileColor) * MAX_VALUE * COPIES_PER_TILE  # 104
TOTAL_TILES = NUM_NUMBERED_TILES + NUM_FAKE_JOKERS  # 106

WIRE_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Tile(BaseModel):
    """A physical tile. Immutable; only its container changes during play."""

    model_config = WIRE_MODEL_CONFIG

    id: str = Field(min_length=1)
    value: int = Field(ge=FAKE_JOKER_VALUE, le=MAX_VALUE)
    color: TileColor | None = None
    is_fake_joker: bool = False

    @model_validator(mode="after")
    def _check_fake_joker_shape(self) -> Self:
        if self.is_fake_joker:
            if self.value != FAKE_JOKER_VALUE or self.color is not None:
                raise ValueError("fake joker must have value 0 and no color")
        elif self.value == FAKE_JOKER_VALUE or self.color is None:
            raise ValueError("numbered tile needs a value in 1-13 and a color")
        return self


class JokerIdentity(BaseModel):
    """The value and color that act as the wildcard for one deal."""

    model_config = WIRE_MODEL_CONFIG

    value: int = Field(ge=MIN_VALUE, le=MAX_VALUE)
    color: TileColor

    def matches(self, tile: Tile) -> bool:
        """True if the tile is a real joker (not a fake joker) for this deal."""
        return not tile.is_fake_joker and tile.value == self.value and tile.color == self.color


def numbered_tile_id(color: TileColor, value: int, copy: int) -> str:
    return f"{color.value}-{value}-{copy}"


def fake_joker_id(copy: int) -> str:
    return f"fake-{copy}"


def create_tile_set() -> list[Tile]:
    """Return all 106 tiles in a fixed, unshuffled order."""
    tiles = [
        Tile(id=numbered_tile_id(color, value, copy), value=value, color=color)
        for color in TileColor
        for value in range(MIN_VALUE, MAX_VALUE + 1)
        for copy in range(1, COPIES_PER_TILE + 1)
    ]
    tiles.extend(
        Tile(id=fake_joker_id(copy), value=FAKE_JOKER_VALUE, is_fake_joker=True)
        for copy in range(1, NUM_FAKE_JOKERS + 1)
    )
    return tiles


def find_tile(tiles: tuple[Tile, ...] | list[Tile], tile_id: str) -> int | None:
    """Return the index of a tile by id, or None if absent."""
    for index, tile in enumerate(tiles):
        if tile.id == tile_id:
            return index
    return None
