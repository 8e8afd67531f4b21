"""
Automated move policy for bot seats and timed-out players.

The policy is deliberately simple: draw from the left discard pile when it
has a tile (otherwise from the center), then discard the tile just drawn.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from okey.logic.enums import DrawSource

if TYPE_CHECKING:
    from okey.logic.state import GameRoom
    from okey.logic.tiles import Tile

BOT_ID_PREFIX = "bot-"


def make_bot_identity() -> str:
    return f"{BOT_ID_PREFIX}{uuid.uuid4()}"


def is_bot_identity(player_id: str) -> bool:
    return player_id.startswith(BOT_ID_PREFIX)


def bot_name(number: int) -> str:
    return f"Bot {number}"


def choose_draw_source(room: GameRoom, seat: int) -> DrawSource:
    """Prefer the left discard pile, fall back to the center pile."""
    if room.discard_piles[room.left_seat(seat)]:
        return DrawSource.LEFT
    return DrawSource.CENTER


def choose_discard(hand: tuple[Tile, ...]) -> Tile:
    """Discard the most recently added tile."""
    return hand[-1]
