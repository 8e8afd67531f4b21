"""
String enum definitions for Okey game concepts.
"""

from enum import StrEnum


class TileColor(StrEnum):
    """The four tile suits."""

    RED = "red"
    BLACK = "black"
    BLUE = "blue"
    ORANGE = "orange"


class DrawSource(StrEnum):
    """Where a player draws a tile from."""

    CENTER = "center"  # top of the draw pile
    LEFT = "left"  # top of the preceding seat's discard pile


class RoomPhase(StrEnum):
    """Lifecycle state of a game room."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class GameEndReason(StrEnum):
    """Why a room moved to the finished phase."""

    NORMAL_FINISH = "normal_finish"
    DECK_EXHAUSTED = "deck_exhausted"


class GameAction(StrEnum):
    """Actions dispatched from client to the turn coordinator."""

    DRAW_TILE = "draw_tile"
    DISCARD_TILE = "discard_tile"
    FINISH_GAME = "finish_game"


class OpponentAction(StrEnum):
    """Publicly visible actions announced to the other seats."""

    DRAW = "draw"


class GameErrorCode(StrEnum):
    """Error codes sent to clients for rejected game commands."""

    NOT_YOUR_TURN = "not_your_turn"
    ALREADY_DREW = "already_drew"
    MUST_DRAW_FIRST = "must_draw_first"
    EMPTY_PILE = "empty_pile"
    TILE_NOT_IN_HAND = "tile_not_in_hand"
    INVALID_FINISH = "invalid_finish"
    GAME_FINISHED = "game_finished"
    GAME_NOT_STARTED = "game_not_started"
    ALREADY_IN_GAME = "already_in_game"
    ALREADY_QUEUED = "already_queued"
    INVALID_MESSAGE = "invalid_message"
    ACTION_FAILED = "action_failed"


class TimeoutType(StrEnum):
    """The two timers armed for every turn."""

    WARNING = "warning"
    ACTION = "action"
