"""Typed domain exceptions for game rule violations.

Turn transitions raise subclasses of GameRuleError instead of returning
error values. The coordinator catches them at the service boundary and
converts them into a private error event for the offending seat; the
stored room is never written when one is raised.
"""

from okey.logic.enums import GameErrorCode


class GameRuleError(Exception):
    """Base exception for rejected game commands."""

    code: GameErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProtocolViolationError(GameRuleError):
    """Command is out of order or references something the player does not have."""


class NotYourTurnError(ProtocolViolationError):
    code = GameErrorCode.NOT_YOUR_TURN


class AlreadyDrewError(ProtocolViolationError):
    """Player already holds 15 tiles this turn."""

    code = GameErrorCode.ALREADY_DREW


class MustDrawFirstError(ProtocolViolationError):
    """Player tried to discard while holding 14 tiles."""

    code = GameErrorCode.MUST_DRAW_FIRST


class EmptyPileError(ProtocolViolationError):
    code = GameErrorCode.EMPTY_PILE


class TileNotInHandError(ProtocolViolationError):
    code = GameErrorCode.TILE_NOT_IN_HAND


class GameFinishedError(ProtocolViolationError):
    """Room already reached a terminal state."""

    code = GameErrorCode.GAME_FINISHED


class GameNotStartedError(ProtocolViolationError):
    code = GameErrorCode.GAME_NOT_STARTED


class InvalidFinishError(GameRuleError):
    """Submitted hand does not partition into valid sets. The turn is kept."""

    code = GameErrorCode.INVALID_FINISH
