"""
Server-side turn timers.

Every turn gets a timer pair: a warning timer that fires `warning_seconds`
before the deadline and an action timer that fires at the deadline. Bot
seats get a short deadline and no warning. On action timeout the session
layer plays an automated move for the seat.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from okey.logic.settings import GameSettings


class TimerConfig(BaseModel):
    """Configuration for turn timers."""

    turn_seconds: float = 30
    warning_seconds: float = 10
    bot_turn_seconds: float = 1.5

    @classmethod
    def from_settings(cls, settings: GameSettings) -> TimerConfig:
        """Build TimerConfig from GameSettings."""
        return cls(
            turn_seconds=settings.turn_seconds,
            warning_seconds=settings.warning_seconds,
            bot_turn_seconds=settings.bot_turn_seconds,
        )

    def deadline_for(self, *, is_bot: bool) -> float:
        return self.bot_turn_seconds if is_bot else self.turn_seconds


class TurnTimerPair:
    """
    Warning and action timers for one turn of one room.

    Both tasks are created on start and cancelled together. The pair
    remembers the seat and turn number it was armed for so callbacks can be
    matched against the current room state.
    """

    def __init__(self, seat: int, turn_number: int, deadline_seconds: float) -> None:
        self.seat = seat
        self.turn_number = turn_number
        self.deadline_seconds = deadline_seconds
        self._warning_task: asyncio.Task[None] | None = None
        self._action_task: asyncio.Task[None] | None = None

    @property
    def is_active(self) -> bool:
        return self._action_task is not None and not self._action_task.done()

    def start(
        self,
        warning_seconds: float,
        on_warning: Callable[[], Awaitable[None]],
        on_action: Callable[[], Awaitable[None]],
    ) -> None:
        """Start both timers. The warning is skipped when the deadline leaves no room for it."""
        self.cancel()
        if self.deadline_seconds > warning_seconds > 0:
            self._warning_task = asyncio.create_task(
                self._run_timer(self.deadline_seconds - warning_seconds, on_warning),
            )
        self._action_task = asyncio.create_task(self._run_timer(self.deadline_seconds, on_action))

    def cancel(self) -> None:
        """
        Cancel both timers.

        The task currently running a callback is left alone, so a timeout
        handler can re-arm the next turn without aborting itself.
        """
        current = asyncio.current_task()
        for task in (self._warning_task, self._action_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
        self._warning_task = None
        self._action_task = None

    async def _run_timer(self, seconds: float, callback: Callable[[], Awaitable[None]]) -> None:
        try:
            await asyncio.sleep(seconds)
            await callback()
        except asyncio.CancelledError:
            pass
        except (RuntimeError, OSError, ConnectionError, ValueError):  # fmt: skip
            logger.exception("timer callback failed")
