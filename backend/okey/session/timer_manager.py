"""Manage the per-room turn timer pair for active rooms."""

from collections.abc import Awaitable, Callable

import structlog

from okey.logic.enums import TimeoutType
from okey.logic.timer import TimerConfig, TurnTimerPair

logger = structlog.get_logger()

# Callback type: (room_id, timeout_type, seat, turn_number) -> Awaitable[None]
TimeoutCallback = Callable[[str, TimeoutType, int, int], Awaitable[None]]


class TimerManager:
    """Own at most one timer pair per room, in process memory only.

    Arming a room always cancels the pair it replaces. The manager does not
    look at room state; the SessionManager decides when to arm or cancel.
    """

    def __init__(self, on_timeout: TimeoutCallback, config: TimerConfig | None = None) -> None:
        self._timers: dict[str, TurnTimerPair] = {}
        self._on_timeout = on_timeout
        self._config = config or TimerConfig()

    @property
    def config(self) -> TimerConfig:
        return self._config

    def has_timer(self, room_id: str) -> bool:
        timer = self._timers.get(room_id)
        return timer is not None and timer.is_active

    def get_timer(self, room_id: str) -> TurnTimerPair | None:
        return self._timers.get(room_id)

    def is_armed_for(self, room_id: str, seat: int, turn_number: int) -> bool:
        timer = self._timers.get(room_id)
        return timer is not None and timer.is_active and timer.seat == seat and timer.turn_number == turn_number

    def arm(self, room_id: str, seat: int, turn_number: int, *, is_bot: bool) -> TurnTimerPair:
        """Replace the room's timer pair with a fresh one for the given turn."""
        self.cancel(room_id)
        timer = TurnTimerPair(seat, turn_number, self._config.deadline_for(is_bot=is_bot))
        timer.start(
            self._config.warning_seconds,
            on_warning=lambda: self._on_timeout(room_id, TimeoutType.WARNING, seat, turn_number),
            on_action=lambda: self._on_timeout(room_id, TimeoutType.ACTION, seat, turn_number),
        )
        self._timers[room_id] = timer
        logger.debug("turn timer armed", room_id=room_id, seat=seat, deadline=timer.deadline_seconds)
        return timer

    def cancel(self, room_id: str) -> None:
        timer = self._timers.pop(room_id, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        """Cancel every room's timers (server shutdown)."""
        for room_id in list(self._timers):
            self.cancel(room_id)

    def __len__(self) -> int:
        return len(self._timers)
