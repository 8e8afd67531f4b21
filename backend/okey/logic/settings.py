"""
Gameplay settings for an Okey room.

GameSettings carries turn timings and store TTLs into the session layer.
Server configuration (OkeyServerSettings) builds one at startup.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from okey.logic.deck import NUM_SEATS

MAX_HUMANS_PER_ROOM = NUM_SEATS


class GameSettings(BaseModel):
    """Immutable gameplay configuration shared by every room in a process."""

    model_config = ConfigDict(frozen=True)

    # --- Turn timing ---
    turn_seconds: float = Field(default=30, gt=0)
    warning_seconds: float = Field(default=10, ge=0)
    bot_turn_seconds: float = Field(default=1.5, ge=0)

    # --- Store expiry ---
    room_ttl_seconds: int = Field(default=7200, ge=60)
    active_room_ttl_seconds: int = Field(default=3600, ge=60)
    known_player_ttl_seconds: int = Field(default=24 * 3600, ge=60)

    # --- Matchmaking ---
    humans_per_room: int = Field(default=1, ge=1, le=MAX_HUMANS_PER_ROOM)

    @model_validator(mode="after")
    def _check_warning_before_deadline(self) -> Self:
        if self.warning_seconds >= self.turn_seconds:
            raise ValueError("warning_seconds must be shorter than turn_seconds")
        return self
