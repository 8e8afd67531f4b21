"""Okey server configuration via environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from okey.logic.settings import MAX_HUMANS_PER_ROOM, GameSettings
from shared.logging import LogFormat, LogLevel


class OkeyServerSettings(BaseSettings):
    model_config = {"env_prefix": "OKEY_"}

    log_dir: str | None = Field(default="backend/logs/okey", min_length=1)
    log_format: LogFormat = "console"
    log_level: LogLevel = "INFO"
    store_backend: Literal["memory", "sqlite"] = "memory"
    database_path: str = Field(default="backend/data/okey.db", min_length=1)

    room_ttl_seconds: int = Field(default=7200, ge=60)  # 2 hours, sliding
    active_room_ttl_seconds: int = Field(default=3600, ge=60)  # 1 hour

    turn_seconds: float = Field(default=30, gt=0)
    warning_seconds: float = Field(default=10, ge=0)
    bot_turn_seconds: float = Field(default=1.5, ge=0)

    humans_per_room: int = Field(default=1, ge=1, le=MAX_HUMANS_PER_ROOM)

    def game_settings(self) -> GameSettings:
        """Build the gameplay settings shared by all rooms."""
        return GameSettings(
            turn_seconds=self.turn_seconds,
            warning_seconds=self.warning_seconds,
            bot_turn_seconds=self.bot_turn_seconds,
            room_ttl_seconds=self.room_ttl_seconds,
            active_room_ttl_seconds=self.active_room_ttl_seconds,
            humans_per_room=self.humans_per_room,
        )
