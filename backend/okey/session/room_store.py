"""Typed room and player records over a key-value store.

Key layout:
  room:{room_id}        JSON GameRoom, sliding TTL refreshed on every save
  user:room:{player_id} active room id of a human player
  user:seen:{player_id} marker that the player has queued at least once
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from okey.logic.enums import RoomPhase
from okey.logic.settings import GameSettings
from okey.logic.state import GameRoom

if TYPE_CHECKING:
    from shared.dal.kv_store import KeyValueStore

logger = structlog.get_logger()

_KNOWN_MARKER = "1"


def room_key(room_id: str) -> str:
    return f"room:{room_id}"


def active_room_key(player_id: str) -> str:
    return f"user:room:{player_id}"


def known_player_key(player_id: str) -> str:
    return f"user:seen:{player_id}"


class RoomStore:
    def __init__(self, kv: KeyValueStore, settings: GameSettings | None = None) -> None:
        self._kv = kv
        self._settings = settings or GameSettings()

    async def save_room(self, room: GameRoom) -> None:
        """Persist the full room and refresh the expiry of its human seats' active-room entries."""
        await self._kv.set(room_key(room.room_id), room.model_dump_json(), self._settings.room_ttl_seconds)
        if room.phase == RoomPhase.PLAYING:
            for player_id in room.human_player_ids():
                await self._kv.expire(active_room_key(player_id), self._settings.active_room_ttl_seconds)

    async def load_room(self, room_id: str) -> GameRoom | None:
        raw = await self._kv.get(room_key(room_id))
        if raw is None:
            return None
        try:
            return GameRoom.model_validate_json(raw)
        except ValidationError:
            logger.exception("stored room is corrupt, discarding", room_id=room_id)
            await self._kv.delete(room_key(room_id))
            return None

    async def delete_room(self, room_id: str) -> None:
        await self._kv.delete(room_key(room_id))

    async def set_active_room(self, player_id: str, room_id: str) -> None:
        await self._kv.set(active_room_key(player_id), room_id, self._settings.active_room_ttl_seconds)

    async def get_active_room(self, player_id: str) -> str | None:
        return await self._kv.get(active_room_key(player_id))

    async def clear_active_room(self, player_id: str) -> None:
        await self._kv.delete(active_room_key(player_id))

    async def remember_player(self, player_id: str) -> None:
        await self._kv.set(known_player_key(player_id), _KNOWN_MARKER, self._settings.known_player_ttl_seconds)

    async def is_known_player(self, player_id: str) -> bool:
        return await self._kv.get(known_player_key(player_id)) is not None
