import pytest
from pydantic import ValidationError

from okey.logic.enums import DrawSource, GameEndReason, GameErrorCode, TileColor
from okey.logic.events import (
    BroadcastTarget,
    ErrorEvent,
    EventType,
    GameOverEvent,
    PongEvent,
    SeatTarget,
    ServiceEvent,
    TileDrawnEvent,
    to_room,
    to_seat,
)
from okey.logic.game import game_start_event
from okey.messaging.event_payload import event_payload, service_event_payload
from okey.tests.helpers.rooms import dealt_room, tile


class TestServiceEvent:
    def test_mismatched_type_rejected(self):
        with pytest.raises(ValidationError, match="does not match"):
            ServiceEvent(event=EventType.PONG, data=ErrorEvent(code=GameErrorCode.EMPTY_PILE, message="x"))

    def test_helpers_set_targets(self):
        assert to_room(PongEvent()).target == BroadcastTarget()
        assert to_seat(PongEvent(), 3).target == SeatTarget(seat=3)


class TestEventPayload:
    def test_fields_are_camel_case(self):
        payload = event_payload(game_start_event(dealt_room(), 0))

        assert payload["type"] == "game_start"
        assert payload["roomId"] == "room-1"
        assert payload["seatIndex"] == 0
        assert len(payload["hand"]) == 15
        assert set(payload["jokerIdentity"]) == {"value", "color"}
        assert payload["players"][1]["isBot"] is True
        assert "room_id" not in payload

    def test_tile_shape(self):
        payload = event_payload(TileDrawnEvent(tile=tile(TileColor.BLUE, 12, 2), source=DrawSource.LEFT))
        assert payload == {
            "type": "tile_drawn",
            "tile": {"id": "blue-12-2", "value": 12, "color": "blue", "isFakeJoker": False},
            "source": "left",
        }

    def test_none_values_are_kept(self):
        payload = event_payload(GameOverEvent(reason=GameEndReason.DECK_EXHAUSTED))
        assert payload["winnerId"] is None
        assert payload["reason"] == "deck_exhausted"

    def test_service_event_payload_uses_data(self):
        event = to_seat(ErrorEvent(code=GameErrorCode.NOT_YOUR_TURN, message="wait"), 1)
        assert service_event_payload(event) == {"type": "error", "code": "not_your_turn", "message": "wait"}

    def test_player_hands_stay_private(self):
        room = dealt_room()
        payload = event_payload(game_start_event(room, 2))
        own = {t["id"] for t in payload["hand"]}
        assert own == {t.id for t in room.hands[2]}
        assert "hands" not in payload
