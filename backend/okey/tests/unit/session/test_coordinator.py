"""Unit tests for the load-apply-persist pipeline."""

import random

from okey.logic.enums import DrawSource, GameAction, RoomPhase
from okey.logic.events import EventType, SeatTarget
from okey.logic.state import Player, replace_seat
from okey.session.coordinator import TurnCoordinator
from okey.tests.helpers.rooms import dealt_room, room_with_hand, winning_arrangement, winning_tiles


class TestCreateRoom:
    async def test_creates_and_persists_dealt_room(self, store):
        coordinator = TurnCoordinator(store, rng=random.Random(2))
        seats = [Player(id="alice", name="Alice"), *(Player(id=f"bot-{i}", name=f"Bot {i}") for i in range(1, 4))]
        result = await coordinator.create_room(seats)

        assert result.room.phase == RoomPhase.PLAYING
        assert await store.load_room(result.room.room_id) == result.room
        assert await store.get_active_room("alice") == result.room.room_id
        assert await store.get_active_room("bot-1") is None
        assert [e.target for e in result.events] == [SeatTarget(seat=s) for s in range(4)]
        assert all(e.event == EventType.GAME_START for e in result.events)


class TestHandleAction:
    async def test_valid_action_is_persisted(self, store):
        room = dealt_room()
        await store.save_room(room)
        coordinator = TurnCoordinator(store)

        result = await coordinator.handle_action(
            room.room_id,
            "human-0",
            GameAction.DISCARD_TILE,
            {"tile_id": room.hands[0][0].id},
        )

        stored = await store.load_room(room.room_id)
        assert stored == result.room
        assert stored.turn_index == 1

    async def test_rejected_action_is_not_persisted(self, store):
        room = dealt_room()
        await store.save_room(room)
        coordinator = TurnCoordinator(store)

        result = await coordinator.handle_action(room.room_id, "human-0", GameAction.DRAW_TILE, {"source": "center"})

        (event,) = result.events
        assert event.target == SeatTarget(seat=0)
        assert event.data.code == "already_drew"
        assert await store.load_room(room.room_id) == room

    async def test_missing_room_dropped(self, store):
        coordinator = TurnCoordinator(store)
        assert await coordinator.handle_action("ghost", "human-0", GameAction.DRAW_TILE, {"source": "left"}) is None

    async def test_unseated_player_dropped(self, store):
        room = dealt_room()
        await store.save_room(room)
        coordinator = TurnCoordinator(store)
        result = await coordinator.handle_action(room.room_id, "mallory", GameAction.DRAW_TILE, {"source": "left"})
        assert result is None

    async def test_finish_clears_active_rooms(self, store):
        room = room_with_hand(winning_tiles())
        await store.save_room(room)
        await store.set_active_room("human-0", room.room_id)
        coordinator = TurnCoordinator(store)

        result = await coordinator.handle_action(
            room.room_id,
            "human-0",
            GameAction.FINISH_GAME,
            {"arranged_hand": winning_arrangement()},
        )

        assert result.game_over
        assert await store.get_active_room("human-0") is None
        assert (await store.load_room(room.room_id)).phase == RoomPhase.FINISHED


    async def test_draw_source_from_wire_value(self, store):
        room = dealt_room()
        room = room.model_copy(
            update={
                "hands": replace_seat(room.hands, 0, room.hands[0][:-1]),
                "draw_pile": (*room.draw_pile, room.hands[0][-1]),
            },
        )
        await store.save_room(room)
        coordinator = TurnCoordinator(store)

        result = await coordinator.handle_action(room.room_id, "human-0", GameAction.DRAW_TILE, {"source": "center"})

        assert result.events[0].data.source == DrawSource.CENTER
        assert len(result.room.hands[0]) == 15


class TestAutoMove:
    async def test_plays_current_turn(self, store):
        room = dealt_room()
        await store.save_room(room)
        coordinator = TurnCoordinator(store)

        result = await coordinator.auto_move(room.room_id, 0, 0)

        assert result.room.turn_number == 1
        assert (await store.load_room(room.room_id)).turn_number == 1

    async def test_stale_turn_ignored(self, store):
        room = dealt_room()
        await store.save_room(room)
        coordinator = TurnCoordinator(store)

        assert await coordinator.auto_move(room.room_id, 0, 3) is None
        assert await coordinator.auto_move(room.room_id, 1, 0) is None
        assert await coordinator.auto_move("ghost", 0, 0) is None
        assert await store.load_room(room.room_id) == room

    async def test_finished_room_ignored(self, store):
        room = dealt_room().model_copy(update={"phase": RoomPhase.FINISHED})
        await store.save_room(room)
        assert await TurnCoordinator(store).auto_move(room.room_id, 0, 0) is None


class TestUpdateConnection:
    async def test_replaces_connection_id(self, store):
        room = dealt_room()
        coordinator = TurnCoordinator(store)
        updated = await coordinator.update_connection(room, 0, "conn-new")

        assert updated.players[0].connection_id == "conn-new"
        assert (await store.load_room(room.room_id)).players[0].connection_id == "conn-new"
        assert updated.hands == room.hands

