import asyncio

from okey.logic.enums import TimeoutType
from okey.logic.timer import TimerConfig
from okey.session.timer_manager import TimerManager


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, TimeoutType, int, int]] = []
        self.fired = asyncio.Event()

    async def __call__(self, room_id: str, timeout_type: TimeoutType, seat: int, turn_number: int) -> None:
        self.calls.append((room_id, timeout_type, seat, turn_number))
        if timeout_type == TimeoutType.ACTION:
            self.fired.set()


class TestTimerManager:
    async def test_bot_turn_fires_action_only(self):
        recorder = Recorder()
        manager = TimerManager(recorder, TimerConfig(turn_seconds=30, warning_seconds=10, bot_turn_seconds=0.02))
        manager.arm("room-1", 2, 5, is_bot=True)

        await asyncio.wait_for(recorder.fired.wait(), timeout=1.0)
        assert recorder.calls == [("room-1", TimeoutType.ACTION, 2, 5)]

    async def test_human_turn_warns_first(self):
        recorder = Recorder()
        manager = TimerManager(recorder, TimerConfig(turn_seconds=0.1, warning_seconds=0.05))
        manager.arm("room-1", 0, 0, is_bot=False)

        await asyncio.wait_for(recorder.fired.wait(), timeout=1.0)
        assert [c[1] for c in recorder.calls] == [TimeoutType.WARNING, TimeoutType.ACTION]

    async def test_rearm_replaces_previous_pair(self):
        recorder = Recorder()
        manager = TimerManager(recorder, TimerConfig(turn_seconds=30, bot_turn_seconds=0.05))
        first = manager.arm("room-1", 0, 0, is_bot=True)
        manager.arm("room-1", 1, 1, is_bot=True)

        await asyncio.wait_for(recorder.fired.wait(), timeout=1.0)
        assert not first.is_active
        assert recorder.calls == [("room-1", TimeoutType.ACTION, 1, 1)]
        assert len(manager) == 1

    async def test_is_armed_for(self):
        manager = TimerManager(Recorder())
        manager.arm("room-1", 3, 9, is_bot=False)
        assert manager.is_armed_for("room-1", 3, 9)
        assert not manager.is_armed_for("room-1", 3, 10)
        assert not manager.is_armed_for("room-2", 3, 9)
        manager.cancel_all()

    async def test_cancel(self):
        recorder = Recorder()
        manager = TimerManager(recorder, TimerConfig(bot_turn_seconds=0.02))
        manager.arm("room-1", 0, 0, is_bot=True)
        manager.cancel("room-1")

        await asyncio.sleep(0.05)
        assert recorder.calls == []
        assert not manager.has_timer("room-1")
        assert manager.get_timer("room-1") is None

    async def test_cancel_all(self):
        manager = TimerManager(Recorder())
        manager.arm("a", 0, 0, is_bot=False)
        manager.arm("b", 0, 0, is_bot=False)
        assert len(manager) == 2
        manager.cancel_all()
        assert len(manager) == 0
