import asyncio
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from pypopupanchor.positioning import PopupTracker, PositionResult
from pypopupanchor.scene import Scene
from pypopupanchor.types import Entity, PositionStatus, ScreenPoint, Vector3


class FakeCalculator:
    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = []
        self.resets = 0
        self.gate = None

    def reset(self):
        self.resets += 1

    async def compute(self, entity, scene, current_position):
        self.calls.append((entity.id, current_position))
        if self.gate is not None:
            await self.gate.wait()
        return self.results.pop(0)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_tracker(results, clock=None):
    calculator = FakeCalculator(results)
    tracker = PopupTracker(Scene(), calculator=calculator, clock=clock or FakeClock())
    return tracker, calculator


def test_refresh_notifies_handlers_on_change():
    async def run_test():
        tracker, calc = make_tracker([
            PositionResult.shown(PositionStatus.SMOOTHED, ScreenPoint(12, 10)),
        ])
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append((position, result.status)))
        tracker.select(Entity.at(Vector3(1, 1, 1), id="e1"), ScreenPoint(10, 10))

        result = await tracker.refresh()

        assert result.position == ScreenPoint(12, 10)
        assert tracker.position == ScreenPoint(12, 10)
        assert tracker.visible
        assert seen == [(ScreenPoint(12, 10), PositionStatus.SMOOTHED)]
        assert calc.calls == [("e1", ScreenPoint(10, 10))]
        assert calc.resets == 1
    asyncio.run(run_test())


def test_unchanged_position_is_not_notified():
    async def run_test():
        tracker, _ = make_tracker([PositionResult.shown(PositionStatus.HELD, ScreenPoint(10, 10))])
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append(position))
        tracker.select(Entity.at(Vector3.ZERO), ScreenPoint(10, 10))
        await tracker.refresh()
        assert seen == []
    asyncio.run(run_test())


def test_hidden_result_hides_popup():
    async def run_test():
        tracker, _ = make_tracker([PositionResult.hidden(PositionStatus.CULLED)])
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append(position))
        tracker.select(Entity.at(Vector3.ZERO), ScreenPoint(10, 10))
        await tracker.refresh()
        assert seen == [None]
        assert not tracker.visible
    asyncio.run(run_test())


def test_refreshes_closer_than_min_interval_are_skipped():
    async def run_test():
        clock = FakeClock()
        tracker, calc = make_tracker([
            PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(1, 1)),
            PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(2, 2)),
            PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(3, 3)),
        ], clock)
        tracker.select(Entity.at(Vector3.ZERO))

        await tracker.refresh()
        clock.now = 20.0
        skipped = await tracker.refresh()
        assert skipped.status is PositionStatus.UNCHANGED
        assert skipped.position == ScreenPoint(1, 1)
        assert len(calc.calls) == 1

        forced = await tracker.refresh(force=True)
        assert forced.position == ScreenPoint(2, 2)

        clock.now = 100.0
        assert (await tracker.refresh()).position == ScreenPoint(3, 3)
        assert len(calc.calls) == 3
    asyncio.run(run_test())


def test_result_for_previous_selection_is_discarded():
    async def run_test():
        tracker, calc = make_tracker([PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(500, 500))])
        calc.gate = asyncio.Event()
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append(position))

        tracker.select(Entity.at(Vector3.ZERO, id="old"), ScreenPoint(10, 10))
        pending = asyncio.ensure_future(tracker.refresh())
        await asyncio.sleep(0)

        tracker.select(Entity.at(Vector3.ZERO, id="new"), ScreenPoint(20, 20))
        calc.gate.set()
        result = await pending

        assert result.status is PositionStatus.STALE
        assert tracker.position == ScreenPoint(20, 20)
        assert seen == []
    asyncio.run(run_test())


def test_reselecting_same_entity_still_discards_old_result():
    async def run_test():
        tracker, calc = make_tracker([PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(500, 500))])
        calc.gate = asyncio.Event()
        entity = Entity.at(Vector3.ZERO)

        tracker.select(entity, ScreenPoint(10, 10))
        pending = asyncio.ensure_future(tracker.refresh())
        await asyncio.sleep(0)
        tracker.select(entity, ScreenPoint(30, 30))
        calc.gate.set()

        assert (await pending).status is PositionStatus.STALE
        assert tracker.position == ScreenPoint(30, 30)
    asyncio.run(run_test())


def test_clear_hides_and_discards_in_flight_result():
    async def run_test():
        tracker, calc = make_tracker([PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(500, 500))])
        calc.gate = asyncio.Event()
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append((position, result.status)))

        tracker.select(Entity.at(Vector3.ZERO), ScreenPoint(10, 10))
        pending = asyncio.ensure_future(tracker.refresh())
        await asyncio.sleep(0)
        tracker.clear()
        calc.gate.set()

        assert (await pending).status is PositionStatus.STALE
        assert tracker.entity is None
        assert seen == [(None, PositionStatus.NO_ANCHOR)]
        assert (await tracker.refresh()).status is PositionStatus.NO_ANCHOR
    asyncio.run(run_test())


def test_handler_errors_do_not_stop_other_handlers(caplog):
    async def run_test():
        tracker, _ = make_tracker([PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(5, 5))])
        seen = []

        def broken(position, result):
            raise RuntimeError("handler broke")

        tracker.register_position_handler(broken)
        tracker.register_position_handler(lambda position, result: seen.append(position))
        tracker.select(Entity.at(Vector3.ZERO))
        await tracker.refresh()
        assert seen == [ScreenPoint(5, 5)]

        tracker.unregister_position_handler(broken)
        assert len(tracker._position_handlers) == 1
    asyncio.run(run_test())
    assert "Err in position_changed_handler" in caplog.text


def test_camera_changes_are_throttled():
    async def run_test():
        results = [PositionResult.shown(PositionStatus.PROJECTED, ScreenPoint(i, i)) for i in range(5)]
        tracker, calc = make_tracker(results)
        tracker.on_camera_changed()
        assert calc.calls == []

        tracker.select(Entity.at(Vector3.ZERO))
        tracker.on_camera_changed()
        tracker.on_camera_changed()
        tracker.on_camera_changed()
        await tracker.close()
        assert len(calc.calls) == 1
    asyncio.run(run_test())


def test_end_to_end_with_real_calculator():
    async def run_test():
        scene = Scene(800, 600)
        scene.camera.position = Vector3(-200, 0, 10)
        scene.camera.look_at(Vector3(0, 0, 10))
        tracker = PopupTracker(scene)
        seen = []
        tracker.register_position_handler(lambda position, result: seen.append(position))

        tracker.select(Entity.at(Vector3.ZERO), ScreenPoint(400, 250))
        result = await tracker.refresh()

        assert result.status is PositionStatus.PROJECTED
        assert tracker.position.X == 400
        assert seen == [tracker.position]
        await tracker.close()
    asyncio.run(run_test())
