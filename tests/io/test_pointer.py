from __future__ import annotations

from typing import Any, Callable

import pytest

from engine.io.pointer import PointerState, PointerTracker, normalize_pointer


class _FakeScheduler:
    """`pyglet.clock` 互換の最小スケジューラ（手動で時間を進める）。"""

    def __init__(self) -> None:
        self.now = 0.0
        self.pending: list[tuple[float, Callable[..., Any]]] = []
        self.unscheduled = 0

    def schedule_once(self, func: Callable[..., Any], delay: float, *args: Any) -> None:
        self.pending.append((self.now + delay, func))

    def unschedule(self, func: Callable[..., Any]) -> None:
        before = len(self.pending)
        self.pending = [(t, f) for (t, f) in self.pending if f != func]
        self.unscheduled += before - len(self.pending)

    def advance(self, to: float) -> None:
        self.now = to
        due = [(t, f) for (t, f) in self.pending if t <= to]
        self.pending = [(t, f) for (t, f) in self.pending if t > to]
        for t, f in due:
            f(to - t)


@pytest.mark.parametrize(
    "client, expected",
    [
        ((0, 0), (-1.0, 1.0)),
        ((800, 600), (1.0, -1.0)),
        ((400, 300), (0.0, 0.0)),
        ((600, 150), (0.5, 0.5)),
    ],
)
def test_normalize_pointer(client, expected) -> None:
    assert normalize_pointer(client[0], client[1], 800, 600) == pytest.approx(expected)


def test_normalize_pointer_rejects_empty_viewport() -> None:
    with pytest.raises(ValueError):
        normalize_pointer(0, 0, 0, 600)


def test_move_updates_state_and_schedules_single_reset() -> None:
    sched = _FakeScheduler()
    tracker = PointerTracker(idle_reset_sec=1.0, scheduler=sched)
    tracker.move(600, 150, 800, 600)
    tracker.move(600, 150, 800, 600)
    assert tracker.state.as_tuple() == pytest.approx((0.5, 0.5))
    assert len(sched.pending) == 1
    assert tracker.reset_pending


def test_idle_reset_after_one_second() -> None:
    sched = _FakeScheduler()
    tracker = PointerTracker(scheduler=sched)
    tracker.move(600, 150, 800, 600)
    sched.advance(0.99)
    assert tracker.state.as_tuple() == pytest.approx((0.5, 0.5))
    sched.advance(1.0)
    assert tracker.state.as_tuple() == (0.0, 0.0)
    assert not tracker.reset_pending


def test_move_restarts_idle_window() -> None:
    sched = _FakeScheduler()
    tracker = PointerTracker(scheduler=sched)
    tracker.move(600, 150, 800, 600)
    sched.advance(0.9)
    tracker.move(200, 450, 800, 600)
    sched.advance(1.5)
    assert tracker.state.as_tuple() == pytest.approx((-0.5, -0.5))
    sched.advance(1.9)
    assert tracker.state.as_tuple() == (0.0, 0.0)


def test_cancel_drops_pending_reset() -> None:
    sched = _FakeScheduler()
    tracker = PointerTracker(scheduler=sched)
    tracker.move(600, 150, 800, 600)
    tracker.cancel()
    sched.advance(5.0)
    assert tracker.state.as_tuple() == pytest.approx((0.5, 0.5))
    assert not tracker.reset_pending


def test_shared_state_object() -> None:
    state = PointerState()
    tracker = PointerTracker(state, scheduler=_FakeScheduler())
    tracker.move(800, 0, 800, 600)
    assert (state.x, state.y) == pytest.approx((1.0, 1.0))


def test_invalid_idle_time() -> None:
    with pytest.raises(ValueError):
        PointerTracker(idle_reset_sec=0.0, scheduler=_FakeScheduler())


def test_with_pyglet_clock() -> None:
    """実際の `pyglet.clock.Clock` でもデバウンスが成立する（時間は手動）。"""
    clock_mod = pytest.importorskip("pyglet.clock")
    now = [0.0]
    clock = clock_mod.Clock(time_function=lambda: now[0])
    tracker = PointerTracker(scheduler=clock)

    clock.tick()
    tracker.move(600, 150, 800, 600)

    now[0] = 0.9
    clock.tick()
    tracker.move(200, 450, 800, 600)

    now[0] = 1.5
    clock.tick()
    assert tracker.state.as_tuple() == pytest.approx((-0.5, -0.5))

    now[0] = 2.5
    clock.tick()
    assert tracker.state.as_tuple() == (0.0, 0.0)
