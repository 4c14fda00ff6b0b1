from __future__ import annotations

import pytest

from engine.core.frame_clock import FrameClock


class _Recorder:
    def __init__(self, name: str, log: list[tuple[str, float]]):
        self.name = name
        self.log = log

    def tick(self, dt: float) -> None:
        self.log.append((self.name, dt))


def test_ticks_in_registration_order_and_accumulates() -> None:
    log: list[tuple[str, float]] = []
    clock = FrameClock([_Recorder("a", log), _Recorder("b", log)])
    clock.tick(0.5)
    clock.tick(0.25)
    assert log == [("a", 0.5), ("b", 0.5), ("a", 0.25), ("b", 0.25)]
    assert clock.elapsed == pytest.approx(0.75)
    assert clock.delta == pytest.approx(0.25)
    assert clock.frames == 2


def test_tick_without_dt_measures_time() -> None:
    log: list[tuple[str, float]] = []
    clock = FrameClock([_Recorder("a", log)])
    clock.tick()
    assert len(log) == 1
    assert log[0][1] >= 0.0
