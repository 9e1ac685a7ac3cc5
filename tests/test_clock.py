from __future__ import annotations

import pytest

from island_sim.core.clock import TickDriver, WorldClock, advance_time_of_day, clamp_delta_ms
from island_sim.core.config import DAY_LENGTH_MS, START_TIME_OF_DAY


class FakeEngine:
    def __init__(self, active: bool = True) -> None:
        self.is_active = active
        self.ticks: list[float] = []
        self.sweeps = 0

    def tick(self, delta_ms: float) -> None:
        self.ticks.append(delta_ms)

    def sweep_resources(self) -> None:
        self.sweeps += 1


def test_time_of_day_wraps_past_midnight():
    one_hour_ms = DAY_LENGTH_MS / 24.0
    assert advance_time_of_day(23.5, one_hour_ms) == pytest.approx(0.5)


def test_time_of_day_never_reaches_24():
    for start in (0.0, 12.0, 23.99):
        value = advance_time_of_day(start, DAY_LENGTH_MS * 3.7)
        assert 0.0 <= value < 24.0


def test_clamp_delta():
    assert clamp_delta_ms(-50) == 0.0
    assert clamp_delta_ms(50) == 50.0
    assert clamp_delta_ms(5_000) == 200.0


def test_world_clock_day_rollover():
    clock = WorldClock()
    assert clock.time_of_day == START_TIME_OF_DAY
    assert not clock.is_night()
    clock.advance(DAY_LENGTH_MS)
    assert clock.day == 1
    assert clock.time_of_day == pytest.approx(START_TIME_OF_DAY)
    clock.reset()
    assert clock.elapsed_ms == 0.0 and clock.day == 0


def test_night_hours():
    clock = WorldClock(time_of_day=20.0)
    assert clock.is_night()
    clock = WorldClock(time_of_day=5.5)
    assert clock.is_night()


def test_driver_fires_tick_and_sweep_timers():
    engine = FakeEngine()
    driver = TickDriver(engine, interval_ms=100, sweep_interval_ms=2000)
    fired = driver.run_for(2000)
    assert fired == 20
    assert engine.ticks == [100.0] * 20
    assert engine.sweeps == 1


def test_driver_clamps_stalled_timer():
    engine = FakeEngine()
    driver = TickDriver(engine)
    assert driver.fire(5_000) == 200.0
    assert engine.ticks == [200.0]


def test_inactive_driver_does_not_tick_or_catch_up():
    engine = FakeEngine(active=False)
    driver = TickDriver(engine)
    driver.run_for(1_000, stop_when_inactive=False)
    assert engine.ticks == []
    assert engine.sweeps == 0

    engine.is_active = True
    driver.run_for(100)
    assert engine.ticks == [100.0]


def test_driver_rejects_bad_interval():
    with pytest.raises(ValueError):
        TickDriver(FakeEngine(), interval_ms=0)
