import pytest

from tickengine.context import ContextBuilder, ControlFlow
from tickengine.tick import Tick, TickConfig, TickIndex


class FakeClock:
    def __init__(self, times):
        self._times = iter(times)

    def __call__(self):
        return next(self._times)


def _run(tick, control_flow, count):
    for _ in range(count):
        tick.update(TickConfig(tick.timestep()), control_flow)


def test_create_from_config():
    tick = Tick.create(TickConfig(0.25), ControlFlow())
    assert tick.timestep() == 0.25
    assert tick.index() == TickIndex(0)
    assert tick.is_frame()
    assert tick.drift() == 0.0
    assert tick.slept() == 0.0
    assert Tick.debug_name() == "tick"


def test_first_update_only_records_time():
    control_flow = ControlFlow()
    tick = Tick(0.1, clock=FakeClock([0.0]))
    _run(tick, control_flow, 1)
    assert tick.index() == TickIndex(0)
    assert control_flow.sleep_until is None


def test_ahead_of_real_time_requests_sleep():
    control_flow = ControlFlow()
    tick = Tick(0.1, clock=FakeClock([0.0, 0.05]))
    _run(tick, control_flow, 2)
    assert tick.index() == TickIndex(1)
    assert tick.drift() < 0
    assert tick.is_frame()
    assert tick.slept() == pytest.approx(tick.timestep() - tick.drift())
    assert control_flow.sleep_until == pytest.approx(0.05 + tick.slept())


def test_behind_real_time_skips_frame_and_sleep():
    control_flow = ControlFlow()
    tick = Tick(0.1, clock=FakeClock([0.0, 0.5]))
    _run(tick, control_flow, 2)
    assert tick.drift() > tick.timestep()
    assert not tick.is_frame()
    assert tick.slept() == 0.0
    assert control_flow.sleep_until is None
    assert tick.index() == TickIndex(1)


def test_steady_clock_keeps_drift_near_zero():
    control_flow = ControlFlow()
    tick = Tick(0.1, clock=FakeClock([0.0, 0.1, 0.2, 0.3]))
    _run(tick, control_flow, 4)
    assert tick.index() == TickIndex(3)
    assert tick.drift() == pytest.approx(0.0, abs=1e-9)
    assert tick.is_frame()


def test_seconds_since_tick_is_antisymmetric():
    tick = Tick(0.1, clock=FakeClock([0.0, 0.1, 0.2]))
    _run(tick, ControlFlow(), 3)
    assert tick.index() == TickIndex(2)
    assert tick.seconds_since_tick(tick.index()) == 0
    past = tick.seconds_since_tick(TickIndex(0))
    future = tick.seconds_since_tick(TickIndex(4))
    assert past > 0
    assert future == pytest.approx(-past)


def test_tick_index_ordering():
    assert TickIndex(1) < TickIndex(2)
    assert sorted([TickIndex(3), TickIndex(0)]) == [TickIndex(0), TickIndex(3)]


def test_tick_in_context():
    context = ContextBuilder().inject(TickConfig(0.0)).system(Tick).build()
    context.step()
    context.step()
    tick = context.get(Tick)
    assert tick.index() == TickIndex(1)
    assert context.get(ControlFlow).sleep_until is None
    context.destroy()