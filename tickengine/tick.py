"""Fixed-timestep simulation clock that paces the main loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .context import ControlFlow
from .system import System


@dataclass
class TickConfig:
    """Length of one simulation step, in seconds."""

    timestep: float


@dataclass(frozen=True, order=True)
class TickIndex:
    """Deterministic count of completed ticks."""

    value: int


class Tick(System):
    """Counts ticks and asks the loop to sleep when simulation runs ahead of real time."""

    dependencies = (TickConfig, ControlFlow)

    def __init__(
        self, timestep: float, clock: Optional[Callable[[], float]] = None
    ) -> None:
        self._timestep = timestep
        self._index = TickIndex(0)
        self._drift = 0.0
        self._slept = 0.0
        self._last_time: Optional[float] = None
        self._is_frame = True
        self._clock = clock if clock is not None else time.monotonic

    @classmethod
    def create(cls, config: TickConfig, control_flow: ControlFlow) -> "Tick":
        return cls(config.timestep)

    @classmethod
    def debug_name(cls) -> str:
        return "tick"

    def is_frame(self) -> bool:
        """Whether a frame should be rendered this tick."""
        return self._is_frame

    def timestep(self) -> float:
        return self._timestep

    def index(self) -> TickIndex:
        return self._index

    def drift(self) -> float:
        """Accumulated real time minus simulated time, in seconds."""
        return self._drift

    def slept(self) -> float:
        """Seconds of sleep requested by the last update."""
        return self._slept

    def seconds_since_tick(self, index: TickIndex) -> float:
        """Simulated seconds from ``index`` to the current tick (negative if in the future)."""
        if index.value < self._index.value:
            return (self._index.value - index.value) * self._timestep
        return (index.value - self._index.value) * -self._timestep

    def update(self, config: TickConfig, control_flow: ControlFlow) -> None:
        current_time = self._clock()
        last_time = self._last_time
        if last_time is None:
            self._last_time = current_time
            return

        self._drift += (current_time - last_time) - self._timestep

        self._slept = 0.0
        self._is_frame = self._drift < self._timestep
        if self._drift < self._timestep:
            sleep_seconds = max(self._timestep - self._drift, 0.0)
            control_flow.sleep_until = current_time + sleep_seconds
            self._slept = sleep_seconds
        self._last_time = current_time

        self._index = TickIndex(self._index.value + 1)