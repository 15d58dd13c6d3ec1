"""Named stopwatches timing stages of each frame, with a periodic log summary."""

from __future__ import annotations

import itertools
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .system import System
from .tick import Tick

_log = logging.getLogger(__name__)

_LOG_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True, order=True)
class FrameTimerId:
    """Handle to a frame timer, returned by ``FrameTimers.new_stopped``."""

    index: int


@dataclass
class _FrameTimer:
    debug_name: str
    last_start: Optional[float] = None
    seconds_since_logged: float = 0.0
    times_since_logged: float = 0.0

    def record(self, elapsed: float) -> float:
        self.seconds_since_logged += elapsed
        self.times_since_logged += 1.0
        return elapsed


def _div(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator)


@dataclass
class _RunningStats:
    count: int = 0
    minimum: float = 100.0
    maximum: float = -100.0
    total: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.maximum = max(self.maximum, value)
        self.minimum = min(self.minimum, value)

    def summary(self) -> str:
        return (
            f"n={self.count}, min={self.minimum * 1e3:.2f}ms "
            f"mean={_div(self.total, self.count) * 1e3:.2f}ms "
            f"max={self.maximum * 1e3:.2f}ms"
        )

    def reset(self) -> None:
        self.count = 0
        self.minimum = 100.0
        self.maximum = -100.0
        self.total = 0.0


class FrameTimers(System):
    """Manages timers that measure the per-frame time of particular stages.

    Every second a summary of the timer averages, tick drift and sleep times
    is written to the debug log.
    """

    dependencies = (Tick,)

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock if clock is not None else time.monotonic
        self._timers: Dict[FrameTimerId, _FrameTimer] = {}
        self._ids = itertools.count()
        self._last_logged: Optional[float] = None
        self._drift = _RunningStats()
        self._slept = _RunningStats()
        self.tick_timer = self.new_stopped("tick")
        self.frame_timer = self.new_stopped("frame")

    @classmethod
    def create(cls, tick: Tick) -> "FrameTimers":
        return cls()

    @classmethod
    def debug_name(cls) -> str:
        return "frame_timers"

    def _timer(self, timer_id: FrameTimerId) -> _FrameTimer:
        try:
            return self._timers[timer_id]
        except KeyError:
            raise KeyError(f"invalid timer id {timer_id!r}") from None

    def new_stopped(self, debug_name: str) -> FrameTimerId:
        """Create a stopped timer; ``debug_name`` labels it in the summary."""
        timer_id = FrameTimerId(next(self._ids))
        self._timers[timer_id] = _FrameTimer(debug_name=debug_name)
        return timer_id

    def remove(self, timer_id: FrameTimerId) -> None:
        """Remove a timer; raises KeyError for an unknown id."""
        self._timer(timer_id)
        del self._timers[timer_id]

    def start(self, timer_id: FrameTimerId) -> Optional[float]:
        """Start a timer; if it was running, restart it and return the elapsed seconds."""
        timer = self._timer(timer_id)
        now = self._clock()
        last_start, timer.last_start = timer.last_start, now
        if last_start is None:
            return None
        return timer.record(now - last_start)

    def stop(self, timer_id: FrameTimerId) -> Optional[float]:
        """Stop a timer and return the elapsed seconds, or None if it was stopped."""
        timer = self._timer(timer_id)
        last_start, timer.last_start = timer.last_start, None
        if last_start is None:
            return None
        return timer.record(self._clock() - last_start)

    def query(self, timer_id: FrameTimerId) -> Optional[float]:
        """Seconds since the timer was started, or None if it is stopped."""
        timer = self._timer(timer_id)
        if timer.last_start is None:
            return None
        return self._clock() - timer.last_start

    def update(self, tick: Tick) -> None:
        self._drift.add(tick.drift())
        slept = tick.slept()
        if slept > 0.0:
            self._slept.add(slept)

        self.start(self.tick_timer)
        if tick.is_frame():
            self.start(self.frame_timer)
        self._maybe_log()

    def _maybe_log(self) -> None:
        now = self._clock()
        if self._last_logged is None:
            self._last_logged = now
            return
        if now - self._last_logged < _LOG_INTERVAL_SECONDS:
            return
        self._last_logged = now

        parts = []
        for timer in self._timers.values():
            seconds, times = timer.seconds_since_logged, timer.times_since_logged
            timer.seconds_since_logged = 0.0
            timer.times_since_logged = 0.0
            parts.append(
                f"\n\t{timer.debug_name}\t{_div(times, seconds):.2f}/s "
                f"(avg {_div(seconds, times) * 1000.0:.2f}ms)"
            )
        _log.debug("Frame timer summary:%s", "".join(parts))
        _log.debug("Drift summary: %s", self._drift.summary())
        self._drift.reset()
        _log.debug("Sleep summary: %s", self._slept.summary())
        self._slept.reset()