"""Keyboard and mouse state, and polling of gestures and 2D analog controls."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .system import System

NUM_SCAN_CODES = 512
NUM_MOUSE_BUTTONS = 256


class MouseButton(enum.Enum):
    """Named mouse buttons; any other button is given by its integer index."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3
    BACK = 4
    FORWARD = 5


ButtonLike = Union[MouseButton, int]


class ElementState(enum.Enum):
    PRESSED = "pressed"
    RELEASED = "released"


# Events -------------------------------------------------------------------


@dataclass(frozen=True)
class NewEvents:
    """The event loop woke up.

    ``wait_cancelled`` marks a wake-up that interrupted a wait early;
    ``requested_resume`` is the time a timed wait was asked to end at.
    """

    wait_cancelled: bool = False
    requested_resume: Optional[float] = None


@dataclass(frozen=True)
class AboutToWait:
    """The event loop has drained its queue."""


@dataclass(frozen=True)
class CloseRequested:
    """The window was asked to close."""


@dataclass(frozen=True)
class KeyboardInput:
    key: int
    state: ElementState


@dataclass(frozen=True)
class MouseMotion:
    dx: float
    dy: float


@dataclass(frozen=True)
class ButtonInput:
    """A raw device button, identified by its device index."""

    button: int
    state: ElementState


Event = Union[NewEvents, AboutToWait, CloseRequested, KeyboardInput, MouseMotion, ButtonInput]


# Gestures -----------------------------------------------------------------


@dataclass(frozen=True)
class NoGesture:
    pass


@dataclass(frozen=True)
class KeyHold:
    key: int


@dataclass(frozen=True)
class KeyTrigger:
    key: int


@dataclass(frozen=True)
class ButtonHold:
    button: ButtonLike


@dataclass(frozen=True)
class ButtonTrigger:
    button: ButtonLike


@dataclass(frozen=True)
class AnyOf:
    gestures: Sequence["Gesture"]


@dataclass(frozen=True)
class AllOf:
    gestures: Sequence["Gesture"]


@dataclass(frozen=True)
class QuitTrigger:
    pass


Gesture = Union[
    NoGesture, KeyHold, KeyTrigger, ButtonHold, ButtonTrigger, AnyOf, AllOf, QuitTrigger
]


# Analogs ------------------------------------------------------------------


@dataclass(frozen=True)
class NoAnalog2d:
    pass


@dataclass(frozen=True)
class MouseAnalog:
    sensitivity: float


@dataclass(frozen=True)
class GesturesAnalog:
    x_positive: Gesture
    x_negative: Gesture
    y_positive: Gesture
    y_negative: Gesture
    step: float


@dataclass(frozen=True)
class SumAnalog:
    analogs: Sequence["Analog2d"]


Analog2d = Union[NoAnalog2d, MouseAnalog, GesturesAnalog, SumAnalog]


def _mouse_button_index(button: ButtonLike) -> int:
    if isinstance(button, MouseButton):
        return button.value
    return min(button + 6, NUM_MOUSE_BUTTONS - 1)


def _key_index(key: int) -> int:
    if not 0 <= key < NUM_SCAN_CODES:
        raise IndexError(f"key code {key} out of range 0..{NUM_SCAN_CODES}")
    return key


# A button is up (None) or down since the given update index.
_ButtonState = Optional[int]


class Input(System):
    """Accumulates window and device events into pollable input state."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock if clock is not None else time.monotonic
        self._current_update_index = 1
        self._keyboard: List[_ButtonState] = [None] * NUM_SCAN_CODES
        self._mouse_buttons: List[_ButtonState] = [None] * NUM_MOUSE_BUTTONS
        self._quit_requested_index = 0
        self._new_step = False
        self._mouse_enabled = True
        self._mouse_grabbed = False
        self._new_mouse_grabbed = True
        self._mouse_rel = [0.0, 0.0]

    @classmethod
    def create(cls) -> "Input":
        return cls()

    @classmethod
    def debug_name(cls) -> str:
        return "input"

    def reset(self) -> None:
        """Begin a new update: triggers expire and relative mouse motion is cleared."""
        self._current_update_index += 1
        self._mouse_rel = [0.0, 0.0]

    def _state_for(self, state: ElementState) -> _ButtonState:
        return self._current_update_index if state is ElementState.PRESSED else None

    def handle_event(self, event: Event) -> bool:
        """Record an event; returns True when a new step should run."""
        if isinstance(event, NewEvents):
            if event.wait_cancelled:
                pass
            elif event.requested_resume is not None and event.requested_resume > self._clock():
                pass
            else:
                self._new_step = True
        elif isinstance(event, AboutToWait):
            new_step, self._new_step = self._new_step, False
            return new_step
        elif isinstance(event, CloseRequested):
            self._quit_requested_index = self._current_update_index
        elif isinstance(event, KeyboardInput):
            self._keyboard[_key_index(event.key)] = self._state_for(event.state)
        elif isinstance(event, MouseMotion):
            if self._mouse_enabled:
                self._mouse_rel[0] += event.dx
                self._mouse_rel[1] += event.dy
        elif isinstance(event, ButtonInput):
            if self._mouse_enabled and 0 <= event.button < NUM_MOUSE_BUTTONS:
                self._mouse_buttons[event.button] = self._state_for(event.state)
        return False

    def set_cursor_grabbed(self, grabbed: bool) -> None:
        """Request a cursor grab change, applied on the next update."""
        self._new_mouse_grabbed = grabbed

    def set_mouse_enabled(self, enable: bool) -> None:
        self._mouse_enabled = enable

    def cursor_grabbed(self) -> bool:
        """Whether the cursor is currently grabbed (and hidden)."""
        return self._mouse_grabbed

    def _is_down(self, state: _ButtonState) -> bool:
        return state is not None

    def _is_triggered(self, state: _ButtonState) -> bool:
        return state == self._current_update_index

    def poll_gesture(self, gesture: Gesture) -> bool:
        match gesture:
            case QuitTrigger():
                return self._quit_requested_index == self._current_update_index
            case KeyHold(key=key):
                return self._is_down(self._keyboard[_key_index(key)])
            case KeyTrigger(key=key):
                return self._is_triggered(self._keyboard[_key_index(key)])
            case ButtonHold(button=button):
                return self._is_down(self._mouse_buttons[_mouse_button_index(button)])
            case ButtonTrigger(button=button):
                return self._is_triggered(self._mouse_buttons[_mouse_button_index(button)])
            case AnyOf(gestures=gestures):
                return any(self.poll_gesture(sub) for sub in gestures)
            case AllOf(gestures=gestures):
                return all(self.poll_gesture(sub) for sub in gestures)
            case NoGesture():
                return False
        raise TypeError(f"not a gesture: {gesture!r}")

    def _axis(self, positive: Gesture, negative: Gesture, step: float) -> float:
        if self.poll_gesture(positive):
            return step
        if self.poll_gesture(negative):
            return -step
        return 0.0

    def poll_analog2d(self, motion: Analog2d) -> Tuple[float, float]:
        match motion:
            case SumAnalog(analogs=analogs):
                x, y = 0.0, 0.0
                for analog in analogs:
                    ax, ay = self.poll_analog2d(analog)
                    x += ax
                    y += ay
                return (x, y)
            case MouseAnalog(sensitivity=sensitivity):
                return (self._mouse_rel[0] * sensitivity, self._mouse_rel[1] * sensitivity)
            case GesturesAnalog():
                return (
                    self._axis(motion.x_positive, motion.x_negative, motion.step),
                    self._axis(motion.y_positive, motion.y_negative, motion.step),
                )
            case NoAnalog2d():
                return (0.0, 0.0)
        raise TypeError(f"not an analog control: {motion!r}")

    def update(self) -> None:
        """Apply a pending cursor grab change."""
        if self._new_mouse_grabbed != self._mouse_grabbed:
            self._mouse_grabbed = self._new_mouse_grabbed