"""Assembles systems and injected values into a context and drives their lifecycle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar, Union

from .errors import ContextError, EngineError, SystemFailure
from .system import System

_log = logging.getLogger(__name__)

T = TypeVar("T")

# (hook name, label used in errors and logs, whether to log each call)
_SETUP = ("setup", "setup", True)
_UPDATE = ("update", "update", False)
_TEARDOWN = ("teardown", "teardown", True)
_DESTROY = ("destroy", "destruction", True)


@dataclass
class ControlFlow:
    """Requests from systems to the main loop."""

    quit_requested: bool = False
    sleep_until: Optional[float] = None


@dataclass
class Inject(Generic[T]):
    """A value made available to systems for reading."""

    value: T


@dataclass
class InjectMut(Generic[T]):
    """A value made available to systems for reading and writing."""

    value: T


@dataclass
class _Slot:
    holder: Union[Inject, InjectMut, System]
    dependencies: Tuple[Any, ...] = ()

    @property
    def value(self) -> Any:
        if isinstance(self.holder, (Inject, InjectMut)):
            return self.holder.value
        return self.holder

    @property
    def system(self) -> Optional[System]:
        if isinstance(self.holder, (Inject, InjectMut)):
            return None
        return self.holder


def _lookup(slots: List[_Slot], kind: Type[T]) -> T:
    for slot in reversed(slots):
        if isinstance(slot.value, kind):
            return slot.value
    raise LookupError(f"no value of type {kind.__name__} in context")


def _run_stage(slots: List[_Slot], stage: Tuple[str, str, bool], reverse: bool) -> None:
    hook, label, verbose = stage
    ordered = reversed(slots) if reverse else slots
    for slot in ordered:
        system = slot.system
        if system is None:
            continue
        name = type(system).debug_name()
        if verbose:
            _log.info("Running %s for system %r...", label, name)
        try:
            getattr(system, hook)(*slot.dependencies)
        except Exception as exc:
            raise SystemFailure(label, name) from exc


def _log_fatal(error: BaseException) -> None:
    _log.error("Fatal error: %s", error)
    cause = error.__cause__
    while cause is not None:
        _log.error("    caused by: %s", cause)
        cause = cause.__cause__


class ContextBuilder:
    """Collects injected values and systems, in creation order."""

    def __init__(self) -> None:
        self._slots: List[_Slot] = [_Slot(InjectMut(ControlFlow()))]

    def inject(self, value: Any) -> "ContextBuilder":
        """Make ``value`` available to systems added afterwards."""
        self._slots.append(_Slot(Inject(value)))
        return self

    def inject_mut(self, value: Any) -> "ContextBuilder":
        """Make ``value`` available, for modification, to systems added afterwards."""
        self._slots.append(_Slot(InjectMut(value)))
        return self

    def system(self, system_type: Type[System]) -> "ContextBuilder":
        """Create a system from what has been added before it.

        The system's ``dependencies`` class attribute lists the types it needs;
        each is looked up among earlier entries, newest first.
        """
        kinds = getattr(system_type, "dependencies", ())
        dependencies = tuple(_lookup(self._slots, kind) for kind in kinds)
        name = system_type.debug_name()
        _log.info("Creating system %r...", name)
        try:
            instance = system_type.create(*dependencies)
        except Exception as exc:
            raise SystemFailure("creation", name) from exc
        self._slots.append(_Slot(instance, dependencies))
        return self

    def build(self) -> "Context":
        """Set up every system, oldest first, and return the running context."""
        slots = list(self._slots)
        try:
            _run_stage(slots, _SETUP, reverse=False)
        except SystemFailure as exc:
            raise ContextError("setup") from exc
        _log.info("Context set up.")
        return Context(slots)


class Context:
    """A built set of systems that can be stepped, run and destroyed."""

    def __init__(self, slots: List[_Slot]) -> None:
        self._slots: Optional[List[_Slot]] = slots

    def _live_slots(self) -> List[_Slot]:
        if self._slots is None:
            raise RuntimeError("call on destroyed context")
        return self._slots

    def get(self, kind: Type[T]) -> T:
        """The newest system or injected value of type ``kind``."""
        return _lookup(self._live_slots(), kind)

    def step(self) -> None:
        """Update every system once, oldest first."""
        try:
            _run_stage(self._live_slots(), _UPDATE, reverse=False)
        except SystemFailure as exc:
            raise ContextError("update") from exc

    def destroy(self) -> None:
        """Tear down and destroy every system, newest first. Safe to repeat."""
        slots, self._slots = self._slots, None
        if slots is None:
            return
        try:
            _run_stage(slots, _TEARDOWN, reverse=True)
        except SystemFailure as exc:
            raise ContextError("teardown") from exc
        _log.info("Context tore down.")
        try:
            _run_stage(slots, _DESTROY, reverse=True)
        except SystemFailure as exc:
            raise ContextError("destruction") from exc
        _log.info("Context destroyed.")

    def run(self) -> None:
        """Step until a system requests quit, then destroy the context."""
        while True:
            try:
                self.step()
                control_flow = self.get(ControlFlow)
                sleep_until, control_flow.sleep_until = control_flow.sleep_until, None
                if control_flow.quit_requested:
                    self.destroy()
                    return
            except EngineError as error:
                _log_fatal(error)
                raise
            if sleep_until is not None:
                delay = sleep_until - time.monotonic()
                if delay > 0:
                    time.sleep(delay)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.destroy()