"""Base class for engine systems with a create/setup/update/teardown/destroy lifecycle."""

from __future__ import annotations

import enum
import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class Stage(enum.Enum):
    """Lifecycle stage reached by a system through the default hooks."""

    CREATED = "created"
    SET_UP = "set_up"
    TORN_DOWN = "torn_down"
    DESTROYED = "destroyed"


class System:
    """A unit of engine state driven through a fixed lifecycle.

    Every lifecycle hook receives the system's dependencies as positional
    arguments. The default hooks only record the stage reached.
    """

    @classmethod
    def debug_name(cls) -> str:
        """Name used in logs and error messages."""
        return _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()

    @classmethod
    def create(cls, *args: Any) -> "System":
        """Build the system from its dependencies."""
        return cls(*args)

    @property
    def stage(self) -> Stage:
        """The last lifecycle stage recorded by the default hooks."""
        return getattr(self, "_stage", Stage.CREATED)

    def setup(self, *args: Any) -> None:
        """Called once after every system has been created."""
        self._stage = Stage.SET_UP

    def update(self, *args: Any) -> None:
        """Called once per step."""

    def teardown(self, *args: Any) -> None:
        """Called once before destruction, in reverse order."""
        self._stage = Stage.TORN_DOWN

    def destroy(self, *args: Any) -> None:
        """Called last; the system is not used afterwards."""
        self._stage = Stage.DESTROYED