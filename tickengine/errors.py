"""Exceptions raised by the engine and its systems."""

from __future__ import annotations

from typing import Any, Optional


class EngineError(Exception):
    """Base class of every error the engine raises."""


class CreateWindowError(EngineError):
    """The window could not be created."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ResourceIoError(EngineError):
    """An I/O failure while loading a resource."""

    def __init__(self, path: str, resource: str) -> None:
        self.path = path
        self.resource = resource
        super().__init__(
            f"I/O error when accessing `{path}` for resource `{resource}`."
        )


class ShaderError(EngineError):
    """A shader failed to compile or link."""

    def __init__(self, log: str, needed_by: str) -> None:
        self.log = log
        self.needed_by = needed_by
        super().__init__(
            f"Linking/compiling shader for `{needed_by}` failed with:\n{log}"
        )


class UnsupportedFeatureError(EngineError):
    """A feature is not available on this platform."""

    def __init__(self, needed_by: str) -> None:
        self.needed_by = needed_by
        super().__init__(
            f"Feature needed by `{needed_by}` is not supported on this platform."
        )


class OutOfVideoMemoryError(EngineError):
    """A video memory allocation failed."""

    def __init__(self, needed_by: str) -> None:
        self.needed_by = needed_by
        super().__init__(
            f"Out of video memory when trying to allocate `{needed_by}`."
        )


class NoSuchEntityError(EngineError):
    """An entity id does not refer to a live entity."""

    def __init__(self, context: str, needed_by: Optional[str], id: Any) -> None:
        self.context = context
        self.needed_by = needed_by
        self.id = id
        super().__init__(
            f"No entity with id `{id!r}`, needed by `{needed_by!r}` when `{context}`"
        )


class NoSuchComponentError(EngineError):
    """A component id does not refer to an existing component."""

    def __init__(self, context: str, needed_by: Optional[str], id: Any) -> None:
        self.context = context
        self.needed_by = needed_by
        self.id = id
        super().__init__(
            f"No component with id `{id!r}`, needed by `{needed_by!r}` when `{context}`"
        )


class ContextError(EngineError):
    """A stage of the context lifecycle failed."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"Context {stage} error")


class SystemFailure(EngineError):
    """A stage of a single system's lifecycle failed."""

    def __init__(self, stage: str, system_name: str) -> None:
        self.stage = stage
        self.system_name = system_name
        super().__init__(f"System {stage} failed for `{system_name}`.")