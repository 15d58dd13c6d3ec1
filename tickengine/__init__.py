"""A small game-engine core: systems, a context, entities, ticking, frame timers, input and projections."""

__version__ = "0.1.0"

__all__ = [
    "context",
    "entities",
    "errors",
    "frame_timers",
    "input",
    "projections",
    "system",
    "tick",
]