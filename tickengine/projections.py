"""Perspective projections attached to entities."""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, TypeVar

from .entities import Entities, EntityId
from .system import System

_log = logging.getLogger(__name__)

O = TypeVar("O")

Column = Tuple[float, float, float, float]
Mat4 = Tuple[Column, Column, Column, Column]


def perspective(fov: float, aspect_ratio: float, near: float, far: float) -> Mat4:
    """Right-handed perspective matrix, as four columns, mapping depth to [-1, 1].

    ``fov`` is the vertical field of view in radians.
    """
    if not 0.0 < fov < math.pi:
        raise ValueError(f"field of view must be in (0, pi) radians, got {fov}")
    if not aspect_ratio > 0.0:
        raise ValueError(f"aspect ratio must be positive, got {aspect_ratio}")
    if not near > 0.0:
        raise ValueError(f"near plane must be positive, got {near}")
    if not far > near:
        raise ValueError(f"far plane ({far}) must be beyond the near plane ({near})")
    f = 1.0 / math.tan(fov / 2.0)
    return (
        (f / aspect_ratio, 0.0, 0.0, 0.0),
        (0.0, f, 0.0, 0.0),
        (0.0, 0.0, (far + near) / (near - far), -1.0),
        (0.0, 0.0, (2.0 * far * near) / (near - far), 0.0),
    )


@dataclass
class Projection:
    """Perspective parameters; ``fov`` is in radians."""

    fov: float
    aspect_ratio: float
    near: float
    far: float

    def matrix(self) -> Mat4:
        return perspective(self.fov, self.aspect_ratio, self.near, self.far)


@dataclass
class _StoredProjection:
    projection: Projection
    matrix: Mat4


class Projections(System):
    """Stores a projection and its matrix per entity."""

    dependencies = (Entities,)

    def __init__(self) -> None:
        self._map: Dict[EntityId, _StoredProjection] = {}

    @classmethod
    def create(cls, entities: Entities) -> "Projections":
        return cls()

    @classmethod
    def debug_name(cls) -> str:
        return "projections"

    def attach(self, entity: EntityId, projection: Projection) -> None:
        """Attach a copy of ``projection`` to ``entity``, replacing any previous one."""
        stored = dataclasses.replace(projection)
        if entity in self._map:
            _log.error("Entity %r already had a projection attached, replacing.", entity)
        self._map[entity] = _StoredProjection(stored, stored.matrix())

    def get_matrix(self, entity: EntityId) -> Optional[Mat4]:
        stored = self._map.get(entity)
        return stored.matrix if stored is not None else None

    def replace_with(
        self, entity: EntityId, with_: Callable[[Optional[Projection]], O]
    ) -> O:
        """Call ``with_`` on the entity's projection (or None) and refresh its matrix."""
        stored = self._map.get(entity)
        if stored is None:
            return with_(None)
        output = with_(stored.projection)
        stored.matrix = stored.projection.matrix()
        return output

    def update(self, entities: Entities) -> None:
        for entity in entities.last_removed():
            if self._map.pop(entity, None) is not None:
                _log.debug("Removed projection %r.", entity)

    def teardown(self, entities: Entities) -> None:
        self.update(entities)

    def destroy(self, entities: Entities) -> None:
        self.update(entities)
        if self._map:
            _log.error("Projections leaked, %d instances.", len(self._map))