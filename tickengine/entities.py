"""A hierarchy of named entities with deferred, cascading removal."""

from __future__ import annotations

import enum
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import NoSuchEntityError
from .system import System

_log = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class EntityId:
    """Opaque handle to an entity."""

    index: int

    def __repr__(self) -> str:
        return f"EntityId({self.index})"


class _Liveness(enum.Enum):
    ALIVE = "alive"
    KILLED = "killed"
    DEAD_DUE_TO_PARENT = "dead_due_to_parent"

    @property
    def is_alive(self) -> bool:
        return self is _Liveness.ALIVE


@dataclass
class Entity:
    """A node in the entity tree."""

    name: str
    parent_id: Optional[EntityId] = None
    child: Optional[EntityId] = None
    next: Optional[EntityId] = None
    previous: Optional[EntityId] = None
    liveness: _Liveness = field(default=_Liveness.ALIVE)

    def parent(self) -> Optional[EntityId]:
        """The id of the parent, or None for a root."""
        return self.parent_id


class Entities(System):
    """Owns the entity tree; removals are applied on the next update."""

    def __init__(self) -> None:
        self._slab: Dict[EntityId, Entity] = {}
        self._ids = itertools.count()
        self._first_root: Optional[EntityId] = None
        self._removed: List[EntityId] = []
        self._last_removed: List[EntityId] = []

    @classmethod
    def create(cls) -> "Entities":
        return cls()

    @classmethod
    def debug_name(cls) -> str:
        return "entities"

    def __len__(self) -> int:
        return len(self._slab)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._slab

    def is_empty(self) -> bool:
        return not self._slab

    def _new_id(self) -> EntityId:
        return EntityId(next(self._ids))

    def add_root(self, name: str) -> EntityId:
        """Add a new root entity and return its id."""
        new_id = self._new_id()
        self._slab[new_id] = Entity(name=name, next=self._first_root)
        old_first_root, self._first_root = self._first_root, new_id
        if old_first_root is not None:
            self._slab[old_first_root].previous = new_id
        _log.debug("Added root %r %r.", name, new_id)
        return new_id

    def add(self, parent: EntityId, name: str) -> EntityId:
        """Add a child of ``parent``; raises NoSuchEntityError if it is gone."""
        parent_entity = self._slab.get(parent)
        if parent_entity is None:
            raise NoSuchEntityError(context="add", needed_by=name, id=parent)

        new_id = self._new_id()
        new = Entity(name=name, parent_id=parent)
        self._slab[new_id] = new
        parent_dead = not parent_entity.liveness.is_alive
        old_child, parent_entity.child = parent_entity.child, new_id

        if old_child is not None:
            new.next = old_child
            if parent_dead:
                new.liveness = _Liveness.DEAD_DUE_TO_PARENT
                self._removed.append(new_id)
            self._slab[old_child].previous = new_id
        elif parent_dead:
            new.liveness = _Liveness.DEAD_DUE_TO_PARENT
        _log.debug("Added entity %r %r as child of %r.", name, new_id, parent)
        return new_id

    def remove(self, entity_id: EntityId) -> None:
        """Mark an entity (and its subtree) for removal on the next update."""
        _log.debug("Lazily removed entity %r.", entity_id)
        self._removed.append(entity_id)

    def last_removed(self) -> Tuple[EntityId, ...]:
        """Ids removed by the most recent update that had work to do."""
        return tuple(self._last_removed)

    def get(self, entity_id: EntityId) -> Optional[Entity]:
        return self._slab.get(entity_id)

    def debug_name_of(self, entity_id: EntityId) -> Optional[str]:
        entity = self._slab.get(entity_id)
        return entity.name if entity is not None else None

    def debug_tree_dump(self, indent: int) -> str:
        """Render the entity tree as indented text."""
        lines = ["Entity tree dump:\n"]
        if self._first_root is None:
            return lines[0]
        stack: List[Tuple[int, EntityId]] = [(0, self._first_root)]
        while stack:
            depth, entity_id = stack.pop()
            lead = indent + depth * 4
            lines.append(" " * lead)
            entity = self._slab.get(entity_id)
            if entity is None:
                lines.append("|- <missing>\n")
                continue
            padding = max(0, 60 - (lead + 3 + len(entity.name) + 4))
            lines.append(f"|- {entity.name}  {'.' * padding}  ({entity_id!r})\n")
            if entity.next is not None:
                stack.append((depth, entity.next))
            if entity.child is not None:
                stack.append((depth + 1, entity.child))
        return "".join(lines)

    def update(self) -> None:
        """Apply pending removals, cascading to descendants."""
        removed = self._removed
        if not removed:
            return
        last_removed = self._last_removed
        num_explicit = len(removed)
        last_removed.clear()

        # Mark explicitly removed entities as killed, deduplicating, and queue
        # their first children for orphan collection.
        for removed_id in removed[:num_explicit]:
            entity = self._slab.get(removed_id)
            if entity is None or not entity.liveness.is_alive:
                continue
            entity.liveness = _Liveness.KILLED
            last_removed.append(removed_id)
            if entity.child is not None:
                removed.append(entity.child)
        num_killed = len(last_removed)

        # Collect orphans: each queued id starts a sibling chain of children.
        position = num_explicit
        while position < len(removed):
            removed_id: Optional[EntityId] = removed[position]
            while removed_id is not None:
                entity = self._slab.pop(removed_id)
                if entity.liveness.is_alive:
                    last_removed.append(removed_id)
                    if entity.child is not None:
                        removed.append(entity.child)
                removed_id = entity.next
            position += 1

        # Unlink killed entities that survived orphan collection.
        for removed_id in last_removed[:num_killed]:
            entity = self._slab.pop(removed_id, None)
            if entity is None:
                continue
            if entity.next is not None:
                self._slab[entity.next].previous = entity.previous
            if entity.previous is not None:
                self._slab[entity.previous].next = entity.next
            if entity.parent_id is not None:
                parent = self._slab[entity.parent_id]
                if parent.child == removed_id:
                    parent.child = entity.next
            elif self._first_root == removed_id:
                self._first_root = entity.next

        _log.debug("Collected %d removed ids.", len(last_removed))
        removed.clear()

    def teardown(self) -> None:
        self.update()

    def destroy(self) -> None:
        self.update()
        if not self.is_empty():
            _log.error("Entities leaked. %s", self.debug_tree_dump(4))