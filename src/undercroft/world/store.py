from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from ..errors import InvariantViolation
from .entity import PLAYER_ID, Entity, EntityId

logger = logging.getLogger(__name__)

PLAYER_SLOT = 0


class EntityStore:
    """Ordered collection of the current level's entities.

    Slot 0 always holds the player. New entities receive handles from a
    counter that never repeats for the lifetime of the session, including
    across level transitions.
    """

    def __init__(self, player: Entity, next_id: int = 1) -> None:
        if player.eid != PLAYER_ID:
            raise InvariantViolation(f"Store must be seeded with the player, got {player!r}")
        self._entities: List[Entity] = [player]
        self._next_id = max(next_id, int(PLAYER_ID) + 1)

    # Lifecycle
    def new_id(self) -> EntityId:
        eid = EntityId(self._next_id)
        self._next_id += 1
        return eid

    def add(self, entity: Entity) -> Entity:
        """Append a non-player entity. The player slot is never touched."""
        if entity.eid == PLAYER_ID:
            raise InvariantViolation("The player cannot be added twice")
        self._entities.append(entity)
        return entity

    def extract_player(self) -> Entity:
        """Take the player out of a store that is about to be discarded.

        Raises InvariantViolation if slot 0 is not the player; the session is
        corrupt at that point and must not continue.
        """
        if not self._entities or self._entities[PLAYER_SLOT].eid != PLAYER_ID:
            raise InvariantViolation("Entity store slot 0 does not hold the player")
        return self._entities[PLAYER_SLOT]

    def reseeded(self) -> "EntityStore":
        """A fresh store holding only the player, continuing the id counter."""
        player = self.extract_player()
        fresh = EntityStore(player, next_id=self._next_id)
        logger.debug("Discarded %d non-player entities", len(self._entities) - 1)
        return fresh

    # Queries
    @property
    def player(self) -> Entity:
        return self.extract_player()

    def is_player(self, eid: EntityId) -> bool:
        return eid == PLAYER_ID

    def get(self, eid: EntityId) -> Optional[Entity]:
        for entity in self._entities:
            if entity.eid == eid:
                return entity
        return None

    def at(self, x: int, y: int) -> List[Entity]:
        return [e for e in self._entities if e.x == x and e.y == y]

    def blocking_at(self, x: int, y: int) -> Optional[Entity]:
        for entity in self._entities:
            if entity.blocks and entity.x == x and entity.y == y:
                return entity
        return None

    def stairs(self) -> List[Entity]:
        return [e for e in self._entities if e.is_stairs]

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))

    def __len__(self) -> int:
        return len(self._entities)

    def __getitem__(self, index: int) -> Entity:
        return self._entities[index]

    def __repr__(self) -> str:
        return f"EntityStore({len(self._entities)} entities)"
