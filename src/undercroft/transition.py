from __future__ import annotations

import logging
from typing import Optional, Tuple

from .actions import ActionType, PlayerAction
from .errors import InvariantViolation
from .messages import LIGHT_VIOLET
from .session import GameEvent, GameSession
from .world.entity import Entity
from .world.store import EntityStore

logger = logging.getLogger(__name__)


def stairs_under(store: EntityStore, pos: Tuple[int, int]) -> Optional[Entity]:
    for entity in store.at(*pos):
        if entity.is_stairs:
            return entity
    return None


def can_descend(session: GameSession, action: PlayerAction) -> bool:
    """Descent fires only for a descend action taken while standing on stairs."""
    if action.type is not ActionType.DESCEND:
        return False
    return stairs_under(session.store, session.player.pos) is not None


def descend(session: GameSession) -> int:
    """Move the session one level deeper.

    Runs to completion in one call: rest, discard the old level, generate the
    new one, then rebuild the live field of view. The new level is built
    aside first; depth, store and map are only replaced once the generator
    has returned, so a failing generator leaves the session on the old level.
    Returns the hp restored.
    """
    player = session.store.extract_player()
    if not player.alive:
        raise InvariantViolation("Cannot descend with a dead player")

    fresh = session.store.reseeded()
    new_depth = session.depth + 1
    old_pos = player.pos
    try:
        new_map = session.generate_level(fresh, new_depth)
    except Exception:
        player.move_to(*old_pos)
        logger.exception("Level generation failed for depth %d; staying on depth %d", new_depth, session.depth)
        raise

    restored = player.fighter.heal(player.fighter.max_hp // session.config.rest_heal_divisor)
    session.log.add(f"You take a moment to rest and recover {restored} hit points.", LIGHT_VIOLET)
    session.log.add(
        f"After a rare moment of peace, you descend to depth {new_depth} of the undercroft...",
        LIGHT_VIOLET,
    )
    session.depth = new_depth
    session.store = fresh
    session.map = new_map
    session.visibility.reset(new_map)
    session.visibility.recompute(player.pos)

    logger.info(
        "Descended to depth %d: player %s hp=%d/%d, %d entities",
        session.depth,
        player.pos,
        player.fighter.hp,
        player.fighter.max_hp,
        len(fresh),
    )
    session.emit(GameEvent.DESCENDED, session.depth)
    return restored
