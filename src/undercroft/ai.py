from __future__ import annotations

import logging
from typing import Optional

from .combat import attack
from .session import GameSession
from .world.entity import Entity

logger = logging.getLogger(__name__)


def move_towards(session: GameSession, monster: Entity, target_x: int, target_y: int) -> bool:
    """Take one straight-line step towards a target. No pathfinding."""
    dist = monster.distance(target_x, target_y)
    if dist == 0:
        return False
    dx = int(round((target_x - monster.x) / dist))
    dy = int(round((target_y - monster.y) / dist))
    nx, ny = monster.x + dx, monster.y + dy
    if not session.map.is_walkable(nx, ny) or session.store.blocking_at(nx, ny) is not None:
        return False
    monster.move_to(nx, ny)
    return True


def take_turn(session: GameSession, monster: Entity) -> Optional[int]:
    """Basic monster turn.

    A monster the player can see closes in, and attacks once adjacent.
    Returns the experience gained if the attack killed the player.
    """
    if not monster.alive:
        return None
    player = session.player
    if not player.alive or not session.visibility.in_fov(monster.x, monster.y):
        return None
    if monster.distance_to(player) >= 2:
        move_towards(session, monster, player.x, player.y)
        return None
    return attack(monster, player, session.log)
