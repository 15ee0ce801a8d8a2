from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .messages import ORANGE, RED, WHITE, MessageLog
from .world.entity import Entity, EntityId
from .world.store import EntityStore

logger = logging.getLogger(__name__)


def apply_damage(target: Entity, amount: int) -> Optional[int]:
    """Damage `target` and return its experience yield if this hit killed it.

    None means no kill: the target survived, was already dead, or has no
    combat profile at all.
    """
    if target.fighter is None:
        return None
    return target.fighter.take_damage(amount)


def handle_death(entity: Entity, log: MessageLog, xp: Optional[int] = None, credited_to_player: bool = False) -> None:
    """Turn a freshly killed entity into a corpse and narrate it."""
    if entity.is_player:
        log.add("You died!", RED)
        logger.info("Player died at %s", entity.pos)
    elif credited_to_player and xp is not None:
        log.add(f"The {entity.name} is dead! You gain {xp} experience points.", ORANGE)
    else:
        log.add(f"The {entity.name} is dead!", ORANGE)
    entity.become_corpse()


def attack(attacker: Entity, target: Entity, log: MessageLog) -> Optional[int]:
    """Single-target melee: damage is attacker power minus target defense.

    The attacker, player or monster alike, is credited with the yield of a
    kill. Returns that yield, or None when nothing died.
    """
    if attacker.fighter is None or target.fighter is None:
        raise ValueError("Both attacker and target need a combat profile")
    damage = attacker.fighter.power - target.fighter.defense
    if damage <= 0:
        log.add(f"{attacker.name.capitalize()} attacks {target.name} but it has no effect!", WHITE)
        return None

    log.add(f"{attacker.name.capitalize()} attacks {target.name} for {damage} hit points.", WHITE)
    xp = apply_damage(target, damage)
    if xp is None:
        return None
    attacker.fighter.xp += xp
    logger.debug("%r killed %r and gained %d xp (now %d)", attacker, target, xp, attacker.fighter.xp)
    handle_death(target, log, xp, credited_to_player=attacker.is_player)
    return xp


@dataclass
class AreaDamageReport:
    """Outcome of one area burst.

    `kills` lists (entity id, yield) for every non-player entity the burst
    killed; `total_xp` is what the player was credited with afterwards.
    """

    hit: List[EntityId] = field(default_factory=list)
    kills: List[Tuple[EntityId, int]] = field(default_factory=list)
    total_xp: int = 0
    player_killed: bool = False


def area_damage(
    store: EntityStore,
    center: Tuple[int, int],
    radius: int,
    amount: int,
    log: MessageLog,
) -> AreaDamageReport:
    """Damage every living fighter within `radius` of `center`, player included.

    First pass applies damage and collects (id, yield) for non-player kills.
    Second pass credits the player with the sum once. The player never earns
    experience from its own death.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    report = AreaDamageReport()
    cx, cy = center

    for entity in store:
        if not entity.alive or entity.distance(cx, cy) > radius:
            continue
        report.hit.append(entity.eid)
        log.add(f"The {entity.name} gets burned for {amount} hit points.", ORANGE)
        xp = apply_damage(entity, amount)
        if xp is None:
            continue
        if store.is_player(entity.eid):
            report.player_killed = True
            handle_death(entity, log)
        else:
            report.kills.append((entity.eid, xp))
            handle_death(entity, log, xp, credited_to_player=True)

    report.total_xp = sum(xp for _, xp in report.kills)
    player = store.player
    if player.fighter is not None and report.total_xp:
        player.fighter.xp += report.total_xp
    logger.debug(
        "Burst at %s r=%d: hit=%d kills=%d xp=%d player_killed=%s",
        center,
        radius,
        len(report.hit),
        len(report.kills),
        report.total_xp,
        report.player_killed,
    )
    return report
