from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import NewType, Optional, Tuple

logger = logging.getLogger(__name__)

EntityId = NewType("EntityId", int)
Color = Tuple[int, int, int]

# The player always owns this handle; every other entity gets a fresh one from the store.
PLAYER_ID = EntityId(0)

WHITE: Color = (255, 255, 255)
DARK_RED: Color = (128, 0, 0)


class EntityKind(Enum):
    PLAYER = auto()
    MONSTER = auto()
    ITEM = auto()
    STAIRS = auto()
    CORPSE = auto()


@dataclass(init=False)
class Fighter:
    """Combat profile embedded in an entity.

    `xp` is the running experience counter of the owner; `xp_yield` is what
    the owner is worth to whoever lands the killing blow. The yield is fixed
    at creation and read-only afterwards.
    """

    max_hp: int
    power: int
    defense: int
    hp: int
    xp: int
    alive: bool
    _xp_yield: int

    def __init__(
        self,
        max_hp: int,
        power: int,
        defense: int,
        xp_yield: int = 0,
        hp: int = -1,
        xp: int = 0,
        alive: bool = True,
    ) -> None:
        if max_hp <= 0:
            raise ValueError("max_hp must be positive")
        if xp_yield < 0:
            raise ValueError("xp_yield must be non-negative")
        self.max_hp = max_hp
        self.power = power
        self.defense = defense
        self._xp_yield = xp_yield
        self.hp = max_hp if hp < 0 else min(hp, max_hp)
        self.xp = xp
        self.alive = alive

    @property
    def xp_yield(self) -> int:
        return self._xp_yield

    def heal(self, amount: int) -> int:
        """Saturating heal. Returns the hp actually restored."""
        if amount < 0:
            raise ValueError("Heal amount cannot be negative")
        before = self.hp
        self.hp = max(self.hp, min(self.max_hp, self.hp + amount))
        return self.hp - before

    def take_damage(self, amount: int) -> Optional[int]:
        """Apply damage and report a kill.

        Returns the experience yield when this hit kills, otherwise None. The
        liveness flag flips in the same call, so a corpse never yields twice.
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")
        if not self.alive:
            return None
        self.hp = max(0, self.hp - amount)
        if self.hp == 0:
            self.alive = False
            return self.xp_yield
        return None


@dataclass
class Entity:
    """Anything placeable on the map: player, monster, item, stairs."""

    eid: EntityId
    name: str
    x: int
    y: int
    glyph: str
    color: Color = WHITE
    kind: EntityKind = EntityKind.MONSTER
    blocks: bool = False
    fighter: Optional[Fighter] = None
    level: int = 1
    always_visible: bool = False

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_player(self) -> bool:
        return self.eid == PLAYER_ID

    @property
    def is_stairs(self) -> bool:
        return self.kind is EntityKind.STAIRS

    @property
    def alive(self) -> bool:
        return self.fighter is not None and self.fighter.alive

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)

    def distance(self, x: int, y: int) -> float:
        return math.hypot(x - self.x, y - self.y)

    def become_corpse(self) -> None:
        """Turn a dead creature into non-blocking remains. It stays in the store."""
        logger.debug("%s (eid=%d) becomes a corpse at %s", self.name, self.eid, self.pos)
        self.glyph = "%"
        self.color = DARK_RED
        self.blocks = False
        if self.kind is EntityKind.MONSTER:
            self.kind = EntityKind.CORPSE
            self.name = f"remains of {self.name}"

    def __repr__(self) -> str:
        hp = f" hp={self.fighter.hp}/{self.fighter.max_hp}" if self.fighter else ""
        return f"Entity#{self.eid}({self.name}@{self.x},{self.y}{hp})"


def make_player(x: int, y: int, max_hp: int, power: int, defense: int) -> Entity:
    return Entity(
        eid=PLAYER_ID,
        name="player",
        x=x,
        y=y,
        glyph="@",
        color=WHITE,
        kind=EntityKind.PLAYER,
        blocks=True,
        fighter=Fighter(max_hp=max_hp, power=power, defense=defense, xp_yield=0),
    )
