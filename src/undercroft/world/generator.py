from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import GameConfig
from .dungeon_map import DungeonMap, Rect, TileType
from .entity import Color, Entity, EntityKind, Fighter
from .store import EntityStore

logger = logging.getLogger(__name__)

# Each row is (value, first depth at which it applies); later rows override earlier ones.
DepthTable = Sequence[Tuple[int, int]]

MAX_MONSTERS_BY_DEPTH: DepthTable = [(2, 1), (3, 4), (5, 6)]
MAX_ITEMS_BY_DEPTH: DepthTable = [(1, 1), (2, 4)]


@dataclass(frozen=True)
class MonsterTemplate:
    name: str
    glyph: str
    color: Color
    max_hp: int
    defense: int
    power: int
    xp_yield: int
    chance: DepthTable


@dataclass(frozen=True)
class ItemTemplate:
    name: str
    glyph: str
    color: Color
    chance: DepthTable


MONSTERS: Dict[str, MonsterTemplate] = {
    "orc": MonsterTemplate("orc", "o", (63, 127, 63), max_hp=20, defense=0, power=4, xp_yield=35, chance=[(80, 1)]),
    "troll": MonsterTemplate(
        "troll", "T", (0, 127, 0), max_hp=30, defense=2, power=8, xp_yield=100, chance=[(15, 3), (30, 5), (60, 7)]
    ),
}

# Item effects are resolved elsewhere; the generator only places them.
ITEMS: Dict[str, ItemTemplate] = {
    "healing potion": ItemTemplate("healing potion", "!", (127, 0, 255), chance=[(35, 1)]),
    "scroll of lightning bolt": ItemTemplate("scroll of lightning bolt", "#", (255, 255, 63), chance=[(25, 4)]),
    "scroll of fireball": ItemTemplate("scroll of fireball", "#", (255, 127, 0), chance=[(25, 6)]),
    "scroll of confusion": ItemTemplate("scroll of confusion", "#", (191, 63, 255), chance=[(10, 2)]),
}


def from_depth(table: DepthTable, depth: int) -> int:
    """Value of a depth-weighted table at the given depth, 0 before its first row."""
    for value, min_depth in reversed(list(table)):
        if depth >= min_depth:
            return value
    return 0


def weighted_choice(weights: Dict[str, int], rng: random.Random) -> str:
    """Pick a key with probability proportional to its (non-negative) weight."""
    total = sum(w for w in weights.values() if w > 0)
    if total <= 0:
        raise ValueError("All weights are zero; cannot make a weighted choice")
    roll = rng.randint(1, total)
    running = 0
    for key, weight in weights.items():
        if weight <= 0:
            continue
        running += weight
        if roll <= running:
            return key
    # Unreachable with integer weights
    raise RuntimeError("weighted_choice fell through")


class LevelGenerator(ABC):
    """Produces a new level.

    Implementations must append new entities to `store` and must not replace
    the player in slot 0. They may move the player onto the new map.
    """

    @abstractmethod
    def generate(self, store: EntityStore, depth: int, rng: random.Random) -> DungeonMap:
        raise NotImplementedError


class RoomsLevelGenerator(LevelGenerator):
    """Rooms + corridors layout populated with monsters, items and stairs.

    Rooms are placed at random until max_rooms attempts are used; each new room
    is joined to the previous one by an L-shaped corridor. The player starts in
    the first room and the down stairs sit in the centre of the last.
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = config

    def generate(self, store: EntityStore, depth: int, rng: random.Random) -> DungeonMap:
        cfg = self.config
        logger.info("Generating depth %d (%dx%d)", depth, cfg.width, cfg.height)
        m = DungeonMap(cfg.width, cfg.height, default=TileType.WALL)
        rooms: List[Rect] = []

        for _ in range(cfg.max_rooms):
            w = rng.randint(cfg.room_min_size, cfg.room_max_size)
            h = rng.randint(cfg.room_min_size, cfg.room_max_size)
            if w >= cfg.width or h >= cfg.height:
                continue
            x = rng.randint(0, cfg.width - w - 1)
            y = rng.randint(0, cfg.height - h - 1)
            new_room = Rect(x, y, w, h)
            if any(new_room.intersects(other) for other in rooms):
                continue
            m.carve_room(new_room)

            if not rooms:
                store.player.move_to(*new_room.center())
            else:
                x1, y1 = rooms[-1].center()
                x2, y2 = new_room.center()
                if rng.random() < 0.5:
                    m.carve_h_corridor(x1, x2, y1)
                    m.carve_v_corridor(y1, y2, x2)
                else:
                    m.carve_v_corridor(y1, y2, x1)
                    m.carve_h_corridor(x1, x2, y2)
            self._place_objects(m, store, new_room, depth, rng)
            rooms.append(new_room)

        if not rooms:
            fallback = Rect(0, 0, cfg.width - 1, cfg.height - 1)
            m.carve_room(fallback)
            store.player.move_to(*fallback.center())
            rooms.append(fallback)
            logger.warning("No room fit on depth %d; carved a single open hall", depth)

        sx, sy = rooms[-1].center()
        store.add(
            Entity(
                eid=store.new_id(),
                name="stairs",
                x=sx,
                y=sy,
                glyph=">",
                kind=EntityKind.STAIRS,
                always_visible=True,
            )
        )
        logger.debug("Depth %d: %d rooms, %d entities, stairs at (%d,%d)", depth, len(rooms), len(store), sx, sy)
        return m

    def _free_spot(self, m: DungeonMap, store: EntityStore, room: Rect, rng: random.Random) -> Optional[Tuple[int, int]]:
        x = rng.randint(room.x + 1, room.right() - 1)
        y = rng.randint(room.y + 1, room.bottom() - 1)
        if not m.is_walkable(x, y) or store.blocking_at(x, y) is not None:
            return None
        return (x, y)

    def _place_objects(self, m: DungeonMap, store: EntityStore, room: Rect, depth: int, rng: random.Random) -> None:
        num_monsters = rng.randint(0, from_depth(MAX_MONSTERS_BY_DEPTH, depth))
        monster_weights = {name: from_depth(t.chance, depth) for name, t in MONSTERS.items()}
        for _ in range(num_monsters):
            spot = self._free_spot(m, store, room, rng)
            if spot is None:
                continue
            t = MONSTERS[weighted_choice(monster_weights, rng)]
            store.add(
                Entity(
                    eid=store.new_id(),
                    name=t.name,
                    x=spot[0],
                    y=spot[1],
                    glyph=t.glyph,
                    color=t.color,
                    kind=EntityKind.MONSTER,
                    blocks=True,
                    fighter=Fighter(max_hp=t.max_hp, power=t.power, defense=t.defense, xp_yield=t.xp_yield),
                )
            )

        num_items = rng.randint(0, from_depth(MAX_ITEMS_BY_DEPTH, depth))
        item_weights = {name: from_depth(t.chance, depth) for name, t in ITEMS.items()}
        for _ in range(num_items):
            spot = self._free_spot(m, store, room, rng)
            if spot is None:
                continue
            it = ITEMS[weighted_choice(item_weights, rng)]
            store.add(
                Entity(
                    eid=store.new_id(),
                    name=it.name,
                    x=spot[0],
                    y=spot[1],
                    glyph=it.glyph,
                    color=it.color,
                    kind=EntityKind.ITEM,
                    always_visible=True,
                )
            )
