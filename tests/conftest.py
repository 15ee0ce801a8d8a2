import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from undercroft.config import GameConfig  # noqa: E402
from undercroft.rng import RNGManager  # noqa: E402
from undercroft.session import GameSession  # noqa: E402
from undercroft.world.dungeon_map import DungeonMap  # noqa: E402
from undercroft.world.entity import Entity, EntityKind, Fighter  # noqa: E402
from undercroft.world.generator import LevelGenerator  # noqa: E402
from undercroft.world.store import EntityStore  # noqa: E402

OPEN_ROOM = [
    "############",
    "#..........#",
    "#..........#",
    "#..........#",
    "#..........#",
    "#..........#",
    "#..........#",
    "############",
]

SPAWN = (2, 2)
STAIRS = (8, 5)


def make_monster(store: EntityStore, x: int, y: int, name: str = "rat", hp: int = 5, power: int = 1,
                 defense: int = 0, xp_yield: int = 10) -> Entity:
    return store.add(
        Entity(
            eid=store.new_id(),
            name=name,
            x=x,
            y=y,
            glyph=name[0],
            kind=EntityKind.MONSTER,
            blocks=True,
            fighter=Fighter(max_hp=hp, power=power, defense=defense, xp_yield=xp_yield),
        )
    )


def add_stairs(store: EntityStore, x: int, y: int) -> Entity:
    return store.add(
        Entity(eid=store.new_id(), name="stairs", x=x, y=y, glyph=">", kind=EntityKind.STAIRS, always_visible=True)
    )


def default_populate(store: EntityStore, depth: int) -> None:
    add_stairs(store, *STAIRS)
    make_monster(store, 9, 2)


class ScriptedGenerator(LevelGenerator):
    """Always builds the same open room; `populate` decides what is appended."""

    def __init__(self, populate: Optional[Callable[[EntityStore, int], None]] = None) -> None:
        self.populate = populate or default_populate
        self.depths: List[int] = []
        self.maps: List[DungeonMap] = []

    def generate(self, store, depth, rng):
        self.depths.append(depth)
        m = DungeonMap.from_ascii(OPEN_ROOM)
        store.player.move_to(*SPAWN)
        self.populate(store, depth)
        self.maps.append(m)
        return m


@pytest.fixture()
def config() -> GameConfig:
    return GameConfig(width=12, height=8, seed=7)


@pytest.fixture()
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture()
def session(config: GameConfig, generator: ScriptedGenerator) -> GameSession:
    return GameSession(config, generator=generator, rng=RNGManager(7))
