from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, List, Optional

from .config import GameConfig
from .messages import MessageLog
from .progression import ProgressionMachine
from .rng import RNGManager
from .visibility import VisibilityContext
from .world.dungeon_map import DungeonMap
from .world.entity import Entity, make_player
from .world.generator import LevelGenerator, RoomsLevelGenerator
from .world.store import EntityStore

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome, stranger. The undercroft is hungry tonight."


class GameEvent(Enum):
    """Events emitted by GameSession to notify UI or systems."""

    PLAYER_MOVED = auto()
    DESCENDED = auto()
    LEVEL_UP = auto()
    ENTITY_KILLED = auto()
    PLAYER_DIED = auto()  # payload: killer eid, None when the player killed themselves


Listener = Callable[[GameEvent, "GameSession", Any], None]


@dataclass(frozen=True)
class CharacterSheet:
    level: int
    xp: int
    xp_to_next: int
    threshold: int
    hp: int
    max_hp: int
    power: int
    defense: int
    depth: int


class GameSession:
    """Dungeon state for one run, threaded explicitly through every operation.

    Holds the depth counter, the current map and entity store, the message
    log, the inventory, the visibility context and the progression machine.
    Nothing here is global; two sessions never share state.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        generator: Optional[LevelGenerator] = None,
        rng: Optional[RNGManager] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or RNGManager(self.config.seed)
        self.generator = generator or RoomsLevelGenerator(self.config)
        self.log = MessageLog(self.config.message_capacity)
        self.inventory: List[Entity] = []
        self.progression = ProgressionMachine(self.config, self.log)
        self._listeners: List[Listener] = []

        self.depth: int = 1
        player = make_player(
            0,
            0,
            max_hp=self.config.player_max_hp,
            power=self.config.player_power,
            defense=self.config.player_defense,
        )
        self.store = EntityStore(player)
        self.map: DungeonMap = self.generate_level(self.store, self.depth)
        self.visibility = VisibilityContext(self.map, self.config.torch_radius)
        self.visibility.recompute(player.pos)
        self.log.add(WELCOME_TEXT)
        logger.info("New session at depth %d, player at %s, %d entities", self.depth, player.pos, len(self.store))

    def generate_level(self, store: EntityStore, depth: int) -> DungeonMap:
        """Ask the generator for the level at `depth`. The session itself is not touched."""
        return self.generator.generate(store, depth, self.rng.context_rng("level", depth))

    @property
    def player(self) -> Entity:
        return self.store.player

    @property
    def game_over(self) -> bool:
        return not self.player.alive

    # Events
    def add_listener(self, listener: Listener) -> None:
        """Subscribe to session events."""
        self._listeners.append(listener)

    def emit(self, event: GameEvent, payload: Any = None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self, payload)
            except Exception as ex:  # pragma: no cover - listeners shouldn't crash the session
                logger.exception("Listener errored on %s: %s", event, ex)

    def character_sheet(self) -> CharacterSheet:
        p = self.player
        f = p.fighter
        return CharacterSheet(
            level=p.level,
            xp=f.xp,
            xp_to_next=self.progression.xp_to_next(p),
            threshold=self.progression.threshold(p.level),
            hp=f.hp,
            max_hp=f.max_hp,
            power=f.power,
            defense=f.defense,
            depth=self.depth,
        )
