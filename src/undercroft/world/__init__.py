from .dungeon_map import DungeonMap, Rect, TileType
from .entity import PLAYER_ID, Entity, EntityId, EntityKind, Fighter, make_player
from .generator import LevelGenerator, RoomsLevelGenerator
from .store import PLAYER_SLOT, EntityStore

__all__ = [
    "DungeonMap",
    "Rect",
    "TileType",
    "PLAYER_ID",
    "Entity",
    "EntityId",
    "EntityKind",
    "Fighter",
    "make_player",
    "LevelGenerator",
    "RoomsLevelGenerator",
    "PLAYER_SLOT",
    "EntityStore",
]
