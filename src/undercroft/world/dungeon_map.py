from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Set, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class TileType(Enum):
    WALL = 0
    FLOOR = 1

    @property
    def is_walkable(self) -> bool:
        return self is TileType.FLOOR

    @property
    def is_transparent(self) -> bool:
        return self is TileType.FLOOR

    @property
    def glyph(self) -> str:
        return {TileType.WALL: "#", TileType.FLOOR: "."}[self]


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int

    def right(self) -> int:
        return self.x + self.w

    def bottom(self) -> int:
        return self.y + self.h

    def center(self) -> Coord:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def intersects(self, other: "Rect") -> bool:
        return (
            self.x <= other.right()
            and self.right() >= other.x
            and self.y <= other.bottom()
            and self.bottom() >= other.y
        )


class DungeonMap:
    """
    Tile map of one dungeon level plus its explored-tile memory.

    All tile access is bounds-checked. The explored set belongs to the map, so
    replacing the map on descent also discards everything the player had
    explored.
    """

    def __init__(self, width: int, height: int, default: TileType = TileType.WALL) -> None:
        if min(width, height) < 3:
            raise ValueError(f"Dungeon maps need at least 3x3 tiles, got {width}x{height}")
        self.width = width
        self.height = height
        self._tiles: List[List[TileType]] = [[default for _ in range(width)] for _ in range(height)]
        self._explored: Set[Coord] = set()

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> TileType:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} map")
        return self._tiles[y][x]

    def set_tile(self, x: int, y: int, t: TileType) -> None:
        if not self.in_bounds(x, y):
            logger.error("Refusing to write tile %s outside the map at (%d,%d)", t.name, x, y)
            return
        self._tiles[y][x] = t

    # ---- Query -----------------------------------------------------------
    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._tiles[y][x].is_walkable

    def is_transparent(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._tiles[y][x].is_transparent

    # ---- Explored memory -------------------------------------------------
    def mark_explored(self, tiles: Iterable[Coord]) -> None:
        for (x, y) in tiles:
            if self.in_bounds(x, y):
                self._explored.add((x, y))

    def is_explored(self, x: int, y: int) -> bool:
        return (x, y) in self._explored

    @property
    def explored(self) -> Set[Coord]:
        return set(self._explored)

    # ---- Carving helpers -------------------------------------------------
    def carve_room(self, rect: Rect) -> None:
        # Leave the rectangle's outline as wall so adjacent rooms stay separated.
        for yy in range(rect.y + 1, rect.bottom()):
            for xx in range(rect.x + 1, rect.right()):
                self.set_tile(xx, yy, TileType.FLOOR)

    def carve_h_corridor(self, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            self.set_tile(x, y, TileType.FLOOR)

    def carve_v_corridor(self, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            self.set_tile(x, y, TileType.FLOOR)

    # ---- Construction / Export -------------------------------------------
    @classmethod
    def from_ascii(cls, rows: List[str]) -> "DungeonMap":
        """Build a map from ASCII rows for tests/tools. '#' is wall, anything else floor."""
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("All rows must be same width")
        m = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                m.set_tile(x, y, TileType.WALL if ch == "#" else TileType.FLOOR)
        return m

    def to_str_lines(self) -> List[str]:
        return ["".join(self._tiles[y][x].glyph for x in range(self.width)) for y in range(self.height)]

    def __repr__(self) -> str:
        return f"DungeonMap({self.width}x{self.height}, explored={len(self._explored)})"
