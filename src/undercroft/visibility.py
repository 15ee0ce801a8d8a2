from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List, Set, Tuple

from .world.dungeon_map import DungeonMap
from .world.entity import Entity

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Coord]:
    """
    Bresenham's line algorithm. Returns the list of points from (x0, y0) to (x1, y1) inclusive.
    """
    points: List[Coord] = []

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def is_visible_line(m: DungeonMap, x0: int, y0: int, x1: int, y1: int) -> bool:
    """
    Line of sight between two tiles. Every tile strictly between them must be
    transparent; the target itself may be a wall so walls light up when seen.
    """
    line = bresenham_line(x0, y0, x1, y1)
    for (x, y) in line[1:-1]:
        if not m.is_transparent(x, y):
            return False
    return True


def compute_fov(m: DungeonMap, origin: Coord, radius: int) -> Set[Coord]:
    """
    Visible tiles from origin within a circular radius using line-of-sight.
    A radius of 0 means unlimited. The origin is always visible.
    """
    ox, oy = origin
    if not m.in_bounds(ox, oy):
        raise ValueError("Origin out of bounds")
    if radius < 0:
        raise ValueError("radius must be >= 0")

    if radius == 0:
        min_x, max_x, min_y, max_y = 0, m.width - 1, 0, m.height - 1
    else:
        min_x = max(0, ox - radius)
        max_x = min(m.width - 1, ox + radius)
        min_y = max(0, oy - radius)
        max_y = min(m.height - 1, oy + radius)

    visible: Set[Coord] = {(ox, oy)}
    r2 = radius * radius
    for y in range(min_y, max_y + 1):
        for x in range(min_x, max_x + 1):
            if (x, y) == (ox, oy):
                continue
            if radius and (x - ox) ** 2 + (y - oy) ** 2 > r2:
                continue
            if is_visible_line(m, ox, oy, x, y):
                visible.add((x, y))

    logger.debug("FOV from (%d,%d) radius %d -> %d visible tiles", ox, oy, radius, len(visible))
    return visible


def is_drawable(entity: Entity, live_fov: AbstractSet[Coord], explored: AbstractSet[Coord]) -> bool:
    """Whether an entity is a render candidate.

    In live view always; otherwise only always-visible entities standing on
    an explored tile.
    """
    pos = entity.pos
    return pos in live_fov or (entity.always_visible and pos in explored)


class VisibilityContext:
    """
    Live field of view over the current map.

    The explored-tile memory lives on the map itself; every recompute marks
    the newly visible tiles as explored there. Call reset() after the map is
    replaced so no stale view of the old level survives.
    """

    def __init__(self, m: DungeonMap, radius: int) -> None:
        if radius < 0:
            raise ValueError("radius must be >= 0")
        self.map = m
        self.radius = radius
        self._visible: Set[Coord] = set()

    def reset(self, m: DungeonMap) -> None:
        self.map = m
        self._visible = set()
        logger.debug("Visibility reset for new map %dx%d", m.width, m.height)

    def recompute(self, origin: Coord) -> None:
        self._visible = compute_fov(self.map, origin, self.radius)
        self.map.mark_explored(self._visible)

    @property
    def visible(self) -> Set[Coord]:
        return set(self._visible)

    def in_fov(self, x: int, y: int) -> bool:
        return (x, y) in self._visible

    def drawable(self, entities: Iterable[Entity]) -> List[Entity]:
        """Render candidates among `entities`, preserving their order."""
        explored = self.map.explored
        return [e for e in entities if is_drawable(e, self._visible, explored)]
