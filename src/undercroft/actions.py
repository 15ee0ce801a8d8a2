from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class ActionType(Enum):
    """Semantic player actions, independent of any input device."""

    MOVE = auto()
    WAIT = auto()
    DESCEND = auto()
    BURST = auto()  # area damage centred on a target tile


@dataclass(frozen=True)
class PlayerAction:
    """A single player action for one tick.

    Attributes:
        type: What the player wants to do.
        dx, dy: Direction for MOVE (each in -1..1); ignored otherwise.
        target: Map tile for BURST.
    """

    type: ActionType
    dx: int = 0
    dy: int = 0
    target: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        if self.type is ActionType.MOVE:
            if self.dx not in (-1, 0, 1) or self.dy not in (-1, 0, 1) or (self.dx, self.dy) == (0, 0):
                raise ValueError(f"Invalid move direction ({self.dx}, {self.dy})")
        if self.type is ActionType.BURST and self.target is None:
            raise ValueError("BURST needs a target tile")

    @classmethod
    def move(cls, dx: int, dy: int) -> "PlayerAction":
        return cls(ActionType.MOVE, dx, dy)

    @classmethod
    def burst(cls, x: int, y: int) -> "PlayerAction":
        return cls(ActionType.BURST, target=(x, y))


WAIT = PlayerAction(ActionType.WAIT)
DESCEND = PlayerAction(ActionType.DESCEND)

__all__ = ["ActionType", "PlayerAction", "WAIT", "DESCEND"]
