from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from .config import GameConfig
from .errors import ChoiceError
from .messages import YELLOW, MessageLog
from .world.entity import Entity

logger = logging.getLogger(__name__)


class ProgressionState(str, Enum):
    IDLE = "idle"
    THRESHOLD_REACHED = "threshold_reached"
    AWAITING_CHOICE = "awaiting_choice"


class StatChoice(str, Enum):
    CONSTITUTION = "constitution"  # max hp
    STRENGTH = "strength"  # attack power
    AGILITY = "agility"  # defense


CHOICE_ORDER: Tuple[StatChoice, ...] = (StatChoice.CONSTITUTION, StatChoice.STRENGTH, StatChoice.AGILITY)

_ALIASES = {
    "hp": StatChoice.CONSTITUTION,
    "health": StatChoice.CONSTITUTION,
    "attack": StatChoice.STRENGTH,
    "power": StatChoice.STRENGTH,
    "defense": StatChoice.AGILITY,
}


@dataclass(frozen=True)
class LevelUpPrompt:
    """A pending stat choice handed back to the game loop.

    `spent_xp` is the threshold of the level just left; it is deducted when
    the choice is resolved.
    """

    new_level: int
    spent_xp: int
    options: Tuple[Tuple[StatChoice, str], ...]

    def labels(self) -> List[str]:
        return [label for _, label in self.options]


def parse_choice(raw: Union[StatChoice, int, str, None]) -> Optional[StatChoice]:
    """Interpret user input as a stat choice. Returns None for anything invalid.

    Accepts the enum itself, a 0-based option index (int or digit string), an
    option letter a/b/c, or a stat name.
    """
    if raw is None:
        return None
    if isinstance(raw, StatChoice):
        return raw
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return CHOICE_ORDER[raw] if 0 <= raw < len(CHOICE_ORDER) else None
    text = str(raw).strip().lower()
    if not text:
        return None
    if text.isdigit():
        return parse_choice(int(text))
    if len(text) == 1 and "a" <= text <= "c":
        return CHOICE_ORDER[ord(text) - ord("a")]
    try:
        return StatChoice(text)
    except ValueError:
        return _ALIASES.get(text)


class ProgressionMachine:
    """Level-up state machine for the player.

    Idle -> ThresholdReached -> AwaitingChoice -> Idle. evaluate() is called
    once per tick after all actions resolved; when it returns a prompt the
    loop must not advance until resolve() accepted a valid choice. After each
    resolution the caller evaluates again, so a large experience windfall
    produces one prompt per level gained.
    """

    def __init__(self, config: GameConfig, log: MessageLog) -> None:
        self.config = config
        self.log = log
        self._state = ProgressionState.IDLE
        self._pending: Optional[LevelUpPrompt] = None

    @property
    def state(self) -> ProgressionState:
        return self._state

    @property
    def pending(self) -> Optional[LevelUpPrompt]:
        return self._pending

    def threshold(self, level: int) -> int:
        return self.config.level_up_threshold(level)

    def xp_to_next(self, player: Entity) -> int:
        if player.fighter is None:
            raise ValueError("player has no combat profile")
        return max(0, self.threshold(player.level) - player.fighter.xp)

    def options_for(self, player: Entity) -> Tuple[Tuple[StatChoice, str], ...]:
        f = player.fighter
        cfg = self.config
        return (
            (StatChoice.CONSTITUTION, f"Constitution (+{cfg.level_up_hp_bonus} HP, from {f.max_hp})"),
            (StatChoice.STRENGTH, f"Strength (+{cfg.level_up_power_bonus} attack, from {f.power})"),
            (StatChoice.AGILITY, f"Agility (+{cfg.level_up_defense_bonus} defense, from {f.defense})"),
        )

    def evaluate(self, player: Entity) -> Optional[LevelUpPrompt]:
        """Check the threshold; returns the pending prompt if a choice is owed."""
        if self._state is ProgressionState.AWAITING_CHOICE:
            return self._pending
        if player.fighter is None:
            return None

        threshold = self.threshold(player.level)
        if player.fighter.xp < threshold:
            return None

        self._state = ProgressionState.THRESHOLD_REACHED
        player.level += 1
        self.log.add(f"Your battle skills grow stronger! You reached level {player.level}!", YELLOW)
        logger.info("Player reached level %d (xp=%d, threshold=%d)", player.level, player.fighter.xp, threshold)
        self._pending = LevelUpPrompt(new_level=player.level, spent_xp=threshold, options=self.options_for(player))
        self._state = ProgressionState.AWAITING_CHOICE
        return self._pending

    def resolve(self, player: Entity, raw_choice: Union[StatChoice, int, str, None]) -> bool:
        """Apply a stat choice. Returns False, changing nothing, when the input is invalid."""
        if self._state is not ProgressionState.AWAITING_CHOICE or self._pending is None:
            raise ChoiceError("No level-up choice is pending")
        choice = parse_choice(raw_choice)
        if choice is None:
            logger.debug("Ignoring invalid level-up input %r", raw_choice)
            return False

        f = player.fighter
        cfg = self.config
        f.xp -= self._pending.spent_xp
        if choice is StatChoice.CONSTITUTION:
            f.max_hp += cfg.level_up_hp_bonus
            f.hp += cfg.level_up_hp_bonus
        elif choice is StatChoice.STRENGTH:
            f.power += cfg.level_up_power_bonus
        else:
            f.defense += cfg.level_up_defense_bonus
        logger.info("Level %d choice: %s (xp left %d)", player.level, choice.value, f.xp)

        self._pending = None
        self._state = ProgressionState.IDLE
        return True
