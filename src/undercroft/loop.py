from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from . import ai
from .actions import ActionType, PlayerAction
from .combat import area_damage, attack
from .progression import LevelUpPrompt, StatChoice
from .session import GameEvent, GameSession
from .transition import can_descend, descend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """What happened during one call into the loop.

    Attributes:
        took_turn: The player's action consumed a turn, so monsters acted.
        descended: The session moved to a new level this tick.
        prompt: A level-up choice the caller must resolve via choose().
        accepted: For choose(), whether the input was a valid option.
        game_over: The player is dead.
    """

    took_turn: bool = False
    descended: bool = False
    prompt: Optional[LevelUpPrompt] = None
    accepted: bool = True
    game_over: bool = False


class TurnLoop:
    """Turn driver for a single session.

    One step() is one tick: the player acts, every monster gets a turn if the
    player's action took one, and the progression machine checks the
    threshold last. While a level-up choice is pending, step() refuses to
    advance and only choose() makes progress.
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self._ticks = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    def step(self, action: PlayerAction) -> TickResult:
        s = self.session
        if s.game_over:
            return TickResult(game_over=True)
        pending = s.progression.pending
        if pending is not None:
            logger.debug("Ignoring %s while a level-up choice is pending", action)
            return TickResult(prompt=pending)

        took_turn, descended = self._player_act(action)
        if not descended:
            s.visibility.recompute(s.player.pos)
        if took_turn and not s.game_over:
            self._monsters_act()

        self._ticks += 1
        prompt = None if s.game_over else self._check_progression()
        return TickResult(took_turn=took_turn, descended=descended, prompt=prompt, game_over=s.game_over)

    def choose(self, raw_choice: Union[StatChoice, int, str, None]) -> TickResult:
        """Resume after a level-up prompt. Invalid input leaves the prompt pending."""
        s = self.session
        if not s.progression.resolve(s.player, raw_choice):
            return TickResult(prompt=s.progression.pending, accepted=False)
        s.emit(GameEvent.LEVEL_UP, s.player.level)
        return TickResult(prompt=self._check_progression())

    def _check_progression(self) -> Optional[LevelUpPrompt]:
        return self.session.progression.evaluate(self.session.player)

    def _player_act(self, action: PlayerAction) -> Tuple[bool, bool]:
        s = self.session
        player = s.player
        if action.type is ActionType.WAIT:
            return True, False
        if action.type is ActionType.DESCEND:
            if can_descend(s, action):
                descend(s)
                return False, True
            s.log.add("There are no stairs here.")
            return False, False
        if action.type is ActionType.BURST:
            report = area_damage(s.store, action.target, s.config.area_radius, s.config.area_damage, s.log)
            for eid, _ in report.kills:
                s.emit(GameEvent.ENTITY_KILLED, eid)
            if report.player_killed:
                s.emit(GameEvent.PLAYER_DIED, None)
            return True, False

        nx, ny = player.x + action.dx, player.y + action.dy
        target = s.store.blocking_at(nx, ny)
        if target is not None and target.alive:
            xp = attack(player, target, s.log)
            if xp is not None:
                s.emit(GameEvent.ENTITY_KILLED, target.eid)
            return True, False
        if s.map.is_walkable(nx, ny) and target is None:
            player.move_to(nx, ny)
            s.emit(GameEvent.PLAYER_MOVED, player.pos)
        return True, False

    def _monsters_act(self) -> None:
        s = self.session
        for entity in s.store:
            if entity.is_player or not entity.alive:
                continue
            ai.take_turn(s, entity)
            if s.game_over:
                s.emit(GameEvent.PLAYER_DIED, entity.eid)
                logger.info("Player killed by %s at depth %d", entity.name, s.depth)
                break
