from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple, Union

from .actions import DESCEND, WAIT, PlayerAction
from .loop import TurnLoop
from .progression import LevelUpPrompt, StatChoice, parse_choice
from .session import GameSession

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]
Write = Callable[[str], None]

# vi-keys, as in most console roguelikes
MOVE_KEYS: Dict[str, Tuple[int, int]] = {
    "h": (-1, 0),
    "l": (1, 0),
    "k": (0, -1),
    "j": (0, 1),
    "y": (-1, -1),
    "u": (1, -1),
    "b": (-1, 1),
    "n": (1, 1),
}

QUIT = "quit"
SHEET = "sheet"

HELP_TEXT = "Move: h j k l y u b n | wait: . | descend: > | character: c | quit: q"


def decode_command(text: str) -> Optional[Union[PlayerAction, str]]:
    """Map one line of console input to an action or a front-end command."""
    key = text.strip().lower()[:1]
    if key in MOVE_KEYS:
        return PlayerAction.move(*MOVE_KEYS[key])
    if key == ".":
        return WAIT
    if key == ">":
        return DESCEND
    if key == "c":
        return SHEET
    if key == "q":
        return QUIT
    return None


def render(session: GameSession) -> List[str]:
    """Plain-text frame: explored tiles, then drawable entities on top."""
    m = session.map
    vis = session.visibility
    explored = m.explored
    rows = [
        [m.get_tile(x, y).glyph if (x, y) in explored or vis.in_fov(x, y) else " " for x in range(m.width)]
        for y in range(m.height)
    ]
    # Non-blocking entities first so creatures are drawn over items and corpses.
    for entity in sorted(vis.drawable(session.store), key=lambda e: e.blocks):
        rows[entity.y][entity.x] = entity.glyph

    sheet = session.character_sheet()
    status = (
        f"HP {sheet.hp}/{sheet.max_hp}  Depth {sheet.depth}  "
        f"Level {sheet.level}  XP {sheet.xp}/{sheet.threshold}"
    )
    return ["".join(r) for r in rows] + [status]


def format_prompt(prompt: LevelUpPrompt) -> str:
    lines = ["Level up! Choose a stat to raise:"]
    for idx, label in enumerate(prompt.labels()):
        lines.append(f"  ({chr(ord('a') + idx)}) {label}")
    return "\n".join(lines)


def prompt_stat_choice(prompt: LevelUpPrompt, read_line: ReadLine, write: Write) -> StatChoice:
    """Modal level-up menu. Re-prompts until the input names a valid option.

    EOFError from `read_line` propagates; there is no way to skip the choice.
    """
    write(format_prompt(prompt))
    while True:
        choice = parse_choice(read_line("> "))
        if choice is not None:
            return choice
        write("Please choose a, b or c.")


def run_console(session: GameSession, read_line: ReadLine = input, write: Write = print) -> int:
    """Interactive text session. Returns a process exit code."""
    loop = TurnLoop(session)
    write(HELP_TEXT)
    mark = 0
    try:
        while not session.game_over:
            for msg in session.log.since(mark):
                write(msg.text)
            mark = session.log.total
            write("\n".join(render(session)))
            command = decode_command(read_line("? "))
            if command is None:
                write(HELP_TEXT)
                continue
            if command == QUIT:
                break
            if command == SHEET:
                sheet = session.character_sheet()
                write(
                    f"Level {sheet.level}  Experience {sheet.xp}  To next level {sheet.xp_to_next}\n"
                    f"Max HP {sheet.max_hp}  Attack {sheet.power}  Defense {sheet.defense}"
                )
                continue
            result = loop.step(command)
            while result.prompt is not None:
                result = loop.choose(prompt_stat_choice(result.prompt, read_line, write))
    except EOFError:
        logger.info("Input closed; ending session")
    if session.game_over:
        for msg in session.log.since(mark):
            write(msg.text)
    write(f"You reached depth {session.depth} at level {session.player.level}.")
    return 0
