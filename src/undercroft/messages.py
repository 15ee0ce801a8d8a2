from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
ORANGE: Color = (255, 127, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_VIOLET: Color = (184, 115, 255)


@dataclass(frozen=True)
class Message:
    """A single player-facing narrative line."""

    text: str
    color: Color = WHITE


class MessageLog:
    """Narrative log shown to the player.

    - Keeps a finite history (capacity) and drops the oldest entries first.
    - Independent from diagnostic logging; every line is also mirrored to the
      module logger at DEBUG level.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._messages: List[Message] = []
        self._total = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, text: str, color: Color = WHITE) -> Message:
        msg = Message(text=text, color=color)
        self._messages.append(msg)
        self._total += 1
        if len(self._messages) > self._capacity:
            del self._messages[0 : len(self._messages) - self._capacity]
        logger.debug("Message: %s", text)
        return msg

    def recent(self, n: int) -> List[Message]:
        if n <= 0:
            return []
        return self._messages[-n:]

    @property
    def total(self) -> int:
        """Number of messages ever added, including dropped ones."""
        return self._total

    def since(self, mark: int) -> List[Message]:
        """Messages added after `total` was `mark` (as many as are still kept)."""
        return self.recent(self._total - mark)

    def texts(self) -> List[str]:
        return [m.text for m in self._messages]

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
