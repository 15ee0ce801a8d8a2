import logging
import os
from typing import Optional, TextIO

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV_VAR = "UNDERCROFT_LOG_LEVEL"


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v count to a logging level: none is WARNING, -v INFO, -vv DEBUG."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(default_level: int = logging.WARNING, stream: Optional[TextIO] = None) -> int:
    """Configure the root logger and return the effective level.

    UNDERCROFT_LOG_LEVEL, when set to a level name, wins over `default_level`.
    Diagnostics go to stderr unless `stream` is given; the console game owns stdout.
    """
    level = default_level
    level_name = os.getenv(LOG_LEVEL_ENV_VAR)
    if level_name:
        candidate = logging.getLevelName(level_name.strip().upper())
        if isinstance(candidate, int):
            level = candidate
        else:
            logging.getLogger(__name__).warning("Ignoring unknown %s=%r", LOG_LEVEL_ENV_VAR, level_name)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream)
    return level
