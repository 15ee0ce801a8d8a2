from __future__ import annotations

import argparse
import sys
from dataclasses import replace

from . import __version__
from .app import run_console
from .config import load_config
from .errors import ConfigError
from .logging_config import configure_logging, level_for_verbosity
from .session import GameSession


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="undercroft",
        description="Undercroft - console dungeon crawl",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--seed", type=int, default=None, help="Master seed for level generation")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    configure_logging(level_for_verbosity(args.verbose))

    try:
        config = load_config(args.config)
        if args.seed is not None:
            config = replace(config, seed=args.seed)
    except ConfigError as exc:
        parser.error(str(exc))
    return run_console(GameSession(config))


if __name__ == "__main__":
    sys.exit(main())
