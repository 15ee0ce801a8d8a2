from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from importlib.resources import files as resource_files

import yaml
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_SLUG = "undercroft"
CONFIG_ENV_VAR = "UNDERCROFT_CONFIG"
CONFIG_FILENAME = "config.yaml"


@dataclass
class GameConfig:
    """Central tuning for a session.

    - Map and room sizes are handed to the level generator.
    - level_up_base / level_up_factor define the experience threshold per level.
    - level_up_*_bonus are the amounts applied by each stat choice.
    - rest_heal_divisor: fraction of max hp restored on descent (1/N, rounded down).
    - area_radius / area_damage tune the burst used by area_damage().
    """

    width: int = 80
    height: int = 43
    room_min_size: int = 6
    room_max_size: int = 10
    max_rooms: int = 30
    torch_radius: int = 10

    player_max_hp: int = 100
    player_power: int = 4
    player_defense: int = 1

    level_up_base: int = 200
    level_up_factor: int = 150
    level_up_hp_bonus: int = 20
    level_up_power_bonus: int = 1
    level_up_defense_bonus: int = 1

    rest_heal_divisor: int = 2
    area_radius: int = 3
    area_damage: int = 25
    message_capacity: int = 100
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ConfigError("Map must be at least 3x3")
        if self.room_min_size < 1 or self.room_max_size < self.room_min_size:
            raise ConfigError("room sizes must satisfy 1 <= room_min_size <= room_max_size")
        if self.max_rooms < 1:
            raise ConfigError("max_rooms must be >= 1")
        if self.torch_radius < 0:
            raise ConfigError("torch_radius must be >= 0")
        if self.player_max_hp <= 0:
            raise ConfigError("player_max_hp must be positive")
        if self.level_up_base < 0 or self.level_up_factor <= 0:
            raise ConfigError("level_up_base must be >= 0 and level_up_factor > 0")
        if min(self.level_up_hp_bonus, self.level_up_power_bonus, self.level_up_defense_bonus) < 0:
            raise ConfigError("level-up bonuses must be non-negative")
        if self.rest_heal_divisor < 1:
            raise ConfigError("rest_heal_divisor must be >= 1")
        if self.area_radius < 0 or self.area_damage < 0:
            raise ConfigError("area_radius and area_damage must be non-negative")
        if self.message_capacity <= 0:
            raise ConfigError("message_capacity must be positive")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0):
            raise ConfigError(f"seed must be a non-negative integer, got {self.seed!r}")

    def level_up_threshold(self, level: int) -> int:
        """Experience required to advance from `level` to `level + 1`."""
        return self.level_up_base + level * self.level_up_factor

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GameConfig":
        """Build a config from a mapping. Missing fields fall back to defaults."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (raw or {}).items():
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            if key == "seed" and value is None:
                values[key] = None
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"Config value for {key!r} must be an integer, got {value!r}")
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "GameConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse config file {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        logger.debug("Loaded config from path: %s", path)
        return cls.from_dict(raw)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Persist configuration to a YAML file."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        Path(path).write_text(yaml.safe_dump(data, sort_keys=True), encoding="utf-8")


def user_config_path() -> Path:
    """Location of the per-user override file."""
    return Path(user_config_dir(APP_SLUG)) / CONFIG_FILENAME


def load_default_config() -> GameConfig:
    """Load the embedded default resource at undercroft/data/defaults.yaml."""
    text = resource_files("undercroft.data").joinpath("defaults.yaml").read_text(encoding="utf-8")
    logger.debug("Loaded embedded default config resource")
    return GameConfig.from_dict(yaml.safe_load(text) or {})


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """Resolve the active configuration.

    Precedence: explicit path, then the UNDERCROFT_CONFIG env var, then the
    user config file, then the embedded defaults.
    """
    if path is not None:
        return GameConfig.from_yaml(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        logger.info("Using config from %s=%s", CONFIG_ENV_VAR, env_path)
        return GameConfig.from_yaml(env_path)
    user_path = user_config_path()
    if user_path.exists():
        logger.info("Using user config at %s", user_path)
        return GameConfig.from_yaml(user_path)
    logger.debug("No user config at %s; using defaults", user_path)
    return load_default_config()
