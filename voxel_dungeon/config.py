# voxel_dungeon/config.py
"""Configuration record for dungeon generation.

Options can be given in snake_case or in the camelCase spelling used by
existing dungeon definition files (``roomCount``, ``intersectCorridors``...).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

import structlog
import yaml

from voxel_dungeon.errors import ConfigurationError
from voxel_dungeon.rng import Seed
from voxel_dungeon.world.geometry import Room

log = structlog.get_logger(__name__)

CAMEL_CASE_ALIASES: Dict[str, str] = {
    "roomCount": "room_count",
    "roomSpacing": "room_spacing",
    "minRoomWidth": "min_room_width",
    "minRoomHeight": "min_room_height",
    "minRoomDepth": "min_room_depth",
    "maxRoomWidth": "max_room_width",
    "maxRoomHeight": "max_room_height",
    "maxRoomDepth": "max_room_depth",
    "overlapRooms": "overlap_rooms",
    "allowStairs": "allow_stairs",
    "intersectCorridors": "intersect_corridors",
    "cycleEdges": "cycle_edges",
    "maxTries": "max_tries",
}


@dataclass(frozen=True)
class DungeonConfig:
    seed: Seed = "hello world"
    room_count: int = 4
    room_spacing: int = 1
    width: int = 16
    height: int = 16
    levels: int = 3
    predefined: Tuple[Room, ...] = field(default_factory=tuple)
    # width -> x extent, height -> z extent, depth -> y (levels) extent
    min_room_width: int = 3
    min_room_height: int = 3
    min_room_depth: int = 1
    max_room_width: int = 6
    max_room_height: int = 6
    max_room_depth: int = 1
    overlap_rooms: bool = False
    allow_stairs: bool = True
    intersect_corridors: bool = True
    # Accepted for compatibility; the room graph is always a plain tree.
    cycle_edges: bool = True
    max_tries: int = 256

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "predefined", tuple(Room.coerce(room) for room in self.predefined)
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DungeonConfig":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown dungeon option: {key!r}")
            kwargs[name] = value
        if "predefined" in kwargs:
            try:
                kwargs["predefined"] = tuple(Room.coerce(room) for room in kwargs["predefined"])
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid predefined room: {e!r}") from e
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid dungeon options: {e}") from e

    def with_overrides(self, **overrides: Any) -> "DungeonConfig":
        overrides = {CAMEL_CASE_ALIASES.get(k, k): v for k, v in overrides.items()}
        try:
            return replace(self, **overrides)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e

    def validate(self) -> None:
        """Raise ConfigurationError if no dungeon can be built from this record."""
        if self.width <= 0 or self.height <= 0 or self.levels <= 0:
            raise ConfigurationError(
                f"width, height and levels must be positive "
                f"(got {self.width}, {self.height}, {self.levels})"
            )
        if self.room_count < 0:
            raise ConfigurationError("room_count must not be negative")
        if self.room_spacing < 0:
            raise ConfigurationError("room_spacing must not be negative")
        if self.max_tries < 1:
            raise ConfigurationError("max_tries must be at least 1")
        for axis, low, high in (
            ("width", self.min_room_width, self.max_room_width),
            ("height", self.min_room_height, self.max_room_height),
            ("depth", self.min_room_depth, self.max_room_depth),
        ):
            if low < 1:
                raise ConfigurationError(f"min_room_{axis} must be at least 1")
            if low > high:
                raise ConfigurationError(
                    f"min_room_{axis} ({low}) is greater than max_room_{axis} ({high})"
                )
        for index, room in enumerate(self.predefined):
            if min(room.size) < 1:
                raise ConfigurationError(f"Predefined room {index} has an empty size: {room}")
            if not room.within(self.width, self.levels, self.height):
                raise ConfigurationError(f"Predefined room {index} is outside the grid: {room}")
        if self.room_count + len(self.predefined) == 0:
            raise ConfigurationError("Couldn't generate any rooms: room_count is 0 and nothing is predefined")


def load_dungeon_config(config_path: Union[str, Path]) -> DungeonConfig:
    """Load a DungeonConfig from a YAML file, optionally nested under ``dungeon:``."""
    config_path = Path(config_path)
    if not config_path.is_file():
        log.error("Dungeon config file not found", path=str(config_path))
        raise FileNotFoundError(f"Dungeon configuration file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error("Error parsing dungeon YAML", path=str(config_path), error=str(e), exc_info=True)
        raise
    if config_data is None:
        log.warning("Dungeon config file is empty, using defaults", path=str(config_path))
        return DungeonConfig()
    if not isinstance(config_data, Mapping):
        raise ConfigurationError(f"Dungeon config must be a mapping: {config_path}")
    section = config_data.get("dungeon", config_data)
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[dungeon] section must be a mapping: {config_path}")
    config = DungeonConfig.from_dict(section)
    log.info("Dungeon config loaded", path=str(config_path))
    return config


__all__ = ["DungeonConfig", "load_dungeon_config", "CAMEL_CASE_ALIASES"]
