"""Seeded 3D dungeon layouts on a voxel grid.

Rooms are rejection-sampled onto a multi-level grid, connected by a minimum
spanning tree over their Delaunay triangulation, and joined with corridors,
diagonal staircases and shafts carved by an A* search. The same seed and
configuration always produce the same maze.
"""

from .config import DungeonConfig, load_dungeon_config
from .constants import (
    CellType,
    NODE_TYPE_CORRIDOR,
    NODE_TYPE_EMPTY,
    NODE_TYPE_ROOM,
    NODE_TYPE_VERTICAL,
)
from .errors import (
    ConfigurationError,
    DungeonGenerationError,
    PathfindingFailure,
    PlacementExhausted,
)
from .rng import DungeonRNG
from .world.corridors import Corridor, Stair
from .world.geometry import Point3, Room
from .world.graph import Edge
from .world.procgen import DungeonResult, generate_dungeon

__all__ = [
    "CellType",
    "ConfigurationError",
    "Corridor",
    "DungeonConfig",
    "DungeonGenerationError",
    "DungeonRNG",
    "DungeonResult",
    "Edge",
    "NODE_TYPE_CORRIDOR",
    "NODE_TYPE_EMPTY",
    "NODE_TYPE_ROOM",
    "NODE_TYPE_VERTICAL",
    "PathfindingFailure",
    "PlacementExhausted",
    "Point3",
    "Room",
    "Stair",
    "generate_dungeon",
    "load_dungeon_config",
]
