# voxel_dungeon/world/procgen.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import structlog

from voxel_dungeon.config import DungeonConfig
from voxel_dungeon.rng import DungeonRNG
from voxel_dungeon.world.corridors import Corridor, Stair, carve_corridors
from voxel_dungeon.world.geometry import Room
from voxel_dungeon.world.graph import Edge, build_room_graph
from voxel_dungeon.world.rooms import place_rooms
from voxel_dungeon.world.voxel_grid import VoxelGrid

log = structlog.get_logger(__name__)


@dataclass
class DungeonResult:
    """Output of one generation run."""
    maze: np.ndarray
    rooms: List[Room]
    edges: List[Edge] = field(default_factory=list)
    corridors: List[Corridor] = field(default_factory=list)
    stairs: List[Stair] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        """Plain record: maze as nested lists of cell codes, points as {x, y, z}."""
        return {
            "maze": self.maze.tolist(),
            "rooms": [room.as_dict() for room in self.rooms],
            "mst": [[edge.a, edge.b, edge.weight] for edge in self.edges],
            "corridors": [corridor.as_dict() for corridor in self.corridors],
            "stairs": [stair.as_dict() for stair in self.stairs],
        }


def _run_pipeline(config: DungeonConfig, rng: DungeonRNG) -> DungeonResult:
    rooms = place_rooms(config, rng)

    grid = VoxelGrid(config.width, config.height, config.levels)
    for room in rooms:
        grid.stamp_room(room)

    edges = build_room_graph(rooms, config.levels, cycle_edges=config.cycle_edges)

    corridors, stairs = carve_corridors(
        grid,
        rooms,
        edges,
        allow_stairs=config.allow_stairs,
        intersect_corridors=config.intersect_corridors,
    )
    return DungeonResult(
        maze=grid.cells, rooms=rooms, edges=edges, corridors=corridors, stairs=stairs
    )


def generate_dungeon(
    config: Optional[DungeonConfig] = None,
    rng: Optional[DungeonRNG] = None,
    **overrides: Any,
) -> DungeonResult:
    """Generate rooms, connect them with a spanning tree and carve corridors.

    ``rng`` defaults to a fresh DungeonRNG seeded from ``config.seed``; pass
    one explicitly to control the draw sequence. Keyword overrides are
    applied on top of ``config`` (snake_case or camelCase names).
    """
    config = config if config is not None else DungeonConfig()
    if overrides:
        config = config.with_overrides(**overrides)
    config.validate()
    rng = rng if rng is not None else DungeonRNG(seed=config.seed)

    with structlog.contextvars.bound_contextvars(dungeon_seed=str(config.seed)):
        log.info(
            "Starting dungeon generation",
            width=config.width,
            height=config.height,
            levels=config.levels,
            room_count=config.room_count,
            predefined=len(config.predefined),
        )
        if config.cycle_edges:
            log.debug("cycle_edges is set but has no effect; the room graph stays a tree")

        result = _run_pipeline(config, rng)

        log.info(
            "Dungeon generation complete",
            rooms=len(result.rooms),
            edges=len(result.edges),
            corridors=len(result.corridors),
            stairs=len(result.stairs),
            rng_draws=rng.draws,
        )
    return result


__all__ = ["DungeonResult", "generate_dungeon"]
