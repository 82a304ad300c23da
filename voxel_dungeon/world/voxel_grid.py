# voxel_dungeon/world/voxel_grid.py
from typing import List

import numpy as np
import structlog

from voxel_dungeon.constants import NODE_TYPE_EMPTY, NODE_TYPE_ROOM
from voxel_dungeon.world.geometry import Point3, Room

log = structlog.get_logger(__name__)


class VoxelGrid:
    """Cell-type array of shape ``(width, levels + 1, height)`` indexed [x, y, z].

    Carving only ever happens on levels ``[0, levels)``; the extra top layer
    is allocated for consumers that expect it and stays EMPTY.
    """

    def __init__(self, width: int, height: int, levels: int):
        if width <= 0 or height <= 0 or levels <= 0:
            log.error("Invalid grid dimensions", width=width, height=height, levels=levels)
            raise ValueError("Grid width, height and levels must be positive integers.")
        self._width = width
        self._height = height
        self._levels = levels
        self.cells: np.ndarray = np.full(
            (width, levels + 1, height), fill_value=NODE_TYPE_EMPTY, dtype=np.uint8, order="C"
        )
        # Columns (x, z) holding a room cell on any level
        self.footprints: np.ndarray = np.zeros((width, height), dtype=bool, order="C")
        log.debug("VoxelGrid initialized", shape=self.cells.shape)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def levels(self) -> int:
        return self._levels

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._levels and 0 <= z < self._height

    def get(self, x: int, y: int, z: int) -> int:
        return int(self.cells[x, y, z])

    def node_key(self, x: int, y: int, z: int) -> int:
        """Collision-free integer identity for an in-bounds cell."""
        return x + y * self._width + z * self._width * self._levels

    def stamp_room(self, room: Room) -> None:
        loc, size = room.location, room.size
        self.cells[loc.x : loc.x + size.x, loc.y : loc.y + size.y, loc.z : loc.z + size.z] = (
            NODE_TYPE_ROOM
        )
        self.footprints[loc.x : loc.x + size.x, loc.z : loc.z + size.z] = True

    def in_footprint(self, x: int, z: int) -> bool:
        """Whether column (x, z) lies under or over any stamped room."""
        return 0 <= x < self._width and 0 <= z < self._height and bool(self.footprints[x, z])

    def set_cell(self, point: Point3, cell_type: int) -> bool:
        """Write ``cell_type`` unless the cell is out of bounds or part of a room.

        Returns True when the cell was written.
        """
        x, y, z = point
        if not self.in_bounds(x, y, z):
            return False
        if self.cells[x, y, z] == NODE_TYPE_ROOM:
            return False
        self.cells[x, y, z] = cell_type
        return True

    def count(self, cell_type: int) -> int:
        return int(np.count_nonzero(self.cells == cell_type))

    def to_list(self) -> List[List[List[int]]]:
        return self.cells.tolist()
