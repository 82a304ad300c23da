# voxel_dungeon/constants.py
from enum import IntEnum
from typing import Final


class CellType(IntEnum):
    """Cell codes stored in the voxel maze."""

    EMPTY = 0
    ROOM = 1
    CORRIDOR = 2
    VERTICAL = 3


NODE_TYPE_EMPTY: Final[int] = int(CellType.EMPTY)
NODE_TYPE_ROOM: Final[int] = int(CellType.ROOM)
NODE_TYPE_CORRIDOR: Final[int] = int(CellType.CORRIDOR)
NODE_TYPE_VERTICAL: Final[int] = int(CellType.VERTICAL)

# Added to the step cost whenever a move changes level
VERTICAL_MOVE_PENALTY: Final[int] = 100
# Horizontal run covered by one diagonal staircase
STAIR_SKIP_DISTANCE: Final[int] = 3

__all__ = [
    "CellType",
    "NODE_TYPE_EMPTY",
    "NODE_TYPE_ROOM",
    "NODE_TYPE_CORRIDOR",
    "NODE_TYPE_VERTICAL",
    "VERTICAL_MOVE_PENALTY",
    "STAIR_SKIP_DISTANCE",
]
