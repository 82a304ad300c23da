# voxel_dungeon/errors.py
"""Failure taxonomy for dungeon generation.

Every error raised by :func:`voxel_dungeon.generate_dungeon` derives from
:class:`DungeonGenerationError`, so callers can catch the whole family in one
place. Generation is all-or-nothing: none of these carry a partial result.
"""

from __future__ import annotations

from typing import Optional, Tuple


class DungeonGenerationError(RuntimeError):
    pass


class ConfigurationError(DungeonGenerationError, ValueError):
    """The configuration cannot produce a dungeon (bad bounds, no rooms...)."""


class PlacementExhausted(DungeonGenerationError):
    """A random room could not be placed within ``max_tries`` attempts."""

    def __init__(self, room_index: int, attempts: int) -> None:
        self.room_index = room_index
        self.attempts = attempts
        super().__init__(
            f"Could not place random room #{room_index} after {attempts} attempts"
        )


class PathfindingFailure(DungeonGenerationError):
    """The corridor search between two rooms exhausted its reachable space."""

    def __init__(
        self,
        room_a: int,
        room_b: int,
        start: Optional[Tuple[int, int, int]] = None,
        target: Optional[Tuple[int, int, int]] = None,
    ) -> None:
        self.room_a = room_a
        self.room_b = room_b
        self.start = start
        self.target = target
        super().__init__(
            f"No corridor path between room {room_a} and room {room_b}"
            f" (start={start}, target={target})"
        )


__all__ = [
    "DungeonGenerationError",
    "ConfigurationError",
    "PlacementExhausted",
    "PathfindingFailure",
]
