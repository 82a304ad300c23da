# voxel_dungeon/world/corridors.py
"""Corridor and staircase carving between connected rooms.

Each tree edge runs an A* search over the voxel grid from the entry point of
one room to the entry point of the other. The grid is read-only while the
search runs; the returned path is then committed as CORRIDOR cells, diagonal
staircases (VERTICAL shells) or single-cell shafts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Sequence, Set, Tuple

import structlog

from voxel_dungeon.constants import (
    NODE_TYPE_CORRIDOR,
    NODE_TYPE_EMPTY,
    NODE_TYPE_ROOM,
    NODE_TYPE_VERTICAL,
    STAIR_SKIP_DISTANCE,
    VERTICAL_MOVE_PENALTY,
)
from voxel_dungeon.errors import PathfindingFailure
from voxel_dungeon.systems.pathfinding.astar import find_path
from voxel_dungeon.world.geometry import Point3, Room
from voxel_dungeon.world.graph import Edge
from voxel_dungeon.world.voxel_grid import VoxelGrid

log = structlog.get_logger(__name__)

PLANAR_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (1, 0), (0, 1))


class Corridor(NamedTuple):
    """Waypoints carved for one tree edge, in path order."""
    room_a: int
    room_b: int
    path: Tuple[Point3, ...]

    def as_dict(self) -> dict:
        return {
            "rooms": [self.room_a, self.room_b],
            "path": [point.as_dict() for point in self.path],
        }


@dataclass
class Stair:
    """A diagonal staircase between two adjacent levels."""
    start: Point3
    direction: Point3
    min_y: int
    path: List[Point3] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "start": self.start.as_dict(),
            "direction": self.direction.as_dict(),
            "minY": self.min_y,
            "path": [point.as_dict() for point in self.path],
        }


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass(frozen=True)
class CarvingContext:
    """Traversal rules for one corridor search.

    Holds everything the legality checks need explicitly, so a search never
    depends on shared state and can be exercised on a hand-built grid.
    """
    grid: VoxelGrid
    room_a: Room
    room_b: Room
    target: Point3
    allow_stairs: bool = True
    intersect_corridors: bool = True

    # --- TraversalPolicy -------------------------------------------------
    def key(self, node: Point3) -> int:
        return self.grid.node_key(node.x, node.y, node.z)

    def is_goal(self, node: Point3) -> bool:
        return node == self.target

    def heuristic(self, node: Point3) -> float:
        t = self.target
        return abs(node.x - t.x) + abs(node.z - t.z) + abs(node.y - t.y) * 2

    def step_cost(self, current: Point3, neighbour: Point3) -> float:
        delta_y = neighbour.y - current.y
        cost = abs(neighbour.x - current.x) + abs(neighbour.z - current.z) + abs(delta_y)
        if delta_y != 0:
            cost += VERTICAL_MOVE_PENALTY
        return cost

    def neighbours(self, node: Point3) -> Iterator[Point3]:
        x, y, z = node
        for dx, dz in PLANAR_DIRECTIONS:
            if self.can_enter(x + dx, y, z + dz):
                yield Point3(x + dx, y, z + dz)

        # Stairs and shafts never start inside a room
        if self.in_room(node):
            return

        if not self.allow_stairs:
            for dy in (-1, 1):
                if self.can_enter(x, y + dy, z, vertical=True):
                    yield Point3(x, y + dy, z)
            return

        for dy in (-1, 1):
            for dx, dz in PLANAR_DIRECTIONS:
                if self.stair_clear(node, dx, dy, dz):
                    yield Point3(
                        x + dx * STAIR_SKIP_DISTANCE, y + dy, z + dz * STAIR_SKIP_DISTANCE
                    )

    # --- legality --------------------------------------------------------
    def in_room(self, node: Point3) -> bool:
        """Whether ``node`` lies in the column of any room, endpoint or not."""
        x, _, z = node
        return (
            self.grid.in_footprint(x, z)
            or self.room_a.contains_2d(x, z)
            or self.room_b.contains_2d(x, z)
        )

    def entry_level(self, room: Room, y: int) -> bool:
        """Levels at which the search may walk into an endpoint room."""
        if y == room.floor:
            return True
        # Shaft entries sit at the vertical midpoint, not on the floor
        return not self.allow_stairs and y == room.entry_point(use_floor=False).y

    def can_enter(self, x: int, y: int, z: int, vertical: bool = False) -> bool:
        """Whether the search may occupy (x, y, z).

        ``vertical`` cells are the ones a stair or shaft would be built in and
        must be EMPTY and outside every room column. Endpoint rooms are only
        enterable at their entry level, never by a vertical structure.
        """
        if not self.grid.in_bounds(x, y, z):
            return False
        cell = self.grid.get(x, y, z)
        if cell == NODE_TYPE_VERTICAL:
            return False
        if vertical and (cell != NODE_TYPE_EMPTY or self.grid.in_footprint(x, z)):
            return False

        in_a = self.room_a.contains_2d(x, z)
        in_b = self.room_b.contains_2d(x, z)
        if in_a or in_b:
            if vertical or cell != NODE_TYPE_ROOM:
                return False
            return (in_a and self.entry_level(self.room_a, y)) or (
                in_b and self.entry_level(self.room_b, y)
            )

        if cell == NODE_TYPE_ROOM:
            return False
        if cell == NODE_TYPE_CORRIDOR:
            return self.intersect_corridors
        return True

    def stair_clear(self, node: Point3, dx: int, dy: int, dz: int) -> bool:
        """Three-cell lookahead for a staircase jump from ``node``.

        The run has to be clear on the destination level for the whole jump
        and on the source level for the two cells the stair shell occupies.
        """
        x, y, z = node
        for step in range(1, STAIR_SKIP_DISTANCE + 1):
            if not self.can_enter(x + dx * step, y + dy, z + dz * step, vertical=True):
                return False
        for step in range(1, STAIR_SKIP_DISTANCE):
            if not self.can_enter(x + dx * step, y, z + dz * step, vertical=True):
                return False
        return True


def _carve_stair(grid: VoxelGrid, pre: Point3, post: Point3) -> Stair:
    delta_y = post.y - pre.y
    direction = Point3(_sign(post.x - pre.x), _sign(delta_y), _sign(post.z - pre.z))
    planar = Point3(direction.x, 0, direction.z)
    stair = Stair(start=pre, direction=direction, min_y=min(pre.y, post.y))

    def set_stair(point: Point3, cell_type: int) -> None:
        if cell_type == NODE_TYPE_VERTICAL and (
            not grid.in_bounds(*point) or grid.get(*point) != NODE_TYPE_EMPTY
        ):
            return
        if grid.set_cell(point, cell_type):
            stair.path.append(point)

    upper = Point3(0, delta_y, 0)
    set_stair(pre + planar, NODE_TYPE_VERTICAL)
    set_stair(pre + planar.scaled(2), NODE_TYPE_VERTICAL)
    set_stair(pre + planar + upper, NODE_TYPE_VERTICAL)
    set_stair(pre + planar.scaled(2) + upper, NODE_TYPE_VERTICAL)
    set_stair(pre + planar.scaled(STAIR_SKIP_DISTANCE) + upper, NODE_TYPE_CORRIDOR)
    set_stair(pre, NODE_TYPE_CORRIDOR)
    return stair


def materialize_path(
    grid: VoxelGrid,
    path: Sequence[Point3],
    target: Point3,
    allow_stairs: bool,
) -> Tuple[List[Point3], List[Stair]]:
    """Commit a search path into ``grid``.

    Returns the corridor waypoints carved for this path and any stairs
    built. Cells already CORRIDOR or ROOM are not re-marked and are not
    repeated in the waypoint list.
    """
    waypoints: List[Point3] = []
    recorded: Set[Point3] = set()
    stairs: List[Stair] = []

    def record(point: Point3) -> None:
        if point not in recorded:
            recorded.add(point)
            waypoints.append(point)

    if not path:
        return waypoints, stairs

    previous = path[0]
    for index, node in enumerate(path):
        point = target if index == len(path) - 1 else node
        delta_y = point.y - previous.y
        current_type = grid.get(*point)

        if delta_y != 0:
            if allow_stairs and index != 0:
                stair = _carve_stair(grid, previous, point)
                if stair.path:
                    stairs.append(stair)
                record(previous)
                record(point)
            elif current_type == NODE_TYPE_EMPTY:
                grid.set_cell(point, NODE_TYPE_VERTICAL)
                record(point)
        elif current_type == NODE_TYPE_EMPTY:
            grid.set_cell(point, NODE_TYPE_CORRIDOR)
            record(point)

        previous = point

    return waypoints, stairs


def carve_corridors(
    grid: VoxelGrid,
    rooms: Sequence[Room],
    edges: Sequence[Edge],
    allow_stairs: bool = True,
    intersect_corridors: bool = True,
) -> Tuple[List[Corridor], List[Stair]]:
    """Search and carve one corridor per edge, in edge order."""
    corridors: List[Corridor] = []
    stairs: List[Stair] = []

    for edge in edges:
        room_a, room_b = rooms[edge.a], rooms[edge.b]
        start = room_a.entry_point(use_floor=allow_stairs)
        target = room_b.entry_point(use_floor=allow_stairs)
        context = CarvingContext(
            grid=grid,
            room_a=room_a,
            room_b=room_b,
            target=target,
            allow_stairs=allow_stairs,
            intersect_corridors=intersect_corridors,
        )
        path = find_path(start, context)
        if path is None:
            log.error(
                "No corridor path between rooms",
                room_a=edge.a,
                room_b=edge.b,
                start=start,
                target=target,
            )
            raise PathfindingFailure(edge.a, edge.b, tuple(start), tuple(target))

        waypoints, edge_stairs = materialize_path(grid, path, target, allow_stairs)
        if waypoints:
            corridors.append(Corridor(edge.a, edge.b, tuple(waypoints)))
        stairs.extend(edge_stairs)
        log.debug(
            "Carved corridor",
            room_a=edge.a,
            room_b=edge.b,
            path_nodes=len(path),
            carved=len(waypoints),
            stairs=len(edge_stairs),
        )

    return corridors, stairs


__all__ = [
    "CarvingContext",
    "Corridor",
    "Stair",
    "carve_corridors",
    "materialize_path",
]
