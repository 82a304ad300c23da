from collections import deque

import numpy as np
import pytest

from voxel_dungeon.config import DungeonConfig
from voxel_dungeon.constants import (
    NODE_TYPE_CORRIDOR,
    NODE_TYPE_ROOM,
    NODE_TYPE_VERTICAL,
)
from voxel_dungeon.errors import PathfindingFailure
from voxel_dungeon.world.corridors import CarvingContext, carve_corridors, materialize_path
from voxel_dungeon.world.geometry import Point3, Room
from voxel_dungeon.world.graph import Edge
from voxel_dungeon.world.procgen import generate_dungeon
from voxel_dungeon.world.voxel_grid import VoxelGrid


def make_room(x, y, z, sx=2, sy=1, sz=2):
    return Room(Point3(x, y, z), Point3(sx, sy, sz))


def build_grid(width, height, levels, rooms):
    grid = VoxelGrid(width=width, height=height, levels=levels)
    for room in rooms:
        grid.stamp_room(room)
    return grid


def connected(maze, start, goal):
    """6-neighbour flood fill over non-empty cells."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, y, z = queue.popleft()
        if (x, y, z) == goal:
            return True
        for dx, dy, dz in ((1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)):
            n = (x + dx, y + dy, z + dz)
            if all(0 <= c < s for c, s in zip(n, maze.shape)) and n not in seen and maze[n]:
                seen.add(n)
                queue.append(n)
    return False


def stair_layout(**overrides):
    config = DungeonConfig(
        room_count=0,
        width=12,
        height=5,
        levels=2,
        predefined=(make_room(1, 0, 1), make_room(8, 1, 1)),
        cycle_edges=False,
    )
    return config.with_overrides(**overrides)


def test_straight_corridor_between_rooms():
    rooms = [make_room(1, 0, 1, 3, 1, 3), make_room(8, 0, 1, 3, 1, 3)]
    grid = build_grid(12, 5, 1, rooms)
    corridors, stairs = carve_corridors(grid, rooms, [Edge(0, 1, 7.0)])
    assert stairs == []
    assert len(corridors) == 1
    assert corridors[0].room_a == 0 and corridors[0].room_b == 1
    assert corridors[0].path == tuple(Point3(x, 0, 2) for x in range(4, 8))
    assert grid.count(NODE_TYPE_CORRIDOR) == 4
    assert grid.count(NODE_TYPE_ROOM) == 18


def test_staircase_between_levels():
    result = generate_dungeon(stair_layout())
    maze = result.maze

    assert len(result.corridors) == 1
    assert len(result.stairs) == 1
    stair = result.stairs[0]
    assert stair.direction == Point3(1, 1, 0)
    assert stair.min_y == 0
    assert stair.start.y == 0 and stair.start.z == 2
    assert len(stair.path) == 6

    vertical = [tuple(int(c) for c in cell) for cell in np.argwhere(maze == NODE_TYPE_VERTICAL)]
    assert len(vertical) == 4
    shell_x = {stair.start.x + 1, stair.start.x + 2}
    for x, y, z in vertical:
        assert x in shell_x and z == 2 and y in (0, 1)
        assert not any(room.contains_2d(x, z) for room in result.rooms)

    post = stair.start + Point3(3, 1, 0)
    assert maze[post] == NODE_TYPE_CORRIDOR
    assert post in result.corridors[0].path
    assert len(result.corridors[0].path) == 3
    assert connected(maze, (1, 0, 1), (9, 1, 2))


def test_shaft_between_levels_without_stairs():
    result = generate_dungeon(stair_layout(allow_stairs=False))
    maze = result.maze

    assert result.stairs == []
    vertical = np.argwhere(maze == NODE_TYPE_VERTICAL)
    assert len(vertical) == 1
    x, y, z = (int(c) for c in vertical[0])
    assert y == 1 and z == 2 and 3 <= x <= 7
    assert np.count_nonzero(maze == NODE_TYPE_CORRIDOR) == 5
    assert len(result.corridors[0].path) == 6
    assert connected(maze, (1, 0, 1), (9, 1, 2))


def test_existing_corridor_is_crossed_when_allowed():
    rooms = [make_room(1, 0, 1), make_room(8, 0, 1)]
    grid = build_grid(11, 5, 1, rooms)
    grid.cells[5, 0, :] = NODE_TYPE_CORRIDOR
    corridors, _ = carve_corridors(grid, rooms, [Edge(0, 1, 7.0)], intersect_corridors=True)
    assert corridors[0].path == (
        Point3(3, 0, 2),
        Point3(4, 0, 2),
        Point3(6, 0, 2),
        Point3(7, 0, 2),
    )


def test_existing_corridor_blocks_when_disallowed():
    rooms = [make_room(1, 0, 1), make_room(8, 0, 1)]
    grid = build_grid(11, 5, 1, rooms)
    grid.cells[5, 0, :] = NODE_TYPE_CORRIDOR
    with pytest.raises(PathfindingFailure) as excinfo:
        carve_corridors(grid, rooms, [Edge(0, 1, 7.0)], intersect_corridors=False)
    assert (excinfo.value.room_a, excinfo.value.room_b) == (0, 1)


def test_enclosed_room_raises():
    rooms = [make_room(1, 0, 2), make_room(8, 0, 2)]
    grid = build_grid(12, 7, 1, rooms)
    grid.cells[7:11, 0, 1] = NODE_TYPE_VERTICAL
    grid.cells[7:11, 0, 4] = NODE_TYPE_VERTICAL
    grid.cells[7, 0, 1:5] = NODE_TYPE_VERTICAL
    grid.cells[10, 0, 1:5] = NODE_TYPE_VERTICAL
    with pytest.raises(PathfindingFailure):
        carve_corridors(grid, rooms, [Edge(0, 1, 7.0)])


def test_corridors_stay_out_of_unrelated_rooms():
    rooms = [make_room(1, 0, 1), make_room(5, 0, 0, 2, 1, 4), make_room(9, 0, 1)]
    grid = build_grid(12, 6, 1, rooms)
    corridors, _ = carve_corridors(grid, rooms, [Edge(0, 2, 8.0)])
    assert grid.count(NODE_TYPE_ROOM) == 4 + 8 + 4
    for point in corridors[0].path:
        assert not rooms[1].contains_2d(point.x, point.z)


def test_context_rules_inside_room():
    room_a, room_b = make_room(1, 0, 1), make_room(8, 0, 1)
    grid = build_grid(12, 5, 2, [room_a, room_b])
    context = CarvingContext(grid, room_a, room_b, target=Point3(9, 0, 2))
    moves = list(context.neighbours(Point3(2, 0, 2)))
    assert all(move.y == 0 for move in moves)
    # above the endpoint footprint there is no room cell to enter
    assert not context.can_enter(2, 1, 2)
    assert context.can_enter(1, 0, 1)
    assert not context.can_enter(2, 0, 2, vertical=True)


def test_context_rejects_unrelated_room_cells():
    room_a, room_b, other = make_room(1, 0, 1), make_room(8, 0, 1), make_room(4, 0, 1)
    grid = build_grid(12, 5, 1, [room_a, room_b, other])
    context = CarvingContext(grid, room_a, room_b, target=Point3(9, 0, 2))
    assert not context.can_enter(4, 0, 1)
    assert context.can_enter(4, 0, 3)


def test_context_stair_lookahead():
    room_a, room_b = make_room(0, 0, 0), make_room(10, 1, 3)
    grid = build_grid(12, 5, 2, [room_a, room_b])
    context = CarvingContext(grid, room_a, room_b, target=Point3(11, 1, 4))
    node = Point3(3, 0, 2)
    assert Point3(6, 1, 2) in set(context.neighbours(node))

    grid.cells[4, 0, 2] = NODE_TYPE_CORRIDOR
    assert not context.stair_clear(node, 1, 1, 0)
    assert Point3(6, 1, 2) not in set(context.neighbours(node))


def test_context_shaft_moves():
    room_a, room_b = make_room(0, 0, 0), make_room(10, 1, 3)
    grid = build_grid(12, 5, 2, [room_a, room_b])
    context = CarvingContext(grid, room_a, room_b, target=Point3(10, 1, 3), allow_stairs=False)
    moves = set(context.neighbours(Point3(4, 0, 2)))
    assert Point3(4, 1, 2) in moves
    assert all(abs(m.x - 4) + abs(m.z - 2) <= 1 for m in moves)


def test_context_cost_and_heuristic():
    room_a, room_b = make_room(0, 0, 0), make_room(10, 1, 3)
    grid = build_grid(12, 5, 2, [room_a, room_b])
    context = CarvingContext(grid, room_a, room_b, target=Point3(10, 1, 3))
    assert context.step_cost(Point3(3, 0, 2), Point3(4, 0, 2)) == 1
    assert context.step_cost(Point3(3, 0, 2), Point3(6, 1, 2)) == 104
    assert context.heuristic(Point3(3, 0, 2)) == 7 + 1 + 2


def test_materialize_skips_existing_cells():
    room_a, room_b = make_room(0, 0, 0), make_room(6, 0, 0)
    grid = build_grid(8, 2, 1, [room_a, room_b])
    grid.cells[3, 0, 1] = NODE_TYPE_CORRIDOR
    path = [Point3(x, 0, 1) for x in range(1, 8)]
    waypoints, stairs = materialize_path(grid, path, Point3(7, 0, 1), allow_stairs=True)
    assert stairs == []
    assert waypoints == [Point3(2, 0, 1), Point3(4, 0, 1), Point3(5, 0, 1)]
    assert grid.count(NODE_TYPE_ROOM) == 8


def test_no_stair_in_column_of_unrelated_room():
    # the room on level 2 spans the whole depth of the grid between the endpoints
    room_a, room_b, overhead = make_room(1, 0, 1), make_room(10, 1, 1), make_room(4, 2, 0, 3, 1, 5)
    rooms = [room_a, room_b, overhead]
    grid = build_grid(14, 5, 3, rooms)
    corridors, stairs = carve_corridors(grid, rooms, [Edge(0, 1, 9.0)])

    assert len(corridors) == 1
    assert len(stairs) == 1
    for point in stairs[0].path:
        assert not any(room.contains_2d(point.x, point.z) for room in rooms)
    for x, _, z in np.argwhere(grid.cells == NODE_TYPE_VERTICAL):
        assert not overhead.contains_2d(int(x), int(z))
    assert grid.get(5, 2, 2) == NODE_TYPE_ROOM


def test_context_blocks_vertical_moves_under_unrelated_room():
    room_a, room_b, overhead = make_room(0, 0, 0), make_room(10, 1, 3), make_room(4, 2, 1, 3, 1, 3)
    grid = build_grid(12, 5, 3, [room_a, room_b, overhead])
    context = CarvingContext(grid, room_a, room_b, target=Point3(11, 1, 4))
    below = Point3(5, 0, 2)
    # walking underneath is fine, climbing inside the column is not
    assert context.can_enter(5, 0, 2)
    assert context.in_room(below)
    assert all(move.y == 0 for move in context.neighbours(below))
    assert not context.can_enter(5, 1, 2, vertical=True)
    assert not context.stair_clear(Point3(3, 0, 2), 1, 1, 0)
    assert context.stair_clear(Point3(3, 0, 4), 1, 1, 0)


def test_deep_endpoint_entered_on_floor_with_stairs():
    room_a, room_b = make_room(1, 0, 1, 2, 3, 2), make_room(8, 0, 1)
    grid = build_grid(12, 5, 3, [room_a, room_b])
    context = CarvingContext(grid, room_a, room_b, target=Point3(9, 0, 2))
    assert context.can_enter(1, 0, 1)
    assert not context.can_enter(1, 1, 1)
    assert not context.can_enter(1, 2, 1)


def test_deep_endpoint_entered_at_midpoint_with_shafts():
    room_a, room_b = make_room(1, 0, 1, 2, 3, 2), make_room(8, 0, 1)
    grid = build_grid(12, 5, 3, [room_a, room_b])
    context = CarvingContext(
        grid, room_a, room_b, target=Point3(9, 0, 2), allow_stairs=False
    )
    assert context.can_enter(1, 0, 1)
    assert context.can_enter(1, 1, 1)
    assert not context.can_enter(1, 2, 1)
