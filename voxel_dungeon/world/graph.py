# voxel_dungeon/world/graph.py
"""Room connectivity: Delaunay candidate edges reduced to a minimum spanning tree."""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, List, NamedTuple, Sequence, Set, Tuple

import numpy as np
import structlog
from scipy.spatial import Delaunay, QhullError

from voxel_dungeon.errors import ConfigurationError
from voxel_dungeon.world.geometry import Room, euclidean

log = structlog.get_logger(__name__)


class Edge(NamedTuple):
    a: int
    b: int
    weight: float


def edge_weight(rooms: Sequence[Room], a: int, b: int) -> float:
    # Weighted by room locations (min corners), not by the triangulated anchors.
    return euclidean(rooms[a].location, rooms[b].location)


def room_anchors(rooms: Sequence[Room], levels: int) -> np.ndarray:
    """Anchor points used as triangulation vertices.

    Projected to (x, z) when the dungeon is flat or every room floor shares
    a level, since a 3D triangulation of coplanar points is degenerate.
    """
    anchors = np.array([room.anchor for room in rooms], dtype=float)
    if levels == 1 or np.all(anchors[:, 1] == anchors[0, 1]):
        return anchors[:, [0, 2]]
    return anchors


def triangulate(points: np.ndarray) -> np.ndarray:
    """Return Delaunay simplices as an index array; empty when Qhull rejects the input."""
    try:
        return Delaunay(points).simplices
    except (QhullError, ValueError) as e:
        log.info("Triangulation degenerate", points=len(points), error=str(e).split("\n", 1)[0])
        return np.empty((0, points.shape[1] + 1), dtype=int)


def simplex_edges(simplices: np.ndarray) -> Set[Tuple[int, int]]:
    pairs: Set[Tuple[int, int]] = set()
    for simplex in simplices:
        for a, b in combinations(sorted(int(v) for v in simplex), 2):
            pairs.add((a, b))
    return pairs


class _DisjointSet:
    def __init__(self, size: int):
        self.parent = list(range(size))
        self.components = size

    def find(self, a: int) -> int:
        while self.parent[a] != a:
            self.parent[a] = self.parent[self.parent[a]]
            a = self.parent[a]
        return a

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        self.parent[rb] = ra
        self.components -= 1
        return True


def kruskal(candidates: Iterable[Edge], node_count: int, forest: _DisjointSet | None = None) -> List[Edge]:
    """Greedy minimum spanning forest; ties resolve on (weight, a, b)."""
    forest = forest if forest is not None else _DisjointSet(node_count)
    tree: List[Edge] = []
    for edge in sorted(candidates, key=lambda e: (e.weight, e.a, e.b)):
        if forest.union(edge.a, edge.b):
            tree.append(edge)
            if forest.components == 1:
                break
    return tree


def chain_edges(rooms: Sequence[Room]) -> List[Edge]:
    return [Edge(i, i + 1, edge_weight(rooms, i, i + 1)) for i in range(len(rooms) - 1)]


def build_room_graph(rooms: Sequence[Room], levels: int, cycle_edges: bool = False) -> List[Edge]:
    """Spanning tree over ``rooms``: exactly ``len(rooms) - 1`` edges, no cycles.

    ``cycle_edges`` is accepted for compatibility and never adds edges.
    """
    count = len(rooms)
    if count == 0:
        log.error("Cannot build a room graph without rooms")
        raise ConfigurationError("Couldn't generate any rooms!")
    if count == 1:
        return []
    if count == 2:
        return [Edge(0, 1, edge_weight(rooms, 0, 1))]

    simplices = triangulate(room_anchors(rooms, levels))
    if len(simplices) < 2:
        log.info("Too few simplices, chaining rooms by index", simplices=len(simplices), rooms=count)
        return chain_edges(rooms)

    candidates = [Edge(a, b, edge_weight(rooms, a, b)) for a, b in simplex_edges(simplices)]
    forest = _DisjointSet(count)
    tree = kruskal(candidates, count, forest)
    if forest.components > 1:
        # Qhull drops duplicate anchors (e.g. stacked rooms seen from above)
        log.debug("Candidate edges do not span all rooms", components=forest.components)
        complete = (Edge(a, b, edge_weight(rooms, a, b)) for a, b in combinations(range(count), 2))
        tree.extend(kruskal(complete, count, forest))

    log.debug(
        "Room graph built",
        rooms=count,
        simplices=len(simplices),
        candidates=len(candidates),
        tree_edges=len(tree),
        cycle_edges=cycle_edges,
    )
    return tree


__all__ = ["Edge", "build_room_graph", "room_anchors", "triangulate", "kruskal"]
