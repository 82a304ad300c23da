# voxel_dungeon/systems/pathfinding/astar.py
"""Generic A* search over an abstract traversal policy.

The search only knows how to order and expand nodes; what a node is, which
moves are legal, what they cost and how far the goal is are all answered by
the policy. This keeps the mechanics testable without any grid carving.
"""

from __future__ import annotations

import heapq
from itertools import count
from typing import Dict, Hashable, Iterable, List, Optional, Protocol, TypeVar

import structlog

log = structlog.get_logger(__name__)

NodeT = TypeVar("NodeT")


class TraversalPolicy(Protocol[NodeT]):
    def key(self, node: NodeT) -> Hashable:
        """Identity of ``node``; equal keys are the same search state."""
        ...

    def neighbours(self, node: NodeT) -> Iterable[NodeT]:
        ...

    def step_cost(self, current: NodeT, neighbour: NodeT) -> float:
        ...

    def heuristic(self, node: NodeT) -> float:
        """Admissible estimate of the remaining cost to the goal."""
        ...

    def is_goal(self, node: NodeT) -> bool:
        ...


def find_path(start: NodeT, policy: TraversalPolicy[NodeT]) -> Optional[List[NodeT]]:
    """Return the cheapest path from ``start`` to a goal node, start included.

    Returns None once the reachable space is exhausted. Equal f-scores are
    expanded in insertion order, so results are deterministic.
    """
    tie = count()
    start_key = policy.key(start)
    g_score: Dict[Hashable, float] = {start_key: 0.0}
    came_from: Dict[Hashable, Hashable] = {}
    nodes: Dict[Hashable, NodeT] = {start_key: start}
    closed = set()

    open_set: list[tuple[float, int, Hashable]] = []
    heapq.heappush(open_set, (policy.heuristic(start), next(tie), start_key))

    expanded = 0
    while open_set:
        _, _, current_key = heapq.heappop(open_set)
        if current_key in closed:
            continue  # stale entry
        current = nodes[current_key]
        if policy.is_goal(current):
            path: List[NodeT] = [current]
            while current_key in came_from:
                current_key = came_from[current_key]
                path.append(nodes[current_key])
            path.reverse()
            log.debug("Path found", length=len(path), cost=g_score[policy.key(current)], expanded=expanded)
            return path

        closed.add(current_key)
        expanded += 1
        current_g = g_score[current_key]
        for neighbour in policy.neighbours(current):
            neighbour_key = policy.key(neighbour)
            if neighbour_key in closed:
                continue
            tentative_g = current_g + policy.step_cost(current, neighbour)
            if tentative_g < g_score.get(neighbour_key, float("inf")):
                g_score[neighbour_key] = tentative_g
                came_from[neighbour_key] = current_key
                nodes[neighbour_key] = neighbour
                heapq.heappush(
                    open_set, (tentative_g + policy.heuristic(neighbour), next(tie), neighbour_key)
                )

    log.debug("Search space exhausted", expanded=expanded)
    return None


__all__ = ["TraversalPolicy", "find_path"]
