"""Breadth-first path queries over the board graph.

Two searches live here and they are not interchangeable:

* ``bfs_has_path`` is plain connectivity. It ignores where the pawns stand and
  is the only search wall legality may use.
* ``shortest_path`` is move-aware. It expands nodes with the real pawn move
  generator, so hopping over the other pawn counts as one step. It is a
  heuristic estimate tied to the other pawn's current cell, not a graph
  distance.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional

from engine.pieces import Position
from engine.rules import EdgeSet, is_edge_blocked, orthogonal_neighbors, valid_pawn_moves

UNREACHABLE = 999

# Off-board sentinel so the move generator never sees an adjacent pawn.
_NO_PAWN: Position = (-1, -1)


def bfs_has_path(start: Position, goal_row: int, edges: EdgeSet) -> bool:
    """Return whether any open route joins ``start`` to ``goal_row``."""
    queue = deque([start])
    visited = {start}
    while queue:
        node = queue.popleft()
        if node[0] == goal_row:
            return True
        for neighbor in orthogonal_neighbors(node):
            if neighbor in visited or is_edge_blocked(node, neighbor, edges):
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return False


def shortest_path(
    start: Position,
    goal_row: int,
    edges: EdgeSet,
    other_pawn: Optional[Position] = None,
) -> int:
    """Number of pawn moves from ``start`` to ``goal_row``, or ``UNREACHABLE``."""
    blocker = other_pawn if other_pawn is not None else _NO_PAWN
    distances: Dict[Position, int] = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        dist = distances[node]
        if node[0] == goal_row:
            return dist
        for move in valid_pawn_moves(node, blocker, edges):
            if move not in distances:
                distances[move] = dist + 1
                queue.append(move)
    return UNREACHABLE


def shortest_path_cells(start: Position, goal_row: int, edges: EdgeSet) -> List[Position]:
    """Return one plain shortest route from ``start`` to the goal row, inclusive."""
    parents: Dict[Position, Optional[Position]] = {start: None}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        if node[0] == goal_row:
            path: List[Position] = []
            current: Optional[Position] = node
            while current is not None:
                path.append(current)
                current = parents[current]
            return list(reversed(path))
        for neighbor in orthogonal_neighbors(node):
            if neighbor in parents or is_edge_blocked(node, neighbor, edges):
                continue
            parents[neighbor] = node
            queue.append(neighbor)
    return []
