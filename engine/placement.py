"""Wall placement legality and enumeration."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from engine.errors import ErrorKind
from engine.paths import bfs_has_path
from engine.pieces import Orientation, PlayerId, Position, Wall
from engine.rules import WALL_GRID_SIZE, blocked_edges, wall_edges, wall_in_bounds


def crosses_existing_wall(candidate: Wall, walls: Sequence[Wall]) -> bool:
    """Return whether a wall of the other orientation shares the candidate's anchor."""
    return any(
        wall.row == candidate.row and wall.col == candidate.col and wall.orientation is not candidate.orientation
        for wall in walls
    )


def check_wall_placement(
    candidate: Wall,
    walls: Sequence[Wall],
    positions: Mapping[PlayerId, Position],
) -> Optional[ErrorKind]:
    """Return why ``candidate`` may not be placed, or None when it is legal."""
    if not wall_in_bounds(candidate):
        return ErrorKind.OUT_OF_BOUNDS
    if crosses_existing_wall(candidate, walls):
        return ErrorKind.WALL_OVERLAP

    edges = blocked_edges(walls)
    candidate_edges = wall_edges(candidate)
    if any(edge in edges for edge in candidate_edges):
        return ErrorKind.WALL_OVERLAP

    trial_edges = edges.union(candidate_edges)
    for player, position in positions.items():
        if not bfs_has_path(position, player.goal_row, trial_edges):
            return ErrorKind.WALL_WOULD_SEVER_PATH
    return None


def can_place_wall(
    candidate: Wall,
    walls: Sequence[Wall],
    positions: Mapping[PlayerId, Position],
) -> bool:
    """Return whether ``candidate`` may be added to ``walls``."""
    return check_wall_placement(candidate, walls, positions) is None


def compute_available_walls(
    orientation: Orientation,
    walls: Sequence[Wall],
    positions: Mapping[PlayerId, Position],
) -> List[Wall]:
    """
    Enumerate every legal wall of one orientation.

    Each anchor costs up to two BFS passes, so callers should run this at most
    once per orientation for a decision.
    """
    placements: List[Wall] = []
    for row in range(WALL_GRID_SIZE):
        for col in range(WALL_GRID_SIZE):
            candidate = Wall(row, col, orientation)
            if can_place_wall(candidate, walls, positions):
                placements.append(candidate)
    return placements
