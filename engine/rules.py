"""Grid topology rules for Quoridor: edges, walls, pawn moves, and goals."""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Sequence, Tuple

from engine.pieces import BOARD_SIZE, Orientation, PlayerId, Position, Wall

WALL_GRID_SIZE = BOARD_SIZE - 1

Edge = Tuple[Position, Position]
EdgeSet = FrozenSet[Edge]

DIRECTIONS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def in_bounds(pos: Position) -> bool:
    """Return whether a position is on the board."""
    row, col = pos
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def wall_in_bounds(wall: Wall) -> bool:
    """Return whether a wall anchor lies on the intersection grid."""
    return 0 <= wall.row < WALL_GRID_SIZE and 0 <= wall.col < WALL_GRID_SIZE


def orthogonal_neighbors(pos: Position) -> Iterable[Position]:
    """Yield orthogonally adjacent positions in bounds."""
    row, col = pos
    for dr, dc in DIRECTIONS:
        candidate = (row + dr, col + dc)
        if in_bounds(candidate):
            yield candidate


def is_adjacent_orthogonal(a: Position, b: Position) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def edge_key(a: Position, b: Position) -> Edge:
    """Canonical undirected key for the edge between two adjacent cells."""
    return (a, b) if a <= b else (b, a)


def wall_edges(wall: Wall) -> Tuple[Edge, Edge]:
    """Return the two adjacency edges a wall blocks."""
    top_left = (wall.row, wall.col)
    top_right = (wall.row, wall.col + 1)
    bottom_left = (wall.row + 1, wall.col)
    bottom_right = (wall.row + 1, wall.col + 1)
    if wall.orientation is Orientation.HORIZONTAL:
        return edge_key(top_left, bottom_left), edge_key(top_right, bottom_right)
    return edge_key(top_left, top_right), edge_key(bottom_left, bottom_right)


def blocked_edges(walls: Sequence[Wall]) -> EdgeSet:
    """Derive the set of blocked edges from placed walls."""
    blocked = set()
    for wall in walls:
        blocked.update(wall_edges(wall))
    return frozenset(blocked)


def is_edge_blocked(a: Position, b: Position, edges: EdgeSet) -> bool:
    return edge_key(a, b) in edges


def valid_pawn_moves(current: Position, opponent: Position, edges: EdgeSet) -> List[Position]:
    """
    Return the destinations a pawn at ``current`` may reach in one move.

    An adjacent opponent is jumped straight over when nothing is behind it;
    otherwise the pawn may side-step diagonally around it. The result has no
    duplicates and a stable order.
    """
    moves: List[Position] = []
    row, col = current
    for dr, dc in DIRECTIONS:
        adjacent = (row + dr, col + dc)
        if not in_bounds(adjacent) or is_edge_blocked(current, adjacent, edges):
            continue

        if adjacent != opponent:
            moves.append(adjacent)
            continue

        jump = (adjacent[0] + dr, adjacent[1] + dc)
        if in_bounds(jump) and not is_edge_blocked(adjacent, jump, edges):
            moves.append(jump)
            continue

        # Straight jump blocked by a wall or the board edge: side-step instead.
        side_steps = ((0, -1), (0, 1)) if dr != 0 else ((-1, 0), (1, 0))
        for sr, sc in side_steps:
            diagonal = (adjacent[0] + sr, adjacent[1] + sc)
            if in_bounds(diagonal) and not is_edge_blocked(adjacent, diagonal, edges):
                moves.append(diagonal)

    unique: List[Position] = []
    for move in moves:
        if move not in unique:
            unique.append(move)
    return unique


def is_winning_position(player: PlayerId, position: Position) -> bool:
    """Return whether ``position`` lies on ``player``'s goal row."""
    return position[0] == player.goal_row
