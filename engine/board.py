"""Quoridor game snapshots, action application, and state encoding."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

import numpy as np

from engine.errors import ErrorKind, IllegalActionError
from engine.pieces import (
    BOARD_SIZE,
    MAX_WALLS_PER_PLAYER,
    SIDE_SYMBOL,
    Orientation,
    PlayerId,
    Position,
    Wall,
)
from engine.placement import check_wall_placement, compute_available_walls
from engine.rules import (
    EdgeSet,
    blocked_edges,
    in_bounds,
    is_adjacent_orthogonal,
    is_edge_blocked,
    is_winning_position,
    valid_pawn_moves,
)

STATE_CHANNELS = 7


@dataclass(frozen=True)
class Move:
    """A Quoridor action: a pawn move or a wall placement."""

    kind: str
    to_pos: Optional[Position] = None
    wall: Optional[Wall] = None

    @classmethod
    def pawn(cls, to_pos: Position) -> "Move":
        return cls(kind="move", to_pos=to_pos)

    @classmethod
    def place(cls, wall: Wall) -> "Move":
        return cls(kind="wall", wall=wall)

    def __str__(self) -> str:
        if self.kind == "wall" and self.wall is not None:
            return f"wall {self.wall.row} {self.wall.col} {self.wall.symbol}"
        if self.kind == "move" and self.to_pos is not None:
            return f"move {self.to_pos[0]} {self.to_pos[1]}"
        return self.kind


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable game state.

    Applying an action returns a new snapshot; nothing here is mutated after
    construction.
    """

    positions: Mapping[PlayerId, Position]
    walls: Tuple[Wall, ...] = ()
    walls_remaining: Mapping[PlayerId, int] = field(
        default_factory=lambda: {PlayerId.FIRST: MAX_WALLS_PER_PLAYER, PlayerId.SECOND: MAX_WALLS_PER_PLAYER}
    )
    current_player: PlayerId = PlayerId.FIRST
    winner: Optional[PlayerId] = None
    ply: int = 0

    def __post_init__(self) -> None:
        # Read-only views over private copies, so callers cannot edit a snapshot in place.
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))
        object.__setattr__(self, "walls_remaining", MappingProxyType(dict(self.walls_remaining)))
        object.__setattr__(self, "walls", tuple(self.walls))

    def __hash__(self) -> int:
        return hash(
            (
                tuple(self.positions[player] for player in PlayerId),
                self.walls,
                tuple(self.walls_remaining[player] for player in PlayerId),
                self.current_player,
                self.winner,
                self.ply,
            )
        )

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None

    @property
    def edges(self) -> EdgeSet:
        return blocked_edges(self.walls)

    def position(self, player: PlayerId) -> Position:
        return self.positions[player]

    def with_position(self, player: PlayerId, target: Position) -> "Snapshot":
        """Hypothetical copy with one pawn relocated (no legality checks)."""
        positions = dict(self.positions)
        positions[player] = target
        return replace(self, positions=positions)

    def with_wall(self, player: PlayerId, wall: Wall) -> "Snapshot":
        """Hypothetical copy with one more wall charged to ``player`` (no legality checks)."""
        remaining = dict(self.walls_remaining)
        remaining[player] = max(0, remaining[player] - 1)
        return replace(self, walls=self.walls + (wall,), walls_remaining=remaining)

    def encode_state(self) -> np.ndarray:
        """Encode the snapshot as integer planes (usable as a cache key)."""
        encoded = np.zeros((STATE_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for channel, player in enumerate((PlayerId.FIRST, PlayerId.SECOND)):
            row, col = self.positions[player]
            encoded[channel, row, col] = 1
        for wall in self.walls:
            channel = 2 if wall.orientation is Orientation.HORIZONTAL else 3
            encoded[channel, wall.row, wall.col] = 1
        encoded[4, :, :] = 1 if self.current_player is PlayerId.FIRST else 0
        encoded[5, :, :] = self.walls_remaining[PlayerId.FIRST]
        encoded[6, :, :] = self.walls_remaining[PlayerId.SECOND]
        return encoded

    def render_ascii(self) -> str:
        """Return a human-readable board with pawns and walls."""
        horizontal = set()
        vertical = set()
        for wall in self.walls:
            if wall.orientation is Orientation.HORIZONTAL:
                horizontal.update({(wall.row, wall.col), (wall.row, wall.col + 1)})
            else:
                vertical.update({(wall.row, wall.col), (wall.row + 1, wall.col)})

        occupants = {pos: SIDE_SYMBOL[player] for player, pos in self.positions.items()}
        lines: List[str] = ["    " + "   ".join(str(c) for c in range(BOARD_SIZE))]
        for row in range(BOARD_SIZE):
            cells = ""
            for col in range(BOARD_SIZE):
                cells += occupants.get((row, col), ".")
                if col < BOARD_SIZE - 1:
                    cells += " | " if (row, col) in vertical else "   "
            lines.append(f"{row:>2d}  {cells}")
            if row < BOARD_SIZE - 1:
                grooves = "   ".join("=" if (row, col) in horizontal else " " for col in range(BOARD_SIZE))
                lines.append(f"    {grooves}")
        return "\n".join(lines)


def initial_snapshot() -> Snapshot:
    """Start-of-game snapshot: both pawns home, no walls, first side to move."""
    return Snapshot(positions={player: player.start_position for player in PlayerId})


def legal_pawn_moves(snapshot: Snapshot, player: PlayerId) -> List[Position]:
    """Destinations ``player`` may move to (empty once the game is over)."""
    if snapshot.is_terminal:
        return []
    return valid_pawn_moves(
        snapshot.positions[player],
        snapshot.positions[player.opponent()],
        snapshot.edges,
    )


def legal_wall_placements(snapshot: Snapshot, player: PlayerId, orientation: Orientation) -> List[Wall]:
    """Walls of one orientation ``player`` may place right now."""
    if snapshot.is_terminal or snapshot.walls_remaining[player] <= 0:
        return []
    return compute_available_walls(orientation, snapshot.walls, snapshot.positions)


def _check_turn(snapshot: Snapshot, player: PlayerId) -> None:
    if snapshot.is_terminal:
        raise IllegalActionError(
            ErrorKind.GAME_ALREADY_OVER,
            "Game is already over.",
            {"winner": snapshot.winner.value},
        )
    if player is not snapshot.current_player:
        raise IllegalActionError(
            ErrorKind.NOT_YOUR_TURN,
            "Action submitted out of turn.",
            {"player": player.value, "current": snapshot.current_player.value},
        )


def _classify_pawn_target(snapshot: Snapshot, player: PlayerId, target: Position) -> ErrorKind:
    current = snapshot.positions[player]
    if not in_bounds(target):
        return ErrorKind.OUT_OF_BOUNDS
    if target in snapshot.positions.values():
        return ErrorKind.CELL_OCCUPIED
    if is_adjacent_orthogonal(current, target) and is_edge_blocked(current, target, snapshot.edges):
        return ErrorKind.EDGE_BLOCKED
    opponent = snapshot.positions[player.opponent()]
    if is_adjacent_orthogonal(current, opponent) and is_adjacent_orthogonal(opponent, target):
        # Jump or side-step geometry that a wall (or the open jump) rules out.
        return ErrorKind.EDGE_BLOCKED
    return ErrorKind.UNREACHABLE_TARGET


def apply_pawn_move(snapshot: Snapshot, player: PlayerId, target: Position) -> Snapshot:
    """Move ``player``'s pawn to ``target`` and return the next snapshot."""
    _check_turn(snapshot, player)
    target = (int(target[0]), int(target[1]))
    if target not in legal_pawn_moves(snapshot, player):
        kind = _classify_pawn_target(snapshot, player, target)
        raise IllegalActionError(
            kind,
            "Illegal pawn move.",
            {"player": player.value, "from": snapshot.positions[player], "to": target},
        )

    positions = dict(snapshot.positions)
    positions[player] = target
    winner = player if is_winning_position(player, target) else None
    return replace(
        snapshot,
        positions=positions,
        current_player=player if winner is not None else player.opponent(),
        winner=winner,
        ply=snapshot.ply + 1,
    )


def apply_wall_placement(snapshot: Snapshot, player: PlayerId, wall: Wall) -> Snapshot:
    """Place ``wall`` for ``player`` and return the next snapshot."""
    _check_turn(snapshot, player)
    if snapshot.walls_remaining[player] <= 0:
        raise IllegalActionError(
            ErrorKind.NO_WALLS_REMAINING,
            "No walls left to place.",
            {"player": player.value},
        )
    problem = check_wall_placement(wall, snapshot.walls, snapshot.positions)
    if problem is not None:
        raise IllegalActionError(
            problem,
            "Illegal wall placement.",
            {"player": player.value, "wall": wall.describe()},
        )

    remaining = dict(snapshot.walls_remaining)
    remaining[player] -= 1
    return replace(
        snapshot,
        walls=snapshot.walls + (wall,),
        walls_remaining=remaining,
        current_player=player.opponent(),
        ply=snapshot.ply + 1,
    )


def apply_move(snapshot: Snapshot, move: Move) -> Snapshot:
    """Apply a ``Move`` for the side to move."""
    player = snapshot.current_player
    if move.kind == "move" and move.to_pos is not None:
        return apply_pawn_move(snapshot, player, move.to_pos)
    if move.kind == "wall" and move.wall is not None:
        return apply_wall_placement(snapshot, player, move.wall)
    raise ValueError(f"Unsupported move format: {move}")
