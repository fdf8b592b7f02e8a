"""Wall valuation and the decision of whether to spend a wall this turn."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ai.difficulty import DifficultyProfile
from engine.board import Snapshot
from engine.paths import shortest_path
from engine.pieces import BOARD_SIZE, MAX_WALLS_PER_PLAYER, Orientation, PlayerId, Position, Wall
from engine.rules import EdgeSet, blocked_edges, edge_key, manhattan, valid_pawn_moves, wall_edges

# Total rows both pawns travel before the position counts as late game.
PHASE_ADVANCEMENT = 16


@dataclass
class WallContext:
    """Per-decision facts shared by every wall candidate."""

    snapshot: Snapshot
    player: PlayerId
    edges: EdgeSet
    self_dist: int
    opp_dist: int
    phase: float
    predicted_path: List[Position] = field(default_factory=list)
    available: List[Wall] = field(default_factory=list)

    @property
    def opponent(self) -> PlayerId:
        return self.player.opponent()

    @property
    def self_pos(self) -> Position:
        return self.snapshot.positions[self.player]

    @property
    def opp_pos(self) -> Position:
        return self.snapshot.positions[self.opponent]

    @property
    def walls_remaining(self) -> int:
        return self.snapshot.walls_remaining[self.player]


def build_context(snapshot: Snapshot, player: PlayerId) -> WallContext:
    opponent = player.opponent()
    edges = snapshot.edges
    self_pos = snapshot.positions[player]
    opp_pos = snapshot.positions[opponent]
    advanced = player.advancement(self_pos[0]) + opponent.advancement(opp_pos[0])
    return WallContext(
        snapshot=snapshot,
        player=player,
        edges=edges,
        self_dist=shortest_path(self_pos, player.goal_row, edges, opp_pos),
        opp_dist=shortest_path(opp_pos, opponent.goal_row, edges, self_pos),
        phase=min(advanced / PHASE_ADVANCEMENT, 1.0),
        predicted_path=predict_path(snapshot, opponent),
    )


def predict_path(snapshot: Snapshot, player: PlayerId) -> List[Position]:
    """
    Greedy guess at the route ``player`` will walk.

    At each step the pawn takes the legal move that gets furthest toward its
    goal row. Returns an empty list when the greedy walk stalls.
    """
    edges = snapshot.edges
    other = snapshot.positions[player.opponent()]
    current = snapshot.positions[player]
    path = [current]
    visited = {current}
    while current[0] != player.goal_row:
        moves = valid_pawn_moves(current, other, edges)
        if not moves:
            return []
        best = max(moves, key=lambda pos: pos[0] * player.forward)
        if best in visited:
            return []
        visited.add(best)
        path.append(best)
        current = best
    return path


def wall_crosses_path(wall: Wall, path: Sequence[Position]) -> bool:
    """Return whether ``wall`` cuts any step of ``path``."""
    cut = set(wall_edges(wall))
    for a, b in zip(path, path[1:]):
        if manhattan(a, b) == 1 and edge_key(a, b) in cut:
            return True
    return False


def distance_change(snapshot: Snapshot, player: PlayerId, wall: Wall, before: int) -> int:
    """How many moves ``wall`` adds to ``player``'s move-aware distance."""
    edges = blocked_edges(snapshot.walls + (wall,))
    after = shortest_path(
        snapshot.positions[player],
        player.goal_row,
        edges,
        snapshot.positions[player.opponent()],
    )
    return after - before


def _frame_row(player: PlayerId, row: int) -> int:
    """Cell row seen from ``player``'s side, where the goal is always row 0."""
    return row if player is PlayerId.SECOND else BOARD_SIZE - 1 - row


def _frame_wall_row(player: PlayerId, row: int) -> int:
    """Wall anchor row seen from ``player``'s side."""
    return row if player is PlayerId.SECOND else BOARD_SIZE - 2 - row


def _conflicts(a: Wall, b: Wall) -> bool:
    if a.anchor == b.anchor:
        return True
    return bool(set(wall_edges(a)) & set(wall_edges(b)))


def wall_value(wall: Wall, ctx: WallContext, profile: DifficultyProfile) -> Tuple[float, int]:
    """
    Raw desirability of placing ``wall`` for ``ctx.player``.

    Returns the value together with the blocking gain (extra moves forced on
    the opponent).
    """
    snapshot = ctx.snapshot
    player = ctx.player
    opponent = ctx.opponent
    self_pos = ctx.self_pos
    opp_pos = ctx.opp_pos
    value = 0.0

    self_change = distance_change(snapshot, player, wall, ctx.self_dist)
    if self_change > 0:
        value -= self_change * 50

    blocking = distance_change(snapshot, opponent, wall, ctx.opp_dist)
    value += blocking * 20

    dist_to_opp = manhattan(wall.anchor, opp_pos)
    dist_to_self = manhattan(wall.anchor, self_pos)
    if dist_to_opp <= 2:
        value += (3 - dist_to_opp) * 8
    if dist_to_self < 2:
        value -= 20

    wall_row = _frame_wall_row(player, wall.row)
    self_row = _frame_row(player, self_pos[0])
    opp_row = _frame_row(player, opp_pos[0])
    if wall.orientation is Orientation.HORIZONTAL:
        if opp_row <= wall_row < self_row - 1:
            value += 15
        if wall_row >= self_row:
            value -= 25
    else:
        if abs(wall.col - opp_pos[1]) <= 1:
            value += 12
        if abs(wall.col - self_pos[1]) <= 1 and wall_row >= self_row - 2:
            value -= 15

    if profile.lookahead:
        value += _phase_adjustments(wall, ctx, blocking, dist_to_opp, dist_to_self)

    return value, blocking


def _phase_adjustments(wall: Wall, ctx: WallContext, blocking: int, dist_to_opp: int, dist_to_self: int) -> float:
    value = 0.0
    if ctx.predicted_path and wall_crosses_path(wall, ctx.predicted_path):
        value += 28

    phase = ctx.phase
    if phase < 0.3:
        if blocking < 2:
            value -= 60
        if dist_to_opp > 3:
            value -= 40
        if dist_to_self <= 2:
            value -= 50
    elif phase < 0.7:
        if blocking < 1 and ctx.opp_dist - ctx.self_dist < 3:
            value -= 35
        if blocking >= 2:
            value += 25
        opp_row = ctx.opp_pos[0]
        follow_ups = sum(
            1
            for other in ctx.available
            if abs(other.row - opp_row) <= 2 and not _conflicts(other, wall)
        )
        if follow_ups > 4:
            value += 15

    wall_ratio = ctx.walls_remaining / MAX_WALLS_PER_PLAYER
    if phase < 0.4 and wall_ratio > 0.6 and blocking < 2:
        value -= 45
    if phase > 0.7 and wall_ratio > 0.3 and blocking >= 1:
        value += 20
    return value


def wall_usage_probability(ctx: WallContext, profile: DifficultyProfile) -> float:
    """Chance of considering a wall this turn under the profile's curve."""
    if ctx.walls_remaining <= 0:
        return 0.0

    distance_diff = ctx.opp_dist - ctx.self_dist
    curve = profile.wall_usage_curve
    if curve == "flat":
        return profile.wall_usage_probability
    if curve == "race":
        return profile.wall_usage_behind_probability if distance_diff <= -1 else profile.wall_usage_probability
    if curve != "phased":
        raise ValueError(f"Unknown wall usage curve: {curve}")

    if ctx.opp_dist <= 1:
        return 0.95

    phase = ctx.phase
    opp_advanced = ctx.opponent.advancement(ctx.opp_pos[0])
    if phase < 0.3:
        if opp_advanced >= 4 and distance_diff <= -2:
            return 0.6
        if opp_advanced >= 3 and distance_diff <= -3:
            return 0.4
        return 0.05
    if phase < 0.6:
        path_len = len(ctx.predicted_path)
        if 0 < path_len <= 5:
            return 0.8
        if distance_diff <= -1:
            return 0.7
        if distance_diff <= 0:
            return 0.5
        return 0.2
    if phase < 0.8:
        if ctx.opp_dist <= 4 and distance_diff <= 0:
            return 0.9
        if distance_diff <= 0:
            return 0.7
        if ctx.walls_remaining / MAX_WALLS_PER_PLAYER > 0.4:
            return 0.4
        return 0.5
    if ctx.opp_dist <= 3:
        return 0.95
    if distance_diff <= 1:
        return 0.8
    return 0.6


def should_use_wall(ctx: WallContext, profile: DifficultyProfile, rng: random.Random) -> bool:
    """Draw the wall-usage decision from ``rng``."""
    probability = wall_usage_probability(ctx, profile)
    if probability <= 0.0:
        return False
    return rng.random() < probability
