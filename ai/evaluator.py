"""Heuristic position evaluation for Quoridor."""

from __future__ import annotations

from typing import Dict, Tuple

from ai.difficulty import DifficultyProfile
from engine.board import Snapshot
from engine.paths import shortest_path
from engine.pieces import BOARD_SIZE, PlayerId
from engine.rules import manhattan, valid_pawn_moves

CENTER_COL = BOARD_SIZE // 2
PHASE_WALLS = 20


def is_ahead(player: PlayerId, own_row: int, other_row: int) -> bool:
    """Return whether a pawn on ``own_row`` has passed ``other_row`` in its direction of travel."""
    return (own_row - other_row) * player.forward > 0


class PositionEvaluator:
    """Scores snapshots from one side's point of view."""

    def __init__(self, profile: DifficultyProfile) -> None:
        self.profile = profile
        self._cache: Dict[Tuple[bytes, str], float] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    def evaluate(self, snapshot: Snapshot, perspective: PlayerId) -> float:
        """Higher is better for ``perspective``."""
        key = (snapshot.encode_state().tobytes(), perspective.value)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        score = self.breakdown(snapshot, perspective)["total"]
        self._cache[key] = score
        return score

    def breakdown(self, snapshot: Snapshot, perspective: PlayerId) -> Dict[str, float]:
        """Return each named term plus their ``total``."""
        profile = self.profile
        opponent = perspective.opponent()
        edges = snapshot.edges
        self_pos = snapshot.positions[perspective]
        opp_pos = snapshot.positions[opponent]

        self_dist = shortest_path(self_pos, perspective.goal_row, edges, opp_pos)
        opp_dist = shortest_path(opp_pos, opponent.goal_row, edges, self_pos)
        self_advanced = perspective.advancement(self_pos[0])
        opp_advanced = opponent.advancement(opp_pos[0])

        total_walls = len(snapshot.walls)
        phase = min(total_walls / PHASE_WALLS, 1.0)

        self_moves = len(valid_pawn_moves(self_pos, opp_pos, edges))
        opp_moves = len(valid_pawn_moves(opp_pos, self_pos, edges))
        mobility_diff = self_moves - opp_moves
        ahead = is_ahead(perspective, self_pos[0], opp_pos[0])

        terms: Dict[str, float] = {
            "race": (opp_dist - self_dist) * profile.race_weight,
            "center": (CENTER_COL - abs(self_pos[1] - CENTER_COL))
            * (profile.center_base - phase * profile.center_decay),
            "progress": self_advanced ** profile.progress_self_power * profile.progress_self_weight
            - opp_advanced ** profile.progress_opp_power * profile.progress_opp_weight,
            "mobility": mobility_diff * profile.mobility_weight,
            "proximity": profile.proximity_bonus if manhattan(self_pos, opp_pos) < 3 and ahead else 0.0,
        }
        score = sum(terms.values())

        # Tier adjustments.
        score = score * profile.rush_blend + self_advanced * profile.rush_weight
        terms["rush"] = self_advanced * profile.rush_weight

        tier_terms = 0.0
        tier_terms += mobility_diff * profile.extra_mobility_weight
        if total_walls > profile.late_race_wall_threshold:
            tier_terms += (opp_dist - self_dist) * profile.late_race_weight

        col = self_pos[1]
        if col in (0, BOARD_SIZE - 1):
            tier_terms -= profile.outer_column_penalty
        elif col in (1, BOARD_SIZE - 2):
            tier_terms -= profile.inner_column_penalty

        if abs(col - opp_pos[1]) <= 1 and ahead:
            tier_terms += profile.choke_bonus
        terms["tier"] = tier_terms

        terms["total"] = score + tier_terms
        return terms
