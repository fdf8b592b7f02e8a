"""Heuristic Quoridor AI with difficulty tiers and a one-ply reply estimate."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ai.base_ai import BaseAI
from ai.difficulty import Difficulty, DifficultyProfile, get_profile, suggested_thinking_delay
from ai.evaluator import CENTER_COL, PositionEvaluator
from ai.history import SearchHistory, SearchRecord
from ai.wall_values import WallContext, build_context, distance_change, should_use_wall, wall_value
from engine.board import Move, Snapshot
from engine.errors import EngineInconsistencyError, ErrorKind, IllegalActionError
from engine.paths import shortest_path, shortest_path_cells
from engine.pieces import Orientation, PlayerId, Position, Wall
from engine.placement import can_place_wall, compute_available_walls
from engine.rules import edge_key, is_winning_position, valid_pawn_moves, wall_edges

LOGGER = logging.getLogger(__name__)

WIN_SCORE = 1000.0

# Progress and anti-trap corrections applied to pawn moves when looking ahead.
LONGER_PATH_PENALTY = 50.0
STALL_PENALTY = 30.0
ADVANCE_BONUS = 15.0
CENTER_LANE_BONUS = 8.0
CENTER_LANE_WIDTH = 2
DEAD_END_PENALTY = 40.0
NARROW_PENALTY = 15.0

# Blocking bonuses for walls when looking ahead.
STRONG_BLOCK_BONUS = 30.0
CRUSHING_BLOCK_BONUS = 50.0
SELF_HARM_PENALTY = 14.0


@dataclass(frozen=True)
class ScoredMove:
    """An action proposed by the AI with its score."""

    move: Move
    score: float

    @property
    def kind(self) -> str:
        return self.move.kind

    @property
    def data(self) -> Union[Position, Wall]:
        return self.move.wall if self.move.kind == "wall" else self.move.to_pos


class HeuristicAI(BaseAI):
    """Scores every pawn move and a shortlist of walls, then picks the best after noise."""

    def __init__(
        self,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        profile: Optional[DifficultyProfile] = None,
        history: Optional[SearchHistory] = None,
        debug_top_k: int = 3,
    ) -> None:
        self.difficulty = Difficulty(difficulty)
        self.profile = profile or get_profile(self.difficulty)
        self._rng = rng if rng is not None else random.Random(seed)
        self.history = history
        self.debug_top_k = max(1, debug_top_k)
        self.evaluator = PositionEvaluator(self.profile)
        self._root: Optional[Snapshot] = None
        self._available: Optional[List[Wall]] = None

    @property
    def name(self) -> str:
        return f"heuristic-{self.difficulty.value}"

    def choose_move(self, snapshot: Snapshot) -> Move:
        return self.select_move(snapshot).move

    def thinking_delay(self) -> float:
        return suggested_thinking_delay(self.difficulty, self._rng, self.profile)

    def select_move(self, snapshot: Snapshot, player: Optional[PlayerId] = None) -> ScoredMove:
        """Propose an action for ``player`` (default: the side to move)."""
        player = player or snapshot.current_player
        if snapshot.is_terminal:
            raise IllegalActionError(
                ErrorKind.GAME_ALREADY_OVER,
                "Cannot select a move in a finished game.",
                {"winner": snapshot.winner.value},
            )

        self._prepare(snapshot)
        edges = snapshot.edges
        own_pos = snapshot.positions[player]
        opp_pos = snapshot.positions[player.opponent()]
        pawn_moves = valid_pawn_moves(own_pos, opp_pos, edges)
        if not pawn_moves:
            raise EngineInconsistencyError(
                "Pawn has no legal move.",
                {"player": player.value, "position": own_pos, "walls": len(snapshot.walls)},
            )

        for target in pawn_moves:
            if is_winning_position(player, target):
                chosen = ScoredMove(Move.pawn(target), WIN_SCORE)
                LOGGER.debug("Immediate win for %s at %s", player.value, target)
                self._record(snapshot, player, chosen, len(pawn_moves), 0, False)
                return chosen

        ctx = build_context(snapshot, player)
        diagnostics: List[Tuple[ScoredMove, float]] = []

        best_pawn: Optional[ScoredMove] = None
        for target in pawn_moves:
            raw = self._score_pawn_move(snapshot, player, target, ctx)
            candidate = ScoredMove(Move.pawn(target), self._add_noise(raw))
            diagnostics.append((candidate, raw))
            if best_pawn is None or candidate.score > best_pawn.score:
                best_pawn = candidate
        best = best_pawn

        walls_considered = False
        wall_count = 0
        if ctx.walls_remaining > 0 and should_use_wall(ctx, self.profile, self._rng):
            walls_considered = True
            ctx.available = self._available_walls()
            for wall, raw in self._score_walls(snapshot, player, ctx):
                wall_count += 1
                candidate = ScoredMove(Move.place(wall), self._add_noise(raw))
                diagnostics.append((candidate, raw))
                if candidate.score <= best_pawn.score + self.profile.wall_margin:
                    continue
                if candidate.score > best.score:
                    best = candidate

        self._log_diagnostics(diagnostics, best)
        LOGGER.debug(
            "%s (%s) selected %s score=%.3f walls_considered=%s",
            player.value,
            self.difficulty.value,
            best.move,
            best.score,
            walls_considered,
        )
        self._record(snapshot, player, best, len(pawn_moves), wall_count, walls_considered)
        return best

    def pawn_move_scores(self, snapshot: Snapshot, player: Optional[PlayerId] = None) -> Dict[Position, float]:
        """Noise-free score of every legal pawn move for ``player``, for tuning and analysis."""
        player = player or snapshot.current_player
        self._prepare(snapshot)
        ctx = build_context(snapshot, player)
        targets = valid_pawn_moves(snapshot.positions[player], snapshot.positions[player.opponent()], ctx.edges)
        return {target: self._score_pawn_move(snapshot, player, target, ctx) for target in targets}

    def _prepare(self, snapshot: Snapshot) -> None:
        self.evaluator.clear_cache()
        self._root = snapshot
        self._available = None

    # ---------- pawn moves ----------

    def _score_pawn_move(self, snapshot: Snapshot, player: PlayerId, target: Position, ctx: WallContext) -> float:
        trial = snapshot.with_position(player, target)
        score = self.evaluator.evaluate(trial, player)
        if not self.profile.lookahead:
            return score

        reply = self._opponent_reply(trial, player)
        score -= self.profile.reply_penalty_move * max(0.0, score - reply)

        opp_pos = snapshot.positions[player.opponent()]
        new_dist = shortest_path(target, player.goal_row, ctx.edges, opp_pos)
        advancing = (target[0] - ctx.self_pos[0]) * player.forward > 0
        if new_dist > ctx.self_dist:
            score -= LONGER_PATH_PENALTY
        if new_dist == ctx.self_dist and not advancing:
            score -= STALL_PENALTY
        if advancing:
            score += ADVANCE_BONUS
            if abs(target[1] - CENTER_COL) <= CENTER_LANE_WIDTH:
                score += CENTER_LANE_BONUS

        onward = len(valid_pawn_moves(target, opp_pos, ctx.edges))
        if onward <= 1:
            score -= DEAD_END_PENALTY
        elif onward == 2:
            score -= NARROW_PENALTY
        return score

    # ---------- walls ----------

    def _available_walls(self) -> List[Wall]:
        """Legal walls in the real snapshot, enumerated once per decision."""
        if self._available is None:
            root = self._root
            self._available = compute_available_walls(
                Orientation.HORIZONTAL, root.walls, root.positions
            ) + compute_available_walls(Orientation.VERTICAL, root.walls, root.positions)
        return self._available

    def _score_walls(self, snapshot: Snapshot, player: PlayerId, ctx: WallContext) -> List[Tuple[Wall, float]]:
        if not ctx.available:
            return []
        ranked = []
        for wall in ctx.available:
            value, blocking = wall_value(wall, ctx, self.profile)
            ranked.append((value, blocking, wall))
        ranked.sort(key=lambda item: item[0], reverse=True)
        shortlist = ranked[: self.profile.wall_candidate_cap]

        scored: List[Tuple[Wall, float]] = []
        for _, blocking, wall in shortlist:
            trial = snapshot.with_wall(player, wall)
            score = self.evaluator.evaluate(trial, player)
            if self.profile.lookahead:
                if blocking >= 2:
                    score += STRONG_BLOCK_BONUS
                if blocking >= 3:
                    score += CRUSHING_BLOCK_BONUS
                reply = self._opponent_reply(trial, player)
                score -= self.profile.reply_penalty_wall * max(0.0, score - reply)
                if distance_change(snapshot, player, wall, ctx.self_dist) > 0:
                    score -= SELF_HARM_PENALTY
            scored.append((wall, score))
        return scored

    # ---------- opponent reply ----------

    def _opponent_walls(self, snapshot: Snapshot, player: PlayerId) -> int:
        if self.profile.assume_opponent_walls is not None:
            return self.profile.assume_opponent_walls
        return snapshot.walls_remaining[player.opponent()]

    def _opponent_reply(self, trial: Snapshot, player: PlayerId) -> float:
        """
        Lowest evaluation (for ``player``) the opponent can force with one action.

        Pawn replies are exhaustive. Wall replies are limited to legal walls
        that cut ``player``'s current shortest route, at most
        ``reply_wall_cap`` of them, since no other wall can lengthen it.
        """
        opponent = player.opponent()
        edges = trial.edges
        worst: Optional[float] = None
        for reply in valid_pawn_moves(trial.positions[opponent], trial.positions[player], edges):
            score = self.evaluator.evaluate(trial.with_position(opponent, reply), player)
            worst = score if worst is None else min(worst, score)

        if self._opponent_walls(trial, player) > 0:
            for wall in self._reply_walls(trial, player):
                score = self.evaluator.evaluate(trial.with_wall(opponent, wall), player)
                worst = score if worst is None else min(worst, score)

        if worst is None:
            return self.evaluator.evaluate(trial, player)
        return worst

    def _reply_walls(self, trial: Snapshot, player: PlayerId) -> List[Wall]:
        route = shortest_path_cells(trial.positions[player], player.goal_row, trial.edges)
        steps = {edge_key(a, b) for a, b in zip(route, route[1:])}
        if not steps:
            return []
        chosen: List[Wall] = []
        for wall in self._available_walls():
            if len(chosen) >= self.profile.reply_wall_cap:
                break
            if steps.isdisjoint(wall_edges(wall)):
                continue
            if can_place_wall(wall, trial.walls, trial.positions):
                chosen.append(wall)
        return chosen

    # ---------- helpers ----------

    def _add_noise(self, score: float) -> float:
        return score + (self._rng.random() - 0.5) * abs(score) * self.profile.noise_factor

    def _record(
        self,
        snapshot: Snapshot,
        player: PlayerId,
        chosen: ScoredMove,
        pawn_candidates: int,
        wall_candidates: int,
        walls_considered: bool,
    ) -> None:
        if self.history is None:
            return
        self.history.append(
            SearchRecord(
                ply=snapshot.ply,
                player=player,
                difficulty=self.difficulty.value,
                kind=chosen.kind,
                data=chosen.data,
                score=chosen.score,
                pawn_candidates=pawn_candidates,
                wall_candidates=wall_candidates,
                walls_considered=walls_considered,
            )
        )

    def _log_diagnostics(self, diagnostics: List[Tuple[ScoredMove, float]], chosen: ScoredMove) -> None:
        """Emit top-k candidate breakdown when DEBUG is enabled."""
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        ranked = sorted(diagnostics, key=lambda item: item[0].score, reverse=True)
        for idx, (candidate, raw) in enumerate(ranked[: self.debug_top_k], start=1):
            LOGGER.debug(
                "Candidate #%d move=%s raw=%.3f noisy=%.3f chosen=%s",
                idx,
                candidate.move,
                raw,
                candidate.score,
                candidate.move == chosen.move,
            )


def select_move(
    snapshot: Snapshot,
    acting_player: PlayerId,
    difficulty: Difficulty | str,
    rng: random.Random,
    history: Optional[SearchHistory] = None,
    profile: Optional[DifficultyProfile] = None,
) -> ScoredMove:
    """Propose an action for ``acting_player`` using the given tier and random source."""
    ai = HeuristicAI(difficulty=difficulty, rng=rng, profile=profile, history=history)
    return ai.select_move(snapshot, acting_player)
