"""Uniform random baseline agent."""

from __future__ import annotations

import random
from typing import List, Optional

from ai.base_ai import BaseAI
from engine.board import Move, Snapshot, legal_pawn_moves, legal_wall_placements
from engine.errors import EngineInconsistencyError
from engine.pieces import Orientation, Wall


class RandomAI(BaseAI):
    """
    Picks a legal action at random.

    Walls are tried with probability ``wall_probability`` while any remain;
    otherwise a pawn move is drawn uniformly. Meant for arena baselines and
    tests, not for play.
    """

    name = "random"

    def __init__(self, seed: Optional[int] = None, wall_probability: float = 0.2) -> None:
        self._rng = random.Random(seed)
        self.wall_probability = wall_probability

    def choose_move(self, snapshot: Snapshot) -> Move:
        player = snapshot.current_player
        pawn_moves = legal_pawn_moves(snapshot, player)
        if not pawn_moves:
            raise EngineInconsistencyError("Pawn has no legal move.", {"player": player.value})

        if snapshot.walls_remaining[player] > 0 and self._rng.random() < self.wall_probability:
            orientation = self._rng.choice(list(Orientation))
            walls: List[Wall] = legal_wall_placements(snapshot, player, orientation)
            if walls:
                return Move.place(self._rng.choice(walls))
        return Move.pawn(self._rng.choice(pawn_moves))
