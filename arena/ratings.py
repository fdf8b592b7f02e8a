"""Elo ratings across agents, and the tier ladder that feeds them."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from arena.self_play import AgentSpec, ArenaConfig, ArenaRunner, GameRecord
from engine.pieces import PlayerId

LOGGER = logging.getLogger(__name__)


def expected_score(rating_a: float, rating_b: float) -> float:
    """Probability-weighted score A is expected to take from B."""
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / 400.0))


class RatingTable:
    """Elo table keyed by agent label."""

    def __init__(self, k_factor: float = 24.0, initial_rating: float = 1200.0) -> None:
        self.k_factor = k_factor
        self.initial_rating = initial_rating
        self._ratings: Dict[str, float] = {}
        self.games_played: Dict[str, int] = {}

    def rating(self, label: str) -> float:
        return self._ratings.setdefault(label, self.initial_rating)

    def record(self, label_a: str, label_b: str, score_a: float) -> Tuple[float, float]:
        """Apply one result (1 win, 0.5 draw, 0 loss for A) and return the new ratings."""
        rating_a = self.rating(label_a)
        rating_b = self.rating(label_b)
        delta = self.k_factor * (score_a - expected_score(rating_a, rating_b))
        self._ratings[label_a] = rating_a + delta
        self._ratings[label_b] = rating_b - delta
        for label in (label_a, label_b):
            self.games_played[label] = self.games_played.get(label, 0) + 1
        return self._ratings[label_a], self._ratings[label_b]

    def record_games(self, first_label: str, second_label: str, records: Sequence[GameRecord]) -> None:
        for record in records:
            if record.is_draw:
                score = 0.5
            elif record.winner is PlayerId.FIRST:
                score = 1.0
            else:
                score = 0.0
            self.record(first_label, second_label, score)

    def leaderboard(self) -> Dict[str, float]:
        return dict(sorted(self._ratings.items(), key=lambda item: item[1], reverse=True))


@dataclass
class LadderReport:
    """Outcome of a full ladder: per-pairing summaries and final ratings."""

    results: Dict[str, Dict[str, float]] = field(default_factory=dict)
    leaderboard: Dict[str, float] = field(default_factory=dict)


def ladder_specs(config: ArenaConfig) -> List[AgentSpec]:
    specs = [AgentSpec(kind="heuristic", difficulty=tier) for tier in config.tiers]
    if config.include_random:
        specs.append(AgentSpec(kind="random"))
    return specs


def run_ladder(config: ArenaConfig) -> LadderReport:
    """Play every ordered pairing of ladder agents and rate the results."""
    runner = ArenaRunner(config)
    table = RatingTable(k_factor=config.k_factor, initial_rating=config.initial_rating)
    report = LadderReport()

    for first_spec, second_spec in itertools.permutations(ladder_specs(config), 2):
        records = runner.run_games_from_specs(first_spec, second_spec, config.games)
        table.record_games(first_spec.label, second_spec.label, records)
        summary = runner.summarize(records)
        pairing = f"{first_spec.label}-vs-{second_spec.label}"
        report.results[pairing] = summary
        LOGGER.info(
            "Ladder %s | first:%d second:%d draws:%d mean_plies=%.1f",
            pairing,
            summary["first_wins"],
            summary["second_wins"],
            summary["draws"],
            summary["mean_plies"],
        )

    report.leaderboard = table.leaderboard()
    return report
