"""AI-vs-AI match runner used to calibrate difficulty tiers."""

from __future__ import annotations

import json
import logging
import multiprocessing as mp
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from ai.base_ai import BaseAI
from ai.difficulty import Difficulty, DifficultyProfile, PROFILES, profiles_from_payload
from ai.heuristic_ai import HeuristicAI
from ai.random_ai import RandomAI
from engine.board import initial_snapshot
from engine.pieces import MAX_WALLS_PER_PLAYER, PlayerId

LOGGER = logging.getLogger(__name__)


@dataclass
class GameRecord:
    """Summary of one finished (or truncated) match."""

    winner: Optional[PlayerId]
    plies: int
    walls_used: Dict[PlayerId, int]

    @property
    def is_draw(self) -> bool:
        return self.winner is None


@dataclass
class AgentSpec:
    """Serializable agent descriptor for workers."""

    kind: str  # heuristic or random
    difficulty: str = Difficulty.MEDIUM.value
    wall_probability: float = 0.2

    @property
    def label(self) -> str:
        return self.difficulty if self.kind == "heuristic" else self.kind


class ArenaConfig:
    """Arena settings loaded from a config file."""

    def __init__(self, payload: Optional[Mapping[str, object]] = None) -> None:
        payload = payload or {}
        self.games = int(payload.get("games", 20))
        self.max_plies = int(payload.get("max_plies", 200))
        self.base_seed = payload.get("base_seed")
        self.parallel_workers = int(payload.get("parallel_workers", 1))
        self.log_every = int(payload.get("log_every", 10))
        self.tiers = [Difficulty(tier).value for tier in payload.get("tiers", [d.value for d in Difficulty])]
        self.include_random = bool(payload.get("include_random", False))
        self.k_factor = float(payload.get("k_factor", 24.0))
        self.initial_rating = float(payload.get("initial_rating", 1200.0))
        self.profiles: Dict[Difficulty, DifficultyProfile] = profiles_from_payload(payload.get("profiles", {}))

    @classmethod
    def from_json(cls, path: str | Path) -> "ArenaConfig":
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(payload)


def build_agent(
    spec: AgentSpec,
    seed: Optional[int],
    profiles: Optional[Mapping[Difficulty, DifficultyProfile]] = None,
) -> BaseAI:
    if spec.kind == "heuristic":
        tier = Difficulty(spec.difficulty)
        profile = (profiles or PROFILES)[tier]
        return HeuristicAI(difficulty=tier, seed=seed, profile=profile)
    if spec.kind == "random":
        return RandomAI(seed=seed, wall_probability=spec.wall_probability)
    raise ValueError(f"Unsupported AgentSpec kind: {spec.kind}")


def play_game(first_ai: BaseAI, second_ai: BaseAI, max_plies: int) -> GameRecord:
    """Play one match from the initial snapshot; hitting ``max_plies`` is a draw."""
    snapshot = initial_snapshot()
    while not snapshot.is_terminal and snapshot.ply < max_plies:
        actor = first_ai if snapshot.current_player is PlayerId.FIRST else second_ai
        snapshot = actor.play(snapshot)

    walls_used = {player: MAX_WALLS_PER_PLAYER - snapshot.walls_remaining[player] for player in PlayerId}
    LOGGER.debug(
        "%s vs %s finished: winner=%s plies=%d",
        first_ai.name,
        second_ai.name,
        snapshot.winner.value if snapshot.winner else "draw",
        snapshot.ply,
    )
    return GameRecord(winner=snapshot.winner, plies=snapshot.ply, walls_used=walls_used)


def _parallel_worker(
    game_index: int,
    first_spec: AgentSpec,
    second_spec: AgentSpec,
    max_plies: int,
    base_seed: Optional[int],
    profiles: Mapping[Difficulty, DifficultyProfile],
) -> GameRecord:
    seed = None if base_seed is None else base_seed + game_index
    first_ai = build_agent(first_spec, seed=seed, profiles=profiles)
    second_ai = build_agent(second_spec, seed=None if seed is None else seed + 9973, profiles=profiles)
    return play_game(first_ai, second_ai, max_plies=max_plies)


class ArenaRunner:
    """Runs AI-vs-AI matches and returns game records."""

    def __init__(self, config: ArenaConfig) -> None:
        self.config = config

    def run_games(self, first_ai: BaseAI, second_ai: BaseAI, n_games: int) -> List[GameRecord]:
        records: List[GameRecord] = []
        for game_index in range(n_games):
            record = play_game(first_ai, second_ai, max_plies=self.config.max_plies)
            records.append(record)
            self._log_progress(game_index, n_games, record)
        return records

    def run_games_from_specs(self, first_spec: AgentSpec, second_spec: AgentSpec, n_games: int) -> List[GameRecord]:
        base_seed = self.config.base_seed
        if self.config.parallel_workers <= 1:
            records: List[GameRecord] = []
            for game_index in range(n_games):
                record = _parallel_worker(
                    game_index,
                    first_spec,
                    second_spec,
                    self.config.max_plies,
                    base_seed,
                    self.config.profiles,
                )
                records.append(record)
                self._log_progress(game_index, n_games, record)
            return records

        args = [
            (idx, first_spec, second_spec, self.config.max_plies, base_seed, self.config.profiles)
            for idx in range(n_games)
        ]
        with mp.Pool(processes=self.config.parallel_workers) as pool:
            records = pool.starmap(_parallel_worker, args)
        for idx, record in enumerate(records):
            self._log_progress(idx, n_games, record)
        return records

    def _log_progress(self, game_index: int, n_games: int, record: GameRecord) -> None:
        if (game_index + 1) % max(1, self.config.log_every) != 0:
            return
        LOGGER.info(
            "Arena game %d/%d | winner=%s plies=%d walls=%d/%d",
            game_index + 1,
            n_games,
            record.winner.value if record.winner else "draw",
            record.plies,
            record.walls_used[PlayerId.FIRST],
            record.walls_used[PlayerId.SECOND],
        )

    @staticmethod
    def summarize(records: Sequence[GameRecord]) -> Dict[str, float]:
        summary: Dict[str, float] = {"first_wins": 0, "second_wins": 0, "draws": 0}
        for record in records:
            if record.is_draw:
                summary["draws"] += 1
            elif record.winner is PlayerId.FIRST:
                summary["first_wins"] += 1
            else:
                summary["second_wins"] += 1

        plies = np.array([record.plies for record in records], dtype=np.float64)
        summary["mean_plies"] = float(plies.mean()) if plies.size else 0.0
        summary["std_plies"] = float(plies.std()) if plies.size else 0.0
        return summary

