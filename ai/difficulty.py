"""Difficulty tiers and their tuning profiles."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional


class Difficulty(str, Enum):
    """AI strength tier."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyProfile:
    """
    Every knob the evaluator and move selector read for one tier.

    Tiers differ only through these values; no code branches on the tier name.
    """

    # Evaluator weights.
    race_weight: float = 18.0
    center_base: float = 3.5
    center_decay: float = 2.2
    progress_self_power: float = 1.55
    progress_self_weight: float = 3.4
    progress_opp_power: float = 1.45
    progress_opp_weight: float = 3.2
    mobility_weight: float = 2.4
    proximity_bonus: float = 6.0
    rush_blend: float = 1.0
    rush_weight: float = 0.0
    extra_mobility_weight: float = 0.0
    late_race_weight: float = 0.0
    late_race_wall_threshold: int = 10
    outer_column_penalty: float = 0.0
    inner_column_penalty: float = 0.0
    choke_bonus: float = 0.0

    # Move selection.
    noise_factor: float = 0.15
    lookahead: bool = False
    reply_penalty_move: float = 0.85
    reply_penalty_wall: float = 0.7
    reply_wall_cap: int = 10
    assume_opponent_walls: Optional[int] = None
    wall_candidate_cap: int = 12
    wall_margin: float = 0.0

    # Wall usage probability curve: "flat", "race" or "phased".
    wall_usage_curve: str = "race"
    wall_usage_probability: float = 0.6
    wall_usage_behind_probability: float = 0.8

    # Presentation pacing, in seconds.
    delay_base: float = 1.0
    delay_jitter: float = 0.4

    @classmethod
    def from_dict(cls, payload: Mapping[str, object], base: Optional["DifficultyProfile"] = None) -> "DifficultyProfile":
        """Build a profile from ``payload`` on top of ``base`` (or the defaults)."""
        known = {f.name for f in fields(cls)}
        unknown = set(payload) - known
        if unknown:
            raise ValueError(f"Unknown difficulty profile fields: {sorted(unknown)}")
        return replace(base or cls(), **dict(payload))


PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        rush_blend=0.7,
        rush_weight=5.0,
        noise_factor=0.3,
        wall_candidate_cap=3,
        wall_usage_curve="flat",
        wall_usage_probability=0.25,
        delay_base=0.3,
        delay_jitter=0.3,
    ),
    Difficulty.MEDIUM: DifficultyProfile(),
    Difficulty.HARD: DifficultyProfile(
        extra_mobility_weight=-3.6,
        late_race_weight=6.0,
        outer_column_penalty=6.0,
        inner_column_penalty=3.0,
        choke_bonus=5.0,
        noise_factor=0.015,
        lookahead=True,
        wall_candidate_cap=18,
        wall_margin=2.0,
        wall_usage_curve="phased",
        delay_base=1.4,
        delay_jitter=0.4,
    ),
}


def get_profile(difficulty: Difficulty | str) -> DifficultyProfile:
    return PROFILES[Difficulty(difficulty)]


def load_profiles(path: str | Path) -> Dict[Difficulty, DifficultyProfile]:
    """
    Load per-tier overrides from JSON.

    The file maps tier names to partial profiles, e.g.
    ``{"hard": {"noise_factor": 0.02}}``. Tiers not mentioned keep the
    built-in profile.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return profiles_from_payload(payload)


def profiles_from_payload(payload: Mapping[str, Mapping[str, object]]) -> Dict[Difficulty, DifficultyProfile]:
    profiles = dict(PROFILES)
    for name, overrides in payload.items():
        tier = Difficulty(name)
        profiles[tier] = DifficultyProfile.from_dict(overrides, base=PROFILES[tier])
    return profiles


def suggested_thinking_delay(
    difficulty: Difficulty | str,
    rng: random.Random,
    profile: Optional[DifficultyProfile] = None,
) -> float:
    """
    Seconds a client may wait before showing the AI's move.

    Pacing only: it does not affect the chosen move and nothing in the engine
    sleeps on it.
    """
    profile = profile or get_profile(difficulty)
    return profile.delay_base + rng.random() * profile.delay_jitter
