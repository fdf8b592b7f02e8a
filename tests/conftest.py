"""Shared pytest fixtures for the Quoridor tests."""

import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from engine.board import Snapshot, initial_snapshot  # noqa: E402
from engine.pieces import MAX_WALLS_PER_PLAYER, PlayerId  # noqa: E402


@pytest.fixture
def start() -> Snapshot:
    """Fresh start-of-game snapshot."""
    return initial_snapshot()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def _make_snapshot(first, second, walls=(), current=PlayerId.FIRST, first_walls=None, second_walls=None) -> Snapshot:
    return Snapshot(
        positions={PlayerId.FIRST: first, PlayerId.SECOND: second},
        walls=tuple(walls),
        walls_remaining={
            PlayerId.FIRST: MAX_WALLS_PER_PLAYER if first_walls is None else first_walls,
            PlayerId.SECOND: MAX_WALLS_PER_PLAYER if second_walls is None else second_walls,
        },
        current_player=current,
    )


@pytest.fixture
def make_snapshot():
    """Factory for arbitrary mid-game snapshots (no legality checks)."""
    return _make_snapshot
