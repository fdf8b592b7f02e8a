"""Tests for heuristic position evaluation."""

import pytest

from ai.difficulty import PROFILES, Difficulty
from ai.evaluator import PositionEvaluator, is_ahead
from engine.pieces import Orientation, PlayerId, Wall

FIRST = PlayerId.FIRST
SECOND = PlayerId.SECOND
H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def _mirror(snapshot_factory, first, second, walls):
    """Reflect a position top-to-bottom and swap the sides."""
    mirrored_walls = [Wall(7 - wall.row, wall.col, wall.orientation) for wall in walls]
    return snapshot_factory((8 - second[0], second[1]), (8 - first[0], first[1]), walls=mirrored_walls)


class TestIsAhead:
    def test_direction_depends_on_side(self):
        assert is_ahead(FIRST, 5, 3)
        assert not is_ahead(FIRST, 3, 5)
        assert is_ahead(SECOND, 3, 5)


class TestPositionEvaluator:
    @pytest.mark.parametrize("tier", list(Difficulty))
    def test_start_is_balanced(self, start, tier):
        evaluator = PositionEvaluator(PROFILES[tier])
        assert evaluator.evaluate(start, FIRST) == pytest.approx(evaluator.evaluate(start, SECOND))

    @pytest.mark.parametrize("tier", list(Difficulty))
    def test_mirrored_positions_score_the_same(self, make_snapshot, tier):
        first, second = (2, 3), (6, 5)
        walls = [Wall(3, 2, H), Wall(5, 6, V)]
        original = make_snapshot(first, second, walls=walls)
        mirrored = _mirror(make_snapshot, first, second, walls)
        evaluator = PositionEvaluator(PROFILES[tier])
        assert evaluator.evaluate(original, FIRST) == pytest.approx(evaluator.evaluate(mirrored, SECOND))

    def test_advancing_scores_higher(self, make_snapshot):
        evaluator = PositionEvaluator(PROFILES[Difficulty.MEDIUM])
        behind = make_snapshot((1, 4), (8, 4))
        ahead = make_snapshot((3, 4), (8, 4))
        assert evaluator.evaluate(ahead, FIRST) > evaluator.evaluate(behind, FIRST)

    def test_being_walled_in_scores_lower(self, make_snapshot):
        evaluator = PositionEvaluator(PROFILES[Difficulty.MEDIUM])
        open_board = make_snapshot((2, 4), (6, 0))
        walled = make_snapshot((2, 4), (6, 0), walls=[Wall(2, 3, H), Wall(2, 5, H)])
        assert evaluator.evaluate(walled, FIRST) < evaluator.evaluate(open_board, FIRST)

    def test_breakdown_total_matches_evaluate(self, make_snapshot):
        evaluator = PositionEvaluator(PROFILES[Difficulty.HARD])
        snapshot = make_snapshot((3, 1), (5, 2), walls=[Wall(4, 4, H)])
        terms = evaluator.breakdown(snapshot, FIRST)
        assert {"race", "center", "progress", "mobility", "proximity", "rush", "tier", "total"} <= set(terms)
        assert evaluator.evaluate(snapshot, FIRST) == pytest.approx(terms["total"])

    def test_cache_returns_same_value(self, make_snapshot):
        evaluator = PositionEvaluator(PROFILES[Difficulty.EASY])
        snapshot = make_snapshot((3, 1), (5, 2))
        first = evaluator.evaluate(snapshot, FIRST)
        assert evaluator.evaluate(snapshot, FIRST) == first
        evaluator.clear_cache()
        assert evaluator.evaluate(snapshot, FIRST) == pytest.approx(first)
