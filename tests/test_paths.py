"""Tests for plain reachability and move-aware distances."""

from engine.paths import UNREACHABLE, bfs_has_path, shortest_path, shortest_path_cells
from engine.pieces import Orientation, Wall
from engine.rules import blocked_edges, is_adjacent_orthogonal

NO_EDGES = frozenset()
SEALED_ROW = frozenset(((0, col), (1, col)) for col in range(9))


class TestShortestPath:
    def test_open_board_distance(self):
        assert shortest_path((0, 4), 8, NO_EDGES) == 8

    def test_hop_over_other_pawn_counts_once(self):
        assert shortest_path((0, 4), 8, NO_EDGES, other_pawn=(1, 4)) == 7

    def test_detour_around_walls(self):
        edges = blocked_edges([Wall(0, 3, Orientation.HORIZONTAL), Wall(0, 5, Orientation.HORIZONTAL)])
        assert shortest_path((0, 4), 8, edges) == 10

    def test_sealed_start_is_unreachable(self):
        assert shortest_path((0, 4), 8, SEALED_ROW) == UNREACHABLE

    def test_already_on_goal(self):
        assert shortest_path((8, 1), 8, NO_EDGES) == 0


class TestReachability:
    def test_open_board_has_path(self):
        assert bfs_has_path((0, 4), 8, NO_EDGES)

    def test_sealed_row_has_no_path(self):
        assert not bfs_has_path((0, 4), 8, SEALED_ROW)
        assert bfs_has_path((8, 4), 1, SEALED_ROW)


class TestPathCells:
    def test_route_is_contiguous(self):
        route = shortest_path_cells((0, 4), 8, NO_EDGES)
        assert len(route) == 9
        assert route[0] == (0, 4)
        assert route[-1][0] == 8
        assert all(is_adjacent_orthogonal(a, b) for a, b in zip(route, route[1:]))

    def test_no_route_returns_empty(self):
        assert shortest_path_cells((0, 4), 8, SEALED_ROW) == []
