"""Tests for snapshots and action application."""

import pytest

from ai.random_ai import RandomAI
from engine.board import (
    STATE_CHANNELS,
    Move,
    Snapshot,
    apply_move,
    apply_pawn_move,
    apply_wall_placement,
    legal_pawn_moves,
    legal_wall_placements,
    initial_snapshot,
)
from engine.errors import ErrorKind, IllegalActionError
from engine.paths import bfs_has_path
from engine.pieces import MAX_WALLS_PER_PLAYER, Orientation, PlayerId, Wall
from engine.rules import blocked_edges

FIRST = PlayerId.FIRST
SECOND = PlayerId.SECOND
H = Orientation.HORIZONTAL
V = Orientation.VERTICAL
# Horizontal walls across row 0 that leave only column 8 open.
NEARLY_SEALED = [Wall(0, 0, H), Wall(0, 2, H), Wall(0, 4, H), Wall(0, 6, H)]


class TestInitialSnapshot:
    def test_start_layout(self, start):
        assert start.positions == {FIRST: (0, 4), SECOND: (8, 4)}
        assert start.walls == ()
        assert start.walls_remaining == {FIRST: MAX_WALLS_PER_PLAYER, SECOND: MAX_WALLS_PER_PLAYER}
        assert start.current_player is FIRST
        assert start.winner is None
        assert not start.is_terminal

    def test_each_side_has_three_moves(self, start):
        assert sorted(legal_pawn_moves(start, FIRST)) == [(0, 3), (0, 5), (1, 4)]
        assert sorted(legal_pawn_moves(start, SECOND)) == [(7, 4), (8, 3), (8, 5)]

    def test_encode_state_shape(self, start):
        encoded = start.encode_state()
        assert encoded.shape == (STATE_CHANNELS, 9, 9)
        assert encoded[0, 0, 4] == 1
        assert encoded[1, 8, 4] == 1
        assert encoded[5, 0, 0] == MAX_WALLS_PER_PLAYER

    def test_render_shows_both_pawns(self, start):
        text = start.render_ascii()
        assert "1" in text and "2" in text

    def test_snapshot_maps_are_read_only(self, start):
        with pytest.raises(TypeError):
            start.positions[FIRST] = (5, 5)
        with pytest.raises(TypeError):
            start.walls_remaining[FIRST] = 0
        assert start.positions[FIRST] == (0, 4)

    def test_caller_dicts_are_copied(self):
        positions = {FIRST: (0, 4), SECOND: (8, 4)}
        snapshot = Snapshot(positions=positions)
        positions[FIRST] = (5, 5)
        assert snapshot.positions[FIRST] == (0, 4)

    def test_equal_snapshots_hash_alike(self, start):
        assert hash(start) == hash(initial_snapshot())
        assert len({start, initial_snapshot()}) == 1


class TestPawnMoves:
    def test_move_switches_turn(self, start):
        nxt = apply_pawn_move(start, FIRST, (1, 4))
        assert nxt.positions[FIRST] == (1, 4)
        assert nxt.current_player is SECOND
        assert nxt.ply == 1
        assert start.positions[FIRST] == (0, 4)

    def test_out_of_turn_rejected(self, start):
        with pytest.raises(IllegalActionError) as exc:
            apply_pawn_move(start, SECOND, (7, 4))
        assert exc.value.kind is ErrorKind.NOT_YOUR_TURN

    @pytest.mark.parametrize(
        "target,kind",
        [((-1, 4), ErrorKind.OUT_OF_BOUNDS), ((2, 4), ErrorKind.UNREACHABLE_TARGET), ((1, 5), ErrorKind.UNREACHABLE_TARGET)],
    )
    def test_bad_targets(self, start, target, kind):
        with pytest.raises(IllegalActionError) as exc:
            apply_pawn_move(start, FIRST, target)
        assert exc.value.kind is kind

    def test_occupied_cell(self, make_snapshot):
        snapshot = make_snapshot((4, 4), (5, 4))
        with pytest.raises(IllegalActionError) as exc:
            apply_pawn_move(snapshot, FIRST, (5, 4))
        assert exc.value.kind is ErrorKind.CELL_OCCUPIED

    def test_wall_blocks_step(self, make_snapshot):
        snapshot = make_snapshot((0, 4), (8, 4), walls=[Wall(0, 4, H)])
        with pytest.raises(IllegalActionError) as exc:
            apply_pawn_move(snapshot, FIRST, (1, 4))
        assert exc.value.kind is ErrorKind.EDGE_BLOCKED

    def test_jump_is_applied(self, make_snapshot):
        snapshot = make_snapshot((4, 4), (5, 4))
        assert apply_pawn_move(snapshot, FIRST, (6, 4)).positions[FIRST] == (6, 4)

    def test_reaching_goal_ends_game(self, make_snapshot):
        snapshot = make_snapshot((7, 0), (4, 8))
        final = apply_pawn_move(snapshot, FIRST, (8, 0))
        assert final.winner is FIRST
        assert final.is_terminal
        assert final.current_player is FIRST
        assert legal_pawn_moves(final, SECOND) == []
        with pytest.raises(IllegalActionError) as exc:
            apply_pawn_move(final, FIRST, (7, 0))
        assert exc.value.kind is ErrorKind.GAME_ALREADY_OVER


class TestWallPlacement:
    def test_wall_is_charged_to_player(self, start):
        nxt = apply_wall_placement(start, FIRST, Wall(3, 4, H))
        assert nxt.walls == (Wall(3, 4, H),)
        assert nxt.walls_remaining[FIRST] == MAX_WALLS_PER_PLAYER - 1
        assert nxt.walls_remaining[SECOND] == MAX_WALLS_PER_PLAYER
        assert nxt.current_player is SECOND
        assert start.walls == ()

    def test_overlap_rejected_and_snapshot_unchanged(self, start):
        nxt = apply_wall_placement(start, FIRST, Wall(3, 4, H))
        with pytest.raises(IllegalActionError) as exc:
            apply_wall_placement(nxt, SECOND, Wall(3, 5, H))
        assert exc.value.kind is ErrorKind.WALL_OVERLAP
        assert nxt.walls == (Wall(3, 4, H),)
        assert nxt.current_player is SECOND

    def test_string_orientation_blocks_the_right_edges(self, start):
        nxt = apply_wall_placement(start, FIRST, Wall(3, 4, "horizontal"))
        assert nxt.edges == blocked_edges([Wall(3, 4, H)])
        with pytest.raises(IllegalActionError) as exc:
            apply_wall_placement(nxt, SECOND, Wall(3, 4, "vertical"))
        assert exc.value.kind is ErrorKind.WALL_OVERLAP

    def test_severing_wall_rejected_and_snapshot_unchanged(self, make_snapshot):
        snapshot = make_snapshot((0, 4), (8, 4), walls=NEARLY_SEALED)
        with pytest.raises(IllegalActionError) as exc:
            apply_wall_placement(snapshot, FIRST, Wall(0, 7, V))
        assert exc.value.kind is ErrorKind.WALL_WOULD_SEVER_PATH
        assert snapshot.walls == tuple(NEARLY_SEALED)
        assert snapshot.walls_remaining[FIRST] == MAX_WALLS_PER_PLAYER
        assert snapshot.current_player is FIRST

    def test_no_walls_remaining(self, make_snapshot):
        snapshot = make_snapshot((0, 4), (8, 4), first_walls=0)
        assert legal_wall_placements(snapshot, FIRST, H) == []
        with pytest.raises(IllegalActionError) as exc:
            apply_wall_placement(snapshot, FIRST, Wall(3, 4, H))
        assert exc.value.kind is ErrorKind.NO_WALLS_REMAINING

    def test_error_message_carries_context(self, start):
        with pytest.raises(IllegalActionError) as exc:
            apply_wall_placement(start, FIRST, Wall(8, 8, H))
        assert str(exc.value).startswith("[out_of_bounds]")
        assert exc.value.context["player"] == "first"


class TestApplyMove:
    def test_dispatches_by_kind(self, start):
        nxt = apply_move(start, Move.pawn((1, 4)))
        nxt = apply_move(nxt, Move.place(Wall(2, 2, H)))
        assert nxt.positions[FIRST] == (1, 4)
        assert nxt.walls_remaining[SECOND] == MAX_WALLS_PER_PLAYER - 1

    def test_unknown_kind(self, start):
        with pytest.raises(ValueError):
            apply_move(start, Move(kind="teleport"))

    def test_move_string_format(self):
        assert str(Move.pawn((1, 4))) == "move 1 4"
        assert str(Move.place(Wall(2, 3, H))) == "wall 2 3 H"


class TestRandomGameInvariants:
    def test_invariants_hold_every_ply(self, start):
        """A seeded random game keeps walls counted, pawns apart and both goals reachable."""
        agents = {FIRST: RandomAI(seed=3, wall_probability=0.5), SECOND: RandomAI(seed=4, wall_probability=0.5)}
        snapshot = start
        for _ in range(80):
            if snapshot.is_terminal:
                break
            previous_ply = snapshot.ply
            snapshot = agents[snapshot.current_player].play(snapshot)
            assert snapshot.ply == previous_ply + 1
            assert len(snapshot.walls) + sum(snapshot.walls_remaining.values()) == 2 * MAX_WALLS_PER_PLAYER
            assert snapshot.positions[FIRST] != snapshot.positions[SECOND]
            edges = snapshot.edges
            for player in PlayerId:
                assert bfs_has_path(snapshot.positions[player], player.goal_row, edges)
