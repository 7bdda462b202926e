"""
Tests for dealing, reshuffling and the solver
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjongg.tiles import TileSet, bam, dot
from mahjongg.layout import BoardLayout, Position, PYRAMID, FLAT, TOWER
from mahjongg.board import BoardState
from mahjongg.match import MatchResult, attempt_match
from mahjongg.deal import DealGenerator, DealError, is_stuck
from mahjongg.solver import solve, is_solvable, SolverLimitReached


P = Position


class TestDealGenerator:
    """Test initial deals"""

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            DealGenerator(policy="lucky")

    @pytest.mark.parametrize("policy", ["random", "solvable"])
    def test_full_deal_multiplicity(self, policy):
        """A 144-tile deal holds each regular tile four times"""
        board = DealGenerator(policy=policy, seed=1).deal(PYRAMID)
        assert board.occupied_count == 144
        counts = board.tiles().to_count_array()
        assert np.all(counts[:34] == 4)
        assert np.all(counts[34:] == 1)

    def test_every_position_filled(self):
        board = DealGenerator(policy="random", seed=2).deal(FLAT)
        assert board.occupied_positions() == list(FLAT.positions)

    def test_small_layout_deck_pairs_up(self):
        """A partial deck still splits into matching pairs"""
        board = DealGenerator(policy="random", seed=3).deal(TOWER)
        assert len(board.tiles().pairs()) == 10

    def test_same_seed_same_deal(self):
        a = DealGenerator(policy="solvable", seed=42).deal(PYRAMID)
        b = DealGenerator(policy="solvable", seed=42).deal(PYRAMID)
        assert np.array_equal(a.to_index_grid(), b.to_index_grid())

    def test_different_seeds_differ(self):
        a = DealGenerator(policy="random", seed=1).deal(PYRAMID)
        b = DealGenerator(policy="random", seed=2).deal(PYRAMID)
        assert not np.array_equal(a.to_index_grid(), b.to_index_grid())

    def test_reset_replays_deals(self):
        dealer = DealGenerator(policy="random", seed=5)
        first = dealer.deal(TOWER).to_index_grid()
        dealer.deal(TOWER)
        dealer.reset()
        assert np.array_equal(dealer.deal(TOWER).to_index_grid(), first)

    def test_random_deal_has_no_solution_record(self):
        dealer = DealGenerator(policy="random", seed=0)
        dealer.deal(PYRAMID)
        assert dealer.last_solution == []

    @pytest.mark.parametrize("seed", range(5))
    def test_solvable_deal_replays_to_empty(self, seed):
        """Replaying the recorded solution clears a full pyramid"""
        dealer = DealGenerator(policy="solvable", seed=seed)
        board = dealer.deal(PYRAMID)
        assert len(dealer.last_solution) == 72

        for p1, p2 in dealer.last_solution:
            before = board.occupied_count
            attempt = attempt_match(board, p1, p2)
            assert attempt.result == MatchResult.SUCCESS, attempt.reason
            assert board.occupied_count == before - 2
        assert board.is_empty()

    @pytest.mark.parametrize("seed", range(10))
    def test_solvable_deal_found_by_solver(self, seed):
        """The solver independently clears solvable tower deals"""
        board = DealGenerator(policy="solvable", seed=seed).deal(TOWER)
        solution = solve(board)
        assert solution is not None
        assert len(solution) == 10
        for p1, p2 in solution:
            assert attempt_match(board, p1, p2).success
        assert board.is_empty()

    def test_unbuildable_layout_raises(self):
        """A two-high stack can never be cleared pair by pair"""
        stack = BoardLayout.from_masks("stack", [["#"], ["#"]])
        with pytest.raises(DealError):
            DealGenerator(policy="solvable", seed=0, max_attempts=3).deal(stack)

    def test_is_stuck(self):
        layout = BoardLayout.from_masks("row", [["####"]])
        board = BoardState(layout, {
            P(0, 0, 0): bam(1), P(0, 0, 1): bam(2), P(0, 0, 2): bam(1), P(0, 0, 3): bam(2),
        })
        assert DealGenerator().is_stuck(board)
        assert is_stuck(board)


class TestShuffle:
    """Test reshuffling the remaining tiles"""

    def partly_played(self, policy):
        dealer = DealGenerator(policy=policy, seed=7)
        board = dealer.deal(PYRAMID)
        for p1, p2 in dealer.last_solution[:20]:
            attempt_match(board, p1, p2)
        return dealer, board

    def test_shuffle_keeps_tiles_and_positions(self):
        dealer, board = self.partly_played("solvable")
        shuffled = dealer.shuffle_remaining(board)
        assert shuffled.occupied_positions() == board.occupied_positions()
        assert np.array_equal(shuffled.tiles().to_count_array(), board.tiles().to_count_array())

    def test_solvable_shuffle_has_solution(self):
        dealer, board = self.partly_played("solvable")
        shuffled = dealer.shuffle_remaining(board)
        assert len(dealer.last_solution) == shuffled.occupied_count // 2
        for p1, p2 in dealer.last_solution:
            assert attempt_match(shuffled, p1, p2).success
        assert shuffled.is_empty()

    def test_random_shuffle_prefers_playable(self):
        layout = BoardLayout.from_masks("row", [["####"]])
        board = BoardState(layout, {
            P(0, 0, 0): bam(1), P(0, 0, 1): bam(2), P(0, 0, 2): bam(1), P(0, 0, 3): bam(2),
        })
        shuffled = DealGenerator(policy="random", seed=0).shuffle_remaining(board)
        assert not is_stuck(shuffled)

    def test_solvable_shuffle_of_unpairable_tiles(self):
        """Tiles without partners are reshuffled at random instead"""
        layout = BoardLayout.from_masks("pair", [["##"]])
        board = BoardState(layout, {P(0, 0, 0): bam(1), P(0, 0, 1): dot(1)})
        dealer = DealGenerator(policy="solvable", seed=0, max_attempts=5)
        shuffled = dealer.shuffle_remaining(board)
        assert dealer.last_solution == []
        assert is_stuck(shuffled)
        assert sorted(shuffled.tiles()) == sorted([bam(1), dot(1)])

    def test_can_pair(self):
        assert TileSet([bam(1), bam(1), dot(2), dot(2)]).can_pair()
        assert not TileSet([bam(1), dot(1)]).can_pair()


class TestSolver:
    """Test the depth-first solver"""

    def test_unsolvable_board(self):
        """Tops b1 b2 over bottoms b1 b2: nothing matches"""
        layout = BoardLayout.from_masks("double", [["##"], ["##"]])
        board = BoardState(layout, {
            P(0, 0, 0): bam(1), P(0, 0, 1): bam(2),
            P(1, 0, 0): bam(1), P(1, 0, 1): bam(2),
        })
        assert solve(board) is None
        assert not is_solvable(board)

    def test_solver_does_not_modify_board(self):
        board = DealGenerator(policy="solvable", seed=1).deal(TOWER)
        before = board.to_index_grid()
        solve(board)
        assert np.array_equal(board.to_index_grid(), before)

    def test_trap_needs_search(self):
        """Taking the lower b2 pair strands the board; search avoids it"""
        layout = BoardLayout.from_masks("rows", [["####", "##"]])
        board = BoardState(layout, {
            P(0, 0, 0): bam(1), P(0, 0, 1): bam(2), P(0, 0, 2): bam(1), P(0, 0, 3): bam(2),
            P(0, 1, 0): bam(2), P(0, 1, 1): bam(2),
        })
        solution = solve(board)
        assert solution is not None
        assert len(solution) == 3

    def test_node_limit(self):
        board = DealGenerator(policy="random", seed=0).deal(PYRAMID)
        with pytest.raises(SolverLimitReached):
            solve(board, node_limit=0)
