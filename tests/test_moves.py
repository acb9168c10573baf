"""Tests for the move set and payoff table (rps_regret/moves.py)."""

import itertools

import numpy as np
import pytest

from rps_regret.moves import Move, MOVES, BEATS, BEATEN_BY, PAYOFF_MATRIX, utility


class TestPayoffTable:
    """Zero-sum payoff properties."""

    @pytest.mark.parametrize("move", MOVES)
    def test_self_play_is_a_tie(self, move):
        assert utility(move, move) == 0

    @pytest.mark.parametrize("a,b", list(itertools.product(MOVES, MOVES)))
    def test_zero_sum(self, a, b):
        assert utility(a, b) + utility(b, a) == 0

    @pytest.mark.parametrize(
        "winner,loser",
        [
            (Move.ROCK, Move.SCISSORS),
            (Move.SCISSORS, Move.PAPER),
            (Move.PAPER, Move.ROCK),
        ],
    )
    def test_cycle(self, winner, loser):
        assert utility(winner, loser) == 1
        assert utility(loser, winner) == -1
        assert BEATS[winner] == loser
        assert BEATEN_BY[loser] == winner

    def test_only_cycle_pairs_are_decisive(self):
        decisive = {(a, b) for a, b in itertools.product(MOVES, MOVES) if utility(a, b) != 0}
        assert decisive == {(a, BEATS[a]) for a in MOVES} | {(BEATS[a], a) for a in MOVES}

    def test_utility_vs_matches_function(self):
        for a, b in itertools.product(MOVES, MOVES):
            assert a.utility_vs(b) == utility(a, b)

    def test_payoff_matrix_matches_table(self):
        assert PAYOFF_MATRIX.shape == (3, 3)
        for a, b in itertools.product(MOVES, MOVES):
            assert PAYOFF_MATRIX[a.index, b.index] == utility(a, b)
        np.testing.assert_array_equal(PAYOFF_MATRIX, -PAYOFF_MATRIX.T)

    def test_payoff_matrix_is_read_only(self):
        with pytest.raises(ValueError):
            PAYOFF_MATRIX[0, 0] = 5


class TestMoveParsing:

    def test_canonical_order(self):
        assert MOVES == [Move.ROCK, Move.PAPER, Move.SCISSORS]
        assert [m.index for m in MOVES] == [0, 1, 2]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("rock", Move.ROCK),
            ("PAPER", Move.PAPER),
            (" Scissors ", Move.SCISSORS),
            ("r", Move.ROCK),
            ("s", Move.SCISSORS),
        ],
    )
    def test_from_name(self, name, expected):
        assert Move.from_name(name) is expected

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Unknown move"):
            Move.from_name("lizard")

    def test_label(self):
        assert Move.SCISSORS.label == "Scissors"
