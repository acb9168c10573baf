"""Tests for the self-play training loop (rps_regret/engine.py)."""

import numpy as np
import pytest

from rps_regret.engine import build_players, play_round, train, TrainingResult
from rps_regret.moves import Move, MOVES
from rps_regret.player import Player
from rps_regret.strategy import Strategy


class TestPlayRound:

    def test_rock_vs_paper_worked_example(self, fixed_draws):
        a = Player(Strategy(1, 1, 1, rng=fixed_draws(0.0)), name="A")
        b = Player(Strategy(4, 3, 3, rng=fixed_draws(0.5)), name="B")
        np.testing.assert_allclose(a.strategy.weights, [100 / 3] * 3)
        np.testing.assert_allclose(b.strategy.weights, [40.0, 30.0, 30.0])

        moves = play_round(a, b)

        assert moves == (Move.ROCK, Move.PAPER)
        np.testing.assert_array_equal(a.strategy.regrets, [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(b.strategy.regrets, [-1.0, 0.0, -2.0])
        np.testing.assert_allclose(a.strategy.weights, [0.0, 100 / 3, 200 / 3])
        # B won, so no move has positive regret: uniform reset
        np.testing.assert_allclose(b.strategy.weights, [100 / 3] * 3)

    def test_each_player_updates_once(self, players):
        p1, p2 = players
        play_round(p1, p2)
        assert p1.strategy.updates == 1
        assert p2.strategy.updates == 1


class TestTrain:

    def test_tallies_add_up(self, players):
        result = train(*players, iterations=500, seed=1)
        assert isinstance(result, TrainingResult)
        assert result.iterations == 500
        assert result.p1_wins + result.p2_wins + result.draws == 500
        assert players[0].strategy.updates == 500
        assert result.p1_win_pct + result.p2_win_pct + result.draw_pct == pytest.approx(100.0)

    def test_reports_start_and_end_strategies(self, players):
        result = train(*players, iterations=100, seed=1)
        assert result.p2_start == pytest.approx({"rock": 0.4, "paper": 0.3, "scissors": 0.3})
        assert sum(result.p1_end.values()) == pytest.approx(1.0)
        assert set(result.p1_regret) == {m.value for m in MOVES}

    def test_same_seed_is_reproducible(self):
        first = train(*build_players(), iterations=300, seed=11, record_moves=True)
        second = train(*build_players(), iterations=300, seed=11, record_moves=True)
        assert first.p1_moves == second.p1_moves
        assert first.to_dict() == second.to_dict()

    def test_different_seeds_differ(self):
        first = train(*build_players(), iterations=300, seed=1, record_moves=True)
        second = train(*build_players(), iterations=300, seed=2, record_moves=True)
        assert first.p1_moves != second.p1_moves

    @pytest.mark.parametrize("iterations", [0, -10])
    def test_non_positive_iterations_play_no_rounds(self, players, iterations):
        result = train(*players, iterations=iterations, seed=1)
        assert result.iterations == 0
        assert result.p1_wins == result.p2_wins == result.draws == 0
        assert result.p1_end == result.p1_start
        assert players[0].strategy.updates == 0
        assert result.p1_win_pct == 0.0

    def test_record_moves(self, players):
        result = train(*players, iterations=50, seed=3, record_moves=True)
        assert len(result.p1_moves) == len(result.p2_moves) == 50
        assert sum(result.p1_move_distribution.values()) == 50

    def test_moves_not_recorded_by_default(self, players):
        result = train(*players, iterations=50, seed=3)
        assert result.p1_moves == []

    def test_snapshots_and_progress(self, players):
        calls = []
        result = train(*players, iterations=1000, seed=5, snapshot_every=100,
                       on_progress=lambda done, total: calls.append((done, total)))
        assert [s.round for s in result.history] == list(range(100, 1001, 100))
        assert calls[-1] == (1000, 1000)
        assert len(calls) == 10

    def test_final_round_always_snapshotted(self, players):
        result = train(*players, iterations=250, seed=5, snapshot_every=100)
        assert [s.round for s in result.history] == [100, 200, 250]

    def test_without_seed_keeps_player_rng(self, fixed_draws):
        p1 = Player(Strategy(rng=fixed_draws(0.0)))
        p2 = Player(Strategy(rng=fixed_draws(0.5)))
        result = train(p1, p2, iterations=1, record_moves=True)
        assert result.p1_moves == [Move.ROCK]
        assert result.p2_moves == [Move.PAPER]

    def test_to_dict_is_json_ready(self, players):
        d = train(*players, iterations=200, seed=9, snapshot_every=100).to_dict()
        assert d["player_one"] == "Player one"
        assert d["iterations"] == 200
        assert d["p2_start"] == {"rock": 40.0, "paper": 30.0, "scissors": 30.0}
        assert len(d["history"]) == 2


class TestConvergence:

    def test_biased_start_converges_to_uniform(self, players):
        result = train(*players, iterations=50_000, seed=2024)
        for end in (result.p1_end, result.p2_end):
            for m in MOVES:
                assert end[m.value] == pytest.approx(1 / 3, abs=0.05)

    def test_symmetric_start_converges_to_uniform(self):
        p1, p2 = build_players((1, 1, 1), (1, 1, 1))
        result = train(p1, p2, iterations=50_000, seed=99)
        for end in (result.p1_end, result.p2_end):
            for m in MOVES:
                assert end[m.value] == pytest.approx(1 / 3, abs=0.05)
