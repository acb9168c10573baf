"""Tests for batch training runs (rps_regret/tournament.py)."""

import pytest

from rps_regret.tournament import run_many, summarize_runs


def test_sequential_runs_are_independent_and_ordered():
    results = run_many(3, iterations=200, seed=1, parallel=False)
    assert len(results) == 3
    assert all(r.iterations == 200 for r in results)
    assert len({tuple(r.p1_end.values()) for r in results}) == 3


def test_runs_are_reproducible():
    first = run_many(2, iterations=150, seed=8, parallel=False)
    second = run_many(2, iterations=150, seed=8, parallel=False)
    assert [r.to_dict() for r in first] == [r.to_dict() for r in second]


def test_parallel_matches_sequential():
    sequential = run_many(2, iterations=150, seed=3, parallel=False)
    parallel = run_many(2, iterations=150, seed=3, parallel=True)
    assert [r.to_dict() for r in parallel] == [r.to_dict() for r in sequential]


def test_progress_callback():
    calls = []
    run_many(3, iterations=20, seed=2, parallel=False,
             on_run_done=lambda done, total, result: calls.append((done, total)))
    assert calls == [(1, 3), (2, 3), (3, 3)]


def test_invalid_weights_fail_fast():
    with pytest.raises(ValueError):
        run_many(2, iterations=10, p1_weights=(-1, 1, 1), parallel=False)


def test_zero_runs():
    assert run_many(0, iterations=10) == []


def test_summarize_runs():
    results = run_many(4, iterations=300, seed=5, parallel=False)
    summary = summarize_runs(results)
    assert summary["runs"] == 4
    for side in ("p1", "p2"):
        s = summary[side]
        assert sum(s["mean_strategy"].values()) == pytest.approx(100.0, abs=0.05)
        assert 0.0 <= s["exploitability_mean"] <= s["exploitability_max"] <= 1.0
        assert s["exploitability_std"] >= 0.0


def test_summarize_no_runs():
    assert summarize_runs([]) == {"runs": 0}
