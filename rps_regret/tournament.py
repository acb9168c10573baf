"""Batch mode: many independent self-play training runs.

Supports parallel execution via ProcessPoolExecutor for multi-core speedup.
Every run builds its own players inside the worker, so no Strategy is ever
shared between processes.
"""

import logging
import os
from typing import Callable, Optional, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed

import numpy as np

from .engine import (
    TrainingResult,
    build_players,
    train,
    DEFAULT_ITERATIONS,
    DEFAULT_P1_WEIGHTS,
    DEFAULT_P2_WEIGHTS,
)
from .moves import MOVES
from .stats import exploitability

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Worker function for parallel execution (must be top-level for pickling)
# ---------------------------------------------------------------------------

def _run_training_worker(
    iterations: int,
    p1_weights: tuple,
    p2_weights: tuple,
    seed: Optional[int],
) -> TrainingResult:
    player_one, player_two = build_players(p1_weights, p2_weights)
    return train(player_one, player_two, iterations=iterations, seed=seed)


def run_many(
    n_runs: int,
    iterations: int = DEFAULT_ITERATIONS,
    p1_weights: Sequence[float] = DEFAULT_P1_WEIGHTS,
    p2_weights: Sequence[float] = DEFAULT_P2_WEIGHTS,
    seed: Optional[int] = None,
    parallel: bool = True,
    on_run_done: Optional[Callable[[int, int, TrainingResult], None]] = None,
) -> list[TrainingResult]:
    """Train `n_runs` independent games and return results in run order.

    Args:
        parallel: If True, run across multiple CPU cores.
        on_run_done: Optional callback(completed, total, result) called
                     after each run finishes. Used for progress tracking.
    """
    # Fail fast in the parent rather than inside every worker
    build_players(p1_weights, p2_weights)

    jobs = []
    for i in range(max(n_runs, 0)):
        run_seed = (seed * 1000 + i) if seed is not None else None
        jobs.append((iterations, tuple(p1_weights), tuple(p2_weights), run_seed))
    logger.info("Running %d training runs of %d iterations (%s)", len(jobs), iterations,
                "parallel" if parallel and len(jobs) > 1 else "sequential")

    if parallel and len(jobs) > 1:
        return _run_parallel(jobs, on_run_done=on_run_done)

    results = []
    for i, job in enumerate(jobs):
        result = _run_training_worker(*job)
        results.append(result)
        if on_run_done:
            on_run_done(i + 1, len(jobs), result)
    return results


def _run_parallel(
    jobs: list[tuple],
    on_run_done: Optional[Callable[[int, int, TrainingResult], None]] = None,
) -> list[TrainingResult]:
    """Run training jobs in a process pool, preserving job order."""
    max_workers = min(os.cpu_count() or 4, len(jobs))
    total = len(jobs)

    results: list[Optional[TrainingResult]] = [None] * total
    completed = 0

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {
            executor.submit(_run_training_worker, *job): idx
            for idx, job in enumerate(jobs)
        }

        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            result = future.result()
            results[idx] = result
            completed += 1

            if on_run_done:
                on_run_done(completed, total, result)

    return results  # type: ignore[return-value]


def summarize_runs(results: list[TrainingResult]) -> dict:
    """Aggregate final average strategies and exploitability across runs."""
    if not results:
        return {"runs": 0}

    summary = {"runs": len(results)}
    for side in ("p1", "p2"):
        ends = [getattr(r, f"{side}_end") for r in results]
        matrix = np.array([[end[m.value] for m in MOVES] for end in ends])
        exploit = np.array([exploitability(end) for end in ends])
        summary[side] = {
            "mean_strategy": {
                m.value: round(float(matrix[:, m.index].mean()) * 100, 2) for m in MOVES
            },
            "exploitability_mean": round(float(exploit.mean()), 4),
            "exploitability_std": round(float(exploit.std()), 4),
            "exploitability_max": round(float(exploit.max()), 4),
        }
    return summary
