"""Equilibrium metrics and pretty-printing for training runs."""

from typing import Mapping, Sequence, Union

import numpy as np

from .engine import TrainingResult
from .moves import Move, MOVES, PAYOFF_MATRIX
from .player import Player
from .regret import RegretCalculator

StrategyLike = Union[Mapping[Move, float], Mapping[str, float], Sequence[float], np.ndarray]

UNIFORM = np.full(len(MOVES), 1.0 / len(MOVES))


def as_probabilities(strategy: StrategyLike) -> np.ndarray:
    """Coerce a strategy into a probability vector in Rock, Paper, Scissors order.

    Accepts mappings keyed by Move or move name, or a plain sequence.
    Vectors that do not sum to 1 (e.g. percentages) are rescaled.
    """
    if isinstance(strategy, Mapping):
        values = [strategy[m] if m in strategy else strategy[m.value] for m in MOVES]
    else:
        values = strategy
    p = np.asarray(values, dtype=float)
    if p.shape != (len(MOVES),) or (p < 0).any() or p.sum() <= 0:
        raise ValueError(f"Not a valid mixed strategy: {values!r}")
    return p / p.sum()


def expected_utility(strategy: StrategyLike, opponent: StrategyLike) -> float:
    """Expected payoff of `strategy` against `opponent`."""
    return float(as_probabilities(strategy) @ PAYOFF_MATRIX @ as_probabilities(opponent))


def best_response_value(strategy: StrategyLike) -> float:
    """Payoff of the best pure move against `strategy`."""
    return float((PAYOFF_MATRIX @ as_probabilities(strategy)).max())


def exploitability(strategy: StrategyLike) -> float:
    """How much a best-responding opponent wins per round.

    The game is symmetric and zero-sum with value 0, so this is just the
    best-response value: 0 at the uniform equilibrium, 1 for a pure strategy.
    """
    return best_response_value(strategy)


def distance_from_equilibrium(strategy: StrategyLike) -> float:
    """Largest absolute deviation of any move probability from 1/3."""
    return float(np.abs(as_probabilities(strategy) - UNIFORM).max())


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

def print_strategy(label: str, player: Player):
    print(f"  {player.name} strategy {label}: {player}")


def print_training_summary(result: TrainingResult):
    """Print a detailed summary of a finished training run."""
    print("=" * 60)
    print(f"  {result.p1_name}  vs  {result.p2_name}")
    print(f"  Iterations: {result.iterations}")
    print("=" * 60)
    print(f"  {'':20s} {'P1':>10s} {'P2':>10s}")
    print(f"  {'Wins':20s} {result.p1_wins:>10d} {result.p2_wins:>10d}")
    print(f"  {'Draws':20s} {result.draws:>10d} {result.draws:>10d}")
    print(f"  {'Win %':20s} {result.p1_win_pct:>9.1f}% {result.p2_win_pct:>9.1f}%")
    print()
    print(f"  {'Average strategy':20s} {'P1':>10s} {'P2':>10s}")
    for m in MOVES:
        print(f"  {m.label:20s} {result.p1_end[m.value] * 100:>9.2f}% "
              f"{result.p2_end[m.value] * 100:>9.2f}%")
    print(f"  {'Exploitability':20s} {exploitability(result.p1_end):>10.4f} "
          f"{exploitability(result.p2_end):>10.4f}")
    ev = expected_utility(result.p1_end, result.p2_end)
    print(f"  {'Expected payoff':20s} {ev:>10.4f} {-ev:>10.4f}")
    print("=" * 60)


def print_round_regrets(own: Move, opponent: Move):
    """Print the payoff and per-move regret of one realized round."""
    calc = RegretCalculator(own, opponent)
    print(f"  {own.label} vs {opponent.label}: payoff {own.utility_vs(opponent):+d}")
    for m in MOVES:
        print(f"    Regret for {m.label:<10s} {calc.regret_for(m):+d}")


def print_convergence(result: TrainingResult):
    """Print the recorded convergence history, one row per snapshot."""
    if not result.history:
        return
    print()
    print("Convergence (time-averaged strategy, %):")
    print(f"  {'Round':>10s}  {'P1 R':>7s} {'P1 P':>7s} {'P1 S':>7s}   "
          f"{'P2 R':>7s} {'P2 P':>7s} {'P2 S':>7s}")
    print("  " + "-" * 60)
    for snap in result.history:
        p1 = " ".join(f"{snap.p1_average[m.value] * 100:>7.2f}" for m in MOVES)
        p2 = " ".join(f"{snap.p2_average[m.value] * 100:>7.2f}" for m in MOVES)
        print(f"  {snap.round:>10d}  {p1}   {p2}")
    print()
