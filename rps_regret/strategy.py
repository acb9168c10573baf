"""Regret-matching mixed strategy over the three moves.

A Strategy keeps three arrays, all in Rock, Paper, Scissors order:

    weight      current mixed strategy, scaled so the entries sum to 100
    regret      cumulative counterfactual regret, never reset or clamped
    weight_sum  running sum of every normalized weight vector, including
                the initial one; only used for the time-averaged strategy

Each update plays the regret-matching rule: the next strategy is
proportional to the positive part of cumulative regret, or uniform when no
move has positive regret.
"""

import logging
import random
from typing import Optional, Union, Sequence, Mapping

import numpy as np

from .moves import Move, MOVES

logger = logging.getLogger(__name__)

WEIGHT_TOTAL = 100.0
DISPLAY_PRECISION = 2

RegretInput = Union[Mapping[Move, float], Sequence[float], np.ndarray]


def _validate_initial_weights(weights: Sequence[float]) -> np.ndarray:
    values = np.asarray(weights, dtype=float)
    if values.shape != (len(MOVES),):
        raise ValueError(f"Expected {len(MOVES)} initial weights, got {len(weights)}")
    if not np.isfinite(values).all():
        raise ValueError(f"Initial weights must be finite: {list(weights)}")
    if (values < 0).any():
        raise ValueError(f"Initial weights must be non-negative: {list(weights)}")
    if values.sum() <= 0:
        raise ValueError("Initial weights must have a positive sum")
    return values


def _regret_vector(round_regret: RegretInput) -> np.ndarray:
    """Coerce a per-move regret mapping or sequence into a float array."""
    if isinstance(round_regret, Mapping):
        missing = [m.value for m in MOVES if m not in round_regret]
        if missing:
            raise ValueError(f"Regret missing for: {', '.join(missing)}")
        vector = np.array([round_regret[m] for m in MOVES], dtype=float)
    else:
        vector = np.asarray(round_regret, dtype=float)
    if vector.shape != (len(MOVES),):
        raise ValueError(f"Expected {len(MOVES)} regret values, got shape {vector.shape}")
    if not np.isfinite(vector).all():
        raise ValueError(f"Regret values must be finite: {vector.tolist()}")
    return vector


def _normalize(raw: np.ndarray) -> np.ndarray:
    return WEIGHT_TOTAL * raw / raw.sum()


class Strategy:
    """Mixed strategy that learns by regret matching.

    Args:
        rock, paper, scissors: Initial unnormalized weights. Any
            non-negative values with a positive sum; (1, 1, 1) is uniform.
        rng: Random source with a ``random()`` method returning floats in
            [0, 1). Defaults to a private ``random.Random()``.
    """

    def __init__(
        self,
        rock: float = 1,
        paper: float = 1,
        scissors: float = 1,
        rng: Optional[random.Random] = None,
    ):
        initial = _validate_initial_weights((rock, paper, scissors))
        self.rng = rng if rng is not None else random.Random()
        self._weight = _normalize(initial)
        self._regret = np.zeros(len(MOVES))
        # Includes the initial state (already normalized)
        self._weight_sum = self._weight.copy()
        self.updates = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def weights(self) -> np.ndarray:
        return self._weight.copy()

    @property
    def regrets(self) -> np.ndarray:
        return self._regret.copy()

    @property
    def weight_sums(self) -> np.ndarray:
        return self._weight_sum.copy()

    def weight_of(self, move: Move) -> float:
        return float(self._weight[move.index])

    def regret_of(self, move: Move) -> float:
        return float(self._regret[move.index])

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def sample(self) -> Move:
        """Draw a move from the current strategy."""
        return self.move_at(self.rng.random() * WEIGHT_TOTAL)

    def move_at(self, value: float) -> Move:
        """Map a draw in [0, 100] onto the move whose interval contains it.

        Intervals are half-open, [start, end), laid out Rock, Paper,
        Scissors. The Scissors interval also admits 100 itself.
        """
        if value < 0:
            raise ValueError(f"Draw must be non-negative, got {value}")
        rock_end = self.weight_of(Move.ROCK)
        paper_end = rock_end + self.weight_of(Move.PAPER)
        if value < rock_end:
            return Move.ROCK
        if value < paper_end:
            return Move.PAPER
        return Move.SCISSORS

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def update(self, round_regret: RegretInput):
        """Fold one round of regret into the strategy."""
        self._regret += _regret_vector(round_regret)

        raw = np.maximum(self._regret, 0.0)
        if not raw.any():
            # No move has a regret-based edge: fall back to uniform
            logger.debug("All cumulative regrets non-positive %s, resetting to uniform",
                         self._regret.tolist())
            raw = np.ones(len(MOVES))

        self._weight = _normalize(raw)
        self._weight_sum += self._weight
        self.updates += 1

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def current_strategy(self) -> dict[Move, float]:
        return {m: float(self._weight[m.index] / WEIGHT_TOTAL) for m in MOVES}

    def average_strategy(self) -> dict[Move, float]:
        """Time-averaged strategy as probabilities.

        This, not the latest weight vector, is what converges to the
        equilibrium.
        """
        total = self._weight_sum.sum()
        return {m: float(self._weight_sum[m.index] / total) for m in MOVES}

    def average_strategy_percentages(self, precision: int = DISPLAY_PRECISION) -> dict[Move, float]:
        return {m: round(p * 100, precision) for m, p in self.average_strategy().items()}

    def to_dict(self) -> dict:
        return {
            "weights": {m.value: round(float(self._weight[m.index]), 4) for m in MOVES},
            "current_strategy": {m.value: round(p, 6) for m, p in self.current_strategy().items()},
            "regrets": {m.value: float(self._regret[m.index]) for m in MOVES},
            "weight_sums": {m.value: round(float(self._weight_sum[m.index]), 4) for m in MOVES},
            "average_strategy": {
                m.value: pct for m, pct in self.average_strategy_percentages().items()
            },
            "updates": self.updates,
        }

    def __str__(self):
        pct = self.average_strategy_percentages()
        return ", ".join(f"{m.label}: {pct[m]:.{DISPLAY_PRECISION}f}%" for m in MOVES)

    def __repr__(self):
        w = ", ".join(f"{m.value}={self._weight[m.index]:.2f}" for m in MOVES)
        return f"Strategy({w}, updates={self.updates})"
