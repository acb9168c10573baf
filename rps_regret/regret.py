"""Counterfactual regret for a single realized round."""

from dataclasses import dataclass

import numpy as np

from .moves import Move, MOVES, PAYOFF_MATRIX, utility


@dataclass(frozen=True)
class RegretCalculator:
    """Regrets from the perspective of `own_move`.

    Holds the two realized moves of one round. The regret of a candidate
    move is how much better it would have scored against the same opponent
    move than the move actually played. The played move always has regret 0.
    """
    own_move: Move
    opponent_move: Move

    @property
    def actual_utility(self) -> int:
        return utility(self.own_move, self.opponent_move)

    def regret_for(self, move: Move) -> int:
        return utility(move, self.opponent_move) - self.actual_utility

    @property
    def rock_regret(self) -> int:
        return self.regret_for(Move.ROCK)

    @property
    def paper_regret(self) -> int:
        return self.regret_for(Move.PAPER)

    @property
    def scissors_regret(self) -> int:
        return self.regret_for(Move.SCISSORS)

    def regrets(self) -> dict[Move, float]:
        return {m: float(self.regret_for(m)) for m in MOVES}

    def as_array(self) -> np.ndarray:
        """Regrets as a float array in Rock, Paper, Scissors order."""
        column = PAYOFF_MATRIX[:, self.opponent_move.index]
        return column - column[self.own_move.index]
