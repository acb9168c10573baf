"""Rock-Paper-Scissors moves and their zero-sum payoff table."""

from enum import Enum

import numpy as np


class Move(Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    @property
    def index(self) -> int:
        """Position of this move in the canonical Rock, Paper, Scissors order."""
        return _MOVE_INDEX[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def utility_vs(self, other: "Move") -> int:
        return _PAYOFF_TABLE[self, other]

    @classmethod
    def from_name(cls, name: str) -> "Move":
        """Parse a move name (case-insensitive) or its first letter."""
        key = name.strip().lower()
        for move in cls:
            if key in (move.value, move.value[0]):
                return move
        available = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown move: '{name}'. Available: {available}")


# Canonical order for every weight, regret and sampling interval
MOVES = [Move.ROCK, Move.PAPER, Move.SCISSORS]

_MOVE_INDEX = {m: i for i, m in enumerate(MOVES)}

# What each move beats
BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}

# What beats each move
BEATEN_BY = {v: k for k, v in BEATS.items()}

# (own, opponent) → payoff for own
_PAYOFF_TABLE = {
    (Move.ROCK, Move.ROCK): 0,
    (Move.ROCK, Move.PAPER): -1,
    (Move.ROCK, Move.SCISSORS): 1,
    (Move.PAPER, Move.ROCK): 1,
    (Move.PAPER, Move.PAPER): 0,
    (Move.PAPER, Move.SCISSORS): -1,
    (Move.SCISSORS, Move.ROCK): -1,
    (Move.SCISSORS, Move.PAPER): 1,
    (Move.SCISSORS, Move.SCISSORS): 0,
}

# Row = own move, column = opponent move
PAYOFF_MATRIX = np.array(
    [[_PAYOFF_TABLE[own, opp] for opp in MOVES] for own in MOVES],
    dtype=float,
)
PAYOFF_MATRIX.setflags(write=False)


def utility(move: Move, opponent: Move) -> int:
    """Return 1 if `move` beats `opponent`, -1 if it loses, 0 for a tie."""
    return _PAYOFF_TABLE[move, opponent]
