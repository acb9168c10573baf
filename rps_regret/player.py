"""A self-play agent: a thin owner of one Strategy."""

from .moves import Move
from .strategy import Strategy, RegretInput


class Player:
    """Pass-through to the Strategy it owns exclusively."""

    def __init__(self, strategy: Strategy, name: str = "Player"):
        self.strategy = strategy
        self.name = name

    @property
    def rng(self):
        return self.strategy.rng

    @rng.setter
    def rng(self, value):
        self.strategy.rng = value

    def act(self) -> Move:
        """Return a move sampled from the current strategy."""
        return self.strategy.sample()

    def learn(self, round_regret: RegretInput):
        self.strategy.update(round_regret)

    def __str__(self):
        return str(self.strategy)

    def __repr__(self):
        return f"<{self.name}>"
