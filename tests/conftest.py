"""Shared pytest fixtures for the regret-matching trainer tests."""

import random

import pytest

from rps_regret.player import Player
from rps_regret.strategy import Strategy


class FixedDraws:
    """Random source that replays a fixed list of draws in [0, 1)."""

    def __init__(self, *draws):
        self._draws = list(draws)

    def random(self):
        return self._draws.pop(0)


@pytest.fixture
def rng():
    """Provide a reproducible random source."""
    return random.Random(42)


@pytest.fixture
def fixed_draws():
    """Factory for random sources with scripted draws."""
    return FixedDraws


@pytest.fixture
def uniform_strategy(rng):
    return Strategy(rng=rng)


@pytest.fixture
def players():
    """Player one uniform, player two biased towards Rock."""
    return (
        Player(Strategy(1, 1, 1), name="Player one"),
        Player(Strategy(4, 3, 3), name="Player two"),
    )
