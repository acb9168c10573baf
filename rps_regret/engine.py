"""Self-play training loop for two regret-matching players."""

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .moves import Move, MOVES, utility
from .player import Player
from .regret import RegretCalculator
from .strategy import Strategy

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 50_000
DEFAULT_P1_WEIGHTS = (1, 1, 1)
DEFAULT_P2_WEIGHTS = (4, 3, 3)


def _probabilities(strategy: dict[Move, float]) -> dict[str, float]:
    return {m.value: strategy[m] for m in MOVES}


@dataclass
class Snapshot:
    """Both players' time-averaged strategies after `round` rounds."""
    round: int
    p1_average: dict[str, float]
    p2_average: dict[str, float]

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "p1_average": {k: round(v * 100, 2) for k, v in self.p1_average.items()},
            "p2_average": {k: round(v * 100, 2) for k, v in self.p2_average.items()},
        }


@dataclass
class TrainingResult:
    """Outcome of a self-play training run. Tallies are from player one's side."""
    p1_name: str
    p2_name: str
    iterations: int
    p1_wins: int = 0
    p2_wins: int = 0
    draws: int = 0
    p1_start: dict[str, float] = field(default_factory=dict)
    p2_start: dict[str, float] = field(default_factory=dict)
    p1_end: dict[str, float] = field(default_factory=dict)
    p2_end: dict[str, float] = field(default_factory=dict)
    p1_regret: dict[str, float] = field(default_factory=dict)
    p2_regret: dict[str, float] = field(default_factory=dict)
    p1_moves: list = field(default_factory=list)
    p2_moves: list = field(default_factory=list)
    history: list[Snapshot] = field(default_factory=list)

    @property
    def p1_win_pct(self) -> float:
        return (self.p1_wins / self.iterations * 100) if self.iterations else 0.0

    @property
    def p2_win_pct(self) -> float:
        return (self.p2_wins / self.iterations * 100) if self.iterations else 0.0

    @property
    def draw_pct(self) -> float:
        return (self.draws / self.iterations * 100) if self.iterations else 0.0

    @property
    def p1_move_distribution(self) -> dict[str, int]:
        return dict(Counter(m.value for m in self.p1_moves))

    @property
    def p2_move_distribution(self) -> dict[str, int]:
        return dict(Counter(m.value for m in self.p2_moves))

    def to_dict(self) -> dict:
        def pct(d):
            return {k: round(v * 100, 2) for k, v in d.items()}

        return {
            "player_one": self.p1_name,
            "player_two": self.p2_name,
            "iterations": self.iterations,
            "p1_wins": self.p1_wins,
            "p2_wins": self.p2_wins,
            "draws": self.draws,
            "p1_win_pct": round(self.p1_win_pct, 2),
            "p2_win_pct": round(self.p2_win_pct, 2),
            "draw_pct": round(self.draw_pct, 2),
            "p1_start": pct(self.p1_start),
            "p2_start": pct(self.p2_start),
            "p1_end": pct(self.p1_end),
            "p2_end": pct(self.p2_end),
            "p1_regret": self.p1_regret,
            "p2_regret": self.p2_regret,
            "p1_move_distribution": self.p1_move_distribution,
            "p2_move_distribution": self.p2_move_distribution,
            "history": [s.to_dict() for s in self.history],
        }


def build_players(
    p1_weights: Sequence[float] = DEFAULT_P1_WEIGHTS,
    p2_weights: Sequence[float] = DEFAULT_P2_WEIGHTS,
) -> tuple[Player, Player]:
    """Create the two self-play players from initial weight triples."""
    player_one = Player(Strategy(*p1_weights), name="Player one")
    player_two = Player(Strategy(*p2_weights), name="Player two")
    return player_one, player_two


def play_round(player_one: Player, player_two: Player) -> tuple[Move, Move]:
    """Play one round and feed each player its own regrets."""
    move_one = player_one.act()
    move_two = player_two.act()

    # Each side only reads the two realized moves and mutates its own strategy
    player_one.learn(RegretCalculator(move_one, move_two).as_array())
    player_two.learn(RegretCalculator(move_two, move_one).as_array())
    return move_one, move_two


def train(
    player_one: Player,
    player_two: Player,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    record_moves: bool = False,
    snapshot_every: int = 0,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> TrainingResult:
    """Run `iterations` rounds of self-play between two players.

    When a seed is given each player's strategy gets its own seeded RNG
    derived from the master seed; otherwise the players keep whatever
    random source they already have.

    Args:
        record_moves: Keep every round's moves in the result.
        snapshot_every: Record both average strategies every N rounds
                        (0 disables snapshots).
        on_progress: Optional callback(completed, total), called at each
                     snapshot.
    """
    if seed is not None:
        master_rng = random.Random(seed)
        player_one.rng = random.Random(master_rng.randint(0, 2**31))
        player_two.rng = random.Random(master_rng.randint(0, 2**31))

    rounds = max(iterations, 0)
    result = TrainingResult(
        p1_name=player_one.name,
        p2_name=player_two.name,
        iterations=rounds,
        p1_start=_probabilities(player_one.strategy.average_strategy()),
        p2_start=_probabilities(player_two.strategy.average_strategy()),
    )
    logger.info("Training %s vs %s for %d iterations%s", player_one.name, player_two.name,
                rounds, f" (seed={seed})" if seed is not None else "")

    p1_wins = 0
    p2_wins = 0
    draws = 0
    for round_num in range(1, rounds + 1):
        move_one, move_two = play_round(player_one, player_two)

        outcome = utility(move_one, move_two)
        if outcome == 1:
            p1_wins += 1
        elif outcome == -1:
            p2_wins += 1
        else:
            draws += 1

        if record_moves:
            result.p1_moves.append(move_one)
            result.p2_moves.append(move_two)

        if snapshot_every > 0 and (round_num % snapshot_every == 0 or round_num == rounds):
            snapshot = Snapshot(
                round=round_num,
                p1_average=_probabilities(player_one.strategy.average_strategy()),
                p2_average=_probabilities(player_two.strategy.average_strategy()),
            )
            result.history.append(snapshot)
            logger.debug("Round %d: p1=%s p2=%s", round_num, player_one, player_two)
            if on_progress:
                on_progress(round_num, rounds)

    result.p1_wins = p1_wins
    result.p2_wins = p2_wins
    result.draws = draws
    result.p1_end = _probabilities(player_one.strategy.average_strategy())
    result.p2_end = _probabilities(player_two.strategy.average_strategy())
    result.p1_regret = {m.value: player_one.strategy.regret_of(m) for m in MOVES}
    result.p2_regret = {m.value: player_two.strategy.regret_of(m) for m in MOVES}
    logger.info("Training finished: p1=[%s] p2=[%s]", player_one, player_two)
    return result
