"""
Batch simulation and statistics for the War engine.
Plays many engine-only games and summarizes them with numpy.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np

from war_engine.game import GameResult, GameStatus, WarGame
from war_engine.transport import ResponseEnvelope

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    """Per-game numbers collected during a batch run."""
    status: GameStatus
    rounds: int
    wars: int
    chain_lengths: List[int] = field(default_factory=list)
    reshuffles: int = 0


@dataclass
class SimulationSummary:
    """Aggregate statistics over a batch of games."""
    games: int
    player_wins: int
    opponent_wins: int
    draws: int
    unfinished: int
    mean_rounds: float
    median_rounds: float
    max_rounds: int
    mean_wars: float
    reshuffles: int
    chain_histogram: Dict[int, int]

    @property
    def player_win_rate(self) -> float:
        finished = self.games - self.unfinished
        return self.player_wins / finished if finished else 0.0

    def to_dict(self) -> Dict:
        return {
            'games': self.games,
            'player_wins': self.player_wins,
            'opponent_wins': self.opponent_wins,
            'draws': self.draws,
            'unfinished': self.unfinished,
            'player_win_rate': round(self.player_win_rate, 4),
            'mean_rounds': round(self.mean_rounds, 2),
            'median_rounds': self.median_rounds,
            'max_rounds': self.max_rounds,
            'mean_wars': round(self.mean_wars, 2),
            'reshuffles': self.reshuffles,
            'chain_histogram': self.chain_histogram,
        }


def play_game(game: WarGame, max_rounds: int = 10000) -> GameRecord:
    """
    Play one game to completion or until max_rounds.

    Args:
        game: Game to start and play
        max_rounds: Round cap; games hitting it stay IN_PROGRESS

    Returns:
        GameRecord for the game
    """
    game.start_new_game()
    record = GameRecord(status=GameStatus.IN_PROGRESS, rounds=0, wars=0)

    while game.status is GameStatus.IN_PROGRESS and record.rounds < max_rounds:
        result = game.play_round()
        if result.result is None:
            break
        record.rounds += 1
        if result.result is GameResult.WAR:
            record.wars += 1
            record.chain_lengths.append(len(result.war_outcome.rounds))
            if result.war_outcome.requires_reshuffle:
                record.reshuffles += 1

    record.status = game.status
    return record


def summarize(records: List[GameRecord]) -> SimulationSummary:
    """Aggregate game records into a SimulationSummary."""
    if not records:
        raise ValueError("Cannot summarize an empty batch")

    rounds = np.array([r.rounds for r in records], dtype=np.int64)
    wars = np.array([r.wars for r in records], dtype=np.int64)
    statuses = [r.status for r in records]
    chains = np.array([c for r in records for c in r.chain_lengths], dtype=np.int64)

    histogram = {}
    if chains.size:
        counts = np.bincount(chains)
        histogram = {int(length): int(n) for length, n in enumerate(counts) if n}

    return SimulationSummary(
        games=len(records),
        player_wins=statuses.count(GameStatus.PLAYER_WON),
        opponent_wins=statuses.count(GameStatus.OPPONENT_WON),
        draws=statuses.count(GameStatus.DRAW),
        unfinished=statuses.count(GameStatus.IN_PROGRESS),
        mean_rounds=float(np.mean(rounds)),
        median_rounds=float(np.median(rounds)),
        max_rounds=int(np.max(rounds)),
        mean_wars=float(np.mean(wars)),
        reshuffles=int(sum(r.reshuffles for r in records)),
        chain_histogram=histogram,
    )


def simulate_games(num_games: int, seed: Optional[int] = None,
                   max_rounds: int = 10000) -> SimulationSummary:
    """
    Play a batch of games without the simulated transport.

    Args:
        num_games: Number of games to play
        seed: Seed for the whole batch; same seed gives the same summary
        max_rounds: Round cap per game

    Returns:
        SimulationSummary of the batch
    """
    if num_games <= 0:
        raise ValueError(f"num_games must be positive, got {num_games}")

    rng = random.Random(seed)
    records = []
    for i in range(num_games):
        game = WarGame(rng=random.Random(rng.getrandbits(64)))
        records.append(play_game(game, max_rounds))
        if (i + 1) % 100 == 0:
            logger.info("Simulated %d/%d games", i + 1, num_games)
    return summarize(records)


def failure_rate(envelopes: Iterable[ResponseEnvelope]) -> float:
    """Share of envelopes that report a failure."""
    outcomes = np.array([not envelope.success for envelope in envelopes], dtype=np.float64)
    if outcomes.size == 0:
        return 0.0
    return float(outcomes.mean())
