"""
Main game module for the War card game.
Manages one game's lifecycle, drives the round and war resolvers,
and reports state snapshots.
"""

import random
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from war_engine.card import Card
from war_engine.deck import DeckPair, Side
from war_engine.errors import GameNotActiveError, InvariantViolationError
from war_engine.round import resolve_round
from war_engine.utils import GameLogger
from war_engine.war import WarOutcome, resolve_war


class GameStatus(Enum):
    """Lifecycle of a single game."""
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    PLAYER_WON = "player_won"
    OPPONENT_WON = "opponent_won"
    DRAW = "draw"

    @property
    def is_finished(self) -> bool:
        return self in (GameStatus.PLAYER_WON, GameStatus.OPPONENT_WON, GameStatus.DRAW)


class GameResult(Enum):
    """Result of a played round as seen by the presentation layer."""
    PLAYER_WINS = "player_wins"
    OPPONENT_WINS = "opponent_wins"
    WAR = "war"


@dataclass(frozen=True)
class GameState:
    """Snapshot of a game. A new instance is produced for every query."""

    player_count: int
    opponent_count: int
    rounds_played: int
    active: bool
    status: GameStatus = GameStatus.IDLE
    total_wars: int = 0
    started_at: Optional[datetime] = None


@dataclass(frozen=True)
class RoundResult:
    """
    Everything the presentation layer needs to show one round.

    result is None only when the game ended before any card could be played.
    """

    player_card: Optional[Card]
    opponent_card: Optional[Card]
    result: Optional[GameResult]
    cards_won: int
    war_outcome: Optional[WarOutcome] = None
    is_game_ended: bool = False
    status: GameStatus = GameStatus.IN_PROGRESS
    player_cards_remaining: int = 0
    opponent_cards_remaining: int = 0
    round_number: int = 0


class WarGame:
    """
    Game controller for War.

    Not meant for concurrent use; each operation still runs under a lock so
    the two decks and the pot are only ever mutated together.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None,
                 strict_invariants: bool = __debug__, log_file: Optional[str] = None):
        self.rng = rng if rng is not None else random.Random(seed)
        self.strict_invariants = strict_invariants
        self.decks: Optional[DeckPair] = None
        self.status = GameStatus.IDLE
        self.rounds_played = 0
        self.total_wars = 0
        self.started_at: Optional[datetime] = None
        self.logger = GameLogger(log_file)
        self._lock = threading.Lock()

    def start_new_game(self) -> bool:
        """Shuffle, deal, and reset the game. Always succeeds."""
        with self._lock:
            self._begin(DeckPair.shuffled(rng=self.rng))
        return True

    def start_with_decks(self, player_cards: Iterable[Card], opponent_cards: Iterable[Card]) -> bool:
        """
        Start a game from fixed decks instead of a shuffle.

        Decks that can only ever tie, such as a lone 7 against a lone 7,
        redeal to the same ranks after every war and never finish. Callers
        driving such fixtures should cap the number of rounds.

        Args:
            player_cards: Player's deck, top card first
            opponent_cards: Opponent's deck, top card first

        Raises:
            ValueError: If a card appears more than once
        """
        decks = DeckPair(player_cards, opponent_cards)
        if len(set(decks.deck_a) | set(decks.deck_b)) != decks.total_cards:
            raise ValueError("Decks must not share or repeat cards")
        with self._lock:
            self._begin(decks)
        return True

    def _begin(self, decks: DeckPair):
        self.decks = decks
        self.status = GameStatus.IN_PROGRESS
        self.rounds_played = 0
        self.total_wars = 0
        self.started_at = datetime.now()
        self.logger.log_game_start(decks.count(Side.PLAYER), decks.count(Side.OPPONENT))

    def play_round(self) -> RoundResult:
        """
        Play one round, including any war it triggers.

        Returns:
            RoundResult for the round

        Raises:
            GameNotActiveError: If no game is in progress
        """
        with self._lock:
            if self.status is not GameStatus.IN_PROGRESS:
                raise GameNotActiveError(f"Cannot play a round while game is {self.status.value}")

            if self.decks.any_empty():
                self._finish()
                return self._empty_result()

            try:
                return self._resolve()
            except InvariantViolationError as e:
                if self.strict_invariants:
                    raise
                self.logger.log_invariant_violation(e)
                self.status = GameStatus.IDLE
                return self._empty_result()

    def _resolve(self) -> RoundResult:
        outcome = resolve_round(self.decks)
        self.decks.check_conservation()
        war_outcome = None

        if outcome.is_tie:
            war_outcome = resolve_war(self.decks)
            self.total_wars += 1
            self.decks.check_conservation()
            if war_outcome.requires_reshuffle:
                self.decks.redeal(self.rng)
                self.decks.check_conservation()
                self.logger.log_reshuffle(self.decks.count(Side.PLAYER),
                                          self.decks.count(Side.OPPONENT))
            result = GameResult.WAR
            cards_won = war_outcome.total_cards_won
        else:
            result = GameResult.PLAYER_WINS if outcome.winner is Side.PLAYER else GameResult.OPPONENT_WINS
            cards_won = len(outcome.cards_moved)

        self.rounds_played += 1
        if war_outcome is not None:
            self.logger.log_war(self.rounds_played, war_outcome)
        else:
            self.logger.log_round(self.rounds_played, outcome.player_card,
                                  outcome.opponent_card, result.value, cards_won)

        # A side can run dry as a direct result of this round
        if self.decks.any_empty():
            self._finish()

        return RoundResult(
            player_card=outcome.player_card,
            opponent_card=outcome.opponent_card,
            result=result,
            cards_won=cards_won,
            war_outcome=war_outcome,
            is_game_ended=self.status is not GameStatus.IN_PROGRESS,
            status=self.status,
            player_cards_remaining=self.decks.count(Side.PLAYER),
            opponent_cards_remaining=self.decks.count(Side.OPPONENT),
            round_number=self.rounds_played,
        )

    def _empty_result(self) -> RoundResult:
        return RoundResult(
            None, None, None, 0,
            is_game_ended=True,
            status=self.status,
            player_cards_remaining=self.decks.count(Side.PLAYER),
            opponent_cards_remaining=self.decks.count(Side.OPPONENT),
            round_number=self.rounds_played,
        )

    def get_game_state(self) -> GameState:
        """Get a snapshot of the current game."""
        with self._lock:
            return GameState(
                player_count=self.decks.count(Side.PLAYER) if self.decks else 0,
                opponent_count=self.decks.count(Side.OPPONENT) if self.decks else 0,
                rounds_played=self.rounds_played,
                active=self.status is GameStatus.IN_PROGRESS,
                status=self.status,
                total_wars=self.total_wars,
                started_at=self.started_at,
            )

    def end_game(self) -> bool:
        """Abandon the current game and clear all cards."""
        with self._lock:
            if self.decks is not None:
                self.decks.clear()
            self.status = GameStatus.IDLE
        return True

    def _finish(self):
        player_count = self.decks.count(Side.PLAYER)
        opponent_count = self.decks.count(Side.OPPONENT)
        if player_count > opponent_count:
            self.status = GameStatus.PLAYER_WON
        elif opponent_count > player_count:
            self.status = GameStatus.OPPONENT_WON
        else:
            self.status = GameStatus.DRAW
        self.logger.log_game_end(self.status, self.rounds_played, self.total_wars)
