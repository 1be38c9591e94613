"""
Utility module for the War card game.
Contains logging setup, formatting, and the game event logger.
"""

import logging
from typing import Iterable, List, Optional

from war_engine.card import Card
from war_engine.deck import Side


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO):
    """Set up logging configuration for the game."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def format_cards(cards: Iterable[Card]) -> str:
    """Format a run of cards for display."""
    cards = list(cards)
    if not cards:
        return "-"
    return ' '.join(str(card) for card in cards)


def format_war(outcome) -> str:
    """
    Format a war outcome as one line per war round.

    Args:
        outcome: WarOutcome to describe

    Returns:
        Multi-line summary
    """
    lines = [f"War on {format_cards(outcome.initial_tied_cards)}"]
    for war_round in outcome.rounds:
        player = war_round.fighting_cards[Side.PLAYER]
        opponent = war_round.fighting_cards[Side.OPPONENT]
        concealed = war_round.concealed_cards
        result = "tie" if war_round.tied else ("Player" if player > opponent else "Opponent")
        lines.append(
            f"  #{war_round.round_index}: "
            f"[{format_cards(concealed[Side.PLAYER])}] {player} vs "
            f"{opponent} [{format_cards(concealed[Side.OPPONENT])}] -> {result}"
        )
    if outcome.requires_reshuffle:
        lines.append(f"  Out of cards, {outcome.total_cards_won} cards redealt")
    else:
        lines.append(f"  {outcome.winner} takes {outcome.total_cards_won} cards")
    return '\n'.join(lines)


class GameLogger:
    """Logging helper for game events."""

    def __init__(self, log_file: Optional[str] = None, name: str = "WarGame"):
        self.logger = logging.getLogger(name)

        if log_file and not any(isinstance(h, logging.FileHandler) for h in self.logger.handlers):
            fh = logging.FileHandler(log_file)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(fh)

    def log_game_start(self, player_count: int, opponent_count: int):
        """Log the start of a new game."""
        self.logger.info("=== NEW GAME STARTED ===")
        self.logger.info(f"Player: {player_count} cards, Opponent: {opponent_count} cards")

    def log_round(self, round_number: int, player_card: Card, opponent_card: Card,
                  result: str, cards_won: int):
        """Log a face-up round."""
        self.logger.debug(f"Round {round_number}: {player_card} vs {opponent_card} -> {result} ({cards_won} cards)")

    def log_war(self, round_number: int, outcome):
        """Log a resolved war with its chain length."""
        self.logger.info(f"Round {round_number}: war of {len(outcome.rounds)} round(s), "
                         f"{outcome.total_cards_won} cards at stake")
        self.logger.debug(format_war(outcome))

    def log_reshuffle(self, player_count: int, opponent_count: int):
        """Log a redeal after a war ran out of cards."""
        self.logger.info(f"Cards exhausted during war, redealt {player_count} / {opponent_count}")

    def log_invariant_violation(self, error: Exception):
        self.logger.error(f"Card conservation broken, aborting game: {error}")

    def log_game_end(self, status, rounds_played: int, total_wars: int):
        """Log game completion."""
        self.logger.info("=== GAME COMPLETE ===")
        self.logger.info(f"Result: {status.value} after {rounds_played} rounds and {total_wars} wars")
