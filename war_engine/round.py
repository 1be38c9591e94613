"""
Round module for the War card game.
Resolves a single face-up round between the two sides.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from war_engine.card import Card, Comparison, compare
from war_engine.deck import DeckPair, Side
from war_engine.errors import InsufficientCardsError


@dataclass(frozen=True)
class RoundOutcome:
    """Result of one face-up round. A winner of None means a tie."""

    winner: Optional[Side]
    cards_moved: Tuple[Card, ...]
    player_card: Card
    opponent_card: Card

    @property
    def is_tie(self) -> bool:
        return self.winner is None


def resolve_round(decks: DeckPair) -> RoundOutcome:
    """
    Play the top card of each deck and settle the round.

    The winner takes both cards, its own card first. On a tie both
    cards stay in the pot for the war that follows.

    Args:
        decks: Deck pair to draw from; mutated in place

    Returns:
        RoundOutcome describing the winner and the cards moved

    Raises:
        InsufficientCardsError: If either side has no cards
    """
    if decks.any_empty():
        raise InsufficientCardsError(
            f"Cannot play a round with {decks.count(Side.PLAYER)} vs "
            f"{decks.count(Side.OPPONENT)} cards"
        )

    player_card = decks.stake(Side.PLAYER)
    opponent_card = decks.stake(Side.OPPONENT)

    comparison = compare(player_card, opponent_card)
    if comparison is Comparison.EQUAL:
        return RoundOutcome(None, (), player_card, opponent_card)

    if comparison is Comparison.GREATER:
        winner, order = Side.PLAYER, [player_card, opponent_card]
    else:
        winner, order = Side.OPPONENT, [opponent_card, player_card]

    moved = decks.award_pot(winner, order)
    return RoundOutcome(winner, tuple(moved), player_card, opponent_card)
