"""
Card module for the War card game.
Defines Card, Suit, and Rank classes with rank-only ordering.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class Suit(Enum):
    """Card suits. Suits never decide a War round."""
    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self):
        return self.value


class Rank(Enum):
    """Card ranks with proper ordering (2 lowest, Ace highest)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self):
        if self.value <= 10:
            return str(self.value)
        return {11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    def __lt__(self, other):
        if not isinstance(other, Rank):
            return NotImplemented
        return self.value < other.value


class Comparison(Enum):
    """Result of comparing two cards by rank."""
    GREATER = 1
    LESS = -1
    EQUAL = 0


@dataclass(frozen=True)
class Card:
    """Represents a playing card with suit and rank."""

    suit: Suit
    rank: Rank

    def __str__(self):
        return f"{self.rank}{self.suit}"

    def __repr__(self):
        return f"Card({self.suit.name}, {self.rank.name})"

    def __lt__(self, other):
        """Compare cards by rank only."""
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank < other.rank

    @property
    def value(self) -> int:
        return self.rank.value


def compare(a: Card, b: Card) -> Comparison:
    """
    Compare two cards the way a War round does.

    Args:
        a: Card played by the first side
        b: Card played by the second side

    Returns:
        Comparison of a relative to b, ignoring suits
    """
    if a.rank.value > b.rank.value:
        return Comparison.GREATER
    if a.rank.value < b.rank.value:
        return Comparison.LESS
    return Comparison.EQUAL


def create_deck() -> List[Card]:
    """Create a standard 52-card deck."""
    deck = []
    for suit in Suit:
        for rank in Rank:
            deck.append(Card(suit, rank))
    return deck
