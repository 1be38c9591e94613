"""
Deck module for the War card game.
Handles deck creation, shuffling, dealing, and the two-sided deck pair.
"""

import logging
import random
from collections import deque
from enum import Enum
from typing import Deque, Iterable, List, Optional, Tuple

from war_engine.card import Card, create_deck
from war_engine.errors import EmptyDeckError, InvariantViolationError
from war_engine.rules import TOTAL_CARDS

logger = logging.getLogger(__name__)


class Side(Enum):
    """The two sides of a War game."""
    PLAYER = 1
    OPPONENT = 2

    @property
    def other(self) -> 'Side':
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER

    def __str__(self):
        return self.name.title()


def shuffle_cards(cards: List[Card], rng: random.Random) -> None:
    """Fisher-Yates shuffle in place, from the last index down to 1."""
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]


def build_shuffled_deck(seed: Optional[int] = None,
                        rng: Optional[random.Random] = None) -> List[Card]:
    """
    Build all 52 cards and shuffle them.

    Args:
        seed: Seed for a fresh random generator
        rng: Generator to draw from instead (takes precedence over seed)

    Returns:
        Shuffled list of 52 distinct cards
    """
    if rng is None:
        rng = random.Random(seed)
    cards = create_deck()
    shuffle_cards(cards, rng)
    return cards


def deal(cards: List[Card]) -> Tuple[Deque[Card], Deque[Card]]:
    """Deal alternately: even positions to side A, odd positions to side B."""
    return deque(cards[0::2]), deque(cards[1::2])


def dequeue_head(deck: Deque[Card]) -> Card:
    """
    Remove and return the top card of a deck.

    Raises:
        EmptyDeckError: If the deck has no cards
    """
    if not deck:
        raise EmptyDeckError("Cannot draw from an empty deck")
    return deck.popleft()


def enqueue_tail(deck: Deque[Card], *cards: Card) -> None:
    """Put cards at the bottom of a deck, keeping their order."""
    deck.extend(cards)


class DeckPair:
    """Both sides' decks plus the pot of cards currently at stake."""

    def __init__(self, deck_a: Iterable[Card], deck_b: Iterable[Card],
                 total_cards: Optional[int] = None):
        self.decks = {
            Side.PLAYER: deque(deck_a),
            Side.OPPONENT: deque(deck_b),
        }
        self.pot: List[Card] = []
        if total_cards is None:
            total_cards = len(self.decks[Side.PLAYER]) + len(self.decks[Side.OPPONENT])
        self.total_cards = total_cards

    @classmethod
    def shuffled(cls, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None) -> 'DeckPair':
        """Build a freshly shuffled and dealt pair."""
        deck_a, deck_b = deal(build_shuffled_deck(seed=seed, rng=rng))
        return cls(deck_a, deck_b, total_cards=TOTAL_CARDS)

    @property
    def deck_a(self) -> Deque[Card]:
        return self.decks[Side.PLAYER]

    @property
    def deck_b(self) -> Deque[Card]:
        return self.decks[Side.OPPONENT]

    def count(self, side: Side) -> int:
        return len(self.decks[side])

    def is_empty(self, side: Side) -> bool:
        return len(self.decks[side]) == 0

    def any_empty(self) -> bool:
        return self.is_empty(Side.PLAYER) or self.is_empty(Side.OPPONENT)

    def stake(self, side: Side) -> Card:
        """Move the top card of a side's deck into the pot."""
        card = dequeue_head(self.decks[side])
        self.pot.append(card)
        return card

    def award_pot(self, side: Side, cards: Optional[List[Card]] = None) -> List[Card]:
        """
        Drain the pot onto the bottom of a side's deck.

        Args:
            side: Side receiving the cards
            cards: Order to enqueue the pot in; must be exactly the pot's cards

        Returns:
            Cards moved, in enqueue order
        """
        if cards is None:
            cards = list(self.pot)
        elif sorted(cards, key=_card_key) != sorted(self.pot, key=_card_key):
            raise ValueError("Awarded cards must match the pot")
        enqueue_tail(self.decks[side], *cards)
        self.pot.clear()
        return cards

    def redeal(self, rng: random.Random) -> None:
        """Collect the pot and both decks, shuffle, and deal alternately."""
        cards = list(self.pot)
        cards.extend(self.decks[Side.PLAYER])
        cards.extend(self.decks[Side.OPPONENT])
        shuffle_cards(cards, rng)
        deck_a, deck_b = deal(cards)
        self.decks[Side.PLAYER] = deck_a
        self.decks[Side.OPPONENT] = deck_b
        self.pot.clear()
        logger.debug("Redealt %d cards: %d / %d", len(cards), len(deck_a), len(deck_b))

    def cards_accounted(self) -> int:
        return len(self.decks[Side.PLAYER]) + len(self.decks[Side.OPPONENT]) + len(self.pot)

    def check_conservation(self) -> None:
        """
        Verify that every card is in exactly one deck or the pot.

        Raises:
            InvariantViolationError: If cards went missing or were duplicated
        """
        actual = self.cards_accounted()
        if actual != self.total_cards:
            raise InvariantViolationError(self.total_cards, actual)
        # Duplicates would hide a lost card behind an unchanged total
        distinct = len(set(self.decks[Side.PLAYER]) | set(self.decks[Side.OPPONENT]) | set(self.pot))
        if distinct != actual:
            raise InvariantViolationError(self.total_cards, distinct)

    def clear(self) -> None:
        for deck in self.decks.values():
            deck.clear()
        self.pot.clear()
        self.total_cards = 0


def _card_key(card: Card) -> Tuple[str, int]:
    return (card.suit.name, card.rank.value)
