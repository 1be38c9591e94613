"""
War module for the War card game.
Resolves a tie into a complete, replay-ready war before anything is shown.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from war_engine.card import Card, Comparison, compare
from war_engine.deck import DeckPair, Side
from war_engine.rules import (
    BASE_REVEAL_DURATION,
    CARD_FLIP_DURATION,
    CONCEALED_CARD_DURATION,
    MIN_POOL_SIZE,
    POOL_BUFFER,
    RESULT_FLOURISH_DURATION,
    WAR_ROUND_PAUSE,
    max_concealed_cards,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WarRoundRecord:
    """
    One round of a war: concealed cards, fighting cards, and whether it tied.

    The card mappings are read-only views so a returned war cannot be rewritten.
    """

    round_index: int
    concealed_cards: Mapping[Side, Tuple[Card, ...]]
    fighting_cards: Mapping[Side, Card]
    tied: bool
    cards_staked: int = 0

    @property
    def concealed_count(self) -> int:
        return sum(len(cards) for cards in self.concealed_cards.values())

    @property
    def fighting_count(self) -> int:
        return len(self.fighting_cards)


@dataclass(frozen=True)
class WarOutcome:
    """
    Complete description of a resolved war.

    A winner of None together with requires_reshuffle means the sides ran
    out of cards with equal counts.
    """

    initial_tied_cards: Tuple[Card, ...]
    rounds: Tuple[WarRoundRecord, ...]
    winner: Optional[Side]
    total_cards_won: int
    requires_reshuffle: bool = False
    staked_cards: Tuple[Card, ...] = field(default=())

    @property
    def required_pool_size(self) -> int:
        """Card views needed to show every card of the war at once."""
        size = len(self.initial_tied_cards)
        for war_round in self.rounds:
            size += war_round.concealed_count + war_round.fighting_count
        return max(MIN_POOL_SIZE, size + POOL_BUFFER)

    @property
    def estimated_duration(self) -> float:
        """Rough length in seconds of the full war animation."""
        duration = BASE_REVEAL_DURATION
        for war_round in self.rounds:
            duration += war_round.concealed_count * CONCEALED_CARD_DURATION
            duration += war_round.fighting_count * CARD_FLIP_DURATION
            duration += WAR_ROUND_PAUSE
        return duration + RESULT_FLOURISH_DURATION

    @property
    def final_distribution(self) -> Dict[Side, Tuple[Card, ...]]:
        """Cards each side received from the war (nothing when reshuffled)."""
        distribution = {Side.PLAYER: (), Side.OPPONENT: ()}
        if not self.requires_reshuffle and self.winner is not None:
            distribution[self.winner] = self.staked_cards
        return distribution


def _stake_concealed(decks: DeckPair, count: int) -> Dict[Side, List[Card]]:
    concealed = {Side.PLAYER: [], Side.OPPONENT: []}
    for _ in range(count):
        for side in (Side.PLAYER, Side.OPPONENT):
            # Each side always keeps its fighting card
            if decks.count(side) > 1:
                concealed[side].append(decks.stake(side))
    return concealed


def _starved_winner(decks: DeckPair) -> Optional[Side]:
    player_count = decks.count(Side.PLAYER)
    opponent_count = decks.count(Side.OPPONENT)
    if player_count > opponent_count:
        return Side.PLAYER
    if opponent_count > player_count:
        return Side.OPPONENT
    return None


def resolve_war(decks: DeckPair) -> WarOutcome:
    """
    Resolve the war started by the tied cards sitting in the pot.

    Each war round stakes up to three concealed cards per side and one
    fighting card per side. Ties chain into further rounds until a
    fighting card wins or a side cannot supply another fighting card.

    The winner's deck receives the whole pot in staking order. When the
    cards run out the pot is left in place and the outcome is flagged
    requires_reshuffle; redealing is the caller's job.

    Args:
        decks: Deck pair whose pot holds the initial tied cards

    Returns:
        WarOutcome with every round played
    """
    initial_tied_cards = tuple(decks.pot)
    rounds: List[WarRoundRecord] = []
    round_index = 1

    while True:
        concealed = _stake_concealed(
            decks, max_concealed_cards(decks.count(Side.PLAYER), decks.count(Side.OPPONENT))
        )

        if decks.any_empty():
            break

        fighting = {
            Side.PLAYER: decks.stake(Side.PLAYER),
            Side.OPPONENT: decks.stake(Side.OPPONENT),
        }
        comparison = compare(fighting[Side.PLAYER], fighting[Side.OPPONENT])
        tied = comparison is Comparison.EQUAL

        rounds.append(WarRoundRecord(
            round_index=round_index,
            concealed_cards=MappingProxyType(
                {side: tuple(cards) for side, cards in concealed.items()}),
            fighting_cards=MappingProxyType(dict(fighting)),
            tied=tied,
            cards_staked=len(decks.pot),
        ))

        if not tied:
            winner = Side.PLAYER if comparison is Comparison.GREATER else Side.OPPONENT
            staked = decks.award_pot(winner)
            logger.debug("War won by %s after %d round(s), %d cards",
                         winner, len(rounds), len(staked))
            return WarOutcome(
                initial_tied_cards=initial_tied_cards,
                rounds=tuple(rounds),
                winner=winner,
                total_cards_won=len(staked),
                staked_cards=tuple(staked),
            )

        if decks.any_empty():
            break
        round_index += 1

    winner = _starved_winner(decks)
    logger.debug("War ran out of cards after %d round(s); %d cards await a redeal",
                 len(rounds), len(decks.pot))
    return WarOutcome(
        initial_tied_cards=initial_tied_cards,
        rounds=tuple(rounds),
        winner=winner,
        total_cards_won=len(decks.pot),
        requires_reshuffle=True,
        staked_cards=tuple(decks.pot),
    )
