"""
War card game engine.
Location: war_engine/__init__.py
"""

from .card import Card, Comparison, Rank, Suit, compare, create_deck
from .deck import DeckPair, Side, build_shuffled_deck, deal, dequeue_head, enqueue_tail
from .errors import (
    EmptyDeckError,
    GameNotActiveError,
    InsufficientCardsError,
    InvariantViolationError,
    WarEngineError,
)
from .game import GameResult, GameState, GameStatus, RoundResult, WarGame
from .round import RoundOutcome, resolve_round
from .server import WarServer
from .transport import FailureMode, NetworkConfig, ResponseEnvelope, TransportSimulator
from .war import WarOutcome, WarRoundRecord, resolve_war

__all__ = [
    'Card', 'Comparison', 'Rank', 'Suit', 'compare', 'create_deck',
    'DeckPair', 'Side', 'build_shuffled_deck', 'deal', 'dequeue_head', 'enqueue_tail',
    'EmptyDeckError', 'GameNotActiveError', 'InsufficientCardsError',
    'InvariantViolationError', 'WarEngineError',
    'GameResult', 'GameState', 'GameStatus', 'RoundResult', 'WarGame',
    'RoundOutcome', 'resolve_round',
    'WarServer',
    'FailureMode', 'NetworkConfig', 'ResponseEnvelope', 'TransportSimulator',
    'WarOutcome', 'WarRoundRecord', 'resolve_war',
]
