"""
Player module for the War card game.
Defines the strategy interface that decides when to draw the next round.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

from war_engine.game import GameState


class Action(Enum):
    """What a player wants to do next."""
    DRAW = "draw"
    QUIT = "quit"


class PlayerStrategy(ABC):
    """Abstract interface that all players must implement."""

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__

    @abstractmethod
    def decide_next_action(self, state: GameState) -> Action:
        """
        Decide the next action.

        Args:
            state: Latest game snapshot

        Returns:
            Action to take
        """
        pass

    def __str__(self):
        return self.name


class AutoPlayer(PlayerStrategy):
    """Draws every round until the game ends."""

    def decide_next_action(self, state: GameState) -> Action:
        return Action.DRAW if state.active else Action.QUIT


class ScriptedPlayer(PlayerStrategy):
    """Replays a fixed sequence of actions, then quits."""

    def __init__(self, actions: Iterable[Action], name: Optional[str] = None):
        super().__init__(name)
        self._actions = iter(actions)

    def decide_next_action(self, state: GameState) -> Action:
        if not state.active:
            return Action.QUIT
        return next(self._actions, Action.QUIT)


class HumanPlayer(PlayerStrategy):
    """Asks on the terminal before every draw."""

    def decide_next_action(self, state: GameState) -> Action:
        if not state.active:
            return Action.QUIT

        print(f"\n{self.name}: {state.player_count} cards vs {state.opponent_count} "
              f"(round {state.rounds_played + 1})")
        while True:
            try:
                choice = input("Draw next card? (y/n): ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                return Action.QUIT
            if choice in ['', 'y', 'yes']:
                return Action.DRAW
            if choice in ['n', 'no', 'q', 'quit']:
                return Action.QUIT
            print("Please enter 'y' or 'n'")
