"""
Exceptions raised by the War engine.
Engine errors signal caller mistakes and are never retried.
"""


class WarEngineError(Exception):
    """Base class for engine-level errors."""

    pass


class EmptyDeckError(WarEngineError):
    """A card was requested from an empty deck."""

    pass


class InsufficientCardsError(WarEngineError):
    """A round was started while one side had no cards."""

    pass


class GameNotActiveError(WarEngineError):
    """A round was requested while no game is in progress."""

    pass


class InvariantViolationError(WarEngineError):
    """Cards were lost or duplicated between the decks and the pot."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Card count mismatch: expected {expected}, found {actual}")
