"""
Fake War server: the game controller behind the simulated transport.
This is the only object the presentation layer talks to.
"""

import asyncio
from typing import Optional

from war_engine.errors import GameNotActiveError
from war_engine.game import GameState, GameStatus, RoundResult, WarGame
from war_engine.transport import NetworkConfig, ResponseEnvelope, TransportSimulator


class WarServer:
    """
    Exposes a WarGame through a TransportSimulator.

    Each call waits out the simulated network before touching the game, so
    a failed or cancelled call leaves the decks exactly as they were. Engine
    errors such as GameNotActiveError are raised, not wrapped, even when the
    network would have failed the call.
    """

    def __init__(self, game: Optional[WarGame] = None,
                 config: Optional[NetworkConfig] = None,
                 seed: Optional[int] = None,
                 transport: Optional[TransportSimulator] = None):
        self.game = game if game is not None else WarGame(seed=seed)
        if transport is None:
            # Separate stream so injected failures never shift the shuffle
            transport_seed = None if seed is None else seed + 1
            transport = TransportSimulator(config, seed=transport_seed)
        self.transport = transport

    async def start_new_game(self) -> ResponseEnvelope[bool]:
        return await self.transport.simulate(self.game.start_new_game)

    async def play_round(self) -> ResponseEnvelope[RoundResult]:
        """
        Play one round through the simulated network.

        Raises:
            GameNotActiveError: If no game is in progress, before any
                latency or failure is simulated
        """
        if self.game.status is not GameStatus.IN_PROGRESS:
            raise GameNotActiveError(f"Cannot play a round while game is {self.game.status.value}")
        return await self.transport.simulate(self.game.play_round)

    async def get_game_state(self) -> ResponseEnvelope[GameState]:
        return await self.transport.simulate(self.game.get_game_state)

    async def end_game(self) -> ResponseEnvelope[bool]:
        return await self.transport.simulate(self.game.end_game)

    def play_round_task(self) -> 'asyncio.Task[ResponseEnvelope[RoundResult]]':
        """Schedule a round on the running loop; await or cancel the task."""
        return asyncio.ensure_future(self.play_round())
