#!/usr/bin/env python3
"""
Main entry point for the War card game.
Play a game through the simulated server, or simulate many games.
"""

import argparse
import asyncio
import json
import logging
from typing import Optional

from war_engine.game import GameResult
from war_engine.player import Action, AutoPlayer, HumanPlayer, PlayerStrategy
from war_engine.server import WarServer
from war_engine.stats import simulate_games
from war_engine.transport import NetworkConfig
from war_engine.utils import format_war, setup_logging

logger = logging.getLogger(__name__)


async def play_session(server: WarServer, strategy: PlayerStrategy,
                       max_rounds: Optional[int] = None, max_attempts: int = 5,
                       verbose: bool = True) -> dict:
    """
    Drive one game through the server until it ends or the player quits.

    Failed transport calls are retried up to max_attempts times each; the
    engine never retries on its own.

    Returns:
        Summary dict with the final state and transport counters
    """
    async def call(request):
        for attempt in range(1, max_attempts + 1):
            response = await request()
            if response.success:
                return response.payload
            logger.warning(f"Request failed ({response.error_message}), attempt {attempt}/{max_attempts}")
        raise ConnectionError(f"Request failed {max_attempts} times")

    await call(server.start_new_game)
    state = await call(server.get_game_state)

    while state.active and strategy.decide_next_action(state) is Action.DRAW:
        if max_rounds is not None and state.rounds_played >= max_rounds:
            break
        result = await call(server.play_round)
        if verbose:
            _print_round(result)
        state = await call(server.get_game_state)

    return {
        'status': state.status.value,
        'rounds_played': state.rounds_played,
        'total_wars': state.total_wars,
        'player_cards': state.player_count,
        'opponent_cards': state.opponent_count,
        'transport_calls': server.transport.calls,
        'transport_failures': server.transport.failures,
    }


def _print_round(result):
    round_number = result.round_number
    if result.result is None:
        print(f"Round {round_number}: no cards left")
    elif result.result is GameResult.WAR:
        print(f"Round {round_number}: {result.player_card} vs {result.opponent_card} -> WAR!")
        print(format_war(result.war_outcome))
    else:
        winner = "Player" if result.result is GameResult.PLAYER_WINS else "Opponent"
        print(f"Round {round_number}: {result.player_card} vs {result.opponent_card} -> {winner}")
    if result.result is not None:
        print(f"  Cards: {result.player_cards_remaining} vs {result.opponent_cards_remaining}")
    if result.is_game_ended:
        print(f"Game over: {result.status.value}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play the War card game")
    parser.add_argument('--simulate', type=int, metavar='N',
                        help='Simulate N games without the network and print statistics')
    parser.add_argument('--human', action='store_true',
                        help='Confirm every draw on the terminal')
    parser.add_argument('--seed', type=int, help='Random seed for reproducible games')
    parser.add_argument('--max-rounds', type=int, default=10000,
                        help='Stop a game after this many rounds')
    parser.add_argument('--min-delay', type=float, default=0.0,
                        help='Minimum simulated latency in seconds')
    parser.add_argument('--max-delay', type=float, default=0.0,
                        help='Maximum simulated latency in seconds')
    parser.add_argument('--timeout-rate', type=float, default=0.0,
                        help='Probability of a simulated timeout')
    parser.add_argument('--error-rate', type=float, default=0.0,
                        help='Probability of a simulated network error')
    parser.add_argument('--timeout-duration', type=float, default=0.0,
                        help='Seconds a simulated timeout waits')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.simulate:
        summary = simulate_games(args.simulate, seed=args.seed, max_rounds=args.max_rounds)
        print(json.dumps(summary.to_dict(), indent=2))
        return summary.to_dict()

    config = NetworkConfig(
        min_delay=args.min_delay,
        max_delay=args.max_delay,
        timeout_rate=args.timeout_rate,
        network_error_rate=args.error_rate,
        server_error_rate=0.0,
        timeout_duration=args.timeout_duration,
    )
    server = WarServer(config=config, seed=args.seed)
    strategy = HumanPlayer("You") if args.human else AutoPlayer()

    print("🃏 Welcome to War! 🃏")
    try:
        result = asyncio.run(play_session(server, strategy, max_rounds=args.max_rounds))
    except KeyboardInterrupt:
        print("\nGame interrupted by user")
        return {'interrupted': True}

    print(f"\n✅ Finished: {result['status']} after {result['rounds_played']} rounds "
          f"({result['total_wars']} wars)")
    return result


if __name__ == "__main__":
    main()
