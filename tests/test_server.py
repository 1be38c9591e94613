"""
Tests for the simulated transport and the War server.
"""

import asyncio

import pytest
from war_engine.card import Card, Rank, Suit
from war_engine.deck import Side
from war_engine.errors import GameNotActiveError
from war_engine.game import GameStatus, WarGame
from war_engine.rules import NETWORK_ERROR_MESSAGES, SERVER_ERROR_MESSAGES
from war_engine.server import WarServer
from war_engine.stats import failure_rate
from war_engine.transport import FailureMode, NetworkConfig, TransportSimulator


def instant(**rates):
    """Zero-latency config with the given failure rates."""
    values = dict(timeout_rate=0.0, network_error_rate=0.0, server_error_rate=0.0)
    values.update(rates)
    return NetworkConfig(min_delay=0.0, max_delay=0.0, timeout_duration=0.0, **values)


def deck_snapshot(game):
    return list(game.decks.deck_a), list(game.decks.deck_b), list(game.decks.pot)


class TestNetworkConfig:
    def test_defaults(self):
        config = NetworkConfig()
        assert config.min_delay == 0.1
        assert config.max_delay == 0.5
        assert config.timeout_duration == 5.0
        assert config.failure_rate == pytest.approx(0.08)

    def test_rate_out_of_range(self):
        with pytest.raises(ValueError):
            NetworkConfig(timeout_rate=1.5)
        with pytest.raises(ValueError):
            NetworkConfig(network_error_rate=-0.1)

    def test_rates_must_not_exceed_one(self):
        with pytest.raises(ValueError):
            NetworkConfig(timeout_rate=0.5, network_error_rate=0.4, server_error_rate=0.2)

    def test_delay_range(self):
        with pytest.raises(ValueError):
            NetworkConfig(min_delay=0.5, max_delay=0.1)
        with pytest.raises(ValueError):
            NetworkConfig(min_delay=-1.0)

    def test_reliable(self):
        assert NetworkConfig.reliable().failure_rate == 0.0


class TestTransportSimulator:
    @pytest.mark.asyncio
    async def test_success_wraps_payload(self):
        transport = TransportSimulator(NetworkConfig.reliable(), seed=1)
        response = await transport.simulate(lambda: 42)

        assert response.success
        assert response.payload == 42
        assert response.error_message is None
        assert response.failure_mode is FailureMode.NONE

    @pytest.mark.asyncio
    async def test_latency_is_drawn_from_range(self):
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        config = NetworkConfig.reliable(min_delay=0.1, max_delay=0.5)
        transport = TransportSimulator(config, seed=3, sleep=fake_sleep)
        for _ in range(20):
            response = await transport.simulate(lambda: None)
            assert 0.1 <= response.simulated_latency <= 0.5
        assert len(sleeps) == 20
        assert all(0.1 <= s <= 0.5 for s in sleeps)

    @pytest.mark.asyncio
    async def test_timeout_skips_operation(self):
        sleeps = []
        calls = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        config = NetworkConfig(min_delay=0.2, max_delay=0.2, timeout_rate=1.0,
                               network_error_rate=0.0, server_error_rate=0.0,
                               timeout_duration=5.0)
        transport = TransportSimulator(config, seed=1, sleep=fake_sleep)
        response = await transport.simulate(lambda: calls.append(1))

        assert not response.success
        assert response.payload is None
        assert response.error_message == "Request timeout"
        assert response.failure_mode is FailureMode.TIMEOUT
        assert response.simulated_latency == pytest.approx(5.2)
        assert sleeps == [pytest.approx(0.2), 5.0]
        assert calls == []

    @pytest.mark.asyncio
    async def test_generic_failures_use_message_families(self):
        network = TransportSimulator(instant(network_error_rate=1.0), seed=2)
        server = TransportSimulator(instant(server_error_rate=1.0), seed=2)

        network_response = await network.simulate(lambda: 1)
        server_response = await server.simulate(lambda: 1)

        assert network_response.error_message in NETWORK_ERROR_MESSAGES
        assert network_response.failure_mode is FailureMode.NETWORK_ERROR
        assert server_response.error_message in SERVER_ERROR_MESSAGES
        assert server_response.failure_mode is FailureMode.SERVER_ERROR

    @pytest.mark.asyncio
    async def test_failure_rate_converges(self):
        transport = TransportSimulator(
            instant(timeout_rate=0.1, network_error_rate=0.1, server_error_rate=0.1), seed=12
        )
        responses = [await transport.simulate(lambda: True) for _ in range(4000)]

        assert failure_rate(responses) == pytest.approx(0.3, abs=0.03)
        assert transport.failures == sum(1 for r in responses if not r.success)
        assert all((r.payload is None) != r.success for r in responses)

    @pytest.mark.asyncio
    async def test_engine_errors_propagate(self):
        def broken():
            raise GameNotActiveError("no game")

        transport = TransportSimulator(NetworkConfig.reliable(), seed=1)
        with pytest.raises(GameNotActiveError):
            await transport.simulate(broken)


class TestWarServer:
    @pytest.mark.asyncio
    async def test_full_flow(self):
        server = WarServer(config=NetworkConfig.reliable(), seed=21)

        started = await server.start_new_game()
        assert started.success and started.payload is True

        played = await server.play_round()
        assert played.success
        assert played.payload.player_card is not None

        state = await server.get_game_state()
        assert state.success
        assert state.payload.rounds_played == 1
        assert state.payload.player_count + state.payload.opponent_count == 52

    @pytest.mark.asyncio
    async def test_play_round_before_start_raises(self):
        server = WarServer(config=NetworkConfig.reliable(), seed=1)
        with pytest.raises(GameNotActiveError):
            await server.play_round()

    @pytest.mark.asyncio
    async def test_inactive_game_raises_even_when_network_fails(self):
        server = WarServer(config=instant(network_error_rate=1.0), seed=1)
        with pytest.raises(GameNotActiveError):
            await server.play_round()
        assert server.transport.calls == 0

    @pytest.mark.asyncio
    async def test_finished_game_raises_instead_of_transport_failure(self):
        game = WarGame()
        game.start_new_game()
        game.end_game()
        server = WarServer(game=game, config=instant(timeout_rate=0.5, server_error_rate=0.5))
        for _ in range(5):
            with pytest.raises(GameNotActiveError):
                await server.play_round()

    @pytest.mark.asyncio
    async def test_war_records_from_server_are_read_only(self):
        game = WarGame()
        game.start_with_decks(
            [Card(Suit.CLUBS, rank) for rank in (Rank.EIGHT, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.ACE, Rank.SIX)],
            [Card(Suit.DIAMONDS, rank) for rank in (Rank.EIGHT, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.KING, Rank.SIX)],
        )
        server = WarServer(game=game, config=NetworkConfig.reliable())

        response = await server.play_round()
        war_round = response.payload.war_outcome.rounds[0]

        with pytest.raises(TypeError):
            war_round.fighting_cards[Side.PLAYER] = Card(Suit.HEARTS, Rank.TWO)
        with pytest.raises(AttributeError):
            war_round.concealed_cards.clear()
        assert war_round.fighting_cards[Side.PLAYER] == Card(Suit.CLUBS, Rank.ACE)
        assert len(war_round.concealed_cards[Side.OPPONENT]) == 3

    @pytest.mark.asyncio
    async def test_failed_call_does_not_mutate(self):
        game = WarGame(seed=5)
        game.start_new_game()
        before = deck_snapshot(game)

        server = WarServer(game=game, config=instant(network_error_rate=0.5, server_error_rate=0.5))
        for _ in range(10):
            response = await server.play_round()
            assert not response.success

        assert deck_snapshot(game) == before
        assert game.rounds_played == 0

    @pytest.mark.asyncio
    async def test_no_call_both_fails_and_mutates(self):
        game = WarGame(seed=6)
        game.start_new_game()
        server = WarServer(game=game, config=instant(timeout_rate=0.2, network_error_rate=0.2), seed=6)

        for _ in range(200):
            if game.status is not GameStatus.IN_PROGRESS:
                break
            rounds_before = game.rounds_played
            response = await server.play_round()
            if response.success:
                assert game.rounds_played == rounds_before + 1
            else:
                assert game.rounds_played == rounds_before

    @pytest.mark.asyncio
    async def test_cancelled_call_leaves_decks_untouched(self):
        game = WarGame(seed=9)
        game.start_new_game()
        before = deck_snapshot(game)

        server = WarServer(game=game, config=NetworkConfig.reliable(min_delay=10.0, max_delay=10.0))
        task = server.play_round_task()
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert deck_snapshot(game) == before
        assert game.rounds_played == 0

    @pytest.mark.asyncio
    async def test_round_task_completes(self):
        server = WarServer(config=NetworkConfig.reliable(), seed=2)
        await server.start_new_game()
        task = server.play_round_task()
        assert isinstance(task, asyncio.Task)
        response = await task
        assert response.success

    @pytest.mark.asyncio
    async def test_independent_games_run_concurrently(self):
        config = NetworkConfig.reliable(min_delay=0.0, max_delay=0.01)
        servers = [WarServer(config=config, seed=seed) for seed in range(3)]

        async def play(server):
            await server.start_new_game()
            for _ in range(30):
                if server.game.status is not GameStatus.IN_PROGRESS:
                    break
                await server.play_round()
            return server.game

        games = await asyncio.gather(*(play(server) for server in servers))

        assert len({id(game.decks) for game in games}) == 3
        for game in games:
            assert game.decks.cards_accounted() == 52
            assert 0 < game.rounds_played <= 30

    @pytest.mark.asyncio
    async def test_end_game(self):
        server = WarServer(config=NetworkConfig.reliable(), seed=4)
        await server.start_new_game()
        response = await server.end_game()
        assert response.success

        state = await server.get_game_state()
        assert not state.payload.active
        with pytest.raises(GameNotActiveError):
            await server.play_round()
