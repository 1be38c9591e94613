"""
Tests for batch statistics, player strategies, and the command-line driver.
"""

import pytest
from war_engine.game import GameState, GameStatus, WarGame
from war_engine.player import Action, AutoPlayer, HumanPlayer, ScriptedPlayer
from war_engine.run import main, play_session
from war_engine.server import WarServer
from war_engine.stats import failure_rate, play_game, simulate_games, summarize
from war_engine.transport import FailureMode, NetworkConfig, ResponseEnvelope


def active_state(rounds=0):
    return GameState(player_count=26, opponent_count=26, rounds_played=rounds,
                     active=True, status=GameStatus.IN_PROGRESS)


class TestStats:
    def test_play_game_respects_round_cap(self):
        record = play_game(WarGame(seed=3), max_rounds=25)
        assert record.rounds <= 25
        assert record.wars == len(record.chain_lengths)

    def test_simulate_games(self):
        summary = simulate_games(6, seed=10, max_rounds=3000)

        assert summary.games == 6
        assert summary.player_wins + summary.opponent_wins + summary.draws + summary.unfinished == 6
        assert summary.mean_rounds > 0
        assert summary.max_rounds >= summary.median_rounds
        assert sum(summary.chain_histogram.values()) >= 0
        assert 0.0 <= summary.player_win_rate <= 1.0

    def test_simulation_is_reproducible(self):
        first = simulate_games(3, seed=77, max_rounds=2000)
        second = simulate_games(3, seed=77, max_rounds=2000)
        assert first.to_dict() == second.to_dict()

    def test_invalid_batches(self):
        with pytest.raises(ValueError):
            simulate_games(0)
        with pytest.raises(ValueError):
            summarize([])

    def test_failure_rate(self):
        envelopes = [
            ResponseEnvelope.ok(True, 0.1),
            ResponseEnvelope.failure("Request timeout", 5.1, FailureMode.TIMEOUT),
            ResponseEnvelope.ok(True, 0.2),
            ResponseEnvelope.failure("Connection lost", 0.3, FailureMode.NETWORK_ERROR),
        ]
        assert failure_rate(envelopes) == pytest.approx(0.5)
        assert failure_rate([]) == 0.0


class TestPlayers:
    def test_auto_player(self):
        player = AutoPlayer()
        assert player.decide_next_action(active_state()) is Action.DRAW
        finished = GameState(0, 52, 100, False, GameStatus.OPPONENT_WON)
        assert player.decide_next_action(finished) is Action.QUIT

    def test_scripted_player(self):
        player = ScriptedPlayer([Action.DRAW, Action.DRAW], name="Script")
        assert str(player) == "Script"
        assert player.decide_next_action(active_state()) is Action.DRAW
        assert player.decide_next_action(active_state(1)) is Action.DRAW
        assert player.decide_next_action(active_state(2)) is Action.QUIT

    def test_human_player(self, monkeypatch):
        answers = iter(["maybe", "y", "n"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        player = HumanPlayer("Tester")

        assert player.decide_next_action(active_state()) is Action.DRAW
        assert player.decide_next_action(active_state(1)) is Action.QUIT


class TestSession:
    @pytest.mark.asyncio
    async def test_scripted_session(self):
        server = WarServer(config=NetworkConfig.reliable(), seed=14)
        result = await play_session(server, ScriptedPlayer([Action.DRAW] * 3), verbose=False)

        assert result['rounds_played'] == 3
        assert result['status'] == GameStatus.IN_PROGRESS.value
        assert result['player_cards'] + result['opponent_cards'] == 52

    @pytest.mark.asyncio
    async def test_session_retries_failures(self):
        config = NetworkConfig(min_delay=0.0, max_delay=0.0, timeout_rate=0.0,
                               network_error_rate=0.3, server_error_rate=0.0)
        server = WarServer(config=config, seed=5)
        result = await play_session(server, AutoPlayer(), max_rounds=20,
                                    max_attempts=20, verbose=False)

        assert result['rounds_played'] <= 20
        assert result['transport_calls'] > result['rounds_played']

    @pytest.mark.asyncio
    async def test_session_gives_up(self):
        config = NetworkConfig(min_delay=0.0, max_delay=0.0, timeout_rate=0.0,
                               network_error_rate=1.0, server_error_rate=0.0)
        server = WarServer(config=config, seed=5)
        with pytest.raises(ConnectionError):
            await play_session(server, AutoPlayer(), max_attempts=3, verbose=False)
        assert server.transport.calls == 3

    def test_cli_simulate(self, capsys):
        summary = main(['--simulate', '2', '--seed', '3', '--max-rounds', '500'])

        assert summary['games'] == 2
        assert '"games": 2' in capsys.readouterr().out

    def test_cli_game(self, capsys):
        result = main(['--seed', '8', '--max-rounds', '10'])

        assert result['rounds_played'] <= 10
        assert 'Welcome to War' in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__])
