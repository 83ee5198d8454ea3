"""
Shared fixtures for the Mafia engine tests.
"""

import pytest

from mafia_engine.engine import MafiaEngine

OWNER_ID = 100


@pytest.fixture
def engine():
    """Fresh engine with an empty registry."""
    return MafiaEngine()


@pytest.fixture
def fill_game(engine):
    """Join ``count`` players with ids starting at ``first_id``."""
    def _fill(game_id, count, first_id=1):
        for user_id in range(first_id, first_id + count):
            result = engine.join_game(game_id, user_id, f"Player {user_id}")
            assert result.success, result.error_message
    return _fill


@pytest.fixture
def started_game(engine, fill_game):
    """Create, fill and start a game owned by ``OWNER_ID``; returns its state."""
    def _start(max_players=5, max_mafia=2, seed=7):
        created = engine.create_game(OWNER_ID, "Owner", max_players, max_mafia)
        assert created.success, created.error_message
        game_id = created.state.id
        fill_game(game_id, max_players)
        result = engine.start_game(game_id, OWNER_ID, seed=seed)
        assert result.success, result.error_message
        return result.state
    return _start
