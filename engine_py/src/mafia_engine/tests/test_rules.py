"""
Tests for game size configuration.
"""

import pytest
from pydantic import ValidationError

from mafia_engine.constants import DEFAULT_MAFIA_COUNT, DEFAULT_PLAYERS_COUNT
from mafia_engine.rules import GameConfig, create_rules, default_rules


def test_default_rules():
    assert default_rules.max_players == DEFAULT_PLAYERS_COUNT
    assert default_rules.max_mafia == DEFAULT_MAFIA_COUNT


def test_create_rules_overrides():
    config = create_rules(max_players=6, max_mafia=2)
    assert config.max_players == 6
    assert config.max_mafia == 2


def test_create_rules_ignores_missing_values():
    config = create_rules(max_players=None, max_mafia=None)
    assert config == default_rules


def test_smallest_game():
    config = GameConfig(max_players=3, max_mafia=1)
    assert config.max_mafia + 2 == config.max_players


@pytest.mark.parametrize("max_players,max_mafia", [(3, 2), (5, 4), (5, 0), (2, 1)])
def test_invalid_sizes(max_players, max_mafia):
    with pytest.raises(ValidationError):
        GameConfig(max_players=max_players, max_mafia=max_mafia)
