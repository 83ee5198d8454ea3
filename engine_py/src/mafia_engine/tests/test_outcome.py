"""
Tests for the win condition.
"""

from mafia_engine.constants import Faction, Role
from mafia_engine.models import Player
from mafia_engine.outcome import check_win_condition, count_alive


def make_players(mafia_alive=0, town_alive=0, mafia_dead=0, town_dead=0):
    players = []
    specs = (
        [(Role.MAFIA, True)] * mafia_alive
        + [(Role.CIVILIAN, True)] * town_alive
        + [(Role.MAFIA, False)] * mafia_dead
        + [(Role.CIVILIAN, False)] * town_dead
    )
    for i, (role, alive) in enumerate(specs, start=1):
        players.append(Player(id=i, name=f"P{i}", order=i, role=role, is_alive=alive))
    return players


def test_mafia_wins_at_parity():
    assert check_win_condition(make_players(mafia_alive=2, town_alive=2)) == Faction.MAFIA


def test_mafia_wins_with_majority():
    assert check_win_condition(make_players(mafia_alive=3, town_alive=1)) == Faction.MAFIA


def test_town_wins_when_no_mafia_alive():
    assert check_win_condition(make_players(town_alive=3, mafia_dead=2)) == Faction.TOWN


def test_no_winner_yet():
    assert check_win_condition(make_players(mafia_alive=1, town_alive=5)) is None


def test_don_counts_as_mafia():
    players = [
        Player(id=1, name="Don", order=1, role=Role.DON),
        Player(id=2, name="Sheriff", order=2, role=Role.SHERIFF),
    ]
    assert check_win_condition(players) == Faction.MAFIA


def test_dead_players_are_ignored():
    players = make_players(mafia_alive=1, town_alive=2, town_dead=4)
    assert count_alive(players) == (1, 2)
    assert check_win_condition(players) is None
