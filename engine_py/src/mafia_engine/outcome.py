"""Win condition evaluation."""

from typing import Iterable, Optional

from .constants import Faction
from .models import Player


def count_alive(players: Iterable[Player]):
    """Return (mafia, town) counts among alive players."""
    mafia = town = 0
    for player in players:
        if not player.is_alive:
            continue
        if player.is_mafia:
            mafia += 1
        else:
            town += 1
    return mafia, town


def check_win_condition(players: Iterable[Player]) -> Optional[Faction]:
    """
    Decide whether the game is over.

    Town wins once no mafia is alive. Mafia wins as soon as it is at least
    as numerous as the town, so parity goes to the mafia.
    """
    mafia, town = count_alive(players)
    if mafia == 0:
        return Faction.TOWN
    if mafia >= town:
        return Faction.MAFIA
    return None
