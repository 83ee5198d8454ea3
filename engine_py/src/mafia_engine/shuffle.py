"""
Shuffling and role generation utilities.
"""

import random
from typing import List, Optional, Sequence, TypeVar

from .constants import Role

T = TypeVar("T")


def shuffle_items(items: Sequence[T], seed: Optional[int] = None,
                  rng: Optional[random.Random] = None) -> List[T]:
    """
    Shuffle a sequence, deterministically if a seed is provided.

    Args:
        items: Items to shuffle (left untouched)
        seed: Optional seed for deterministic shuffling
        rng: Optional random generator, takes precedence over seed

    Returns:
        Shuffled copy of the items
    """
    items_copy = list(items)

    if rng is None and seed is not None:
        rng = random.Random(seed)

    if rng is not None:
        rng.shuffle(items_copy)
    else:
        # Use system random
        random.shuffle(items_copy)

    return items_copy


def create_role_pool(player_count: int, mafia_count: int) -> List[Role]:
    """
    Build the unshuffled role list for a game.

    One Don, ``mafia_count - 1`` Mafia, a Sheriff and a Doctor, padded with
    Civilians up to ``player_count``. When the counts leave no room for the
    Sheriff and Doctor the list comes out longer than ``player_count``.
    """
    roles = [Role.DON]
    roles.extend([Role.MAFIA] * max(mafia_count - 1, 0))
    roles.extend([Role.SHERIFF, Role.DOCTOR])
    while len(roles) < player_count:
        roles.append(Role.CIVILIAN)
    return roles


def generate_roles(player_count: int, mafia_count: int, seed: Optional[int] = None,
                   rng: Optional[random.Random] = None) -> List[Role]:
    """Create the role pool and shuffle it."""
    return shuffle_items(create_role_pool(player_count, mafia_count), seed=seed, rng=rng)
