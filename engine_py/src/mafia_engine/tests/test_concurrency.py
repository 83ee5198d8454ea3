"""
Tests for the engine under concurrent calls.
"""

import threading

from mafia_engine.engine import MafiaEngine
from mafia_engine.errors import ALREADY_IN_GAME, GAME_NOT_FOUND
from mafia_engine.registry import GameRegistry

from conftest import OWNER_ID

USER_ID = 10


class RendezvousRegistry(GameRegistry):
    """Registry whose membership lookups for ``user_id`` wait for each other.

    Two callers that reach the lookup at the same time meet at the barrier.
    When lookups are serialized the first caller times out alone and the
    second finds the barrier broken, so neither blocks for good.
    """

    def __init__(self, user_id):
        super().__init__()
        self.user_id = user_id
        self.barrier = threading.Barrier(2)

    def active_game_for(self, user_id):
        if user_id == self.user_id:
            try:
                self.barrier.wait(timeout=0.5)
            except threading.BrokenBarrierError:
                pass
        return super().active_game_for(user_id)


def run_together(*calls):
    results = [None] * len(calls)

    def worker(index, call):
        results[index] = call()

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)
    return results


def test_concurrent_joins_into_two_games():
    """A user racing into two games ends up in exactly one of them."""
    engine = MafiaEngine(RendezvousRegistry(USER_ID))
    first = engine.create_game(1, "A", 3, 1).state
    second = engine.create_game(2, "B", 3, 1).state

    results = run_together(
        lambda: engine.join_game(first.id, USER_ID, "Ann"),
        lambda: engine.join_game(second.id, USER_ID, "Ann"),
    )

    assert sorted(r.success for r in results) == [False, True]
    assert [r.error_code for r in results if not r.success] == [ALREADY_IN_GAME]
    assert first.has_player(USER_ID) != second.has_player(USER_ID)
    joined = first if first.has_player(USER_ID) else second
    assert engine.current_game_id(USER_ID) == joined.id


def test_concurrent_create_and_join():
    """Creating a game and joining another at once leaves the user in one game."""
    engine = MafiaEngine(RendezvousRegistry(USER_ID))
    other = engine.create_game(OWNER_ID, "Olga", 3, 1).state

    created, joined = run_together(
        lambda: engine.create_game(USER_ID, "Ann", 3, 1),
        lambda: engine.join_game(other.id, USER_ID, "Ann"),
    )

    assert created.success != joined.success
    failed = joined if created.success else created
    assert failed.error_code == ALREADY_IN_GAME
    assert len(engine.registry) == (2 if created.success else 1)
    if created.success:
        assert not other.has_player(USER_ID)
        assert engine.current_game_id(USER_ID) == created.state.id
    else:
        assert engine.current_game_id(USER_ID) == other.id


def test_unknown_game_creates_no_lock(engine):
    assert engine.registry.lock("missing") is None
    assert engine.join_game("missing", 1, "Ann").error_code == GAME_NOT_FOUND
    assert "missing" not in engine.registry.game_locks


def test_aborted_game_leaves_no_lock(engine):
    game = engine.create_game(OWNER_ID, "Olga", 3, 1).state
    assert game.id in engine.registry.game_locks

    engine.abort_game(game.id, OWNER_ID)

    assert engine.join_game(game.id, 1, "Ann").error_code == GAME_NOT_FOUND
    assert engine.reveal_player(game.id, OWNER_ID, 1).error_code == GAME_NOT_FOUND
    assert game.id not in engine.registry.game_locks
    assert engine.registry.lock(game.id) is None
