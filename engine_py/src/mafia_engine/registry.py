"""In-memory game registry.

Holds every live game by id and, for each user, the id of the game they own
or play in. Each game gets its own lock so that actions on one game are
serialized while different games proceed independently.

Lock order: game lock, then membership lock, then the index lock.
"""

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from .constants import GameStatus
from .models import GameState


class GameRegistry:
    def __init__(self):
        self.games: Dict[str, GameState] = {}
        self.user_games: Dict[int, str] = {}
        self.game_locks: Dict[str, threading.Lock] = {}
        self._index_lock = threading.Lock()
        self._membership_lock = threading.Lock()

    def lock(self, game_id: str) -> Optional[threading.Lock]:
        """Return the lock of a live game, or None once the game is gone."""
        with self._index_lock:
            return self.game_locks.get(game_id)

    @contextmanager
    def membership(self) -> Iterator[None]:
        """Hold while checking and changing which game a user belongs to."""
        with self._membership_lock:
            yield

    def new_game_id(self) -> str:
        while True:
            game_id = uuid.uuid4().hex[:10]
            if game_id not in self.games:
                return game_id

    def get_game(self, game_id: str) -> Optional[GameState]:
        return self.games.get(game_id)

    def add_game(self, game: GameState) -> None:
        with self._index_lock:
            self.games[game.id] = game
            self.game_locks[game.id] = threading.Lock()
            self.user_games[game.owner_id] = game.id

    def remove_game(self, game_id: str) -> Optional[GameState]:
        """Drop a game along with its lock and every user mapping pointing at it."""
        with self._index_lock:
            game = self.games.pop(game_id, None)
            self.game_locks.pop(game_id, None)
            stale = [uid for uid, gid in self.user_games.items() if gid == game_id]
            for uid in stale:
                del self.user_games[uid]
            return game

    def game_id_for(self, user_id: int) -> Optional[str]:
        """The user's current game id; a mapping to a removed game counts as none."""
        game_id = self.user_games.get(user_id)
        if game_id is None or game_id not in self.games:
            return None
        return game_id

    def game_for(self, user_id: int) -> Optional[GameState]:
        game_id = self.game_id_for(user_id)
        return self.games.get(game_id) if game_id else None

    def active_game_for(self, user_id: int) -> Optional[GameState]:
        game = self.game_for(user_id)
        if game and game.status != GameStatus.ENDED:
            return game
        return None

    def assign_user(self, user_id: int, game_id: str) -> None:
        with self._index_lock:
            self.user_games[user_id] = game_id

    def release_user(self, user_id: int) -> None:
        with self._index_lock:
            self.user_games.pop(user_id, None)

    def __len__(self) -> int:
        return len(self.games)
