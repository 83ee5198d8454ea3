"""Game lifecycle: create, join, start, reveal, eliminate, end and abort."""

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .constants import (
    GameStatus, Faction, Role, ROLE_IMAGES, HELP_TEXT, OWNER_HELP_TEXT,
    MSG_ABORTED, MSG_ALL_REVEALED, MSG_CONFIRM_ELIMINATION, MSG_DASHBOARD_ENDED,
    MSG_ELIMINATED, MSG_GAME_CREATED, MSG_GAME_OVER, MSG_JOINED,
    MSG_PLAYER_JOINED, MSG_REVEAL_CAPTION, MSG_ROLES_ASSIGNED, MSG_YOUR_ROLE,
    join_link,
)
from .errors import (
    GameError, raise_error,
    ALREADY_IN_GAME, ALREADY_JOINED, GAME_ENDED, GAME_FULL, GAME_NOT_FOUND,
    INVALID_CONFIG, NOT_AUTHORIZED, NOT_ENOUGH_PLAYERS, OWNER_CANNOT_JOIN,
    PLAYER_NOT_FOUND,
)
from .models import GameState, MessageRef, Player
from .notifier import Notification
from .outcome import check_win_condition
from .registry import GameRegistry
from .rules import create_rules
from .serialization import dashboard_view, format_dashboard
from .shuffle import generate_roles, shuffle_items

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of an engine operation.

    On failure ``state`` is left untouched and ``error_code`` names one of the
    codes in ``errors``. On success ``notifications`` holds the messages the
    transport should deliver.
    """
    success: bool
    state: Optional[GameState] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    notifications: List[Notification] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, state: Optional[GameState], notifications=None, **data) -> 'ActionResult':
        return cls(True, state=state, notifications=list(notifications or []), data=data)

    @classmethod
    def failure(cls, error: GameError) -> 'ActionResult':
        return cls(False, error_code=error.code, error_message=error.message)


class MafiaEngine:
    def __init__(self, registry: Optional[GameRegistry] = None):
        self.registry = registry if registry is not None else GameRegistry()

    # ------------------------------------------------------------------ helpers

    @contextmanager
    def _locked_game(self, game_id: str) -> Iterator[GameState]:
        lock = self.registry.lock(game_id)
        if lock is None:
            raise_error(GAME_NOT_FOUND, "Game not found!")
        with lock:
            game = self.registry.get_game(game_id)
            if game is None:
                raise_error(GAME_NOT_FOUND, "Game not found!")
            yield game

    def _require_owner(self, game: GameState, actor_id: int) -> None:
        if game.owner_id != actor_id:
            raise_error(NOT_AUTHORIZED, "Not authorized!")

    def _require_active(self, game: GameState) -> None:
        if game.status == GameStatus.ENDED:
            raise_error(GAME_ENDED, "Game has ended!")
        if game.status != GameStatus.ACTIVE:
            raise_error(NOT_AUTHORIZED, "Game has not started yet!")

    def _require_player(self, game: GameState, player_id: int) -> Player:
        player = game.get_player(player_id)
        if player is None:
            raise_error(PLAYER_NOT_FOUND, "Player not found!")
        return player

    def _validate_config(self, max_players: Optional[int], max_mafia: Optional[int]):
        try:
            return create_rules(max_players=max_players, max_mafia=max_mafia)
        except ValueError as e:
            raise GameError(INVALID_CONFIG, f"Invalid game settings: {e}") from e

    def _retract_last_reveal(self, game: GameState) -> List[Notification]:
        if game.last_reveal is None:
            return []
        ref, game.last_reveal = game.last_reveal, None
        return [Notification.delete(ref)]

    def _end_game(self, game: GameState, winner: Faction) -> List[Notification]:
        game.status = GameStatus.ENDED
        roles = "\n".join(
            f"{p.name}: {p.role}" for p in game.players if p.role != Role.CIVILIAN
        )
        summary = MSG_GAME_OVER.format(winner=winner, roles=roles)
        logger.info(f"Game {game.id} ended, {winner} win")
        notifications = [Notification.message(game.owner_id, summary)]
        notifications.extend(Notification.message(p.id, summary) for p in game.players)
        return notifications

    # --------------------------------------------------------------- lookups

    def get_game(self, game_id: str) -> Optional[GameState]:
        return self.registry.get_game(game_id)

    def current_game_id(self, user_id: int) -> Optional[str]:
        return self.registry.game_id_for(user_id)

    def help_for(self, user_id: int) -> str:
        game = self.registry.game_for(user_id)
        if game is not None and game.owner_id == user_id:
            return HELP_TEXT + "\n" + OWNER_HELP_TEXT
        return HELP_TEXT

    # ------------------------------------------------------------ lifecycle

    def create_game(self, owner_id: int, owner_name: str, max_players: Optional[int] = None,
                    max_mafia: Optional[int] = None) -> ActionResult:
        """Create a game in the waiting phase, owned by ``owner_id``."""
        try:
            with self.registry.membership():
                if self.registry.active_game_for(owner_id) is not None:
                    raise_error(ALREADY_IN_GAME, "You are already in an active game!")
                config = self._validate_config(max_players, max_mafia)

                # mapping left behind by an ended game
                self.registry.release_user(owner_id)
                game = GameState(
                    id=self.registry.new_game_id(),
                    owner_id=owner_id,
                    owner_name=owner_name,
                    max_players=config.max_players,
                    max_mafia=config.max_mafia,
                )
                self.registry.add_game(game)
        except GameError as e:
            return ActionResult.failure(e)

        link = join_link(game.id)
        logger.info(f"Game {game.id} created by {owner_id} ({game.max_players} players, {game.max_mafia} mafia)")
        created = MSG_GAME_CREATED.format(
            game_id=game.id, max_players=game.max_players, max_mafia=game.max_mafia, link=link
        )
        return ActionResult.ok(
            game,
            [Notification.message(owner_id, created), Notification.message(owner_id, OWNER_HELP_TEXT)],
            join_link=link,
        )

    def join_game(self, game_id: str, user_id: int, user_name: str) -> ActionResult:
        try:
            with self._locked_game(game_id) as game:
                if game.owner_id == user_id:
                    raise_error(OWNER_CANNOT_JOIN, "Game owner cannot join their own game!")
                if game.status == GameStatus.ENDED:
                    raise_error(GAME_ENDED, "Cannot join an ended game!")
                if game.is_full:
                    raise_error(GAME_FULL, "Game full!")
                if game.has_player(user_id):
                    raise_error(ALREADY_JOINED, "Already joined!")
                with self.registry.membership():
                    other = self.registry.active_game_for(user_id)
                    if other is not None and other.id != game.id:
                        raise_error(ALREADY_IN_GAME, "You are already in an active game!")

                    game.players.append(Player(id=user_id, name=user_name, order=len(game.players)))
                    game.version += 1
                    self.registry.assign_user(user_id, game.id)
                count = len(game.players)
        except GameError as e:
            return ActionResult.failure(e)

        logger.info(f"User {user_id} joined game {game_id} ({count}/{game.max_players})")
        return ActionResult.ok(game, [
            Notification.message(user_id, MSG_JOINED),
            Notification.message(game.owner_id, MSG_PLAYER_JOINED.format(
                name=user_name, count=count, max_players=game.max_players)),
        ])

    def start_game(self, game_id: str, actor_id: int, seed: Optional[int] = None) -> ActionResult:
        """Assign roles and reseat the players. Only possible once, from waiting."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                if game.status != GameStatus.WAITING:
                    raise_error(NOT_AUTHORIZED, "Game already started!")
                if len(game.players) != game.max_players:
                    raise_error(NOT_ENOUGH_PLAYERS,
                                f"Need {game.max_players} players (excluding owner) to start!")
                self._validate_config(game.max_players, game.max_mafia)

                rng = random.Random(seed) if seed is not None else None
                roles = generate_roles(game.max_players, game.max_mafia, rng=rng)
                seated = shuffle_items(game.players, rng=rng)
                for order, (player, role) in enumerate(zip(seated, roles), start=1):
                    player.role = role
                    player.order = order
                    player.revealed = False
                game.players = seated
                game.status = GameStatus.ACTIVE
                game.version += 1
        except GameError as e:
            return ActionResult.failure(e)

        logger.info(f"Game {game_id} started, roles assigned to {len(game.players)} players")
        return ActionResult.ok(game, [Notification.message(game.owner_id, MSG_ROLES_ASSIGNED)])

    def reveal_player(self, game_id: str, actor_id: int, target_id: int) -> ActionResult:
        """Show one player's role to the owner and send it to the player."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                self._require_active(game)
                player = self._require_player(game, target_id)
                if player.role is None:
                    raise_error(PLAYER_NOT_FOUND, "Player has no role yet!")

                player.revealed = True
                game.version += 1
                image = ROLE_IMAGES[player.role]
                notifications = self._retract_last_reveal(game)
                notifications.append(Notification.photo(
                    game.owner_id, image,
                    MSG_REVEAL_CAPTION.format(name=player.name, role=player.role),
                    track_reveal=True,
                ))
                notifications.append(Notification.photo(
                    player.id, image, MSG_YOUR_ROLE.format(role=player.role)))
        except GameError as e:
            return ActionResult.failure(e)

        return ActionResult.ok(game, notifications, player_id=player.id, role=player.role)

    def reveal_all_players(self, game_id: str, actor_id: int) -> ActionResult:
        """Send every player who has not seen their role yet their role."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                self._require_active(game)
                batch = game.unrevealed_players
                if not batch:
                    return ActionResult.ok(game, revealed=[])

                notifications = self._retract_last_reveal(game)
                for player in batch:
                    player.revealed = True
                    notifications.append(Notification.photo(
                        player.id, ROLE_IMAGES[player.role], MSG_YOUR_ROLE.format(role=player.role)))
                notifications.append(Notification.message(game.owner_id, MSG_ALL_REVEALED))
                game.version += 1
        except GameError as e:
            return ActionResult.failure(e)

        logger.info(f"Game {game_id}: revealed {len(batch)} roles")
        return ActionResult.ok(game, notifications, revealed=[p.id for p in batch])

    def request_elimination(self, game_id: str, actor_id: int, target_id: int) -> ActionResult:
        """Ask the owner to confirm an elimination. Changes nothing."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                self._require_active(game)
                player = self._require_player(game, target_id)
                if not player.is_alive:
                    raise_error(PLAYER_NOT_FOUND, "Player is already eliminated!")
        except GameError as e:
            return ActionResult.failure(e)

        prompt = MSG_CONFIRM_ELIMINATION.format(name=player.name)
        return ActionResult.ok(game, [Notification.message(game.owner_id, prompt)],
                               player_id=player.id, name=player.name)

    def eliminate_player(self, game_id: str, actor_id: int, target_id: int) -> ActionResult:
        """Eliminate a player, ending the game if a faction has won."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                self._require_active(game)
                player = self._require_player(game, target_id)
                if not player.is_alive:
                    raise_error(PLAYER_NOT_FOUND, "Player is already eliminated!")

                player.is_alive = False
                game.version += 1
                notifications = [Notification.message(game.owner_id, MSG_ELIMINATED.format(name=player.name))]
                winner = check_win_condition(game.players)
                if winner is not None:
                    notifications.extend(self._end_game(game, winner))
        except GameError as e:
            return ActionResult.failure(e)

        logger.info(f"Game {game_id}: player {target_id} eliminated")
        return ActionResult.ok(game, notifications, player_id=player.id, winner=winner)

    def abort_game(self, game_id: str, actor_id: int) -> ActionResult:
        """Remove a game and release its owner and players."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                self.registry.remove_game(game.id)
        except GameError as e:
            return ActionResult.failure(e)

        logger.info(f"Game {game_id} aborted by {actor_id}")
        notifications = [Notification.message(game.owner_id, MSG_ABORTED)]
        notifications.extend(Notification.message(p.id, MSG_ABORTED) for p in game.players)
        return ActionResult.ok(game, notifications)

    def get_dashboard_view(self, game_id: str, actor_id: int) -> ActionResult:
        """Owner's dashboard. Opening it retracts the last role reveal."""
        try:
            with self._locked_game(game_id) as game:
                self._require_owner(game, actor_id)
                notifications = self._retract_last_reveal(game)
                view = dashboard_view(game)
                text = MSG_DASHBOARD_ENDED if game.status == GameStatus.ENDED else format_dashboard(game)
        except GameError as e:
            return ActionResult.failure(e)

        return ActionResult.ok(game, notifications, view=view, text=text)

    def record_last_reveal(self, game_id: str, ref: Optional[MessageRef]) -> ActionResult:
        """Remember the owner-facing reveal message so it can be retracted later."""
        try:
            with self._locked_game(game_id) as game:
                game.last_reveal = ref
        except GameError as e:
            return ActionResult.failure(e)
        return ActionResult.ok(game)
