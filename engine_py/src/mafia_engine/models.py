"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import GameStatus, Role, is_mafia


@dataclass
class Player:
    id: int
    name: str  # captured at join time, never re-synced
    order: int
    role: Optional[Role] = None  # set once, when the game starts
    is_alive: bool = True
    revealed: bool = False

    @property
    def is_mafia(self) -> bool:
        return is_mafia(self.role)


@dataclass(frozen=True)
class MessageRef:
    """A message delivered by the transport, kept so it can be retracted."""
    chat_id: int
    message_id: int


@dataclass
class GameState:
    id: str
    owner_id: int
    owner_name: str
    max_players: int
    max_mafia: int
    status: GameStatus = GameStatus.WAITING
    players: List[Player] = field(default_factory=list)  # join order until roles are assigned
    last_reveal: Optional[MessageRef] = None
    version: int = 0

    def get_player(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def has_player(self, player_id: int) -> bool:
        return self.get_player(player_id) is not None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    @property
    def unrevealed_players(self) -> List[Player]:
        return [p for p in self.players if not p.revealed]

    @property
    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.is_alive]
