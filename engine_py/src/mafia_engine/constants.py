"""Game constants and utilities"""

import os
from enum import Enum
from typing import Dict

DEFAULT_PLAYERS_COUNT = 11
DEFAULT_MAFIA_COUNT = 3


class Role(str, Enum):
    """Roles handed out at the start of a game. Values are display names."""
    DON = "Mafia Don"
    MAFIA = "Mafia"
    SHERIFF = "Sheriff"
    DOCTOR = "Doctor"
    CIVILIAN = "Civilian"

    def __str__(self) -> str:
        return self.value


class Faction(str, Enum):
    """Winning sides. Values are used in the end-of-game summary."""
    TOWN = "Civilians"
    MAFIA = "Mafia"

    def __str__(self) -> str:
        return self.value


class GameStatus(str, Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value


MAFIA_ROLES = frozenset({Role.DON, Role.MAFIA})


def is_mafia(role) -> bool:
    return role in MAFIA_ROLES


def faction_of(role: Role) -> Faction:
    return Faction.MAFIA if is_mafia(role) else Faction.TOWN


ROLE_IMAGE_BASE = os.getenv("ROLE_IMAGE_BASE", "assets")

ROLE_IMAGES: Dict[Role, str] = {
    Role.DON: f"{ROLE_IMAGE_BASE}/don.png",
    Role.MAFIA: f"{ROLE_IMAGE_BASE}/mafia.png",
    Role.SHERIFF: f"{ROLE_IMAGE_BASE}/sheriff.png",
    Role.DOCTOR: f"{ROLE_IMAGE_BASE}/doc.png",
    Role.CIVILIAN: f"{ROLE_IMAGE_BASE}/civilian.png",
}

BOT_USERNAME = os.getenv("BOT_USERNAME", "mafia_bot")
JOIN_LINK_BASE = os.getenv("JOIN_LINK_BASE", f"https://t.me/{BOT_USERNAME}?start=join_")


def join_link(game_id: str) -> str:
    return f"{JOIN_LINK_BASE}{game_id}"


# Dashboard actions
ACTION_START = "start_game"
ACTION_REVEAL = "reveal"
ACTION_REVEAL_ALL = "reveal_all"
ACTION_ELIMINATE = "eliminate"

# ===================== TEXT =====================

START_HINT = "Welcome to Mafia Game Bot! Send /help for commands and game rules."

HELP_TEXT = (
    "📖 Commands:\n"
    f"/creategame [players] [mafia] - create a new game (defaults {DEFAULT_PLAYERS_COUNT} players, "
    f"{DEFAULT_MAFIA_COUNT} mafia). You become the owner.\n"
    "/joingame <gameId> - join an existing game or use a join link.\n"
    "\nWhen enough players join, open /dashboard to begin. Roles are sent when the game starts.\n"
    "Mafia eliminate others while civilians try to expose them."
)

OWNER_HELP_TEXT = (
    "\nOwner Tips\n"
    "Single command to manage whole game:\n/dashboard\n"
    "\nAdvanced commands:\n"
    "/startgame - start the game manually\n"
    "/abortgame - cancel your current game"
)

MSG_GAME_CREATED = "🎮 Game created! Game ID: {game_id}\nMax Players: {max_players}\nMax Mafia: {max_mafia}\nJoin link: {link}"
MSG_JOINED = "✅ Joined successfully!"
MSG_PLAYER_JOINED = "🎯 {name} joined! ({count}/{max_players})"
MSG_ROLES_ASSIGNED = "🎲 Roles assigned. Use /dashboard to reveal roles and manage the game."
MSG_REVEAL_CAPTION = "🎭 {name} is {role}"
MSG_YOUR_ROLE = "🎭 Your role is {role}"
MSG_ALL_REVEALED = "🎭 All roles have been revealed."
MSG_CONFIRM_ELIMINATION = "⚠️ Confirm elimination of {name}?"
MSG_ELIMINATION_CANCELLED = "❎ Elimination cancelled."
MSG_ELIMINATED = "☠️ {name} has been eliminated."
MSG_GAME_OVER = "🏆 {winner} win!\n\n📜 Active Roles:\n{roles}"
MSG_ABORTED = "Game was aborted!"
MSG_DASHBOARD_ENDED = "⚠️ Game has ended."
