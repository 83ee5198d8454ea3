"""
State serialization for the owner's dashboard.
"""

from typing import Any, Dict, List

from .constants import (
    ACTION_ELIMINATE, ACTION_REVEAL, ACTION_REVEAL_ALL, ACTION_START,
    GameStatus,
)
from .models import GameState, Player


def roles_visible(state: GameState) -> bool:
    """Roles are listed once every player knows theirs, or the game is over."""
    if state.status == GameStatus.ENDED:
        return True
    return state.status == GameStatus.ACTIVE and not state.unrevealed_players


def available_actions(state: GameState) -> List[Dict[str, Any]]:
    """
    Actions the owner may take next.

    Eliminations are only offered after every role has been revealed.
    """
    if state.status == GameStatus.WAITING:
        return [{"action": ACTION_START, "label": "🚀 Start Game"}]
    if state.status == GameStatus.ENDED:
        return []

    if state.unrevealed_players:
        actions = [{"action": ACTION_REVEAL_ALL, "label": "🔓 Reveal All"}]
        for player in state.players:
            actions.append({
                "action": ACTION_REVEAL,
                "player_id": player.id,
                "label": f"🎭 Reveal {player.order}. {player.name}",
            })
        return actions

    return [
        {
            "action": ACTION_ELIMINATE,
            "player_id": player.id,
            "label": f"❌ Eliminate {player.order}. {player.name}",
        }
        for player in state.players
        if player.is_alive
    ]


def serialize_player(player: Player, show_role: bool) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "order": player.order,
        "is_alive": player.is_alive,
        "revealed": player.revealed,
        "role": player.role.value if show_role and player.role else None,
    }


def dashboard_view(state: GameState) -> Dict[str, Any]:
    """Build the owner's view of a game."""
    show_roles = roles_visible(state)
    return {
        "game_id": state.id,
        "status": state.status.value,
        "version": state.version,
        "player_count": len(state.players),
        "max_players": state.max_players,
        "max_mafia": state.max_mafia,
        "available_actions": available_actions(state),
        "players": [serialize_player(p, show_roles) for p in state.players],
    }


def format_dashboard(state: GameState) -> str:
    """Plain text rendering of the dashboard."""
    text = f"📋 Game Dashboard (Status: {state.status.value})"
    if state.status == GameStatus.WAITING:
        text += f"\nPlayers: {len(state.players)}/{state.max_players}"
    if roles_visible(state) and state.status == GameStatus.ACTIVE:
        text += "\n\nPlayers with Roles:"
        for p in state.players:
            text += f"\n{p.order}. {p.name} - {p.role} {'💚' if p.is_alive else '💀'}"
    return text
