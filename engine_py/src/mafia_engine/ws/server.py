"""
FastAPI WebSocket server for the Mafia game.

Each connection stands for one chat user, identified by the numeric id in
the URL. The server turns inbound events into engine calls and delivers the
resulting notifications to whoever is connected.
"""

import logging
from typing import Dict, Optional

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..constants import MSG_ELIMINATION_CANCELLED, START_HINT
from ..engine import ActionResult, MafiaEngine
from ..models import MessageRef
from ..notifier import dispatch
from .events import (
    parse_inbound_event, create_error_event, create_message_event,
    create_image_event, create_delete_event, create_dashboard_event,
    ErrorCode, OutboundEvent, CreateGameEvent, JoinGameEvent, StartGameEvent,
    DashboardEvent, RevealEvent, RevealAllEvent, EliminateConfirmEvent,
    EliminateEvent, CancelEvent, AbortGameEvent, HelpEvent,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Mafia Game Engine", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state
engine = MafiaEngine()


class RecipientUnavailable(Exception):
    """The recipient has no open connection."""


class ConnectionManager:
    """Manages WebSocket connections and delivers notifications to users."""

    def __init__(self):
        self.connections: Dict[int, WebSocket] = {}
        self._last_message_id = 0

    def connect(self, websocket: WebSocket, user_id: int):
        """Register a user's connection, replacing any older one."""
        self.connections[user_id] = websocket
        logger.info(f"User {user_id} connected")

    def disconnect(self, websocket: WebSocket, user_id: int):
        if self.connections.get(user_id) is websocket:
            del self.connections[user_id]
            logger.info(f"User {user_id} disconnected")

    def _next_message_id(self) -> int:
        self._last_message_id += 1
        return self._last_message_id

    async def _send(self, recipient: int, event: OutboundEvent):
        websocket = self.connections.get(recipient)
        if websocket is None:
            raise RecipientUnavailable(f"User {recipient} is not connected")
        await websocket.send_text(event.model_dump_json())

    async def send_text(self, recipient: int, text: str) -> MessageRef:
        message_id = self._next_message_id()
        await self._send(recipient, create_message_event(message_id, text))
        return MessageRef(chat_id=recipient, message_id=message_id)

    async def send_image(self, recipient: int, image: str, caption: str) -> MessageRef:
        message_id = self._next_message_id()
        await self._send(recipient, create_image_event(message_id, image, caption))
        return MessageRef(chat_id=recipient, message_id=message_id)

    async def delete_message(self, ref: MessageRef) -> None:
        await self._send(ref.chat_id, create_delete_event(ref.message_id))

    async def send_dashboard(self, recipient: int, text: str, view: Dict):
        await self._send(recipient, create_dashboard_event(text, view))

    async def send_error(self, recipient: int, code: ErrorCode, message: str):
        await self._send(recipient, create_error_event(code, message))


manager = ConnectionManager()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "games": len(engine.registry),
        "connections": len(manager.connections),
    }


@app.websocket("/ws/{user_id}")
async def websocket_endpoint(websocket: WebSocket, user_id: int, name: Optional[str] = None):
    """Main WebSocket endpoint."""
    await websocket.accept()
    manager.connect(websocket, user_id)

    try:
        await manager.send_text(user_id, START_HINT)

        while True:
            raw_data = await websocket.receive_text()

            try:
                event = parse_inbound_event(orjson.loads(raw_data))
            except ValueError as e:
                # Invalid event
                await manager.send_error(user_id, ErrorCode.INVALID_EVENT, str(e))
                continue

            try:
                await handle_event(user_id, name, event)
            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.error(f"Error handling event from {user_id}: {e}")
                await manager.send_error(user_id, ErrorCode.INTERNAL, "Internal server error")

    except WebSocketDisconnect:
        logger.info(f"WebSocket for user {user_id} closed")
    finally:
        manager.disconnect(websocket, user_id)


async def respond(user_id: int, result: ActionResult) -> bool:
    """Deliver an engine result: its notifications, or an error to the sender."""
    if not result.success:
        await manager.send_error(user_id, ErrorCode(result.error_code), result.error_message)
        return False

    tracked = await dispatch(manager, result.notifications)
    if tracked is not None:
        engine.record_last_reveal(result.state.id, tracked)
    return True


def resolve_game_id(user_id: int, event) -> Optional[str]:
    return event.game_id or engine.current_game_id(user_id)


async def handle_event(user_id: int, name: Optional[str], event) -> bool:
    """Handle an inbound event."""

    if isinstance(event, HelpEvent):
        await manager.send_text(user_id, engine.help_for(user_id))
        return True
    if isinstance(event, CreateGameEvent):
        result = engine.create_game(user_id, name or "admin", event.max_players, event.max_mafia)
        return await respond(user_id, result)
    if isinstance(event, JoinGameEvent):
        return await respond(user_id, engine.join_game(event.game_id, user_id, name or "Player"))

    game_id = resolve_game_id(user_id, event)
    if game_id is None:
        await manager.send_error(user_id, ErrorCode.GAME_NOT_FOUND, "No game found!")
        return False

    if isinstance(event, StartGameEvent):
        return await respond(user_id, engine.start_game(game_id, user_id))
    elif isinstance(event, DashboardEvent):
        result = engine.get_dashboard_view(game_id, user_id)
        if not await respond(user_id, result):
            return False
        await manager.send_dashboard(user_id, result.data["text"], result.data["view"])
        return True
    elif isinstance(event, RevealEvent):
        return await respond(user_id, engine.reveal_player(game_id, user_id, event.player_id))
    elif isinstance(event, RevealAllEvent):
        return await respond(user_id, engine.reveal_all_players(game_id, user_id))
    elif isinstance(event, EliminateConfirmEvent):
        return await respond(user_id, engine.request_elimination(game_id, user_id, event.player_id))
    elif isinstance(event, EliminateEvent):
        return await respond(user_id, engine.eliminate_player(game_id, user_id, event.player_id))
    elif isinstance(event, CancelEvent):
        await manager.send_text(user_id, MSG_ELIMINATION_CANCELLED)
        return True
    elif isinstance(event, AbortGameEvent):
        return await respond(user_id, engine.abort_game(game_id, user_id))
    else:
        raise ValueError(f"Unhandled event type: {type(event)}")
