"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    START_GAME = "start_game"
    DASHBOARD = "dashboard"
    REVEAL = "reveal"
    REVEAL_ALL = "reveal_all"
    ELIMINATE_CONFIRM = "eliminate_confirm"
    ELIMINATE = "eliminate"
    CANCEL = "cancel"
    ABORT_GAME = "abort_game"
    HELP = "help"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    MESSAGE = "message"
    IMAGE = "image"
    DELETE = "delete"
    DASHBOARD = "dashboard"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    ALREADY_IN_GAME = "ALREADY_IN_GAME"
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    OWNER_CANNOT_JOIN = "OWNER_CANNOT_JOIN"
    GAME_ENDED = "GAME_ENDED"
    GAME_FULL = "GAME_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    INVALID_CONFIG = "INVALID_CONFIG"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class GameEvent(BaseEvent):
    """Event aimed at a game; defaults to the sender's current game."""
    game_id: Optional[str] = Field(default=None, min_length=1, max_length=50)


class CreateGameEvent(BaseEvent):
    """Create game event. Omitted sizes fall back to the defaults."""
    type: EventType = EventType.CREATE_GAME
    max_players: Optional[int] = Field(default=None, ge=1)
    max_mafia: Optional[int] = Field(default=None, ge=0)


class JoinGameEvent(BaseEvent):
    """Join game event, sent from a join link or by game id."""
    type: EventType = EventType.JOIN_GAME
    game_id: str = Field(..., min_length=1, max_length=50)


class StartGameEvent(GameEvent):
    type: EventType = EventType.START_GAME


class DashboardEvent(GameEvent):
    type: EventType = EventType.DASHBOARD


class RevealEvent(GameEvent):
    type: EventType = EventType.REVEAL
    player_id: int


class RevealAllEvent(GameEvent):
    type: EventType = EventType.REVEAL_ALL


class EliminateConfirmEvent(GameEvent):
    type: EventType = EventType.ELIMINATE_CONFIRM
    player_id: int


class EliminateEvent(GameEvent):
    type: EventType = EventType.ELIMINATE
    player_id: int


class CancelEvent(GameEvent):
    type: EventType = EventType.CANCEL


class AbortGameEvent(GameEvent):
    type: EventType = EventType.ABORT_GAME


class HelpEvent(BaseEvent):
    type: EventType = EventType.HELP


# Union type for all inbound events
InboundEvent = Union[
    CreateGameEvent,
    JoinGameEvent,
    StartGameEvent,
    DashboardEvent,
    RevealEvent,
    RevealAllEvent,
    EliminateConfirmEvent,
    EliminateEvent,
    CancelEvent,
    AbortGameEvent,
    HelpEvent,
]


# Outbound event models
class MessageEvent(BaseModel):
    """Text message delivered to a user."""
    type: OutboundEventType = OutboundEventType.MESSAGE
    message_id: int
    text: str
    timestamp: float


class ImageEvent(BaseModel):
    """Image with caption delivered to a user."""
    type: OutboundEventType = OutboundEventType.IMAGE
    message_id: int
    image: str
    caption: str
    timestamp: float


class DeleteEvent(BaseModel):
    """Retraction of a previously delivered message."""
    type: OutboundEventType = OutboundEventType.DELETE
    message_id: int
    timestamp: float


class DashboardStateEvent(BaseModel):
    """Owner dashboard."""
    type: OutboundEventType = OutboundEventType.DASHBOARD
    text: str
    view: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


# Union type for all outbound events
OutboundEvent = Union[
    MessageEvent,
    ImageEvent,
    DeleteEvent,
    DashboardStateEvent,
    ErrorEvent,
]


EVENT_MAP = {
    EventType.CREATE_GAME: CreateGameEvent,
    EventType.JOIN_GAME: JoinGameEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.DASHBOARD: DashboardEvent,
    EventType.REVEAL: RevealEvent,
    EventType.REVEAL_ALL: RevealAllEvent,
    EventType.ELIMINATE_CONFIRM: EliminateConfirmEvent,
    EventType.ELIMINATE: EliminateEvent,
    EventType.CANCEL: CancelEvent,
    EventType.ABORT_GAME: AbortGameEvent,
    EventType.HELP: HelpEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MAP.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_message_event(message_id: int, text: str) -> MessageEvent:
    return MessageEvent(message_id=message_id, text=text, timestamp=time.time())


def create_image_event(message_id: int, image: str, caption: str) -> ImageEvent:
    return ImageEvent(message_id=message_id, image=image, caption=caption, timestamp=time.time())


def create_delete_event(message_id: int) -> DeleteEvent:
    return DeleteEvent(message_id=message_id, timestamp=time.time())


def create_dashboard_event(text: str, view: Dict[str, Any]) -> DashboardStateEvent:
    """Create a dashboard event."""
    return DashboardStateEvent(text=text, view=view, timestamp=time.time())
