from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.game_engine import PlayerSetup


class MessageType(str, Enum):
    """WebSocket message types."""

    # Core
    PING = "ping"
    PONG = "pong"
    CONNECTED = "connected"
    ERROR = "error"

    # Game (client -> server)
    START_GAME = "start_game"
    ROLL_DICE = "roll_dice"
    RESET_GAME = "reset_game"

    # Game (server -> client)
    GAME_EVENTS = "game_events"
    GAME_STATE = "game_state"
    GAME_ERROR = "game_error"


class WSCloseCode:
    """WebSocket close codes (RFC 6455)."""

    NORMAL = 1000
    GOING_AWAY = 1001
    INTERNAL_ERROR = 1011


class WSClientMessage(BaseModel):
    """Message sent from client to server."""

    type: MessageType
    request_id: str | None = None
    payload: dict[str, Any] | None = None


class WSServerMessage(BaseModel):
    """Message sent from server to client."""

    type: MessageType
    request_id: str | None = None
    payload: dict[str, Any] | None = None


# --- Payload schemas ---


class ConnectedPayload(BaseModel):
    """Payload for the 'connected' message."""

    connection_id: str
    state: dict[str, Any]


class PongPayload(BaseModel):
    """Payload for the 'pong' message.

    Carries where the table stands so a client can tell whether it missed
    broadcasts and should resync from a full snapshot.
    """

    server_time: datetime = Field(default_factory=lambda: datetime.now())
    event_seq: int = Field(..., description="Next event sequence number on the table")
    status: str
    phase: str


class ErrorPayload(BaseModel):
    """Payload for error messages (ERROR, GAME_ERROR)."""

    error_code: str
    message: str


# --- Game payload schemas ---


class StartGamePayload(BaseModel):
    """Payload for START_GAME messages (and the HTTP start body)."""

    players: list[PlayerSetup] = Field(..., description="Seated players in turn order")


class GameEventsPayload(BaseModel):
    """Payload for GAME_EVENTS messages to clients.

    Events are broadcast to every connection for animation/UI updates.
    """

    events: list[dict[str, Any]] = Field(..., description="List of game events (serialized)")


class GameStatePayload(BaseModel):
    """Payload for GAME_STATE messages to clients.

    Contains the full session snapshot; clients re-render from it.
    """

    accepted: bool = Field(True, description="False if the request was ignored by the engine")
    state: dict[str, Any] = Field(..., description="Full game session (serialized)")
