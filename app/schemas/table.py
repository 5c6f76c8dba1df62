"""Pydantic schemas for the table REST endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.game_engine import GameSession, PlayerSetup


class StartGameRequest(BaseModel):
    """Request body for starting a game."""

    players: list[PlayerSetup] = Field(..., description="Seated players in turn order")


class ActionResponse(BaseModel):
    """Response from a table action.

    accepted is False when the engine ignored the request (for example a
    roll while the previous one is still in flight).
    """

    accepted: bool
    session: dict[str, Any]


class SetupDefaultsResponse(BaseModel):
    """Defaults for the setup screen."""

    players: list[PlayerSetup]
    colors: list[str]


class SessionResponse(GameSession):
    """Full session snapshot as served to clients."""
