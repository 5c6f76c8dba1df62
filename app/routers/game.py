"""REST endpoints for the table."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from app.config import get_settings
from app.dependencies.game import Coordinator
from app.schemas.table import (
    ActionResponse,
    SessionResponse,
    SetupDefaultsResponse,
    StartGameRequest,
)
from app.services.game.start_game import (
    PLAYER_COLORS,
    default_player_setups,
    validate_game_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["game"])


@router.get("", response_model=SessionResponse)
async def get_session(coordinator: Coordinator):
    """Return the current session snapshot."""
    return coordinator.snapshot()


@router.get("/setup", response_model=SetupDefaultsResponse)
async def get_setup_defaults(
    num_players: int = Query(2, description="Number of seats to prefill"),
):
    """Return default names and colours for the setup screen."""
    settings = get_settings()
    if not settings.MIN_PLAYERS <= num_players <= settings.MAX_PLAYERS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"num_players must be between {settings.MIN_PLAYERS} and {settings.MAX_PLAYERS}",
        )
    return SetupDefaultsResponse(
        players=default_player_setups(num_players),
        colors=PLAYER_COLORS[:num_players],
    )


@router.post("/start", response_model=ActionResponse)
async def start_game(coordinator: Coordinator, request: StartGameRequest):
    """Start a game with the seated players.

    Raises:
        HTTPException 422: If the setup is invalid (blank name, shared avatar,
            seat count out of range).
    """
    logger.info("POST /game/start - players: %d", len(request.players))
    try:
        validate_game_settings(request.players)
    except ValueError as e:
        logger.info("Start rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    accepted = coordinator.start_game(request.players)
    return ActionResponse(accepted=accepted, session=coordinator.snapshot())


@router.post("/roll", response_model=ActionResponse)
async def roll_dice(coordinator: Coordinator):
    """Roll for the active player; ignored while a turn is underway."""
    accepted = coordinator.request_roll()
    logger.debug("POST /game/roll - accepted: %s", accepted)
    return ActionResponse(accepted=accepted, session=coordinator.snapshot())


@router.post("/reset", response_model=ActionResponse)
async def reset_game(coordinator: Coordinator):
    """Cancel any turn in progress and return to setup."""
    logger.info("POST /game/reset")
    accepted = coordinator.reset_game()
    return ActionResponse(accepted=accepted, session=coordinator.snapshot())
