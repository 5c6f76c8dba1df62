"""Handlers for table messages: start, roll, reset and ping."""

import logging

from app.schemas.ws import MessageType, PongPayload, StartGamePayload, WSServerMessage
from app.services.game.start_game import validate_game_settings

from . import handler
from .base import (
    HandlerContext,
    HandlerResult,
    error_response,
    state_response,
    validate_payload,
)

logger = logging.getLogger(__name__)


@handler(MessageType.START_GAME)
async def handle_start_game(ctx: HandlerContext) -> HandlerResult:
    """Handle START_GAME by validating the seated players and starting play.

    Setup problems (blank names, shared avatars, seat count) are reported as
    GAME_ERROR so the setup screen can show them inline.
    """
    payload, validation_error = validate_payload(
        ctx.message.payload,
        StartGamePayload,
        ctx.message.request_id,
        MessageType.GAME_ERROR,
    )
    if validation_error:
        return validation_error

    try:
        validate_game_settings(payload.players)
    except ValueError as e:
        logger.info("Start rejected for connection %s: %s", ctx.connection_id, e)
        return error_response(
            error_code="SETUP_INVALID",
            message=str(e),
            error_type=MessageType.GAME_ERROR,
            request_id=ctx.message.request_id,
        )

    accepted = ctx.coordinator.start_game(payload.players)
    logger.info(
        "Start game from connection %s: accepted=%s, players=%d",
        ctx.connection_id,
        accepted,
        len(payload.players),
    )
    return state_response(ctx, accepted)


@handler(MessageType.ROLL_DICE)
async def handle_roll_dice(ctx: HandlerContext) -> HandlerResult:
    """Handle ROLL_DICE; requests that arrive mid-turn are ignored."""
    accepted = ctx.coordinator.request_roll()
    logger.debug("Roll from connection %s: accepted=%s", ctx.connection_id, accepted)
    return state_response(ctx, accepted)


@handler(MessageType.RESET_GAME)
async def handle_reset_game(ctx: HandlerContext) -> HandlerResult:
    """Handle RESET_GAME by clearing the table back to setup."""
    accepted = ctx.coordinator.reset_game()
    logger.info("Reset from connection %s", ctx.connection_id)
    return state_response(ctx, accepted)


@handler(MessageType.PING)
async def handle_ping(ctx: HandlerContext) -> HandlerResult:
    """Handle PING by refreshing the heartbeat and reporting the table's position.

    A client whose last seen event seq is behind the pong's event_seq has
    missed broadcasts.
    """
    await ctx.manager.heartbeat(ctx.connection_id)
    session = ctx.coordinator.session

    logger.debug(
        "Ping from connection %s at event_seq=%d", ctx.connection_id, session.event_seq
    )
    return HandlerResult(
        success=True,
        response=WSServerMessage(
            type=MessageType.PONG,
            request_id=ctx.message.request_id,
            payload=PongPayload(
                event_seq=session.event_seq,
                status=session.status.value,
                phase=session.phase.value,
            ).model_dump(),
        ),
    )
