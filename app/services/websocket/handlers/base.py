"""Base types and helpers for WebSocket message handlers."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from app.schemas.ws import (
    ErrorPayload,
    GameStatePayload,
    MessageType,
    WSClientMessage,
    WSServerMessage,
)

if TYPE_CHECKING:
    from app.services.game.coordinator import TurnCoordinator
    from app.services.websocket.manager import ConnectionManager


T = TypeVar("T", bound=BaseModel)


@dataclass
class HandlerContext:
    """Context passed to each message handler."""

    connection_id: str
    message: WSClientMessage
    manager: "ConnectionManager"
    coordinator: "TurnCoordinator"


@dataclass
class HandlerResult:
    """Result returned by message handlers."""

    success: bool
    response: WSServerMessage | None = None


def validate_payload(
    payload: dict | None,
    schema: type[T],
    request_id: str | None,
    error_type: MessageType,
) -> tuple[T | None, HandlerResult | None]:
    """Validate payload against a Pydantic schema.

    Args:
        payload: The raw payload dict to validate.
        schema: The Pydantic model class to validate against.
        request_id: The request_id for error responses.
        error_type: The MessageType to use for error responses.

    Returns:
        Tuple of (validated_payload, error_result). One will be None.
    """
    try:
        validated = schema.model_validate(payload or {})
        return validated, None
    except ValidationError as e:
        return None, error_response(
            error_code="VALIDATION_ERROR",
            message=str(e),
            error_type=error_type,
            request_id=request_id,
        )


def error_response(
    error_code: str,
    message: str,
    error_type: MessageType,
    request_id: str | None = None,
) -> HandlerResult:
    """Build an error HandlerResult."""
    return HandlerResult(
        success=False,
        response=WSServerMessage(
            type=error_type,
            request_id=request_id,
            payload=ErrorPayload(
                error_code=error_code,
                message=message,
            ).model_dump(),
        ),
    )


def state_response(ctx: HandlerContext, accepted: bool) -> HandlerResult:
    """Answer a game request with the session as it stands afterwards.

    A request the engine ignored is still a successful exchange; the flag
    tells the client nothing changed.
    """
    return HandlerResult(
        success=True,
        response=WSServerMessage(
            type=MessageType.GAME_STATE,
            request_id=ctx.message.request_id,
            payload=GameStatePayload(
                accepted=accepted,
                state=ctx.coordinator.snapshot(),
            ).model_dump(),
        ),
    )
