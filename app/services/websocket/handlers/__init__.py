"""WebSocket handlers for the table, keyed by client message type."""

import logging
from collections.abc import Awaitable, Callable

from app.schemas.ws import MessageType

from .base import HandlerContext, HandlerResult, error_response

logger = logging.getLogger(__name__)

HandlerFunc = Callable[[HandlerContext], Awaitable[HandlerResult]]

_handlers: dict[MessageType, HandlerFunc] = {}


def handler(message_type: MessageType) -> Callable[[HandlerFunc], HandlerFunc]:
    """Register the handler for a client message type.

    Each type has exactly one handler; registering a second one is a
    programming error.
    """

    def decorator(func: HandlerFunc) -> HandlerFunc:
        if message_type in _handlers:
            raise ValueError(f"Handler for {message_type.value} already registered")
        _handlers[message_type] = func
        return func

    return decorator


def handled_message_types() -> frozenset[MessageType]:
    return frozenset(_handlers)


async def dispatch(ctx: HandlerContext) -> HandlerResult:
    """Run the handler for ctx.message.

    Server-only types (pong, game_state, ...) and anything else without a
    handler are answered with UNSUPPORTED_MESSAGE to the sender only.
    """
    message_type = ctx.message.type
    handler_func = _handlers.get(message_type)
    if handler_func is None:
        logger.debug(
            "Unhandled message type %s from connection %s",
            message_type.value,
            ctx.connection_id,
        )
        return error_response(
            error_code="UNSUPPORTED_MESSAGE",
            message=f"Cannot handle '{message_type.value}'",
            error_type=MessageType.ERROR,
            request_id=ctx.message.request_id,
        )

    return await handler_func(ctx)


# Registers the table handlers
from . import game  # noqa: E402, F401

__all__ = [
    "HandlerContext",
    "HandlerResult",
    "dispatch",
    "handled_message_types",
    "handler",
]
