import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from app.config import get_settings
from app.dependencies.game import Coordinator
from app.schemas.ws import (
    ErrorPayload,
    MessageType,
    WSClientMessage,
    WSServerMessage,
)
from app.services.websocket.handlers import HandlerContext, dispatch
from app.services.websocket.manager import get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


def _error(error_code: str, message: str) -> WSServerMessage:
    return WSServerMessage(
        type=MessageType.ERROR,
        payload=ErrorPayload(error_code=error_code, message=message).model_dump(),
    )


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, coordinator: Coordinator):
    """WebSocket endpoint for watching and driving the table.

    Clients connect with: ws://host/api/v1/ws

    On connection the server sends a 'connected' message with the current
    session. Every accepted transition is then broadcast to all clients as
    'game_events' followed by 'game_state'.
    """
    settings = get_settings()
    max_message_size = settings.WS_MAX_MESSAGE_SIZE

    await websocket.accept()

    manager = get_connection_manager()
    manager.watch(coordinator)
    connection = await manager.connect(websocket, coordinator.snapshot())

    try:
        while True:
            # Check if connection is still open
            if websocket.client_state != WebSocketState.CONNECTED:
                logger.debug("WebSocket no longer connected, exiting loop")
                break

            message_data = await websocket.receive()

            # Handle disconnect message
            if message_data.get("type") == "websocket.disconnect":
                break

            raw_text = message_data.get("text")
            raw_bytes = message_data.get("bytes")

            if raw_text:
                message_size = len(raw_text.encode("utf-8"))
            elif raw_bytes:
                message_size = len(raw_bytes)
            else:
                continue

            # Check message size limit
            if message_size > max_message_size:
                logger.warning(
                    "Message too large from connection %s: %d bytes (max %d)",
                    connection.connection_id,
                    message_size,
                    max_message_size,
                )
                await manager.send_to_connection(
                    connection.connection_id,
                    _error(
                        "MESSAGE_TOO_LARGE",
                        f"Message exceeds maximum size of {max_message_size} bytes",
                    ),
                )
                continue

            # Parse JSON from raw text
            if not raw_text:
                continue

            try:
                data = json.loads(raw_text)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from connection %s", connection.connection_id)
                await manager.send_to_connection(
                    connection.connection_id,
                    _error("INVALID_JSON", "Invalid JSON format"),
                )
                continue

            # Parse and validate message
            try:
                message = WSClientMessage.model_validate(data)
            except ValidationError as e:
                logger.warning(
                    "Invalid message from connection %s: %s",
                    connection.connection_id,
                    e,
                )
                await manager.send_to_connection(
                    connection.connection_id,
                    _error("INVALID_MESSAGE", "Invalid message format"),
                )
                continue

            ctx = HandlerContext(
                connection_id=connection.connection_id,
                message=message,
                manager=manager,
                coordinator=coordinator,
            )

            result = await dispatch(ctx)
            if result.response:
                await manager.send_to_connection(connection.connection_id, result.response)

    except WebSocketDisconnect as e:
        logger.info(
            "WS disconnected: connection %s, code %s",
            connection.connection_id,
            e.code,
        )
    except Exception as e:
        logger.error(
            "WS error for connection %s: %s",
            connection.connection_id,
            e,
        )
    finally:
        await manager.disconnect(connection.connection_id)
