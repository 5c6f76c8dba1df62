import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import WebSocket

from app.schemas.game_engine import GameSession
from app.schemas.ws import (
    ConnectedPayload,
    GameEventsPayload,
    GameStatePayload,
    MessageType,
    WSCloseCode,
    WSServerMessage,
)
from app.services.game.coordinator import TurnCoordinator
from app.services.game.engine import AnyGameEvent

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """Represents an active WebSocket connection."""

    connection_id: str
    websocket: WebSocket
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_heartbeat: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionManager:
    """Manages the WebSocket connections watching the table.

    Session updates from the coordinator are queued and sent by a single
    broadcast task, so every client sees transitions in the order they
    happened.
    """

    def __init__(self):
        self._connections: dict[str, Connection] = {}
        # Coordinator -> unsubscribe callable; holding the coordinator keeps it alive
        self._subscriptions: dict[TurnCoordinator, Callable[[], None]] = {}

        self._queue: asyncio.Queue[WSServerMessage] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._broadcast_task: asyncio.Task | None = None

        logger.info("ConnectionManager initialized")

    def watch(self, coordinator: TurnCoordinator) -> None:
        """Subscribe to a coordinator's session updates (idempotent).

        Must be called from the event loop.
        """
        self._ensure_broadcast_task()
        if coordinator in self._subscriptions:
            return
        self._subscriptions[coordinator] = coordinator.subscribe(self.on_session_update)
        logger.info("Broadcasting session updates to WebSocket clients")

    def is_watching(self, coordinator: TurnCoordinator) -> bool:
        return coordinator in self._subscriptions

    def on_session_update(self, session: GameSession, events: list[AnyGameEvent]) -> None:
        """Coordinator observer: queue events and the new snapshot for broadcast."""
        if self._queue is None or self._loop is None:
            return

        messages = []
        if events:
            messages.append(
                WSServerMessage(
                    type=MessageType.GAME_EVENTS,
                    payload=GameEventsPayload(
                        events=[event.model_dump(mode="json") for event in events]
                    ).model_dump(),
                )
            )
        messages.append(
            WSServerMessage(
                type=MessageType.GAME_STATE,
                payload=GameStatePayload(state=session.model_dump(mode="json")).model_dump(),
            )
        )
        # Timer callbacks may run outside the loop in tests
        for message in messages:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, message)

    def _ensure_broadcast_task(self) -> None:
        if self._broadcast_task is not None:
            return

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        async def broadcast_loop():
            logger.info("Starting broadcast task")
            while True:
                try:
                    message = await self._queue.get()
                    await self.broadcast(message)
                except asyncio.CancelledError:
                    logger.info("Broadcast task cancelled")
                    break
                except Exception as e:
                    logger.error("Error in broadcast task: %s", e)

        self._broadcast_task = asyncio.create_task(broadcast_loop())

    async def stop_broadcast_task(self) -> None:
        """Stop the broadcast task and detach from coordinators."""
        for unsubscribe in self._subscriptions.values():
            unsubscribe()
        self._subscriptions.clear()

        if self._broadcast_task is not None:
            self._broadcast_task.cancel()
            try:
                await self._broadcast_task
            except asyncio.CancelledError:
                pass
            self._broadcast_task = None
            self._queue = None
            self._loop = None
            logger.info("Broadcast task stopped")

    async def connect(self, websocket: WebSocket, snapshot: dict) -> Connection:
        """Register a new WebSocket connection and send it the current session.

        Args:
            websocket: The accepted WebSocket instance.
            snapshot: Serialized session to send with the 'connected' message.

        Returns:
            The created Connection object.
        """
        connection_id = str(uuid.uuid4())
        connection = Connection(connection_id=connection_id, websocket=websocket)
        self._connections[connection_id] = connection

        logger.info("Connection %s established", connection_id)

        await self.send_to_connection(
            connection_id,
            WSServerMessage(
                type=MessageType.CONNECTED,
                payload=ConnectedPayload(
                    connection_id=connection_id,
                    state=snapshot,
                ).model_dump(),
            ),
        )

        return connection

    async def disconnect(self, connection_id: str) -> None:
        """Remove a WebSocket connection.

        Args:
            connection_id: The connection to remove.
        """
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            logger.debug("Connection %s not found for disconnect", connection_id)
            return
        logger.info("Connection %s disconnected", connection_id)

    async def heartbeat(self, connection_id: str) -> None:
        """Update the last heartbeat timestamp for a connection."""
        connection = self._connections.get(connection_id)
        if connection:
            connection.last_heartbeat = datetime.now(timezone.utc)
            logger.debug("Heartbeat updated for connection %s", connection_id)

    async def close_all_connections(self) -> None:
        """Close all active WebSocket connections gracefully."""
        logger.info("Closing all %d connections", len(self._connections))
        for conn_id in list(self._connections.keys()):
            connection = self._connections.get(conn_id)
            if connection:
                try:
                    await connection.websocket.close(code=WSCloseCode.GOING_AWAY)
                except Exception as e:
                    logger.debug("Error closing websocket %s: %s", conn_id, e)
            await self.disconnect(conn_id)

    async def send_to_connection(self, connection_id: str, message: WSServerMessage) -> bool:
        """Send a message to a specific connection.

        Returns:
            True if sent successfully, False otherwise.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            logger.debug("Connection %s not found for sending", connection_id)
            return False

        try:
            await connection.websocket.send_json(message.model_dump(mode="json", exclude_none=True))
            return True
        except Exception as e:
            logger.warning("Failed to send to connection %s: %s", connection_id, e)
            await self.disconnect(connection_id)
            return False

    async def broadcast(self, message: WSServerMessage) -> int:
        """Broadcast a message to all connections.

        Returns:
            Number of connections the message was sent to.
        """
        sent = 0
        for conn_id in list(self._connections.keys()):
            if await self.send_to_connection(conn_id, message):
                sent += 1
        return sent

    def get_connection(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def get_total_connection_count(self) -> int:
        return len(self._connections)


# Global manager instance (initialized in lifespan)
_connection_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the global ConnectionManager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager
