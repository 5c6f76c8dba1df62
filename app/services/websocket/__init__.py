from app.services.websocket.handlers import HandlerContext, HandlerResult, dispatch, handler
from app.services.websocket.manager import ConnectionManager, get_connection_manager

__all__ = [
    "ConnectionManager",
    "HandlerContext",
    "HandlerResult",
    "dispatch",
    "get_connection_manager",
    "handler",
]
