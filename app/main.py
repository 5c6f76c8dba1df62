import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import game, ws
from app.services.game.coordinator import get_coordinator
from app.services.websocket.manager import get_connection_manager

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Snakes & Ladders API")
    logger.debug("Debug mode: %s", settings.DEBUG)

    yield

    # Shutdown: drop the pending turn timer, then close all connections
    logger.info("Shutting down Snakes & Ladders API")
    get_coordinator().cancel_pending()
    connection_manager = get_connection_manager()
    await connection_manager.stop_broadcast_task()
    await connection_manager.close_all_connections()
    logger.info("Turn timers and WebSocket cleanup complete")


app = FastAPI(
    title="Snakes & Ladders API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.debug("CORS configured with origins: %s", settings.CORS_ORIGINS)

app.include_router(game.router, prefix="/api/v1")
app.include_router(ws.router, prefix="/api/v1")
logger.debug("Routers registered: /api/v1/game, /api/v1/ws")


@app.get("/")
def root():
    return {"message": "Snakes & Ladders API"}


@app.get("/health")
def health():
    return {"status": "healthy"}
