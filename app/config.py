import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App config
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEBUG: bool = False

    # Turn timing (milliseconds)
    ROLL_REVEAL_DELAY_MS: int = 1000
    STEP_DELAY_MS: int = 300
    TRANSPORT_REVEAL_DELAY_MS: int = 800
    TURN_HANDOFF_DELAY_MS: int = 500

    # Table setup
    MIN_PLAYERS: int = 2
    MAX_PLAYERS: int = 10

    # WebSocket config
    WS_MAX_MESSAGE_SIZE: int = 64 * 1024

    @field_validator(
        "ROLL_REVEAL_DELAY_MS",
        "STEP_DELAY_MS",
        "TRANSPORT_REVEAL_DELAY_MS",
        "TURN_HANDOFF_DELAY_MS",
    )
    @classmethod
    def validate_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Delays cannot be negative")
        return v

    @field_validator("MIN_PLAYERS")
    @classmethod
    def validate_min_players(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MIN_PLAYERS must be at least 1")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from the server and its websocket stack
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug(
        "Turn timing (ms): roll=%d, step=%d, transport=%d, handoff=%d",
        settings.ROLL_REVEAL_DELAY_MS,
        settings.STEP_DELAY_MS,
        settings.TRANSPORT_REVEAL_DELAY_MS,
        settings.TURN_HANDOFF_DELAY_MS,
    )
    return settings
