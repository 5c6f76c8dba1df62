from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, computed_field

BOARD_SIZE = 100
START_POSITION = 1


# Overall game status
class GameStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    GAME_OVER = "GAME_OVER"


# Turn engine phases
class TurnPhase(str, Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    STEPPING = "stepping"
    RESOLVING_TRANSPORT = "resolving_transport"
    TURN_RESOLUTION = "turn_resolution"
    FINISHED = "finished"


# Phases during which a turn is underway and roll requests are dropped
MOVING_PHASES = frozenset(
    {
        TurnPhase.ROLLING,
        TurnPhase.STEPPING,
        TurnPhase.RESOLVING_TRANSPORT,
        TurnPhase.TURN_RESOLUTION,
    }
)


# Data models for game entities
# Defined by the setup screen before the game starts
class PlayerSetup(BaseModel):
    id: int
    name: str
    color: str
    avatar_ref: str


class Player(PlayerSetup):
    position: int = Field(START_POSITION, ge=1, le=BOARD_SIZE)
    steps_to_move: int = Field(0, ge=0)
    move_direction: Literal[1, -1] = 1


# Game session for broadcasting and game flow
class GameSession(BaseModel):
    """Authoritative state of the single table.

    Only the turn engine produces new sessions; observers read snapshots.
    """

    status: GameStatus = GameStatus.NOT_STARTED
    phase: TurnPhase = TurnPhase.IDLE
    players: list[Player] = []
    current_player_index: int = 0
    winner: Player | None = None
    dice_value: int = Field(1, ge=1, le=6)
    message: str = "Setup your game to start."
    turn_number: int = 0

    # Rolled value while the dice are still in flight
    pending_roll: int | None = Field(None, ge=1, le=6, exclude=True)
    # Transport taken during the current turn, cleared on resolution
    transport_from: int | None = None
    transport_to: int | None = None

    event_seq: int = 0  # Next sequence number for events (monotonically increasing)

    @computed_field
    @property
    def is_rolling(self) -> bool:
        return self.phase == TurnPhase.ROLLING

    @computed_field
    @property
    def is_moving(self) -> bool:
        return self.phase in MOVING_PHASES

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_player_index]
