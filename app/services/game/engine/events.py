"""Game event types - emitted during state transitions for observer broadcasts.

Events describe what happened during a transition, enabling:
- Efficient WebSocket updates (only send what changed)
- Frontend animations (pawn steps, dice reveal, transport jumps)
- Audit logging
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from .board import TransportKind


class GameEvent(BaseModel):
    """Base class for all game events."""

    event_type: str
    seq: int = 0  # Sequence number assigned during processing


class GameStarted(GameEvent):
    """Game has transitioned from NOT_STARTED to IN_PROGRESS."""

    event_type: Literal["game_started"] = "game_started"
    player_order: list[int] = Field(..., description="Player IDs in turn order")
    first_player_id: int


class TurnStarted(GameEvent):
    """A new turn has begun."""

    event_type: Literal["turn_started"] = "turn_started"
    player_id: int
    turn_number: int


class RollStarted(GameEvent):
    """Dice are in flight; the value is not known to observers yet."""

    event_type: Literal["roll_started"] = "roll_started"
    player_id: int


class DiceRolled(GameEvent):
    """The dice value was revealed."""

    event_type: Literal["dice_rolled"] = "dice_rolled"
    player_id: int
    value: int = Field(..., ge=1, le=6)


class PlayerStepped(GameEvent):
    """The active player moved a single cell."""

    event_type: Literal["player_stepped"] = "player_stepped"
    player_id: int
    from_position: int
    to_position: int
    steps_remaining: int
    bounced: bool = Field(
        ..., description="True if this tick overshot 100 and reversed direction"
    )


class TransportFound(GameEvent):
    """The player came to rest on a ladder or snake."""

    event_type: Literal["transport_found"] = "transport_found"
    player_id: int
    kind: TransportKind
    from_position: int
    to_position: int


class PlayerTransported(GameEvent):
    """The player was relocated by a ladder or snake."""

    event_type: Literal["player_transported"] = "player_transported"
    player_id: int
    from_position: int
    to_position: int


class TurnEnded(GameEvent):
    """A player's turn has ended without a win."""

    event_type: Literal["turn_ended"] = "turn_ended"
    player_id: int
    final_position: int
    next_player_id: int


class GameEnded(GameEvent):
    """A player reached cell 100."""

    event_type: Literal["game_ended"] = "game_ended"
    winner_id: int
    turn_number: int


class GameReset(GameEvent):
    """The table was cleared back to setup."""

    event_type: Literal["game_reset"] = "game_reset"


# Union of all event types for type checking
AnyGameEvent = Annotated[
    GameStarted
    | TurnStarted
    | RollStarted
    | DiceRolled
    | PlayerStepped
    | TransportFound
    | PlayerTransported
    | TurnEnded
    | GameEnded
    | GameReset,
    Field(discriminator="event_type"),
]
