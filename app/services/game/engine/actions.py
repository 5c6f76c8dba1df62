"""Game action types - explicit inputs separated from game state.

Player-facing actions come from the table (start, roll, reset). Phase actions
are issued by the turn coordinator when a scheduled delay elapses.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from app.schemas.game_engine import PlayerSetup


class StartGameAction(BaseModel):
    """Seat the players and start the first turn."""

    action_type: Literal["start_game"] = "start_game"
    players: list[PlayerSetup]


class RollAction(BaseModel):
    """Active player requests a roll; the value stays hidden until revealed."""

    action_type: Literal["roll"] = "roll"
    value: int = Field(..., ge=1, le=6, description="Dice roll value (1-6)")


class ResetGameAction(BaseModel):
    """Abandon the current game and return to setup."""

    action_type: Literal["reset_game"] = "reset_game"


class RevealRollAction(BaseModel):
    """Roll reveal delay elapsed."""

    action_type: Literal["reveal_roll"] = "reveal_roll"


class StepAction(BaseModel):
    """One movement tick for the active player."""

    action_type: Literal["step"] = "step"


class ApplyTransportAction(BaseModel):
    """Transport reveal delay elapsed; relocate the active player."""

    action_type: Literal["apply_transport"] = "apply_transport"


class ResolveTurnAction(BaseModel):
    """Check for a win, otherwise pass the turn on."""

    action_type: Literal["resolve_turn"] = "resolve_turn"


# Union type for all game actions
GameAction = Annotated[
    StartGameAction
    | RollAction
    | ResetGameAction
    | RevealRollAction
    | StepAction
    | ApplyTransportAction
    | ResolveTurnAction,
    Field(discriminator="action_type"),
]

PhaseAction = RevealRollAction | StepAction | ApplyTransportAction | ResolveTurnAction
