"""Game engine module - pure functional turn logic.

This module provides the core turn engine with:
- Action types for table inputs and phase transitions
- Event types for observer broadcasts
- ProcessResult pattern for dropped actions
- Modular processing logic (rolling, movement, transport)

Usage:
    from app.services.game.engine import (
        process_action,
        RollAction,
        StepAction,
    )

    result = process_action(session, RollAction(value=4))

    if result.success:
        session = result.state
        events = result.events  # Broadcast these to observers
    else:
        # Guard failed - the session is unchanged
        logger.debug("Dropped: %s", result.error_code)
"""

# Actions - table inputs and phase transitions
from .actions import (
    ApplyTransportAction,
    GameAction,
    PhaseAction,
    ResetGameAction,
    ResolveTurnAction,
    RevealRollAction,
    RollAction,
    StartGameAction,
    StepAction,
)

# Board
from .board import TRANSPORTS, is_ladder, is_snake, transport_destination

# Events - for observer broadcasts
from .events import (
    AnyGameEvent,
    DiceRolled,
    GameEnded,
    GameEvent,
    GameReset,
    GameStarted,
    PlayerStepped,
    PlayerTransported,
    RollStarted,
    TransportFound,
    TurnEnded,
    TurnStarted,
)

# Movement
from .movement import step_player

# Main processing
from .process import check_win_condition, process_action
from .rolling import roll_die

# Result types
from .validation import ProcessResult, ValidationResult, validate_action

__all__ = [
    # Actions
    "GameAction",
    "PhaseAction",
    "StartGameAction",
    "RollAction",
    "ResetGameAction",
    "RevealRollAction",
    "StepAction",
    "ApplyTransportAction",
    "ResolveTurnAction",
    # Board
    "TRANSPORTS",
    "is_ladder",
    "is_snake",
    "transport_destination",
    # Events
    "GameEvent",
    "AnyGameEvent",
    "GameStarted",
    "TurnStarted",
    "RollStarted",
    "DiceRolled",
    "PlayerStepped",
    "TransportFound",
    "PlayerTransported",
    "TurnEnded",
    "GameEnded",
    "GameReset",
    # Processing
    "process_action",
    "check_win_condition",
    "step_player",
    "roll_die",
    # Validation
    "ProcessResult",
    "ValidationResult",
    "validate_action",
]
