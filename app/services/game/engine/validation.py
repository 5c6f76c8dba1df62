"""Validation layer for game actions and ProcessResult pattern.

Separates validation from processing logic:
- validate_action() checks the phase guard for an action
- ProcessResult replaces exceptions for control flow

A failed guard is not an error for the table: the coordinator drops the
action and the session stays exactly as it was.
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

from app.schemas.game_engine import GameSession, GameStatus, TurnPhase

from .actions import (
    ApplyTransportAction,
    GameAction,
    ResetGameAction,
    ResolveTurnAction,
    RevealRollAction,
    RollAction,
    StartGameAction,
    StepAction,
)
from .events import AnyGameEvent


@dataclass
class ProcessResult:
    """Result of processing a game action.

    Replaces exceptions for control flow, providing explicit success/failure
    with error codes for logging.
    """

    state: GameSession | None = None
    events: list[AnyGameEvent] = field(default_factory=list)
    success: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(
        cls,
        state: GameSession,
        events: list[AnyGameEvent] | None = None,
    ) -> "ProcessResult":
        """Create a successful result with new state and events."""
        return cls(
            state=state,
            events=events or [],
            success=True,
        )

    @classmethod
    def failure(cls, code: str, message: str) -> "ProcessResult":
        """Create a failure result with error details."""
        return cls(
            state=None,
            events=[],
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class ValidationResult:
    """Result of validating an action before processing."""

    is_valid: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: str, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


# Phase each coordinator-issued action is allowed to fire in
_PHASE_ACTION_GUARDS: dict[type, TurnPhase] = {
    RevealRollAction: TurnPhase.ROLLING,
    StepAction: TurnPhase.STEPPING,
    ApplyTransportAction: TurnPhase.RESOLVING_TRANSPORT,
    ResolveTurnAction: TurnPhase.TURN_RESOLUTION,
}


def validate_action(state: GameSession, action: GameAction) -> ValidationResult:
    """Validate an action against the current session.

    Checks:
    - Start is only possible from NOT_STARTED with at least one player
    - Rolls need an IN_PROGRESS game with the engine idle
    - Phase actions only fire in the phase that scheduled them

    Reset is always valid.

    Args:
        state: Current game session.
        action: The action to validate.

    Returns:
        ValidationResult indicating success or failure with error details.
    """
    action_type = type(action).__name__
    logger.debug(
        "Validating action: type=%s, status=%s, phase=%s",
        action_type,
        state.status.value,
        state.phase.value,
    )

    if isinstance(action, ResetGameAction):
        return ValidationResult.ok()

    if isinstance(action, StartGameAction):
        if state.status != GameStatus.NOT_STARTED:
            logger.debug(
                "Validation failed: GAME_ALREADY_STARTED, status=%s",
                state.status.value,
            )
            return ValidationResult.error(
                "GAME_ALREADY_STARTED",
                "Game has already started",
            )
        if not action.players:
            logger.debug("Validation failed: NO_PLAYERS")
            return ValidationResult.error(
                "NO_PLAYERS",
                "Cannot start a game without players",
            )
        return ValidationResult.ok()

    # For all other actions, game must be in progress
    if state.status == GameStatus.NOT_STARTED:
        logger.debug("Validation failed: GAME_NOT_STARTED")
        return ValidationResult.error(
            "GAME_NOT_STARTED",
            "Game has not started yet",
        )

    if state.status == GameStatus.GAME_OVER:
        logger.debug("Validation failed: GAME_OVER")
        return ValidationResult.error(
            "GAME_OVER",
            "Game has already finished",
        )

    if isinstance(action, RollAction):
        if state.phase != TurnPhase.IDLE:
            logger.debug(
                "Validation failed: TURN_IN_PROGRESS, phase=%s",
                state.phase.value,
            )
            return ValidationResult.error(
                "TURN_IN_PROGRESS",
                "Cannot roll dice - a turn is already underway",
            )
        return ValidationResult.ok()

    expected_phase = _PHASE_ACTION_GUARDS.get(type(action))
    if expected_phase is None:
        logger.error("Unknown action type received: %s", action_type)
        return ValidationResult.error(
            "UNKNOWN_ACTION",
            f"Unknown action type: {action_type}",
        )

    if state.phase != expected_phase:
        logger.debug(
            "Validation failed: PHASE_MISMATCH, action=%s, expected=%s, got=%s",
            action_type,
            expected_phase.value,
            state.phase.value,
        )
        return ValidationResult.error(
            "PHASE_MISMATCH",
            f"{action_type} is not expected during {state.phase.value}",
        )

    logger.debug("Action validated successfully: type=%s", action_type)
    return ValidationResult.ok()
