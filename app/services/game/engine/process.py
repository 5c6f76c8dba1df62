"""Main entry point for game action processing.

This module provides the primary interface for processing game actions:
- process_action(): Validates and processes any game action
- Dispatches to specialized handlers based on action type
- Returns ProcessResult with new state and events
"""

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

from app.schemas.game_engine import (
    BOARD_SIZE,
    GameSession,
    GameStatus,
    Player,
    PlayerSetup,
    TurnPhase,
)

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
from .board import TRANSPORTS
from .events import AnyGameEvent, GameEnded, GameReset, GameStarted, TurnEnded, TurnStarted
from .movement import process_step
from .rolling import get_next_player_index, process_reveal, process_roll
from .transport import process_apply_transport
from .validation import ProcessResult, validate_action


def process_action(
    state: GameSession,
    action: GameAction,
    transports: Mapping[int, int] = TRANSPORTS,
) -> ProcessResult:
    """Process a game action and return the result.

    This is the main entry point for all game actions. It:
    1. Validates the action against the current phase
    2. Dispatches to the appropriate handler
    3. Assigns sequence numbers to events
    4. Returns ProcessResult with new state and events

    The input session is never mutated.

    Args:
        state: Current game session.
        action: The action to process.
        transports: Transport table to resolve landings against.

    Returns:
        ProcessResult containing:
        - success: Whether the action was accepted
        - state: The new game session (if accepted)
        - events: List of events that occurred (with seq numbers)
        - error_code/error_message: Why the action was dropped

    Example:
        >>> result = process_action(session, RollAction(value=4))
        >>> if result.success:
        ...     session = result.state
        ...     for event in result.events:
        ...         broadcast(event)  # event.seq is set
    """
    action_type = type(action).__name__
    logger.debug(
        "Processing action: type=%s, status=%s, phase=%s",
        action_type,
        state.status.value,
        state.phase.value,
    )

    validation = validate_action(state, action)
    if not validation.is_valid:
        return ProcessResult.failure(
            validation.error_code or "VALIDATION_ERROR",
            validation.error_message or "Invalid action",
        )

    if isinstance(action, StartGameAction):
        result = process_start_game(state, action.players)

    elif isinstance(action, RollAction):
        result = process_roll(state, action.value)

    elif isinstance(action, RevealRollAction):
        result = process_reveal(state)

    elif isinstance(action, StepAction):
        result = process_step(state, transports)

    elif isinstance(action, ApplyTransportAction):
        result = process_apply_transport(state)

    elif isinstance(action, ResolveTurnAction):
        result = process_resolve_turn(state)

    elif isinstance(action, ResetGameAction):
        result = process_reset(state)

    else:
        logger.error("Unknown action type received: %s", action_type)
        return ProcessResult.failure(
            "UNKNOWN_ACTION",
            f"Unknown action type: {action_type}",
        )

    if result.success and result.state is not None:
        result = _assign_event_sequences(result)
        logger.debug(
            "Action processed: type=%s, phase=%s, events=%s",
            action_type,
            result.state.phase.value,
            [type(e).__name__ for e in result.events],
        )
    else:
        logger.warning(
            "Action processing failed: type=%s, error=%s",
            action_type,
            result.error_code,
        )

    return result


def _assign_event_sequences(result: ProcessResult) -> ProcessResult:
    """Assign monotonically increasing sequence numbers to events.

    Updates each event's seq field and increments the state's event_seq counter.
    """
    if result.state is None or not result.events:
        return result

    current_seq = result.state.event_seq
    for event in result.events:
        event.seq = current_seq
        current_seq += 1

    new_state = result.state.model_copy(update={"event_seq": current_seq})

    return ProcessResult.ok(new_state, result.events)


def process_start_game(state: GameSession, setups: list[PlayerSetup]) -> ProcessResult:
    """Transition the table from NOT_STARTED to IN_PROGRESS.

    Every player starts on cell 1 and the first seat rolls first.
    """
    logger.info("Starting game with %d players", len(setups))

    players = [Player(**setup.model_dump()) for setup in setups]
    first = players[0]

    events: list[AnyGameEvent] = [
        GameStarted(
            player_order=[p.id for p in players],
            first_player_id=first.id,
        ),
        TurnStarted(player_id=first.id, turn_number=1),
    ]

    new_state = state.model_copy(
        update={
            "status": GameStatus.IN_PROGRESS,
            "phase": TurnPhase.IDLE,
            "players": players,
            "current_player_index": 0,
            "winner": None,
            "turn_number": 1,
            "pending_roll": None,
            "transport_from": None,
            "transport_to": None,
            "message": f"{first.name}'s turn to roll!",
        }
    )

    logger.info("Game started: player_order=%s", [p.name for p in players])
    return ProcessResult.ok(new_state, events)


def check_win_condition(state: GameSession) -> Player | None:
    """Return the active player if their resolved cell is the last one."""
    player = state.current_player
    if player is not None and player.position == BOARD_SIZE:
        logger.info("Winner detected: player=%s", player.name)
        return player
    return None


def process_resolve_turn(state: GameSession) -> ProcessResult:
    """End the game on a win, otherwise pass the dice to the next seat."""
    player = state.current_player
    if player is None:
        logger.error("process_resolve_turn called with no players seated")
        return ProcessResult.failure("NO_ACTIVE_PLAYER", "No active player")

    events: list[AnyGameEvent] = []
    cleared = {"transport_from": None, "transport_to": None}

    winner = check_win_condition(state)
    if winner is not None:
        events.append(GameEnded(winner_id=winner.id, turn_number=state.turn_number))
        new_state = state.model_copy(
            update={
                **cleared,
                "status": GameStatus.GAME_OVER,
                "phase": TurnPhase.FINISHED,
                "winner": winner,
                "message": f"Congratulations, {winner.name} Wins!",
            }
        )
        logger.info("Game over: winner=%s after %d turns", winner.name, state.turn_number)
        return ProcessResult.ok(new_state, events)

    next_index = get_next_player_index(state.current_player_index, len(state.players))
    next_player = state.players[next_index]
    turn_number = state.turn_number + 1

    events.append(
        TurnEnded(
            player_id=player.id,
            final_position=player.position,
            next_player_id=next_player.id,
        )
    )
    events.append(TurnStarted(player_id=next_player.id, turn_number=turn_number))

    new_state = state.model_copy(
        update={
            **cleared,
            "phase": TurnPhase.IDLE,
            "current_player_index": next_index,
            "turn_number": turn_number,
            "message": f"{next_player.name}'s turn to roll.",
        }
    )
    logger.info(
        "Turn ended: player=%s, position=%d, next_player=%s",
        player.name,
        player.position,
        next_player.name,
    )
    return ProcessResult.ok(new_state, events)


def process_reset(state: GameSession) -> ProcessResult:
    """Clear the table back to setup, keeping the event sequence running."""
    logger.info(
        "Resetting game: status=%s, players=%d", state.status.value, len(state.players)
    )
    new_state = GameSession(event_seq=state.event_seq)
    return ProcessResult.ok(new_state, [GameReset()])
