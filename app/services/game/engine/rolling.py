"""Dice roll processing logic."""

import logging
import random

logger = logging.getLogger(__name__)

from app.schemas.game_engine import GameSession, TurnPhase

from .events import AnyGameEvent, DiceRolled, RollStarted
from .movement import replace_player
from .validation import ProcessResult


def roll_die() -> int:
    """Roll a fair six-sided die."""
    return random.randint(1, 6)


def get_next_player_index(current_index: int, num_players: int) -> int:
    """Calculate the next player's index (0-indexed, wrapping)."""
    next_index = (current_index + 1) % num_players
    logger.debug(
        "Turn order calculation: current=%d, num_players=%d, next=%d",
        current_index,
        num_players,
        next_index,
    )
    return next_index


def process_roll(state: GameSession, roll_value: int) -> ProcessResult:
    """Put the dice in flight for the active player.

    The value is kept on the session but hidden from observers until the
    reveal delay elapses.
    """
    player = state.current_player
    if player is None:
        logger.error("process_roll called with no players seated")
        return ProcessResult.failure("NO_ACTIVE_PLAYER", "No active player")

    logger.info("Processing roll: player=%s, turn=%d", player.name, state.turn_number)
    logger.debug("Roll in flight: player=%s, value=%d", player.name, roll_value)

    events: list[AnyGameEvent] = [RollStarted(player_id=player.id)]
    new_state = state.model_copy(
        update={
            "phase": TurnPhase.ROLLING,
            "pending_roll": roll_value,
            "message": f"{player.name} is rolling...",
        }
    )
    return ProcessResult.ok(new_state, events)


def process_reveal(state: GameSession) -> ProcessResult:
    """Reveal the rolled value and hand the steps to the active player only."""
    player = state.current_player
    roll_value = state.pending_roll
    if player is None or roll_value is None:
        logger.error("process_reveal called without a roll in flight")
        return ProcessResult.failure("NO_ROLL_IN_FLIGHT", "No roll in flight")

    logger.info("Roll revealed: player=%s, value=%d", player.name, roll_value)

    moving_player = player.model_copy(
        update={"steps_to_move": roll_value, "move_direction": 1}
    )
    new_state = state.model_copy(
        update={
            "phase": TurnPhase.STEPPING,
            "players": replace_player(
                state.players, state.current_player_index, moving_player
            ),
            "dice_value": roll_value,
            "pending_roll": None,
            "message": f"{player.name} rolled a {roll_value}!",
        }
    )
    return ProcessResult.ok(new_state, [DiceRolled(player_id=player.id, value=roll_value)])
