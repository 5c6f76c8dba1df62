"""Single-cell movement of the active player, including the bounce at 100."""

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

from app.schemas.game_engine import BOARD_SIZE, GameSession, Player

from .board import TRANSPORTS
from .events import AnyGameEvent, PlayerStepped
from .validation import ProcessResult


def replace_player(players: list[Player], index: int, player: Player) -> list[Player]:
    """Return a copy of players with the record at index swapped out."""
    return [player if i == index else p for i, p in enumerate(players)]


def step_player(player: Player) -> tuple[Player, bool]:
    """Advance a player by one cell in their current direction.

    Overshooting the last cell puts the player on 99 and reverses the
    direction for every remaining step. A player with no steps left is
    returned unchanged.

    Returns:
        The updated player and whether this tick bounced.
    """
    if player.steps_to_move <= 0:
        return player, False

    direction = player.move_direction
    new_position = player.position + direction
    bounced = False

    if new_position > BOARD_SIZE:
        new_position = BOARD_SIZE - 1
        direction = -1
        bounced = True

    updated = player.model_copy(
        update={
            "position": new_position,
            "steps_to_move": player.steps_to_move - 1,
            "move_direction": direction,
        }
    )
    return updated, bounced


def process_step(
    state: GameSession, transports: Mapping[int, int] = TRANSPORTS
) -> ProcessResult:
    """Apply one movement tick to the active player.

    When the last step lands, the resting cell is handed to the transport
    resolver in the same transition.
    """
    # Imported here to avoid circular imports
    from .transport import resolve_landing

    player = state.current_player
    if player is None:
        logger.error("process_step called with no players seated")
        return ProcessResult.failure("NO_ACTIVE_PLAYER", "No active player")

    moved, bounced = step_player(player)
    logger.debug(
        "Step: player=%s, %d -> %d, remaining=%d, bounced=%s",
        player.name,
        player.position,
        moved.position,
        moved.steps_to_move,
        bounced,
    )

    events: list[AnyGameEvent] = [
        PlayerStepped(
            player_id=player.id,
            from_position=player.position,
            to_position=moved.position,
            steps_remaining=moved.steps_to_move,
            bounced=bounced,
        )
    ]
    if bounced:
        logger.info("Player %s overshot %d and bounced back", player.name, BOARD_SIZE)

    new_state = state.model_copy(
        update={
            "players": replace_player(state.players, state.current_player_index, moved)
        }
    )

    if moved.steps_to_move > 0:
        return ProcessResult.ok(new_state, events)

    landed = resolve_landing(new_state, transports)
    return ProcessResult.ok(landed.state, events + landed.events)
