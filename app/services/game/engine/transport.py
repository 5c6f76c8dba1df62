"""Ladder and snake resolution once the active player comes to rest."""

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

from app.schemas.game_engine import BOARD_SIZE, GameSession, TurnPhase

from .board import TRANSPORTS, transport_destination, transport_kind
from .events import AnyGameEvent, PlayerTransported, TransportFound
from .movement import replace_player
from .validation import ProcessResult


def resolve_landing(
    state: GameSession, transports: Mapping[int, int] = TRANSPORTS
) -> ProcessResult:
    """Decide what follows once stepping is complete.

    Cell 100 goes straight to turn resolution without a table lookup.
    A transport cell announces itself and waits for relocation; any other
    cell is final.
    """
    player = state.current_player
    if player is None:
        return ProcessResult.failure("NO_ACTIVE_PLAYER", "No active player")

    position = player.position
    if position == BOARD_SIZE:
        logger.debug("Player %s landed on %d, skipping transport check", player.name, position)
        return ProcessResult.ok(state.model_copy(update={"phase": TurnPhase.TURN_RESOLUTION}))

    destination = transport_destination(position, transports)
    if destination is None:
        logger.debug("No transport at %d for player %s", position, player.name)
        return ProcessResult.ok(state.model_copy(update={"phase": TurnPhase.TURN_RESOLUTION}))

    kind = transport_kind(position, destination)
    logger.info(
        "Transport found: player=%s, kind=%s, %d -> %d",
        player.name,
        kind,
        position,
        destination,
    )
    events: list[AnyGameEvent] = [
        TransportFound(
            player_id=player.id,
            kind=kind,
            from_position=position,
            to_position=destination,
        )
    ]
    new_state = state.model_copy(
        update={
            "phase": TurnPhase.RESOLVING_TRANSPORT,
            "transport_from": position,
            "transport_to": destination,
            "message": f"{player.name} found a {kind}!",
        }
    )
    return ProcessResult.ok(new_state, events)


def process_apply_transport(state: GameSession) -> ProcessResult:
    """Relocate the active player to the announced destination.

    The destination is never looked up again, so chained transports do not
    apply within a turn.
    """
    player = state.current_player
    destination = state.transport_to
    if player is None or destination is None:
        logger.error("process_apply_transport called without a pending transport")
        return ProcessResult.failure("NO_PENDING_TRANSPORT", "No pending transport")

    logger.info(
        "Player %s transported: %d -> %d", player.name, player.position, destination
    )
    relocated = player.model_copy(update={"position": destination})
    new_state = state.model_copy(
        update={
            "phase": TurnPhase.TURN_RESOLUTION,
            "players": replace_player(
                state.players, state.current_player_index, relocated
            ),
        }
    )
    event = PlayerTransported(
        player_id=player.id,
        from_position=player.position,
        to_position=destination,
    )
    return ProcessResult.ok(new_state, [event])
