"""Tests for ladder and snake resolution.

Critical scenarios tested:
- Resting on a ladder or snake announces it before relocating
- Only one transport per turn, even when the destination is a source
- Landing exactly on 100 skips the table and wins
- A ladder that reaches 100 wins after the relocation
"""

from app.schemas.game_engine import GameStatus, TurnPhase
from app.services.game.engine import (
    ApplyTransportAction,
    ResolveTurnAction,
    RevealRollAction,
    RollAction,
    StepAction,
    process_action,
)
from app.services.game.engine.events import (
    GameEnded,
    PlayerTransported,
    TransportFound,
    TurnEnded,
)

from .conftest import create_session, drive_turn


def roll_and_step(state, roll, transports=None):
    """Roll and step until the engine leaves STEPPING."""
    kwargs = {} if transports is None else {"transports": transports}
    state = process_action(state, RollAction(value=roll), **kwargs).state
    state = process_action(state, RevealRollAction(), **kwargs).state
    events = []
    while state.phase == TurnPhase.STEPPING:
        result = process_action(state, StepAction(), **kwargs)
        state = result.state
        events.extend(result.events)
    return state, events


class TestLadders:
    """Climbing ladders."""

    def test_ladder_from_2_to_38(self):
        """Resting on 2 announces the ladder to 38."""
        state = create_session([1, 1])
        state, events = roll_and_step(state, 1)

        assert state.phase == TurnPhase.RESOLVING_TRANSPORT
        assert state.players[0].position == 2
        assert state.transport_from == 2
        assert state.transport_to == 38
        assert state.message == "Player 1 found a ladder!"

        found = [e for e in events if isinstance(e, TransportFound)]
        assert len(found) == 1
        assert found[0].kind == "ladder"
        assert found[0].from_position == 2
        assert found[0].to_position == 38

    def test_ladder_relocates_then_passes_turn(self):
        """The ladder moves the player to 38 and the turn passes."""
        state = create_session([1, 1])
        state, events = drive_turn(state, 1)

        assert state.players[0].position == 38
        assert state.current_player_index == 1
        assert state.phase == TurnPhase.IDLE
        assert state.transport_from is None
        assert state.transport_to is None

        transported = [e for e in events if isinstance(e, PlayerTransported)]
        assert [(e.from_position, e.to_position) for e in transported] == [(2, 38)]

    def test_player_stays_on_source_until_applied(self):
        """Resolution waits until the relocation is applied."""
        state = create_session([1, 1])
        state, _ = roll_and_step(state, 1)

        # Turn resolution must wait for the relocation
        result = process_action(state, ResolveTurnAction())
        assert not result.success
        assert result.error_code == "PHASE_MISMATCH"

        result = process_action(state, ApplyTransportAction())
        assert result.success
        assert result.state.players[0].position == 38
        assert result.state.phase == TurnPhase.TURN_RESOLUTION


class TestSnakes:
    """Sliding down snakes."""

    def test_snake_from_16_to_6(self):
        """Resting on 16 slides the player to 6."""
        state = create_session([14, 1])
        state, _ = roll_and_step(state, 2)

        assert state.message == "Player 1 found a snake!"
        state = process_action(state, ApplyTransportAction()).state
        assert state.players[0].position == 6

    def test_bounce_onto_snake_is_resolved(self):
        """97 + 5 bounces back to 98, which is a snake."""
        state = create_session([97, 1])
        state, events = drive_turn(state, 5)

        assert state.players[0].position == 78
        assert any(isinstance(e, TransportFound) and e.kind == "snake" for e in events)


class TestTransportEdges:
    """Chains and the last cell."""

    def test_no_chained_transports(self):
        """A destination that is itself a source is not followed."""
        table = {3: 10, 10: 20}
        state = create_session([1, 1])
        state, events = drive_turn(state, 2, transports=table)

        assert state.players[0].position == 10
        assert len([e for e in events if isinstance(e, TransportFound)]) == 1

    def test_exact_100_skips_lookup_and_wins(self):
        """Landing on 100 wins without consulting the table."""
        table = {100: 1}
        state = create_session([99, 1])
        state, events = drive_turn(state, 1, transports=table)

        assert state.status == GameStatus.GAME_OVER
        assert state.players[0].position == 100
        assert not any(isinstance(e, TransportFound) for e in events)

    def test_ladder_to_100_wins(self):
        """The ladder from 80 to 100 wins after the relocation."""
        state = create_session([78, 1])
        state, events = drive_turn(state, 2)

        assert state.status == GameStatus.GAME_OVER
        assert state.phase == TurnPhase.FINISHED
        assert state.winner.id == 0
        assert state.message == "Congratulations, Player 1 Wins!"
        assert isinstance(events[-1], GameEnded)
        assert not any(isinstance(e, TurnEnded) for e in events)

    def test_plain_cell_goes_straight_to_resolution(self):
        """A cell off the table goes straight to resolution."""
        state = create_session([1, 1])
        state, events = roll_and_step(state, 4)

        # 5 is not on the table
        assert state.players[0].position == 5
        assert state.phase == TurnPhase.TURN_RESOLUTION
        assert state.transport_to is None
        assert not any(isinstance(e, TransportFound) for e in events)
