"""Tests for event generation and sequencing.

Critical scenarios tested:
- Events have sequential seq numbers
- Seq numbers continue across actions and across a reset
- Event ordering within a turn is correct
"""

from app.services.game.engine import (
    ResetGameAction,
    RollAction,
    StartGameAction,
    process_action,
)
from app.services.game.engine.events import (
    DiceRolled,
    GameReset,
    GameStarted,
    PlayerStepped,
    RollStarted,
    TurnEnded,
    TurnStarted,
)

from .conftest import create_session, drive_turn


class TestEventSequencing:
    """Test that events have proper sequence numbers."""

    def test_events_have_sequential_seq_numbers(self, empty_session, two_setups):
        """Events should have sequential seq numbers starting from 0."""
        result = process_action(empty_session, StartGameAction(players=two_setups))
        assert result.success

        for i, event in enumerate(result.events):
            assert event.seq == i
        assert result.state.event_seq == len(result.events)

    def test_seq_numbers_continue_across_actions(self):
        """Seq numbers should continue from where they left off."""
        state = create_session([1, 1])

        state, first_turn = drive_turn(state, 4)
        _, second_turn = drive_turn(state, 4)

        assert second_turn[0].seq == first_turn[-1].seq + 1

    def test_whole_turn_has_no_gaps(self):
        """Seq numbers within one turn are contiguous."""
        state = create_session([1, 1])
        state, events = drive_turn(state, 4)

        seqs = [e.seq for e in events]
        assert seqs == list(range(seqs[0], seqs[0] + len(seqs)))
        assert state.event_seq == seqs[-1] + 1

    def test_seq_survives_reset(self):
        """Reset keeps counting instead of starting from 0."""
        state = create_session([1, 1])
        state, _ = drive_turn(state, 4)
        seq_before = state.event_seq

        result = process_action(state, ResetGameAction())
        assert isinstance(result.events[0], GameReset)
        assert result.events[0].seq == seq_before
        assert result.state.event_seq == seq_before + 1


class TestEventOrdering:
    """Order of events within a turn."""

    def test_start_game_events(self, empty_session, two_setups):
        """Start emits game_started then turn 1 for the first seat."""
        result = process_action(empty_session, StartGameAction(players=two_setups))

        assert isinstance(result.events[0], GameStarted)
        assert result.events[0].player_order == [0, 1]
        assert result.events[0].first_player_id == 0
        assert isinstance(result.events[1], TurnStarted)
        assert result.events[1].turn_number == 1

    def test_plain_turn_events(self):
        """A plain turn emits roll, reveal, steps, end and next start in order."""
        state = create_session([1, 1])
        _, events = drive_turn(state, 2)

        kinds = [type(e) for e in events]
        assert kinds == [
            RollStarted,
            DiceRolled,
            PlayerStepped,
            PlayerStepped,
            TurnEnded,
            TurnStarted,
        ]
        assert events[-2].final_position == 3
        assert events[-2].next_player_id == 1
        assert events[-1].player_id == 1
        assert events[-1].turn_number == 2

    def test_events_serialize_with_type(self):
        """Dumped events carry their event_type and seq."""
        state = create_session([1, 1])
        _, events = drive_turn(state, 3)

        dumped = [e.model_dump(mode="json") for e in events]
        assert dumped[0]["event_type"] == "roll_started"
        assert dumped[1] == {"event_type": "dice_rolled", "seq": 1, "player_id": 0, "value": 3}
