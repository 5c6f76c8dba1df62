"""Shared fixtures for turn engine tests."""

import heapq
import itertools
from collections.abc import Callable, Iterable

import pytest

from app.config import Settings, get_settings
from app.schemas.game_engine import (
    GameSession,
    GameStatus,
    Player,
    PlayerSetup,
    TurnPhase,
)
from app.services.game.coordinator import TurnCoordinator
from app.services.game.engine import (
    TRANSPORTS,
    ApplyTransportAction,
    ResolveTurnAction,
    RevealRollAction,
    RollAction,
    StepAction,
    process_action,
)

# Turn timing in seconds, matching the default settings
ROLL_DELAY = 1.0
STEP_DELAY = 0.3
TRANSPORT_DELAY = 0.8
HANDOFF_DELAY = 0.5


class ManualTimer:
    """Handle returned by ManualScheduler."""

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Fake clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._timers: list[tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def schedule_after(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        heapq.heappush(self._timers, (timer.due, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for _, _, t in self._timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that falls due."""
        target = self.now + seconds
        while self._timers and self._timers[0][0] <= target + 1e-9:
            due, _, timer = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            if not timer.cancelled:
                timer.callback()
        self.now = target

    def run_until_idle(self, limit: int = 1000) -> None:
        """Fire timers in order until none are left."""
        for _ in range(limit):
            live = [entry for entry in self._timers if not entry[2].cancelled]
            if not live:
                return
            self.advance(max(0.0, min(due for due, _, _ in live) - self.now))
        raise AssertionError("Scheduler did not go idle")


def scripted_roller(values: Iterable[int]) -> Callable[[], int]:
    """Dice that return the given values in order."""
    iterator = iter(values)

    def roll() -> int:
        return next(iterator)

    return roll


def create_setup(player_id: int, name: str | None = None) -> PlayerSetup:
    """Helper to create a seated player."""
    return PlayerSetup(
        id=player_id,
        name=name or f"Player {player_id + 1}",
        color=f"color-{player_id}",
        avatar_ref=f"avatar-{player_id}",
    )


def create_player(player_id: int, position: int = 1, name: str | None = None) -> Player:
    """Helper to create an in-game player at a given cell."""
    return Player(**create_setup(player_id, name).model_dump(), position=position)


def create_session(
    positions: list[int],
    current_player_index: int = 0,
    phase: TurnPhase = TurnPhase.IDLE,
) -> GameSession:
    """In-progress session with one player per position."""
    return GameSession(
        status=GameStatus.IN_PROGRESS,
        phase=phase,
        players=[create_player(i, pos) for i, pos in enumerate(positions)],
        current_player_index=current_player_index,
        turn_number=1,
        message="Player 1's turn to roll!",
    )


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch):
    """Pin settings to their defaults regardless of the environment."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def two_setups() -> list[PlayerSetup]:
    return [create_setup(0, "Alice"), create_setup(1, "Bob")]


@pytest.fixture
def three_setups() -> list[PlayerSetup]:
    return [create_setup(0, "Alice"), create_setup(1, "Bob"), create_setup(2, "Cara")]


@pytest.fixture
def make_coordinator(scheduler: ManualScheduler):
    """Factory for coordinators on the manual clock with scripted dice."""

    def factory(rolls: Iterable[int] = (), transports=None) -> TurnCoordinator:
        kwargs = {}
        if transports is not None:
            kwargs["transports"] = transports
        return TurnCoordinator(
            scheduler,
            settings=get_settings(),
            roller=scripted_roller(rolls),
            **kwargs,
        )

    return factory


@pytest.fixture
def empty_session() -> GameSession:
    return GameSession()


def drive_turn(state: GameSession, roll: int, transports=None) -> tuple[GameSession, list]:
    """Run one whole turn through the reducer, collecting every event.

    Phase actions are issued the way the coordinator would issue them once
    their delays elapse.
    """
    transports = TRANSPORTS if transports is None else transports
    events: list = []

    def apply(action) -> None:
        nonlocal state
        result = process_action(state, action, transports)
        assert result.success, result.error_code
        state = result.state
        events.extend(result.events)

    apply(RollAction(value=roll))
    apply(RevealRollAction())
    while state.phase == TurnPhase.STEPPING:
        apply(StepAction())
    if state.phase == TurnPhase.RESOLVING_TRANSPORT:
        apply(ApplyTransportAction())
    apply(ResolveTurnAction())
    return state, events
