"""Turn coordinator - drives the pure engine through timed phases.

The coordinator owns the single GameSession of the table. Table inputs
(start, roll, reset) arrive from the API layer; every later transition of a
turn is a scheduled continuation:

    IDLE -> ROLLING -> STEPPING (x N) -> [RESOLVING_TRANSPORT] -> TURN_RESOLUTION

Only one continuation is ever pending. Roll requests that arrive while a
turn is underway are dropped by the engine's phase guard.
"""

import logging
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Protocol

from app.config import Settings, get_settings
from app.schemas.game_engine import GameSession, GameStatus, PlayerSetup, TurnPhase
from app.services.game.engine import (
    TRANSPORTS,
    AnyGameEvent,
    ApplyTransportAction,
    GameAction,
    PhaseAction,
    ResetGameAction,
    ResolveTurnAction,
    RevealRollAction,
    RollAction,
    StartGameAction,
    StepAction,
    process_action,
    roll_die,
)

from .scheduler import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class SessionObserver(Protocol):
    """Receives the new session and its events after every accepted transition."""

    def __call__(self, session: GameSession, events: list[AnyGameEvent]) -> None: ...


class TurnCoordinator:
    """Runs turns for a single table."""

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Settings | None = None,
        roller: Callable[[], int] = roll_die,
        transports: Mapping[int, int] = TRANSPORTS,
    ):
        self._scheduler = scheduler
        self._settings = settings or get_settings()
        self._roller = roller
        self._transports = transports

        self._session = GameSession()
        self._observers: list[SessionObserver] = []

        # At most one pending continuation; the epoch invalidates it on reset
        self._pending: TimerHandle | None = None
        self._epoch = 0

    @property
    def session(self) -> GameSession:
        return self._session

    def snapshot(self) -> dict:
        """Serializable view of the session for observers."""
        return self._session.model_dump(mode="json")

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)
        logger.debug("Observer subscribed, total=%d", len(self._observers))

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)
                logger.debug("Observer unsubscribed, total=%d", len(self._observers))

        return unsubscribe

    # --- Table inputs ---

    def start_game(self, players: list[PlayerSetup]) -> bool:
        """Seat the players and start the first turn.

        Setup validation (names, avatars, seat count) belongs to the caller.
        """
        return self._dispatch(StartGameAction(players=players))

    def request_roll(self) -> bool:
        """Roll for the active player if the engine is idle.

        Returns False, without touching the session, when the game is not in
        progress or a turn is already underway.
        """
        if self._pending is not None:
            logger.debug("Roll request dropped: continuation pending")
            return False
        if self._session.status != GameStatus.IN_PROGRESS:
            logger.debug("Roll request dropped: status=%s", self._session.status.value)
            return False
        if self._session.phase != TurnPhase.IDLE:
            logger.debug("Roll request dropped: phase=%s", self._session.phase.value)
            return False
        return self._dispatch(RollAction(value=self._roller()))

    def reset_game(self) -> bool:
        """Cancel any pending continuation and clear the table."""
        self.cancel_pending()
        return self._dispatch(ResetGameAction())

    def cancel_pending(self) -> None:
        """Drop the pending continuation so it can never touch the session."""
        self._epoch += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.info("Cancelled pending turn continuation")

    # --- Internal flow ---

    def _dispatch(self, action: GameAction) -> bool:
        result = process_action(self._session, action, self._transports)
        if not result.success or result.state is None:
            logger.debug(
                "Action dropped: type=%s, code=%s",
                type(action).__name__,
                result.error_code,
            )
            return False

        self._session = result.state
        self._notify(result.events)
        if self._session is not result.state:
            # An observer already moved the table on and scheduled what follows
            logger.debug("Session changed by an observer, not advancing")
            return True
        self._advance()
        return True

    def _notify(self, events: list[AnyGameEvent]) -> None:
        for observer in list(self._observers):
            try:
                observer(self._session, events)
            except Exception:
                logger.exception("Session observer failed")

    def _advance(self) -> None:
        """Schedule, or run straight away, whatever follows the current phase."""
        if self._pending is not None:
            return
        step = self._next_phase_action()
        if step is None:
            return

        delay_ms, action = step
        if delay_ms <= 0:
            self._dispatch(action)
            return

        epoch = self._epoch

        def fire() -> None:
            if epoch != self._epoch:
                logger.debug("Stale continuation ignored: %s", type(action).__name__)
                return
            self._pending = None
            self._dispatch(action)

        fire.__name__ = f"fire_{type(action).__name__}"
        self._pending = self._scheduler.schedule_after(delay_ms / 1000, fire)

    def _next_phase_action(self) -> tuple[int, PhaseAction] | None:
        phase = self._session.phase
        settings = self._settings

        if phase == TurnPhase.ROLLING:
            return settings.ROLL_REVEAL_DELAY_MS, RevealRollAction()
        if phase == TurnPhase.STEPPING:
            return settings.STEP_DELAY_MS, StepAction()
        if phase == TurnPhase.RESOLVING_TRANSPORT:
            return settings.TRANSPORT_REVEAL_DELAY_MS, ApplyTransportAction()
        if phase == TurnPhase.TURN_RESOLUTION:
            # Give observers time to see the new cell after a transport
            if self._session.transport_to is not None:
                return settings.TURN_HANDOFF_DELAY_MS, ResolveTurnAction()
            return 0, ResolveTurnAction()
        return None


@lru_cache
def get_coordinator() -> TurnCoordinator:
    """Process-wide coordinator for the single table."""
    return TurnCoordinator(AsyncioScheduler())
