"""Game service module.

Provides:
- Setup validation (start_game.py)
- Turn coordination on a scheduler (coordinator.py, scheduler.py)
- Game engine processing (engine/)
"""

from .coordinator import TurnCoordinator, get_coordinator
from .engine import ProcessResult, process_action
from .scheduler import AsyncioScheduler, Scheduler
from .start_game import PLAYER_COLORS, default_player_setups, validate_game_settings

__all__ = [
    # Setup
    "PLAYER_COLORS",
    "default_player_setups",
    "validate_game_settings",
    # Coordination
    "TurnCoordinator",
    "get_coordinator",
    "AsyncioScheduler",
    "Scheduler",
    # Engine
    "ProcessResult",
    "process_action",
]
