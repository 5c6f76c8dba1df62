from typing import Annotated

from fastapi import Depends

from app.services.game.coordinator import TurnCoordinator, get_coordinator

Coordinator = Annotated[TurnCoordinator, Depends(get_coordinator)]
