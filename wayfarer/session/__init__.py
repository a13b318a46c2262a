"""Game session orchestration and generation-service context."""

from wayfarer.session.orchestrator import GameSession
from wayfarer.session.schemas import (
    GameState,
    InTransitContext,
    RouteSummary,
    TravelContext,
    TravelQuestContext,
    WorldEvent,
    WorldEventType,
)

__all__ = [
    "GameSession",
    "GameState",
    "InTransitContext",
    "RouteSummary",
    "TravelContext",
    "TravelQuestContext",
    "WorldEvent",
    "WorldEventType",
]
