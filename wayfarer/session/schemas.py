"""Pydantic schemas for session snapshots and generation-service context."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from wayfarer.player.schemas import PlayerState
from wayfarer.quests.schemas import ActiveQuestInfo, Quest
from wayfarer.travel.schemas import DangerTier, TravelState


# =============================================================================
# World Events
# =============================================================================


class WorldEventType(str, Enum):
    """Kinds of world changes recorded by a session."""

    LOCATION_UNLOCKED = "location_unlocked"
    ARRIVED = "arrived"
    QUEST_COMPLETED = "quest_completed"
    QUEST_FAILED = "quest_failed"


class WorldEvent(BaseModel):
    """A recorded change to the world caused by the player."""

    model_config = ConfigDict(frozen=True)

    type: WorldEventType
    target_id: str
    scene_number: int
    data: dict[str, Any] = Field(default_factory=dict)


class GameState(BaseModel):
    """Composed, read-only snapshot of one session."""

    model_config = ConfigDict(frozen=True)

    travel: TravelState
    player: PlayerState
    quests: tuple[Quest, ...] = ()
    active_quest_id: str | None = None
    world_events: tuple[WorldEvent, ...] = ()
    scene_number: int = 0


# =============================================================================
# Generation Service Context
# =============================================================================


class _ContextModel(BaseModel):
    # Serialized with by_alias=True for the generation service (camelCase)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RouteSummary(_ContextModel):
    """A destination the player can currently travel to."""

    location_id: str
    location_name: str
    distance_days: int
    cost: int
    danger: DangerTier


class TravelQuestContext(_ContextModel):
    target_location_id: str
    target_location_name: str
    reason: str
    deadline: int | None = None


class InTransitContext(_ContextModel):
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    days_remaining: int
    total_days: int


class TravelContext(_ContextModel):
    """Read-only travel context handed to the generation service."""

    current_location_id: str
    current_kingdom_id: int
    visited_locations: list[str]
    unlocked_locations: list[str]
    available_routes: list[RouteSummary] = Field(default_factory=list)
    travel_quest: TravelQuestContext | None = None
    in_transit: InTransitContext | None = None
    active_quests: list[ActiveQuestInfo] = Field(default_factory=list)
