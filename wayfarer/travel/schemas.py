"""Pydantic schemas for routes, travel progress and travel state.

All models are frozen. Transitions produce new snapshots through
model_copy, which shares unchanged sub-structures with the previous one.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wayfarer.world.schemas import BiomeType, Point2D


# =============================================================================
# Enums
# =============================================================================


class DangerTier(str, Enum):
    """Qualitative travel risk, ordered safe < risky < dangerous."""

    SAFE = "safe"
    RISKY = "risky"
    DANGEROUS = "dangerous"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    DangerTier.SAFE: 0,
    DangerTier.RISKY: 1,
    DangerTier.DANGEROUS: 2,
}


# =============================================================================
# Route Schemas
# =============================================================================


class Route(BaseModel):
    """A derived, directed travel option between two locations.

    Routes are recomputed on every query because unlock state changes
    over time; they are never cached across calls.
    """

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    distance_days: int = Field(ge=1, le=5)
    cost: int = Field(ge=0)
    danger: DangerTier
    terrain_tags: tuple[BiomeType, ...] = ()
    is_unlocked: bool = True
    requires_quest_id: str | None = None


class RouteOption(BaseModel):
    """A route paired with its resolved destination name, for presentation."""

    model_config = ConfigDict(frozen=True)

    route: Route
    target_name: str


class PathLine(BaseModel):
    """A renderable map segment for one route."""

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    from_pos: Point2D
    to_pos: Point2D
    color: str
    dashed: bool
    danger: DangerTier
    distance_days: int
    cost: int
    is_locked: bool


# =============================================================================
# Travel State Schemas
# =============================================================================


class TravelProgress(BaseModel):
    """An in-progress journey. Exists only while the player is in transit."""

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    days_remaining: int
    total_days: int
    route: Route
    started_at: int  # Scene number


class ForcedTravel(BaseModel):
    """A narrative requirement to reach a specific location."""

    model_config = ConfigDict(frozen=True)

    target_location_id: str
    reason: str
    quest_id: str
    deadline: int | None = None  # Scene number


class TravelState(BaseModel):
    """Where the player is, what is known, and any journey in progress.

    Exactly one of idle (traveling is None) or in transit (traveling set)
    holds at any time. current_location_id is always visited.
    """

    model_config = ConfigDict(frozen=True)

    current_location_id: str
    current_kingdom_id: int
    unlocked_locations: frozenset[str] = frozenset()
    visited_locations: frozenset[str] = frozenset()
    unlocked_routes: frozenset[str] = frozenset()
    traveling: TravelProgress | None = None
    travel_quest: ForcedTravel | None = None

    @model_validator(mode="after")
    def _current_location_is_visited(self) -> TravelState:
        if self.current_location_id not in self.visited_locations:
            raise ValueError(
                f"current location {self.current_location_id!r} must be in visited_locations"
            )
        return self

    @property
    def is_traveling(self) -> bool:
        return self.traveling is not None
