"""Route derivation, path projection and the travel state machine."""

from wayfarer.travel.geometry import (
    classify_danger,
    cost_for_travel,
    days_for_distance,
    distance_2d,
)
from wayfarer.travel.labels import danger_label, days_label, travel_label
from wayfarer.travel.paths import DANGER_COLORS, project_paths
from wayfarer.travel.routes import create_route, routes_from_location, routes_within_kingdom
from wayfarer.travel.schemas import (
    DangerTier,
    ForcedTravel,
    PathLine,
    Route,
    RouteOption,
    TravelProgress,
    TravelState,
)
from wayfarer.travel.state_machine import (
    begin_travel,
    can_afford_travel,
    can_travel_to,
    clear_travel_quest,
    complete_travel,
    initial_travel_state,
    relocate,
    set_travel_quest,
    unlock_location,
)

__all__ = [
    # Geometry
    "classify_danger",
    "cost_for_travel",
    "days_for_distance",
    "distance_2d",
    # Routes & paths
    "create_route",
    "routes_from_location",
    "routes_within_kingdom",
    "project_paths",
    "DANGER_COLORS",
    # Labels
    "danger_label",
    "days_label",
    "travel_label",
    # Schemas
    "DangerTier",
    "ForcedTravel",
    "PathLine",
    "Route",
    "RouteOption",
    "TravelProgress",
    "TravelState",
    # State machine
    "begin_travel",
    "can_afford_travel",
    "can_travel_to",
    "clear_travel_quest",
    "complete_travel",
    "initial_travel_state",
    "relocate",
    "set_travel_quest",
    "unlock_location",
]
