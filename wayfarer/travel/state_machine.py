"""Travel lifecycle: idle -> in transit -> arrived.

Every transition takes a TravelState snapshot and returns a new one; the
input is never modified. Invalid transitions return the input unchanged
and log a warning, since they indicate a caller bug rather than a
condition the session should crash on.
"""

import logging

from wayfarer.travel.schemas import ForcedTravel, Route, TravelProgress, TravelState
from wayfarer.world.schemas import WorldData

logger = logging.getLogger(__name__)


def initial_travel_state(
    world: WorldData,
    starting_location_id: str,
    starting_kingdom_id: int,
) -> TravelState:
    """Create the opening travel state for a new session.

    Every location of the starting kingdom is unlocked; only the starting
    location is visited.

    Args:
        world: World map.
        starting_location_id: Where the player starts.
        starting_kingdom_id: Kingdom the player starts in.

    Returns:
        An idle TravelState.
    """
    kingdom_ids = frozenset(world.kingdom_location_ids(starting_kingdom_id))
    unlocked = kingdom_ids | {starting_location_id}
    return TravelState(
        current_location_id=starting_location_id,
        current_kingdom_id=starting_kingdom_id,
        unlocked_locations=unlocked,
        visited_locations=frozenset({starting_location_id}),
        unlocked_routes=unlocked,
    )


def begin_travel(state: TravelState, route: Route, current_scene: int) -> TravelState:
    """Start a journey along a route.

    Does not deduct the route cost; gold lives in PlayerState and is the
    caller's concern.

    Args:
        state: Current travel state (must be idle).
        route: Route to travel.
        current_scene: Scene number the journey starts at.

    Returns:
        New in-transit state, or the input unchanged if already in transit.
    """
    if state.traveling is not None:
        logger.warning(
            f"begin_travel ignored: already travelling "
            f"{state.traveling.from_id} -> {state.traveling.to_id}"
        )
        return state

    progress = TravelProgress(
        from_id=route.from_id,
        to_id=route.to_id,
        days_remaining=route.distance_days,
        total_days=route.distance_days,
        route=route,
        started_at=current_scene,
    )
    logger.info(f"Travel started: {route.from_id} -> {route.to_id} ({route.distance_days} days)")
    return state.model_copy(update={"traveling": progress})


def complete_travel(state: TravelState, kingdom_id: int | None = None) -> TravelState:
    """Arrive at the destination of the current journey.

    Does not clear travel_quest: the caller compares its target with the
    new current location and calls clear_travel_quest when they match.

    Args:
        state: Current travel state.
        kingdom_id: Kingdom of the destination, if the caller resolved it.

    Returns:
        New idle state at the destination, or the input unchanged if idle.
    """
    if state.traveling is None:
        logger.warning("complete_travel called while idle; ignoring")
        return state

    arrived_at = state.traveling.to_id
    update: dict = {
        "current_location_id": arrived_at,
        "visited_locations": _with(state.visited_locations, arrived_at),
        "traveling": None,
    }
    if kingdom_id is not None:
        update["current_kingdom_id"] = kingdom_id
    logger.info(f"Arrived at {arrived_at}")
    return state.model_copy(update=update)


def relocate(state: TravelState, location_id: str, kingdom_id: int | None = None) -> TravelState:
    """Move the player instantly, bypassing transit.

    Used for teleport-style narrative moves and for implicit arrivals
    detected from generated scenes. Any journey in progress is dropped.

    Args:
        state: Current travel state.
        location_id: New current location.
        kingdom_id: Kingdom of the new location, if known.

    Returns:
        New idle state at location_id.
    """
    update: dict = {
        "current_location_id": location_id,
        "visited_locations": _with(state.visited_locations, location_id),
        "traveling": None,
    }
    if kingdom_id is not None:
        update["current_kingdom_id"] = kingdom_id
    return state.model_copy(update=update)


def unlock_location(state: TravelState, location_id: str) -> TravelState:
    """Unlock a location and its route. Idempotent."""
    if location_id in state.unlocked_locations and location_id in state.unlocked_routes:
        return state
    return state.model_copy(
        update={
            "unlocked_locations": _with(state.unlocked_locations, location_id),
            "unlocked_routes": _with(state.unlocked_routes, location_id),
        }
    )


def set_travel_quest(
    state: TravelState,
    target_id: str,
    reason: str,
    quest_id: str,
    deadline: int | None = None,
) -> TravelState:
    """Replace the forced-travel pointer.

    No validation against the quest ledger; the caller keeps both in sync.
    """
    forced = ForcedTravel(
        target_location_id=target_id,
        reason=reason,
        quest_id=quest_id,
        deadline=deadline,
    )
    return state.model_copy(update={"travel_quest": forced})


def clear_travel_quest(state: TravelState) -> TravelState:
    if state.travel_quest is None:
        return state
    return state.model_copy(update={"travel_quest": None})


def can_travel_to(state: TravelState, location_id: str) -> bool:
    """Whether the player may start a journey to a location right now."""
    if state.current_location_id == location_id:
        return False
    if state.traveling is not None:
        return False
    return location_id in state.unlocked_locations


def can_afford_travel(gold: int, route: Route) -> bool:
    return gold >= route.cost


def _with(items: frozenset[str], item: str) -> frozenset[str]:
    if item in items:
        return items
    return items | {item}
