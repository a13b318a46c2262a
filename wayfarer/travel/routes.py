"""Route derivation from world geometry and kingdom topology.

Routes are derived, never stored: every call recomputes them from the
current location, the world map and the player's unlock state.
"""

import logging

from wayfarer.errors import InvalidRouteError
from wayfarer.travel.geometry import (
    classify_danger,
    cost_for_travel,
    days_for_distance,
    distance_2d,
)
from wayfarer.travel.schemas import Route, TravelState
from wayfarer.world.schemas import Location, WorldData

logger = logging.getLogger(__name__)

UNLOCK_QUEST_PREFIX = "travel_unlock_"


def create_route(
    origin: Location,
    destination: Location,
    world: WorldData,
    same_kingdom: bool,
) -> Route:
    """Build a route between two locations.

    Intra-kingdom routes start unlocked. Cross-kingdom routes start locked
    and name the narrative unlock quest that is expected to open them.

    Args:
        origin: Starting location.
        destination: Target location.
        world: World map (for the width used in day normalization).
        same_kingdom: Whether both locations share a kingdom.

    Returns:
        The derived Route.

    Raises:
        InvalidRouteError: If origin and destination are the same location.
    """
    if origin.id == destination.id:
        raise InvalidRouteError(origin.id)

    days = days_for_distance(distance_2d(origin.position, destination.position), world.width)
    danger = classify_danger(origin.biome, destination.biome, not same_kingdom)
    terrain = tuple(dict.fromkeys((origin.biome, destination.biome)))

    return Route(
        from_id=origin.id,
        to_id=destination.id,
        distance_days=days,
        cost=cost_for_travel(days, danger),
        danger=danger,
        terrain_tags=terrain,
        is_unlocked=same_kingdom,
        requires_quest_id=None if same_kingdom else f"{UNLOCK_QUEST_PREFIX}{destination.id}",
    )


def routes_within_kingdom(location_id: str, world: WorldData) -> list[Route]:
    """Routes from a location to every other location of its own kingdom.

    Intra-kingdom travel is always permitted, so every route is unlocked.

    Args:
        location_id: Origin location id.
        world: World map.

    Returns:
        Routes sorted by ascending duration; empty if the origin is unknown.
    """
    origin = world.get_location(location_id)
    kingdom = world.get_kingdom_for_location(location_id)
    if origin is None or kingdom is None:
        logger.debug(f"No kingdom routes: unknown location {location_id}")
        return []

    routes = [
        create_route(origin, destination, world, same_kingdom=True)
        for destination in kingdom.locations
        if destination.id != location_id
    ]
    return sorted(routes, key=lambda route: route.distance_days)


def routes_from_location(
    location_id: str,
    world: WorldData,
    travel_state: TravelState,
) -> list[Route]:
    """Every candidate route from a location, in-kingdom and cross-kingdom.

    A route is unlocked when it stays in the origin's kingdom or when its
    destination has been unlocked. Cross-kingdom routes that are still
    locked keep their requires_quest_id hint; once unlocked the hint is
    dropped.

    Args:
        location_id: Origin location id.
        world: World map.
        travel_state: Current unlock state.

    Returns:
        Unlocked routes first, then by ascending duration (stable otherwise);
        empty if the origin is unknown.
    """
    origin = world.get_location(location_id)
    origin_kingdom = world.get_kingdom_for_location(location_id)
    if origin is None or origin_kingdom is None:
        logger.debug(f"No routes: unknown location {location_id}")
        return []

    routes: list[Route] = []
    for kingdom in world.kingdoms:
        same_kingdom = kingdom.id == origin_kingdom.id
        for destination in kingdom.locations:
            if destination.id == location_id:
                continue
            route = create_route(origin, destination, world, same_kingdom)
            if not same_kingdom and destination.id in travel_state.unlocked_locations:
                route = route.model_copy(update={"is_unlocked": True, "requires_quest_id": None})
            routes.append(route)

    logger.debug(f"Derived {len(routes)} routes from {location_id}")
    return sorted(routes, key=lambda route: (not route.is_unlocked, route.distance_days))
