"""Projection of route sets onto renderable map segments."""

import logging

from wayfarer.travel.routes import routes_from_location, routes_within_kingdom
from wayfarer.travel.schemas import DangerTier, PathLine, TravelState
from wayfarer.world.schemas import WorldData

logger = logging.getLogger(__name__)

DANGER_COLORS: dict[DangerTier, str] = {
    DangerTier.SAFE: "#4ecdc4",
    DangerTier.RISKY: "#f39c12",
    DangerTier.DANGEROUS: "#e74c3c",
}


def project_paths(
    location_id: str,
    world: WorldData,
    travel_state: TravelState,
    kingdom_only: bool = True,
) -> list[PathLine]:
    """Map the routes from a location to line segments for the world map.

    Locked routes are drawn dashed. Routes whose destination cannot be
    resolved are dropped.

    Args:
        location_id: Origin location id.
        world: World map.
        travel_state: Current unlock state (used for the global route set).
        kingdom_only: Restrict to the origin's kingdom.

    Returns:
        One PathLine per drawable route; empty if the origin is unknown.
    """
    origin = world.get_location(location_id)
    if origin is None:
        return []

    if kingdom_only:
        routes = routes_within_kingdom(location_id, world)
    else:
        routes = routes_from_location(location_id, world, travel_state)

    lines: list[PathLine] = []
    for route in routes:
        destination = world.get_location(route.to_id)
        if destination is None:
            logger.warning(f"Dropping path to unresolvable location {route.to_id}")
            continue
        lines.append(
            PathLine(
                from_id=route.from_id,
                to_id=route.to_id,
                from_pos=origin.position,
                to_pos=destination.position,
                color=DANGER_COLORS[route.danger],
                dashed=not route.is_unlocked,
                danger=route.danger,
                distance_days=route.distance_days,
                cost=route.cost,
                is_locked=not route.is_unlocked,
            )
        )
    return lines
