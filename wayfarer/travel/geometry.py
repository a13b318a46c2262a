"""Travel duration, cost and danger classification.

Pure functions with no state. The constants are module-level rather than
settings so route derivation is deterministic regardless of environment.
"""

import math
from functools import lru_cache

from wayfarer.travel.schemas import DangerTier
from wayfarer.world.schemas import BiomeType, Point2D

MIN_TRAVEL_DAYS = 1
MAX_TRAVEL_DAYS = 5
BASE_COST_PER_DAY = 10

DANGER_MULTIPLIERS: dict[DangerTier, float] = {
    DangerTier.SAFE: 1.0,
    DangerTier.RISKY: 1.5,
    DangerTier.DANGEROUS: 2.0,
}

# Either endpoint in this set adds 2 to the danger score
HAZARDOUS_BIOMES = frozenset({BiomeType.MOUNTAIN, BiomeType.SNOW})
# Either endpoint in this set adds 1
DIFFICULT_BIOMES = frozenset({BiomeType.FOREST, BiomeType.HILLS})


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance_2d(a: Point2D, b: Point2D) -> float:
    """Euclidean distance between two world positions."""
    return math.hypot(a.x - b.x, a.y - b.y)


def days_for_distance(dist: float, world_width: float) -> int:
    """Convert a world-space distance into whole travel days.

    The distance is normalized against the map diagonal (sqrt(2) * width),
    scaled to 0-5, rounded and clamped to [1, 5].

    Args:
        dist: Euclidean distance, >= 0.
        world_width: Map width, > 0.

    Returns:
        Travel days in [MIN_TRAVEL_DAYS, MAX_TRAVEL_DAYS].
    """
    max_dist = math.sqrt(2) * world_width
    normalized = (dist / max_dist) * MAX_TRAVEL_DAYS
    return max(MIN_TRAVEL_DAYS, min(MAX_TRAVEL_DAYS, _round_half_up(normalized)))


def cost_for_travel(days: int, danger: DangerTier) -> int:
    """Gold cost of a journey: days * 10 * danger multiplier, rounded."""
    return _round_half_up(days * BASE_COST_PER_DAY * DANGER_MULTIPLIERS[danger])


def danger_score(from_biome: BiomeType, to_biome: BiomeType, crosses_border: bool) -> int:
    """Numeric danger score behind classify_danger."""
    biomes = {from_biome, to_biome}
    score = 0
    if biomes & HAZARDOUS_BIOMES:
        score += 2
    if biomes & DIFFICULT_BIOMES:
        score += 1
    if crosses_border:
        score += 1
    return score


@lru_cache(maxsize=256)
def classify_danger(
    from_biome: BiomeType, to_biome: BiomeType, crosses_border: bool
) -> DangerTier:
    """Classify a route's danger tier.

    Order-independent in the two biomes: swapping them gives the same tier.

    Args:
        from_biome: Biome at the origin.
        to_biome: Biome at the destination.
        crosses_border: Whether the route leaves the origin's kingdom.

    Returns:
        DANGEROUS for a score >= 3, RISKY for >= 1, else SAFE.
    """
    score = danger_score(from_biome, to_biome, crosses_border)
    if score >= 3:
        return DangerTier.DANGEROUS
    if score >= 1:
        return DangerTier.RISKY
    return DangerTier.SAFE
