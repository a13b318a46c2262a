"""World data contract: kingdoms and their locations (read-only to the engine)."""

from wayfarer.world.schemas import (
    BiomeType,
    Kingdom,
    Location,
    LocationType,
    Point2D,
    WorldData,
)

__all__ = [
    "BiomeType",
    "Kingdom",
    "Location",
    "LocationType",
    "Point2D",
    "WorldData",
]
