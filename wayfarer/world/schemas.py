"""Pydantic schemas for world data supplied by the world generator.

The engine never mutates world data: every model here is frozen. The
lookup helpers on WorldData return None (or an empty list) for unknown
ids instead of raising.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================


class BiomeType(str, Enum):
    """Biome tag of a location."""

    OCEAN = "ocean"
    SHALLOW = "shallow"
    BEACH = "beach"
    PLAIN = "plain"
    FOREST = "forest"
    HILLS = "hills"
    MOUNTAIN = "mountain"
    SNOW = "snow"


class LocationType(str, Enum):
    """Kind of point of interest."""

    CAPITAL = "capital"
    CITY = "city"
    FORTRESS = "fortress"
    RUIN = "ruin"
    DUNGEON = "dungeon"


# =============================================================================
# World Schemas
# =============================================================================


class Point2D(BaseModel):
    """A position in world space."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Location(BaseModel):
    """A point of interest belonging to exactly one kingdom."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    position: Point2D
    biome: BiomeType
    kingdom_id: int = Field(alias="kingdomId")
    type: LocationType = LocationType.CITY
    description: str | None = None

    @field_validator("biome", "type", mode="before")
    @classmethod
    def _lowercase_tag(cls, value: object) -> object:
        # World generators emit upper-case tags ("MOUNTAIN")
        if isinstance(value, str):
            return value.lower()
        return value


class Kingdom(BaseModel):
    """A political region with one capital and zero or more cities."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    capital: Location
    cities: tuple[Location, ...] = ()

    @property
    def locations(self) -> list[Location]:
        """Capital first, then cities in their declared order."""
        return [self.capital, *self.cities]

    @property
    def location_ids(self) -> list[str]:
        return [location.id for location in self.locations]

    def has_location(self, location_id: str) -> bool:
        return any(location.id == location_id for location in self.locations)


class WorldData(BaseModel):
    """Immutable world map: kingdoms, their locations and the map width."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0)
    height: float | None = None
    kingdoms: tuple[Kingdom, ...] = ()

    def get_location(self, location_id: str) -> Location | None:
        """Resolve a location id to its POI.

        Args:
            location_id: Location id.

        Returns:
            Location if found, None otherwise.
        """
        for kingdom in self.kingdoms:
            for location in kingdom.locations:
                if location.id == location_id:
                    return location
        return None

    def get_kingdom(self, kingdom_id: int) -> Kingdom | None:
        for kingdom in self.kingdoms:
            if kingdom.id == kingdom_id:
                return kingdom
        return None

    def get_kingdom_for_location(self, location_id: str) -> Kingdom | None:
        """Get the kingdom that owns a location, or None if unknown."""
        for kingdom in self.kingdoms:
            if kingdom.has_location(location_id):
                return kingdom
        return None

    def kingdom_locations(self, kingdom_id: int) -> list[Location]:
        kingdom = self.get_kingdom(kingdom_id)
        return kingdom.locations if kingdom else []

    def kingdom_location_ids(self, kingdom_id: int) -> list[str]:
        return [location.id for location in self.kingdom_locations(kingdom_id)]

    def location_name(self, location_id: str, default: str | None = None) -> str:
        """Display name for a location id, falling back to default or the id."""
        location = self.get_location(location_id)
        if location is not None:
            return location.name
        return default if default is not None else location_id
