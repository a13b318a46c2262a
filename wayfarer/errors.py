"""Exceptions raised for structural invariant violations.

Expected edge cases (unknown ids, invalid transitions, malformed effects)
never raise; they return empty results or the unchanged snapshot.
"""


class WayfarerError(Exception):
    """Base class for engine errors."""


class InvalidRouteError(WayfarerError, ValueError):
    """A route was constructed between a location and itself."""

    def __init__(self, location_id: str) -> None:
        self.location_id = location_id
        super().__init__(f"Route origin and destination are the same: {location_id}")
