"""Core test fixtures for wayfarer engine tests."""

import logging

import pytest

from wayfarer.config import Settings
from wayfarer.session import GameSession
from wayfarer.travel import initial_travel_state
from wayfarer.world import BiomeType, LocationType, WorldData
from tests.factories import create_kingdom, create_location, create_world


@pytest.fixture(autouse=True)
def _capture_logs(caplog):
    """Capture engine logs at DEBUG so tests can assert on warnings."""
    caplog.set_level(logging.DEBUG, logger="wayfarer")


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def two_kingdom_world() -> WorldData:
    """K1 holds only its capital C1; K2 holds capital C2 and city T2.

    Distances on a 1000-wide map:
        C1 -> C2: 600 (2 days, cross-border plain, risky)
        C1 -> T2: ~721 (3 days, cross-border into forest, risky)
        C2 -> T2: 400 (1 day, forest, risky)
    """
    k1 = create_kingdom(
        id=1,
        name="Aldmark",
        capital=create_location(id="C1", name="Aldhaven", x=100, y=100, kingdom_id=1),
    )
    k2 = create_kingdom(
        id=2,
        name="Brenmoor",
        capital=create_location(id="C2", name="Brenhold", x=700, y=100, kingdom_id=2),
        cities=[
            create_location(
                id="T2",
                name="Thornwick",
                x=700,
                y=500,
                kingdom_id=2,
                biome=BiomeType.FOREST,
            )
        ],
    )
    return create_world(kingdoms=[k1, k2])


@pytest.fixture
def realm_world() -> WorldData:
    """A larger world: K1 has a capital and three cities of varied terrain.

    From C1 (plain, 100,100):
        M  Millbrook   plain     300 away -> 1 day, safe, 10 gold
        A  Oakvale     forest    100 away -> 1 day, risky, 15 gold
        B  Frostpeak   mountain  500 away -> 2 days, risky, 30 gold
    K2 is the same as in two_kingdom_world.
    """
    k1 = create_kingdom(
        id=1,
        name="Aldmark",
        capital=create_location(id="C1", name="Aldhaven", x=100, y=100, kingdom_id=1),
        cities=[
            create_location(id="M", name="Millbrook", x=400, y=100, kingdom_id=1),
            create_location(
                id="A", name="Oakvale", x=200, y=100, kingdom_id=1, biome=BiomeType.FOREST
            ),
            create_location(
                id="B",
                name="Frostpeak",
                x=100,
                y=600,
                kingdom_id=1,
                biome=BiomeType.MOUNTAIN,
                type=LocationType.FORTRESS,
            ),
        ],
    )
    k2 = create_kingdom(
        id=2,
        name="Brenmoor",
        capital=create_location(id="C2", name="Brenhold", x=700, y=100, kingdom_id=2),
        cities=[
            create_location(
                id="T2", name="Thornwick", x=700, y=500, kingdom_id=2, biome=BiomeType.FOREST
            )
        ],
    )
    return create_world(kingdoms=[k1, k2])


@pytest.fixture
def start_state(two_kingdom_world):
    """Idle travel state at C1 with only K1 unlocked."""
    return initial_travel_state(two_kingdom_world, "C1", 1)


@pytest.fixture
def game_session(two_kingdom_world, settings) -> GameSession:
    """A fresh session at C1."""
    return GameSession.start(two_kingdom_world, "C1", 1, settings=settings)


@pytest.fixture
def realm_session(realm_world, settings) -> GameSession:
    """A fresh session at C1 of the larger world."""
    return GameSession.start(realm_world, "C1", 1, settings=settings)


# =============================================================================
# Observability
# =============================================================================


class RecordingHook:
    """Hook that records every session event by callback name."""

    def __init__(self):
        self.events = []

    def _record(self, name, event):
        self.events.append((name, event))

    def names(self):
        return [name for name, _ in self.events]

    def of(self, name):
        return [event for event_name, event in self.events if event_name == name]

    def on_travel_started(self, event):
        self._record("travel_started", event)

    def on_arrival(self, event):
        self._record("arrival", event)

    def on_effect_applied(self, event):
        self._record("effect_applied", event)

    def on_effect_skipped(self, event):
        self._record("effect_skipped", event)

    def on_quest_status(self, event):
        self._record("quest_status", event)

    def on_location_sync(self, event):
        self._record("location_sync", event)


@pytest.fixture
def recorder() -> RecordingHook:
    return RecordingHook()


@pytest.fixture
def require_relic():
    """Nested require_travel payload targeting T2."""
    return {
        "type": "travel",
        "travel": {
            "action": "require_travel",
            "targetLocationId": "T2",
            "reason": "find the relic",
        },
    }
