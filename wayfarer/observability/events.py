"""Event dataclasses for session observability hooks.

These events are emitted by the game session and the effect interpreter
at key points to provide visibility into state transitions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class TravelStartedEvent:
    """Emitted when the player sets out along a route."""

    from_id: str
    to_id: str
    distance_days: int
    cost: int
    scene_number: int
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ArrivalEvent:
    """Emitted when the player arrives somewhere.

    ``via`` is "travel" for a completed journey, "effect" for a narrative
    move and "sync" for an arrival inferred from a generated scene.
    """

    location_id: str
    location_name: str
    via: str = "travel"
    completed_quests: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class EffectAppliedEvent:
    """Emitted after a single effect changed state."""

    kind: str
    description: str
    tone: str
    scene_number: int
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class EffectSkippedEvent:
    """Emitted when an effect was malformed or failed to apply."""

    index: int
    reason: str
    payload: Any = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class QuestStatusEvent:
    """Emitted when a quest is added or reaches a terminal status."""

    quest_id: str
    title: str
    status: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class LocationSyncEvent:
    """Emitted when a generated scene implied an arrival."""

    previous_location_id: str
    location_id: str
    matched_by: str  # "id" or "name"
    timestamp: datetime = field(default_factory=datetime.now)
