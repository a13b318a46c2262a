"""Observability module for game session monitoring.

Provides hooks and observers for visibility into travel, quest and
effect processing.
"""

from wayfarer.observability.console_observer import RichConsoleObserver
from wayfarer.observability.events import (
    ArrivalEvent,
    EffectAppliedEvent,
    EffectSkippedEvent,
    LocationSyncEvent,
    QuestStatusEvent,
    TravelStartedEvent,
)
from wayfarer.observability.hooks import CompositeHook, NullHook, SessionHook

__all__ = [
    # Events
    "ArrivalEvent",
    "EffectAppliedEvent",
    "EffectSkippedEvent",
    "LocationSyncEvent",
    "QuestStatusEvent",
    "TravelStartedEvent",
    # Hooks
    "SessionHook",
    "NullHook",
    "CompositeHook",
    # Observers
    "RichConsoleObserver",
]
