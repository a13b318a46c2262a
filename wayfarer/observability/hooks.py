"""Session hook protocol and implementations.

The SessionHook protocol defines the interface for receiving events from
a game session. Hooks are owned by the session instance; there is no
process-wide registry.
"""

import logging
from typing import Protocol, runtime_checkable

from wayfarer.observability.events import (
    ArrivalEvent,
    EffectAppliedEvent,
    EffectSkippedEvent,
    LocationSyncEvent,
    QuestStatusEvent,
    TravelStartedEvent,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionHook(Protocol):
    """Protocol for session hooks.

    Implement this protocol to receive events from a game session.
    """

    def on_travel_started(self, event: TravelStartedEvent) -> None:
        """Called when a journey begins."""
        ...

    def on_arrival(self, event: ArrivalEvent) -> None:
        """Called when the player arrives at a location."""
        ...

    def on_effect_applied(self, event: EffectAppliedEvent) -> None:
        """Called for each effect that changed state."""
        ...

    def on_effect_skipped(self, event: EffectSkippedEvent) -> None:
        """Called for each malformed or failed effect."""
        ...

    def on_quest_status(self, event: QuestStatusEvent) -> None:
        """Called when a quest is added, completed or failed."""
        ...

    def on_location_sync(self, event: LocationSyncEvent) -> None:
        """Called when a generated scene moved the player implicitly."""
        ...


class NullHook:
    """No-op hook for when observability is disabled.

    This is the default hook - it does nothing but satisfies the protocol.
    Using this avoids null checks throughout the code.
    """

    def on_travel_started(self, event: TravelStartedEvent) -> None:
        pass

    def on_arrival(self, event: ArrivalEvent) -> None:
        pass

    def on_effect_applied(self, event: EffectAppliedEvent) -> None:
        pass

    def on_effect_skipped(self, event: EffectSkippedEvent) -> None:
        pass

    def on_quest_status(self, event: QuestStatusEvent) -> None:
        pass

    def on_location_sync(self, event: LocationSyncEvent) -> None:
        pass


class CompositeHook:
    """Combines multiple hooks into one.

    Events are dispatched to all hooks in registration order. A hook that
    raises is logged and the remaining hooks still receive the event.
    """

    def __init__(self, hooks: list[SessionHook] | None = None) -> None:
        """Initialize with a list of hooks.

        Args:
            hooks: List of hooks to dispatch events to.
        """
        self.hooks: list[SessionHook] = list(hooks or [])

    def add(self, hook: SessionHook) -> None:
        self.hooks.append(hook)

    def remove(self, hook: SessionHook) -> None:
        if hook in self.hooks:
            self.hooks.remove(hook)

    def _dispatch(self, callback: str, event: object) -> None:
        for hook in self.hooks:
            try:
                getattr(hook, callback)(event)
            except Exception:
                logger.exception(f"Hook {type(hook).__name__}.{callback} failed")

    def on_travel_started(self, event: TravelStartedEvent) -> None:
        self._dispatch("on_travel_started", event)

    def on_arrival(self, event: ArrivalEvent) -> None:
        self._dispatch("on_arrival", event)

    def on_effect_applied(self, event: EffectAppliedEvent) -> None:
        self._dispatch("on_effect_applied", event)

    def on_effect_skipped(self, event: EffectSkippedEvent) -> None:
        self._dispatch("on_effect_skipped", event)

    def on_quest_status(self, event: QuestStatusEvent) -> None:
        self._dispatch("on_quest_status", event)

    def on_location_sync(self, event: LocationSyncEvent) -> None:
        self._dispatch("on_location_sync", event)
