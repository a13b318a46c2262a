"""Rich console observer for real-time session visibility.

Uses the Rich library to render travel, quest and effect events with
colors, which is handy when driving a session from a REPL or a debug
harness.
"""

from rich.console import Console
from rich.markup import escape

from wayfarer.observability.events import (
    ArrivalEvent,
    EffectAppliedEvent,
    EffectSkippedEvent,
    LocationSyncEvent,
    QuestStatusEvent,
    TravelStartedEvent,
)


class RichConsoleObserver:
    """Pretty console output using Rich."""

    TONE_STYLES = {
        "positive": "green",
        "negative": "red",
        "neutral": "cyan",
    }

    QUEST_STYLES = {
        "active": "[yellow]new[/]",
        "completed": "[green]completed[/]",
        "failed": "[red]failed[/]",
    }

    def __init__(
        self,
        console: Console | None = None,
        show_skipped: bool = True,
        indent: str = "  ",
    ) -> None:
        """Initialize the console observer.

        Args:
            console: Rich Console instance. Creates new one if not provided.
            show_skipped: Render skipped effects.
            indent: Indentation string for nested output.
        """
        self.console = console or Console()
        self.show_skipped = show_skipped
        self.indent = indent
        self._effect_count = 0

    def on_travel_started(self, event: TravelStartedEvent) -> None:
        """Render journey start."""
        self.console.print(
            f"[blue]>[/] {escape(event.from_id)} -> [bold]{escape(event.to_id)}[/] "
            f"({event.distance_days}d, {event.cost} gold, scene {event.scene_number})"
        )

    def on_arrival(self, event: ArrivalEvent) -> None:
        """Render arrival and any quests it finished."""
        self.console.print(f"[green]*[/] Arrived at [bold]{escape(event.location_name)}[/] [dim]({event.via})[/]")
        for quest_id in event.completed_quests:
            self.console.print(f"{self.indent}[green]+[/] {escape(quest_id)}")

    def on_effect_applied(self, event: EffectAppliedEvent) -> None:
        """Render an applied effect."""
        self._effect_count += 1
        style = self.TONE_STYLES.get(event.tone, "white")
        self.console.print(f"{self.indent}[{style}]{escape(event.description)}[/] [dim]{event.kind}[/]")

    def on_effect_skipped(self, event: EffectSkippedEvent) -> None:
        """Render a skipped effect."""
        if self.show_skipped:
            self.console.print(
                f"{self.indent}! effect #{event.index} skipped: {escape(event.reason)}", style="dim red"
            )

    def on_quest_status(self, event: QuestStatusEvent) -> None:
        """Render a quest status change."""
        status = self.QUEST_STYLES.get(event.status, event.status)
        self.console.print(f"[magenta]#[/] {escape(event.title)} {status}")

    def on_location_sync(self, event: LocationSyncEvent) -> None:
        """Render an inferred arrival."""
        self.console.print(
            f"[yellow]~[/] location sync {escape(event.previous_location_id)} -> "
            f"{escape(event.location_id)} [dim](by {event.matched_by})[/]"
        )

    @property
    def effect_count(self) -> int:
        return self._effect_count

    def reset(self) -> None:
        """Reset counters for a new scene."""
        self._effect_count = 0
