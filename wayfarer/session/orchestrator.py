"""Game session orchestrator.

Holds the canonical travel state, quest ledger and player state of one
session and is the single entry point for the presentation layer and
the generation-service integration. Every mutation replaces whole
snapshots; callers must not mutate one session concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from wayfarer.config import Settings, get_settings
from wayfarer.effects.interpreter import EffectBatchResult, EffectInterpreter
from wayfarer.effects.schemas import Effect, FlagEffect, ItemEffect, StatEffect, TravelEffect
from wayfarer.ids import IdSequence
from wayfarer.observability.console_observer import RichConsoleObserver
from wayfarer.observability.events import (
    ArrivalEvent,
    LocationSyncEvent,
    QuestStatusEvent,
    TravelStartedEvent,
)
from wayfarer.observability.hooks import CompositeHook, SessionHook
from wayfarer.player.schemas import PlayerState, initial_player_state
from wayfarer.quests.ledger import QuestLedger, create_travel_quest, resolved_since
from wayfarer.quests.schemas import ActiveQuestInfo, Quest, QuestStatus
from wayfarer.session.schemas import (
    GameState,
    InTransitContext,
    RouteSummary,
    TravelContext,
    TravelQuestContext,
    WorldEvent,
    WorldEventType,
)
from wayfarer.travel.paths import project_paths
from wayfarer.travel.routes import routes_from_location
from wayfarer.travel.schemas import PathLine, Route, RouteOption, TravelState
from wayfarer.travel.state_machine import (
    begin_travel,
    clear_travel_quest,
    complete_travel,
    initial_travel_state,
    relocate,
    set_travel_quest,
    unlock_location,
)
from wayfarer.world.schemas import Kingdom, Location, WorldData

logger = logging.getLogger(__name__)


class GameSession:
    """Stateful coordinator for one player session.

    Handles:
    - Route and map-path queries for the current location
    - Travel start and arrival, including the arrival quest sweep
    - Location unlocks and scenario-driven forced travel
    - Quest add / complete / fail and reward application
    - Effect batches from the generation service
    - Implicit arrivals inferred from generated scenes
    """

    def __init__(
        self,
        world: WorldData,
        travel_state: TravelState,
        player_state: PlayerState | None = None,
        ledger: QuestLedger | None = None,
        scene_number: int = 0,
        act_number: int = 1,
        settings: Settings | None = None,
        hooks: list[SessionHook] | None = None,
    ) -> None:
        """Initialize session.

        Args:
            world: Immutable world map.
            travel_state: Opening travel state.
            player_state: Player state; a fresh one from settings if omitted.
            ledger: Quest ledger; empty if omitted.
            scene_number: Current scene number.
            act_number: Current story act (1-3).
            settings: Engine settings; the cached settings if omitted.
            hooks: Observability hooks owned by this session.
        """
        self.settings = settings or get_settings()
        self.world = world
        self.scene_number = scene_number
        self.act_number = act_number

        self.hook = CompositeHook(hooks)
        if self.settings.console_observer:
            self.hook.add(RichConsoleObserver())

        self.ids = IdSequence()
        self._travel = travel_state
        self._player = player_state or self._fresh_player(travel_state)
        self._ledger = ledger or QuestLedger()
        self._world_events: tuple[WorldEvent, ...] = ()
        self._explicit_move_scene: int | None = None

    @classmethod
    def start(
        cls,
        world: WorldData,
        starting_location_id: str,
        starting_kingdom_id: int,
        settings: Settings | None = None,
        hooks: list[SessionHook] | None = None,
    ) -> GameSession:
        """Create a session at a starting location with its kingdom unlocked."""
        travel = initial_travel_state(world, starting_location_id, starting_kingdom_id)
        return cls(world, travel, settings=settings, hooks=hooks)

    def reinitialize(self, starting_location_id: str, starting_kingdom_id: int) -> None:
        """Reset travel, quests and player state for a new starting point."""
        if self.world.get_kingdom(starting_kingdom_id) is None:
            logger.warning(f"Cannot reinitialize: unknown kingdom {starting_kingdom_id}")
            return
        self._travel = initial_travel_state(self.world, starting_location_id, starting_kingdom_id)
        self._player = self._fresh_player(self._travel)
        self._ledger = QuestLedger()
        self._world_events = ()
        self._explicit_move_scene = None
        self.ids = IdSequence()
        self.scene_number = 0

    def add_hook(self, hook: SessionHook) -> None:
        self.hook.add(hook)

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def travel_state(self) -> TravelState:
        return self._travel

    @property
    def player_state(self) -> PlayerState:
        return self._player

    @player_state.setter
    def player_state(self, value: PlayerState) -> None:
        self._player = value

    @property
    def ledger(self) -> QuestLedger:
        return self._ledger

    @property
    def quests(self) -> tuple[Quest, ...]:
        return self._ledger.quests

    @property
    def active_quest_id(self) -> str | None:
        return self._ledger.active_quest_id

    @property
    def world_events(self) -> tuple[WorldEvent, ...]:
        return self._world_events

    def snapshot(self) -> GameState:
        """Composed snapshot of the whole session state."""
        return GameState(
            travel=self._travel,
            player=self._player,
            quests=self._ledger.quests,
            active_quest_id=self._ledger.active_quest_id,
            world_events=self._world_events,
            scene_number=self.scene_number,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_available_routes(self) -> list[RouteOption]:
        """All routes from the current location with destination names.

        Unlocked routes come first, then by duration.
        """
        routes = routes_from_location(self._travel.current_location_id, self.world, self._travel)
        return [
            RouteOption(route=route, target_name=self.world.location_name(route.to_id, "Unknown"))
            for route in routes
        ]

    def get_travel_paths(self, kingdom_only: bool = True) -> list[PathLine]:
        return project_paths(
            self._travel.current_location_id, self.world, self._travel, kingdom_only
        )

    def get_current_location(self) -> Location | None:
        return self.world.get_location(self._travel.current_location_id)

    def get_current_kingdom(self) -> Kingdom | None:
        return self.world.get_kingdom(self._travel.current_kingdom_id)

    def get_travel_quest_target(self) -> Location | None:
        if self._travel.travel_quest is None:
            return None
        return self.world.get_location(self._travel.travel_quest.target_location_id)

    def get_active_quests(self) -> list[Quest]:
        return self._ledger.active_quests

    def get_active_quest_info(self) -> list[ActiveQuestInfo]:
        return self._ledger.active_quest_summaries()

    def build_travel_context(self) -> TravelContext:
        """Read-only travel context for the generation service."""
        travel = self._travel
        routes = [
            RouteSummary(
                location_id=route.to_id,
                location_name=self.world.location_name(route.to_id, "Unknown"),
                distance_days=route.distance_days,
                cost=route.cost,
                danger=route.danger,
            )
            for route in routes_from_location(travel.current_location_id, self.world, travel)
            if route.is_unlocked
        ]

        travel_quest = None
        if travel.travel_quest is not None:
            forced = travel.travel_quest
            travel_quest = TravelQuestContext(
                target_location_id=forced.target_location_id,
                target_location_name=self.world.location_name(forced.target_location_id, ""),
                reason=forced.reason,
                deadline=forced.deadline,
            )

        in_transit = None
        if travel.traveling is not None:
            progress = travel.traveling
            in_transit = InTransitContext(
                from_id=progress.from_id,
                from_name=self.world.location_name(progress.from_id, ""),
                to_id=progress.to_id,
                to_name=self.world.location_name(progress.to_id, ""),
                days_remaining=progress.days_remaining,
                total_days=progress.total_days,
            )

        return TravelContext(
            current_location_id=travel.current_location_id,
            current_kingdom_id=travel.current_kingdom_id,
            visited_locations=sorted(travel.visited_locations),
            unlocked_locations=sorted(travel.unlocked_locations),
            available_routes=routes,
            travel_quest=travel_quest,
            in_transit=in_transit,
            active_quests=self._ledger.active_quest_summaries(),
        )

    # =========================================================================
    # Travel
    # =========================================================================

    def travel_to(self, route: Route) -> bool:
        """Set out along a route.

        Deducts the route cost from gold (floored at zero) when
        charge_travel_cost is enabled.

        Args:
            route: A route from the current location.

        Returns:
            True if the journey started, False if it was refused.
        """
        travel = self._travel
        if travel.traveling is not None:
            logger.warning(f"Refusing travel to {route.to_id}: already in transit")
            return False
        if route.from_id != travel.current_location_id:
            logger.warning(
                f"Refusing travel: route starts at {route.from_id}, "
                f"player is at {travel.current_location_id}"
            )
            return False
        if not route.is_unlocked and route.to_id not in travel.unlocked_locations:
            logger.warning(f"Refusing travel along locked route to {route.to_id}")
            return False

        self._travel = begin_travel(travel, route, self.scene_number)
        if self.settings.charge_travel_cost and route.cost:
            stats = self._player.stats
            self._player = self._player.model_copy(
                update={"stats": stats.model_copy(update={"gold": max(0, stats.gold - route.cost)})}
            )

        self.hook.on_travel_started(
            TravelStartedEvent(
                from_id=route.from_id,
                to_id=route.to_id,
                distance_days=route.distance_days,
                cost=route.cost,
                scene_number=self.scene_number,
            )
        )
        return True

    def arrive_at_destination(self) -> list[Quest]:
        """Finish the current journey.

        Completes travel, runs the arrival quest sweep and clears the
        forced-travel pointer when its target was reached.

        Returns:
            Quests completed by this arrival (empty if not in transit).
        """
        progress = self._travel.traveling
        if progress is None:
            logger.warning("arrive_at_destination called while not travelling")
            return []

        kingdom = self.world.get_kingdom_for_location(progress.to_id)
        travel = complete_travel(self._travel, kingdom.id if kingdom else None)
        return self._arrive(travel, via="travel")

    def unlock_new_location(self, location_id: str) -> None:
        before = self._travel
        self._travel = unlock_location(self._travel, location_id)
        self._record_unlocks(before, self._travel)

    def set_travel_quest_from_scenario(
        self,
        target_location_id: str,
        reason: str,
        deadline: int | None = None,
    ) -> Quest | None:
        """Demand travel to a location on behalf of the scenario.

        Creates the travel quest, tracks it, points travel_quest at it and
        unlocks the target.

        Returns:
            The created quest, or None if the target is unknown.
        """
        target = self.world.get_location(target_location_id)
        if target is None:
            logger.warning(f"Cannot set travel quest: unknown location {target_location_id}")
            return None

        quest = create_travel_quest(
            target.id,
            target.name,
            reason,
            self.act_number,
            self.scene_number,
            deadline=deadline,
            default_reputation=self.settings.default_travel_quest_reputation,
        )
        before = self._ledger
        ledger = before.add(quest)
        if ledger.get(quest.id) is not None:
            ledger = ledger.model_copy(update={"active_quest_id": quest.id})
        self._commit_ledger(before, ledger)

        travel = set_travel_quest(self._travel, target.id, reason, quest.id, deadline)
        self._set_travel(unlock_location(travel, target.id))
        return ledger.get(quest.id)

    # =========================================================================
    # Quests
    # =========================================================================

    def add_quest(self, quest: Quest) -> None:
        self._commit_ledger(self._ledger, self._ledger.add(quest))

    def complete_quest(self, quest_id: str) -> None:
        self._commit_ledger(self._ledger, self._ledger.complete(quest_id))

    def fail_quest(self, quest_id: str) -> None:
        self._commit_ledger(self._ledger, self._ledger.fail(quest_id))

    def expire_overdue_quests(self, scene_number: int | None = None) -> list[Quest]:
        """Fail active quests whose deadline lies before the given scene."""
        scene = self.scene_number if scene_number is None else scene_number
        before = self._ledger
        return self._commit_ledger(before, before.expire_overdue(scene))

    # =========================================================================
    # Effects
    # =========================================================================

    def process_effects(
        self,
        effects: Iterable[Effect | dict[str, Any]],
        scene_number: int,
    ) -> EffectBatchResult:
        """Apply an effect batch from the generation service and commit it.

        When the result requires a travel choice, the caller should stop
        generating further scenes and let the player pick a destination.

        Args:
            effects: Typed effects or raw payloads, applied in order.
            scene_number: Scene the effects belong to.

        Returns:
            The interpreter result, including the applied-effects log.
        """
        self.scene_number = scene_number
        result = self._interpreter().apply(
            effects,
            self._player,
            self._travel,
            self._ledger,
            scene_number,
            act_number=self.act_number,
        )

        before_travel = self._travel
        self._player = result.player_state
        self._travel = result.travel_state
        self._record_unlocks(before_travel, self._travel)
        self._commit_ledger(self._ledger, result.ledger)

        if result.moved:
            self._explicit_move_scene = scene_number
            self._arrive(self._travel, via="effect")

        if result.requires_travel_choice:
            logger.info("Effects require travel; waiting for the player to choose a destination")
        return result

    # =========================================================================
    # Location Sync
    # =========================================================================

    def sync_location_from_scene(
        self,
        location_id: str | None = None,
        location_name: str | None = None,
        kingdom_id: int | None = None,
        scene_number: int | None = None,
    ) -> bool:
        """Treat a generated scene's location as an implicit arrival.

        Best-effort fallback for scenes that narrate travel without an
        explicit travel:move effect. An explicit id is used when it names a
        known location. Otherwise the scene's location text is matched by
        case-insensitive containment against the journey destination, then
        the travel-quest target. Name matching can misfire on similarly
        named places. Never overrides an explicit move in the same scene.

        Args:
            location_id: Location id reported by the scene, if any.
            location_name: Free-text location reported by the scene.
            kingdom_id: Kingdom id reported by the scene, if any.
            scene_number: Scene being synced. Advances the session scene
                when given; defaults to the current scene.

        Returns:
            True if the session moved to a new location.
        """
        if scene_number is not None:
            self.scene_number = scene_number
        if self._explicit_move_scene == self.scene_number:
            logger.debug("Skipping location sync: explicit move already applied this scene")
            return False

        matched_by = "id"
        target = self.world.get_location(location_id) if location_id else None
        if target is None and location_name:
            target = self._match_location_name(location_name)
            matched_by = "name"
        if target is None or target.id == self._travel.current_location_id:
            return False

        previous = self._travel.current_location_id
        logger.info(f"Location sync: {previous} -> {target.id} (by {matched_by})")
        self.hook.on_location_sync(
            LocationSyncEvent(
                previous_location_id=previous,
                location_id=target.id,
                matched_by=matched_by,
            )
        )

        if kingdom_id is None or self.world.get_kingdom(kingdom_id) is None:
            kingdom = self.world.get_kingdom_for_location(target.id)
            kingdom_id = kingdom.id if kingdom else None

        self._arrive(relocate(self._travel, target.id, kingdom_id), via="sync")
        return True

    def _match_location_name(self, text: str) -> Location | None:
        haystack = text.lower()
        candidates = []
        if self._travel.traveling is not None:
            candidates.append(self._travel.traveling.to_id)
        if self._travel.travel_quest is not None:
            candidates.append(self._travel.travel_quest.target_location_id)

        for candidate_id in candidates:
            location = self.world.get_location(candidate_id)
            if location is not None and location.name.lower() in haystack:
                return location
        return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _interpreter(self) -> EffectInterpreter:
        return EffectInterpreter(
            world=self.world,
            ids=self.ids,
            hook=self.hook,
            relation_min=self.settings.relation_min,
            relation_max=self.settings.relation_max,
            travel_quest_reputation=self.settings.default_travel_quest_reputation,
        )

    def _fresh_player(self, travel: TravelState) -> PlayerState:
        player = initial_player_state(
            starting_gold=self.settings.starting_gold,
            starting_reputation=self.settings.starting_reputation,
            starting_influence=self.settings.starting_influence,
            starting_health=self.settings.starting_health,
        )
        return player.model_copy(
            update={
                "current_location_id": travel.current_location_id,
                "visited_locations": travel.visited_locations,
            }
        )

    def _arrive(self, travel: TravelState, via: str) -> list[Quest]:
        """Arrival bookkeeping shared by travel, effect moves and sync."""
        location_id = travel.current_location_id
        before = self._travel
        travel = unlock_location(travel, location_id)
        if travel.travel_quest is not None and travel.travel_quest.target_location_id == location_id:
            travel = clear_travel_quest(travel)
        self._set_travel(travel)
        self._record_unlocks(before, travel)

        player = self._player
        self._player = player.model_copy(
            update={
                "current_location_id": location_id,
                "visited_locations": player.visited_locations | {location_id},
            }
        )

        resolved = self._commit_ledger(self._ledger, self._ledger.on_arrival(location_id))
        completed = [quest for quest in resolved if quest.status is QuestStatus.COMPLETED]

        self._record(WorldEventType.ARRIVED, location_id, via=via)
        self.hook.on_arrival(
            ArrivalEvent(
                location_id=location_id,
                location_name=self.world.location_name(location_id),
                via=via,
                completed_quests=[quest.id for quest in completed],
            )
        )
        return completed

    def _commit_ledger(self, before: QuestLedger, after: QuestLedger) -> list[Quest]:
        """Install a new ledger and settle the consequences of resolved quests.

        Returns:
            Quests that moved from active to a terminal status.
        """
        if after is before:
            return []
        self._ledger = after

        known = {quest.id for quest in before.quests}
        for quest in after.quests:
            if quest.id not in known:
                self.hook.on_quest_status(
                    QuestStatusEvent(quest_id=quest.id, title=quest.title, status=quest.status.value)
                )

        resolved = resolved_since(before, after)
        for quest in resolved:
            self._settle_quest(quest)
        return resolved

    def _settle_quest(self, quest: Quest) -> None:
        travel = self._travel
        if travel.travel_quest is not None and travel.travel_quest.quest_id == quest.id:
            self._set_travel(clear_travel_quest(travel))

        completed = quest.status is QuestStatus.COMPLETED
        event_type = WorldEventType.QUEST_COMPLETED if completed else WorldEventType.QUEST_FAILED
        self._record(event_type, quest.id)
        self.hook.on_quest_status(
            QuestStatusEvent(quest_id=quest.id, title=quest.title, status=quest.status.value)
        )

        if not self.settings.apply_quest_rewards:
            return
        if completed:
            effects = self._reward_effects(quest)
        else:
            effects = self._failure_effects(quest)
        if not effects:
            return

        result = self._interpreter().apply(
            effects, self._player, self._travel, self._ledger, self.scene_number, self.act_number
        )
        before = self._travel
        self._player = result.player_state
        self._travel = result.travel_state
        self._record_unlocks(before, self._travel)
        logger.info(f"Settled quest {quest.id}: {[a.description for a in result.applied]}")

    def _reward_effects(self, quest: Quest) -> list[Effect]:
        rewards = quest.rewards
        if rewards is None:
            return []
        effects: list[Effect] = []
        for attribute in ("gold", "reputation", "influence"):
            amount = getattr(rewards, attribute)
            if amount:
                effects.append(StatEffect(attribute=attribute, change=amount))
        effects.extend(ItemEffect(action="add", item_name=name) for name in rewards.items)
        for location_id in (*rewards.unlock_locations, *rewards.unlock_routes):
            effects.append(TravelEffect(action="unlock_route", target_location_id=location_id))
        return effects

    def _failure_effects(self, quest: Quest) -> list[Effect]:
        consequences = quest.failure_consequences
        if consequences is None:
            return []
        effects: list[Effect] = []
        if consequences.reputation:
            effects.append(StatEffect(attribute="reputation", change=consequences.reputation))
        effects.extend(FlagEffect(flag_id=flag, value=True) for flag in consequences.flags)
        return effects

    def _set_travel(self, travel: TravelState) -> None:
        self._travel = travel

    def _record_unlocks(self, before: TravelState, after: TravelState) -> None:
        if after.unlocked_locations is before.unlocked_locations:
            return
        for location_id in sorted(after.unlocked_locations - before.unlocked_locations):
            self._record(WorldEventType.LOCATION_UNLOCKED, location_id)

    def _record(self, event_type: WorldEventType, target_id: str, **data: Any) -> None:
        event = WorldEvent(
            type=event_type,
            target_id=target_id,
            scene_number=self.scene_number,
            data=data,
        )
        self._world_events = (*self._world_events, event)
