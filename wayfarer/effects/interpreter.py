"""Effect interpreter: folds a batch of narrative effects into game state.

Applies effects in order against working copies of the player state,
travel state and quest ledger. Later effects see the result of earlier
ones. A malformed effect is skipped without aborting the batch.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from wayfarer.effects.schemas import (
    EFFECT_TYPES,
    AppliedEffect,
    Effect,
    EffectKind,
    EffectTone,
    FlagEffect,
    ItemEffect,
    LocationEffect,
    QuestEffect,
    RelationshipEffect,
    StatEffect,
    TravelEffect,
    parse_effect,
)
from wayfarer.ids import IdSequence
from wayfarer.observability.events import EffectAppliedEvent, EffectSkippedEvent
from wayfarer.observability.hooks import NullHook, SessionHook
from wayfarer.player.schemas import (
    InventoryItem,
    NPCRelationship,
    PlayerState,
    RelationshipStatus,
    StoryFlag,
)
from wayfarer.quests.ledger import QuestLedger, create_travel_quest
from wayfarer.quests.schemas import Objective, Quest, QuestType
from wayfarer.travel.state_machine import relocate, set_travel_quest, unlock_location
from wayfarer.travel.schemas import TravelState
from wayfarer.world.schemas import WorldData

logger = logging.getLogger(__name__)


@dataclass
class EffectBatchResult:
    """Outcome of applying one effect batch."""

    player_state: PlayerState
    travel_state: TravelState
    ledger: QuestLedger
    applied: list[AppliedEffect] = field(default_factory=list)
    new_quests: list[Quest] = field(default_factory=list)
    skipped: int = 0
    moved: bool = False  # An explicit travel:move was applied
    requires_travel: bool = False  # A require_travel effect was applied

    @property
    def requires_travel_choice(self) -> bool:
        """Whether scene generation should halt so the player can pick a destination."""
        return self.requires_travel


class EffectInterpreter:
    """Applies effect batches to player, travel and quest state.

    Handles:
    - Stat deltas (floored at zero)
    - Inventory stacking and removal
    - NPC relationships (clamped)
    - Story flags
    - Location unlocks
    - Travel moves, route unlocks and forced travel
    - Quest add / update / complete / fail
    """

    def __init__(
        self,
        world: WorldData | None = None,
        ids: IdSequence | None = None,
        hook: SessionHook | None = None,
        relation_min: int = -100,
        relation_max: int = 100,
        travel_quest_reputation: int = 10,
    ) -> None:
        """Initialize interpreter.

        Args:
            world: World map, used to resolve location names and kingdoms.
            ids: Session id sequence for generated item and NPC ids.
            hook: Observability hook.
            relation_min: Lower bound for NPC relation values.
            relation_max: Upper bound for NPC relation values.
            travel_quest_reputation: Default reputation reward of travel quests.
        """
        self.world = world
        self.ids = ids or IdSequence()
        self.hook: SessionHook = hook or NullHook()
        self.relation_min = relation_min
        self.relation_max = relation_max
        self.travel_quest_reputation = travel_quest_reputation

        self._handlers: dict[type, Callable[[EffectBatchResult, Any, int, int], AppliedEffect | None]] = {
            StatEffect: self._apply_stat,
            ItemEffect: self._apply_item,
            RelationshipEffect: self._apply_relationship,
            FlagEffect: self._apply_flag,
            LocationEffect: self._apply_location,
            TravelEffect: self._apply_travel,
            QuestEffect: self._apply_quest,
        }
        missing = set(EFFECT_TYPES) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for effect types: {sorted(t.__name__ for t in missing)}")

    def apply(
        self,
        effects: Iterable[Effect | dict[str, Any]],
        player_state: PlayerState,
        travel_state: TravelState,
        ledger: QuestLedger,
        scene_number: int,
        act_number: int = 1,
    ) -> EffectBatchResult:
        """Apply an ordered effect batch.

        Args:
            effects: Typed effects or raw payloads (flat or nested form).
            player_state: Player snapshot.
            travel_state: Travel snapshot.
            ledger: Quest ledger snapshot.
            scene_number: Scene the effects belong to.
            act_number: Current story act, used for spawned quests.

        Returns:
            EffectBatchResult with the new snapshots and the applied log.
        """
        result = EffectBatchResult(
            player_state=player_state,
            travel_state=travel_state,
            ledger=ledger,
        )

        for index, raw in enumerate(effects):
            try:
                effect = parse_effect(raw)
            except ValidationError as e:
                self._skip(result, index, f"malformed payload ({e.error_count()} errors)", raw)
                continue

            handler = self._handlers[type(effect)]
            try:
                applied = handler(result, effect, scene_number, act_number)
            except Exception as e:
                logger.exception(f"Effect #{index} ({effect.kind}) failed to apply")
                self._skip(result, index, str(e), raw)
                continue

            if applied is None:
                continue

            logger.debug(f"Applied effect #{index}: {applied.description}")
            result.applied.append(applied)
            self._notify(
                "on_effect_applied",
                EffectAppliedEvent(
                    kind=applied.kind.value,
                    description=applied.description,
                    tone=applied.tone.value,
                    scene_number=scene_number,
                ),
            )

        return result

    # =========================================================================
    # Handlers
    # =========================================================================

    def _apply_stat(
        self, result: EffectBatchResult, effect: StatEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        if effect.target != "player":
            logger.debug(f"Ignoring stat effect on non-player target {effect.target}")
            return None

        stats = result.player_state.stats
        if not stats.has_attribute(effect.attribute):
            logger.warning(f"Skipping stat effect on unknown attribute {effect.attribute!r}")
            return None

        old_value = getattr(stats, effect.attribute)
        new_stats = stats.model_copy(update={effect.attribute: max(0, old_value + effect.change)})
        result.player_state = result.player_state.model_copy(update={"stats": new_stats})

        return AppliedEffect(
            description=f"{effect.attribute.capitalize()}: {_signed(effect.change)}",
            tone=_tone(effect.change),
            kind=EffectKind.STAT,
        )

    def _apply_item(
        self, result: EffectBatchResult, effect: ItemEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        player = result.player_state
        existing = player.find_item(effect.item_name)

        if effect.action == "add":
            if existing is not None:
                inventory = _replace(
                    player.inventory,
                    existing,
                    existing.model_copy(update={"quantity": existing.quantity + 1}),
                )
            else:
                item = InventoryItem(
                    id=effect.item_id or self.ids.next("item"),
                    name=effect.item_name,
                    type=effect.item_type,
                    quantity=1,
                )
                inventory = (*player.inventory, item)
            result.player_state = player.model_copy(update={"inventory": inventory})
            return AppliedEffect(
                description=f"Gained: {effect.item_name}",
                tone=EffectTone.POSITIVE,
                kind=EffectKind.ITEM,
            )

        if existing is None:
            logger.debug(f"Cannot remove {effect.item_name!r}: not in inventory")
            return None

        if existing.quantity > 1:
            inventory = _replace(
                player.inventory,
                existing,
                existing.model_copy(update={"quantity": existing.quantity - 1}),
            )
        else:
            inventory = tuple(item for item in player.inventory if item is not existing)
        result.player_state = player.model_copy(update={"inventory": inventory})
        return AppliedEffect(
            description=f"Lost: {effect.item_name}",
            tone=EffectTone.NEGATIVE,
            kind=EffectKind.ITEM,
        )

    def _apply_relationship(
        self,
        result: EffectBatchResult,
        effect: RelationshipEffect,
        scene_number: int,
        act_number: int,
    ) -> AppliedEffect | None:
        player = result.player_state
        existing = player.find_relationship(effect.npc_name, effect.npc_id)

        if existing is not None:
            updated = existing.model_copy(
                update={
                    "relation": self._clamp_relation(existing.relation + effect.change),
                    "status": effect.new_status or existing.status,
                    "last_interaction": scene_number,
                }
            )
            relationships = _replace(player.relationships, existing, updated)
        else:
            if effect.new_status is not None:
                status = effect.new_status
            elif effect.change > 0:
                status = RelationshipStatus.NEUTRAL
            else:
                status = RelationshipStatus.RIVAL
            relationship = NPCRelationship(
                npc_id=effect.npc_id or self.ids.next("npc"),
                npc_name=effect.npc_name,
                relation=self._clamp_relation(effect.change),
                status=status,
                last_interaction=scene_number,
            )
            relationships = (*player.relationships, relationship)

        result.player_state = player.model_copy(update={"relationships": relationships})
        return AppliedEffect(
            description=f"{effect.npc_name}: {_signed(effect.change)}",
            tone=_tone(effect.change),
            kind=EffectKind.RELATIONSHIP,
        )

    def _apply_flag(
        self, result: EffectBatchResult, effect: FlagEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        player = result.player_state
        flag = StoryFlag(id=effect.flag_id, value=effect.value, set_at=scene_number)
        existing = player.get_flag(effect.flag_id)
        if existing is not None:
            flags = _replace(player.flags, existing, flag)
        else:
            flags = (*player.flags, flag)
        result.player_state = player.model_copy(update={"flags": flags})
        return AppliedEffect(
            description=f"Event: {effect.flag_id}",
            tone=EffectTone.NEUTRAL,
            kind=EffectKind.FLAG,
        )

    def _apply_location(
        self, result: EffectBatchResult, effect: LocationEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        if effect.action != "unlock":
            logger.debug(f"Location action {effect.action!r} has no engine state; ignoring")
            return None

        location_id = effect.location_id
        player = result.player_state
        newly_visited = location_id not in player.visited_locations
        newly_unlocked = location_id not in result.travel_state.unlocked_locations
        if not (newly_visited or newly_unlocked):
            return None

        if newly_visited:
            result.player_state = player.model_copy(
                update={"visited_locations": player.visited_locations | {location_id}}
            )
        result.travel_state = unlock_location(result.travel_state, location_id)
        return AppliedEffect(
            description=f"Location opened: {self._location_name(location_id)}",
            tone=EffectTone.POSITIVE,
            kind=EffectKind.LOCATION,
        )

    def _apply_travel(
        self, result: EffectBatchResult, effect: TravelEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        target_id = effect.target_location_id
        target_name = self._location_name(target_id, effect.target_location_name)

        if effect.action == "move":
            kingdom = self.world.get_kingdom_for_location(target_id) if self.world else None
            result.travel_state = relocate(
                result.travel_state, target_id, kingdom.id if kingdom else None
            )
            player = result.player_state
            result.player_state = player.model_copy(
                update={
                    "current_location_id": target_id,
                    "visited_locations": player.visited_locations | {target_id},
                }
            )
            result.moved = True
            return AppliedEffect(
                description=f"Moved to {target_name}",
                tone=EffectTone.NEUTRAL,
                kind=EffectKind.TRAVEL,
            )

        if effect.action == "unlock_route":
            if target_id in result.travel_state.unlocked_locations:
                return None
            result.travel_state = unlock_location(result.travel_state, target_id)
            return AppliedEffect(
                description=f"Route opened: {target_name}",
                tone=EffectTone.POSITIVE,
                kind=EffectKind.TRAVEL,
            )

        # require_travel
        quest = create_travel_quest(
            target_id,
            target_name,
            effect.reason or "",
            act_number,
            scene_number,
            deadline=effect.deadline,
            default_reputation=self.travel_quest_reputation,
        )
        ledger = result.ledger.add(quest)
        if ledger is not result.ledger:
            result.new_quests.append(quest)
        result.ledger = ledger

        travel = set_travel_quest(
            result.travel_state, target_id, quest.description, quest.id, effect.deadline
        )
        result.travel_state = unlock_location(travel, target_id)
        result.requires_travel = True
        return AppliedEffect(
            description=f"Quest: {effect.reason}",
            tone=EffectTone.NEUTRAL,
            kind=EffectKind.TRAVEL,
        )

    def _apply_quest(
        self, result: EffectBatchResult, effect: QuestEffect, scene_number: int, act_number: int
    ) -> AppliedEffect | None:
        ledger = result.ledger

        if effect.action == "add":
            quest = Quest(
                id=effect.quest_id,
                title=effect.title or effect.quest_id,
                description=effect.description or "",
                type=effect.quest_type or QuestType.MAIN,
                objectives=tuple(
                    Objective(
                        id=obj.id,
                        description=obj.description,
                        type=obj.type,
                        target=obj.target,
                        optional=obj.optional,
                    )
                    for obj in effect.objectives
                ),
                act_number=act_number,
                from_scene=scene_number,
                rewards=effect.rewards,
                is_from_scenario=True,
            )
            updated = ledger.add(quest)
            if updated is ledger:
                return None
            result.ledger = updated
            result.new_quests.append(quest)
            return AppliedEffect(
                description=f"New quest: {quest.title}",
                tone=EffectTone.NEUTRAL,
                kind=EffectKind.QUEST,
            )

        if effect.action == "update":
            updated = ledger.complete_objectives(effect.quest_id, effect.completed_objective_ids)
            if updated is ledger:
                return None
            result.ledger = updated
            return AppliedEffect(
                description=f"Quest updated: {updated.get(effect.quest_id).title}",
                tone=EffectTone.POSITIVE,
                kind=EffectKind.QUEST,
            )

        if effect.action == "complete":
            updated = ledger.complete(effect.quest_id)
            if updated is ledger:
                return None
            result.ledger = updated
            return AppliedEffect(
                description=f"Quest completed: {updated.get(effect.quest_id).title}",
                tone=EffectTone.POSITIVE,
                kind=EffectKind.QUEST,
            )

        updated = ledger.fail(effect.quest_id)
        if updated is ledger:
            return None
        result.ledger = updated
        return AppliedEffect(
            description=f"Quest failed: {updated.get(effect.quest_id).title}",
            tone=EffectTone.NEGATIVE,
            kind=EffectKind.QUEST,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _skip(self, result: EffectBatchResult, index: int, reason: str, payload: Any) -> None:
        logger.warning(f"Skipping effect #{index}: {reason}")
        result.skipped += 1
        self._notify("on_effect_skipped", EffectSkippedEvent(index=index, reason=reason, payload=payload))

    def _notify(self, callback: str, event: Any) -> None:
        try:
            getattr(self.hook, callback)(event)
        except Exception:
            logger.exception(f"Hook {callback} failed; effect state is kept")

    def _clamp_relation(self, value: int) -> int:
        return int(max(self.relation_min, min(self.relation_max, value)))

    def _location_name(self, location_id: str, fallback: str | None = None) -> str:
        if self.world is not None:
            location = self.world.get_location(location_id)
            if location is not None:
                return location.name
        return fallback or location_id


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def _tone(change: int) -> EffectTone:
    if change > 0:
        return EffectTone.POSITIVE
    if change < 0:
        return EffectTone.NEGATIVE
    return EffectTone.NEUTRAL


def _replace(items: tuple, old: Any, new: Any) -> tuple:
    return tuple(new if item is old else item for item in items)
