"""Quest ledger: creation, arrival sweep and lifecycle transitions.

The ledger is a frozen snapshot. Every mutation returns a new ledger that
shares unchanged quests with the previous one. Completed and failed
quests are terminal and never re-open.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from wayfarer.quests.schemas import (
    ActiveQuestInfo,
    Objective,
    ObjectiveType,
    Quest,
    QuestRewards,
    QuestStatus,
    QuestType,
)

logger = logging.getLogger(__name__)

DEFAULT_TRAVEL_REPUTATION = 10
FALLBACK_OBJECTIVE_TEXT = "Complete the quest"


# =============================================================================
# Quest Construction
# =============================================================================


def travel_quest_id(target_id: str, from_scene: int) -> str:
    """Deterministic id for a travel quest created at a given scene."""
    return f"travel_{target_id}_{from_scene}"


def create_travel_quest(
    target_id: str,
    target_name: str,
    reason: str,
    act_number: int,
    from_scene: int,
    deadline: int | None = None,
    rewards: QuestRewards | None = None,
    default_reputation: int = DEFAULT_TRAVEL_REPUTATION,
) -> Quest:
    """Build a single-objective quest to reach a location.

    Args:
        target_id: Location the player must reach.
        target_name: Display name of that location.
        reason: Narrative reason, used as the quest description.
        act_number: Story act (1-3).
        from_scene: Scene the quest was created in.
        deadline: Optional scene number to arrive by.
        rewards: Rewards; defaults to reputation plus unlocking the target.
        default_reputation: Reputation granted by the default reward.

    Returns:
        An active travel Quest.
    """
    if rewards is None:
        rewards = QuestRewards(reputation=default_reputation, unlock_locations=(target_id,))

    return Quest(
        id=travel_quest_id(target_id, from_scene),
        title=f"Journey to {target_name}",
        description=reason,
        type=QuestType.TRAVEL,
        status=QuestStatus.ACTIVE,
        objectives=(
            Objective(
                id=f"arrive_{target_id}",
                description=f"Arrive at {target_name}",
                type=ObjectiveType.TRAVEL,
                target=target_id,
            ),
        ),
        act_number=act_number,
        from_scene=from_scene,
        deadline=deadline,
        rewards=rewards,
        is_from_scenario=True,
    )


# =============================================================================
# Objective Progress
# =============================================================================


def is_quest_complete(quest: Quest) -> bool:
    """Whether every non-optional objective is completed.

    A quest without required objectives only completes explicitly.
    """
    required = [objective for objective in quest.objectives if not objective.optional]
    return bool(required) and all(objective.completed for objective in required)


def _complete_objectives(quest: Quest, predicate) -> Quest:
    changed = False
    objectives = []
    for objective in quest.objectives:
        if not objective.completed and predicate(objective):
            objective = objective.model_copy(update={"completed": True})
            changed = True
        objectives.append(objective)

    if not changed:
        return quest

    update: dict = {"objectives": tuple(objectives)}
    updated = quest.model_copy(update=update)
    if is_quest_complete(updated):
        updated = updated.model_copy(update={"status": QuestStatus.COMPLETED})
    return updated


def update_travel_objective(quest: Quest, arrived_location_id: str) -> Quest:
    """Complete the travel objectives of one quest that target a location."""
    if not quest.is_active:
        return quest
    return _complete_objectives(
        quest,
        lambda o: o.type is ObjectiveType.TRAVEL and o.target == arrived_location_id,
    )


def update_quests_on_arrival(quests: Iterable[Quest], arrived_location_id: str) -> list[Quest]:
    """Arrival sweep over all quests.

    Active quests get their matching travel objectives completed and are
    marked completed when nothing required is left. Other quests pass
    through unchanged. Pure, and idempotent for a repeated location.

    Args:
        quests: Quests to sweep.
        arrived_location_id: Location just reached.

    Returns:
        The swept quests, in the same order.
    """
    return [update_travel_objective(quest, arrived_location_id) for quest in quests]


def resolved_since(previous: QuestLedger, current: QuestLedger) -> list[Quest]:
    """Quests that were active in previous and are terminal in current."""
    before = {quest.id: quest for quest in previous.quests}
    resolved = []
    for quest in current.quests:
        old = before.get(quest.id)
        was_active = old is None or old.is_active
        if was_active and quest.status.is_terminal:
            resolved.append(quest)
    return resolved


# =============================================================================
# Ledger
# =============================================================================


class QuestLedger(BaseModel):
    """All quests of a session plus the currently tracked quest."""

    model_config = ConfigDict(frozen=True)

    quests: tuple[Quest, ...] = ()
    active_quest_id: str | None = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, quest_id: str) -> Quest | None:
        for quest in self.quests:
            if quest.id == quest_id:
                return quest
        return None

    @property
    def active_quests(self) -> list[Quest]:
        return [quest for quest in self.quests if quest.is_active]

    @property
    def active_quest(self) -> Quest | None:
        if self.active_quest_id is None:
            return None
        return self.get(self.active_quest_id)

    def active_quest_summaries(self) -> list[ActiveQuestInfo]:
        """Active quests with their current objective, for prompt context."""
        summaries = []
        for quest in self.active_quests:
            objective = quest.current_objective
            summaries.append(
                ActiveQuestInfo(
                    id=quest.id,
                    title=quest.title,
                    current_objective=objective.description if objective else FALLBACK_OBJECTIVE_TEXT,
                    type=quest.type,
                )
            )
        return summaries

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, quest: Quest) -> QuestLedger:
        """Insert a quest. Duplicate ids are ignored.

        The new quest becomes the tracked quest when none is tracked.
        """
        if self.get(quest.id) is not None:
            logger.warning(f"Quest already in ledger, ignoring add: {quest.id}")
            return self

        active_id = self.active_quest_id
        if active_id is None and quest.is_active:
            active_id = quest.id
        logger.info(f"Quest added: {quest.id} ({quest.title})")
        return QuestLedger(quests=(*self.quests, quest), active_quest_id=active_id)

    def complete(self, quest_id: str) -> QuestLedger:
        """Mark a quest completed. No-op for unknown or terminal quests."""
        return self._resolve(quest_id, QuestStatus.COMPLETED)

    def fail(self, quest_id: str) -> QuestLedger:
        """Mark a quest failed. No-op for unknown or terminal quests."""
        return self._resolve(quest_id, QuestStatus.FAILED)

    def on_arrival(self, location_id: str) -> QuestLedger:
        """Run the arrival sweep and retarget the tracked quest if it finished."""
        swept = tuple(update_quests_on_arrival(self.quests, location_id))
        if swept == self.quests:
            return self
        return self._with_quests(swept)

    def complete_objectives(self, quest_id: str, objective_ids: Iterable[str]) -> QuestLedger:
        """Explicitly complete objectives of an active quest by id."""
        quest = self.get(quest_id)
        if quest is None:
            logger.warning(f"Cannot update unknown quest: {quest_id}")
            return self
        if not quest.is_active:
            return self

        wanted = set(objective_ids)
        updated = _complete_objectives(quest, lambda o: o.id in wanted)
        if updated is quest:
            return self
        return self._replace(updated)

    def expire_overdue(self, scene_number: int) -> QuestLedger:
        """Fail active quests whose deadline scene has passed."""
        ledger = self
        for quest in self.active_quests:
            if quest.deadline is not None and quest.deadline < scene_number:
                logger.info(f"Quest {quest.id} missed its deadline (scene {quest.deadline})")
                ledger = ledger.fail(quest.id)
        return ledger

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _resolve(self, quest_id: str, status: QuestStatus) -> QuestLedger:
        quest = self.get(quest_id)
        if quest is None:
            logger.warning(f"Quest not found, cannot mark {status.value}: {quest_id}")
            return self
        if quest.status.is_terminal:
            logger.debug(f"Quest {quest_id} already {quest.status.value}")
            return self

        logger.info(f"Quest {quest_id} {status.value}")
        return self._replace(quest.model_copy(update={"status": status}))

    def _replace(self, updated: Quest) -> QuestLedger:
        quests = tuple(updated if quest.id == updated.id else quest for quest in self.quests)
        return self._with_quests(quests)

    def _with_quests(self, quests: tuple[Quest, ...]) -> QuestLedger:
        active_id = self.active_quest_id
        if active_id is not None:
            tracked = next((quest for quest in quests if quest.id == active_id), None)
            if tracked is None or not tracked.is_active:
                active_id = next((quest.id for quest in quests if quest.is_active), None)
        return QuestLedger(quests=quests, active_quest_id=active_id)
