"""Pydantic schemas for quests, objectives and rewards."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class QuestType(str, Enum):
    """Kind of quest."""

    MAIN = "main"  # Main storyline
    SIDE = "side"
    TRAVEL = "travel"  # Reach a location
    FETCH = "fetch"  # Bring an item
    TALK = "talk"  # Speak with an NPC
    EXPLORE = "explore"  # Explore a location


class QuestStatus(str, Enum):
    """Status of a quest. COMPLETED and FAILED are terminal."""

    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not QuestStatus.ACTIVE


class ObjectiveType(str, Enum):
    """What an objective asks the player to do."""

    TRAVEL = "travel"  # target = location id
    ITEM = "item"  # target = item id
    TALK = "talk"  # target = npc id
    CHOICE = "choice"  # target = flag id
    CUSTOM = "custom"


# =============================================================================
# Quest Schemas
# =============================================================================


class Objective(BaseModel):
    """A single step of a quest."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    type: ObjectiveType = ObjectiveType.CUSTOM
    target: str | None = None
    completed: bool = False
    optional: bool = False


class QuestRewards(BaseModel):
    """Rewards granted when a quest completes."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    gold: int = 0
    reputation: int = 0
    influence: int = 0
    items: tuple[str, ...] = ()
    unlock_locations: tuple[str, ...] = ()
    unlock_routes: tuple[str, ...] = ()


class FailureConsequences(BaseModel):
    """Penalties applied when a quest fails."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    reputation: int = 0
    flags: tuple[str, ...] = ()  # Flags set to True on failure


class Quest(BaseModel):
    """A narrative quest tracked by the ledger."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    type: QuestType = QuestType.MAIN
    status: QuestStatus = QuestStatus.ACTIVE
    objectives: tuple[Objective, ...] = ()
    act_number: int = Field(default=1, ge=1, le=3)
    from_scene: int = 0
    deadline: int | None = None  # Scene number
    rewards: QuestRewards | None = None
    failure_consequences: FailureConsequences | None = None
    giver: str | None = None
    is_from_scenario: bool = True

    @property
    def is_active(self) -> bool:
        return self.status is QuestStatus.ACTIVE

    @property
    def current_objective(self) -> Objective | None:
        """First objective that is not completed yet."""
        for objective in self.objectives:
            if not objective.completed:
                return objective
        return None


class ActiveQuestInfo(BaseModel):
    """Summary of an active quest for the generation service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    current_objective: str
    type: QuestType
