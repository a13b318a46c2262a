"""Quest ledger and quest schemas."""

from wayfarer.quests.ledger import (
    QuestLedger,
    create_travel_quest,
    is_quest_complete,
    resolved_since,
    travel_quest_id,
    update_quests_on_arrival,
    update_travel_objective,
)
from wayfarer.quests.schemas import (
    ActiveQuestInfo,
    FailureConsequences,
    Objective,
    ObjectiveType,
    Quest,
    QuestRewards,
    QuestStatus,
    QuestType,
)

__all__ = [
    "QuestLedger",
    "create_travel_quest",
    "is_quest_complete",
    "resolved_since",
    "travel_quest_id",
    "update_quests_on_arrival",
    "update_travel_objective",
    "ActiveQuestInfo",
    "FailureConsequences",
    "Objective",
    "ObjectiveType",
    "Quest",
    "QuestRewards",
    "QuestStatus",
    "QuestType",
]
