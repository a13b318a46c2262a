"""Player state consumed and produced by the effect interpreter."""

from wayfarer.player.schemas import (
    InventoryItem,
    ItemType,
    NPCRelationship,
    PlayerState,
    PlayerStats,
    RelationshipStatus,
    StoryFlag,
    initial_player_state,
)

__all__ = [
    "InventoryItem",
    "ItemType",
    "NPCRelationship",
    "PlayerState",
    "PlayerStats",
    "RelationshipStatus",
    "StoryFlag",
    "initial_player_state",
]
