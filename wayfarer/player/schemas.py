"""Player state record patched by the effect interpreter.

The canonical copy belongs to the session; the interpreter works on
frozen snapshots and returns a new one.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ItemType(str, Enum):
    """Inventory item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    KEY = "key"
    DOCUMENT = "document"
    TREASURE = "treasure"


class RelationshipStatus(str, Enum):
    """How an NPC regards the player."""

    ALLY = "ally"
    NEUTRAL = "neutral"
    RIVAL = "rival"
    ENEMY = "enemy"
    DEAD = "dead"


class PlayerStats(BaseModel):
    """Numeric player attributes. Effects never push them below zero."""

    model_config = ConfigDict(frozen=True)

    gold: int = 50
    reputation: int = 0
    influence: int = 10
    health: int = 100

    @classmethod
    def has_attribute(cls, attribute: str) -> bool:
        return attribute in cls.model_fields


class InventoryItem(BaseModel):
    """A named, stackable inventory entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: ItemType = ItemType.KEY
    quantity: int = Field(default=1, ge=1)
    description: str | None = None


class NPCRelationship(BaseModel):
    """The player's standing with one NPC."""

    model_config = ConfigDict(frozen=True)

    npc_id: str
    npc_name: str
    relation: int = 0  # Clamped to the configured bounds by the interpreter
    status: RelationshipStatus = RelationshipStatus.NEUTRAL
    last_interaction: int | None = None  # Scene number


class StoryFlag(BaseModel):
    """A narrative flag set at a given scene."""

    model_config = ConfigDict(frozen=True)

    id: str
    value: bool | int | str
    set_at: int


class PlayerState(BaseModel):
    """Dynamic player state: stats, inventory, relationships and flags."""

    model_config = ConfigDict(frozen=True)

    stats: PlayerStats = Field(default_factory=PlayerStats)
    inventory: tuple[InventoryItem, ...] = ()
    relationships: tuple[NPCRelationship, ...] = ()
    flags: tuple[StoryFlag, ...] = ()
    current_location_id: str | None = None
    visited_locations: frozenset[str] = frozenset()

    def find_item(self, name: str) -> InventoryItem | None:
        for item in self.inventory:
            if item.name == name:
                return item
        return None

    def find_relationship(self, npc_name: str, npc_id: str | None = None) -> NPCRelationship | None:
        for relationship in self.relationships:
            if npc_id is not None and relationship.npc_id == npc_id:
                return relationship
            if relationship.npc_name == npc_name:
                return relationship
        return None

    def get_flag(self, flag_id: str) -> StoryFlag | None:
        for flag in self.flags:
            if flag.id == flag_id:
                return flag
        return None


def initial_player_state(
    starting_gold: int = 50,
    starting_reputation: int = 0,
    starting_influence: int = 10,
    starting_health: int = 100,
) -> PlayerState:
    """Fresh player state for a new session."""
    return PlayerState(
        stats=PlayerStats(
            gold=starting_gold,
            reputation=starting_reputation,
            influence=starting_influence,
            health=starting_health,
        )
    )
