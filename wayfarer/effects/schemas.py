"""Effect sum type produced by the generation service.

Each effect kind is its own model tagged by a ``kind`` literal; ``Effect``
is the discriminated union over all of them. Raw payloads arrive either
flat (``{"kind": "stat", "attribute": "gold", "change": 5}``) or in the
generation service's nested form (``{"type": "stat", "stat": {...}}``)
with camelCase keys; parse_effect accepts both.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from wayfarer.player.schemas import ItemType, RelationshipStatus
from wayfarer.quests.schemas import ObjectiveType, QuestRewards, QuestType

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class EffectKind(str, Enum):
    """Discriminator values of the Effect union."""

    STAT = "stat"
    ITEM = "item"
    RELATIONSHIP = "relationship"
    FLAG = "flag"
    LOCATION = "location"
    TRAVEL = "travel"
    QUEST = "quest"


class EffectTone(str, Enum):
    """How an applied effect reads to the player."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


# =============================================================================
# Effect Models
# =============================================================================


class _EffectModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class StatEffect(_EffectModel):
    """Change a numeric player attribute."""

    kind: Literal["stat"] = "stat"
    target: str = "player"  # "player", "kingdom" or an NPC id
    attribute: str
    change: int


class ItemEffect(_EffectModel):
    """Add or remove one unit of a named item."""

    kind: Literal["item"] = "item"
    action: Literal["add", "remove"]
    item_name: str = Field(min_length=1)
    item_id: str | None = None
    item_type: ItemType = ItemType.KEY


class RelationshipEffect(_EffectModel):
    """Shift the player's standing with an NPC."""

    kind: Literal["relationship"] = "relationship"
    npc_name: str = Field(min_length=1)
    npc_id: str | None = None
    change: int
    new_status: RelationshipStatus | None = None


class FlagEffect(_EffectModel):
    """Set a story flag."""

    kind: Literal["flag"] = "flag"
    flag_id: str = Field(min_length=1)
    value: bool | int | str = True


class LocationEffect(_EffectModel):
    """Change a location's availability. Only unlock alters engine state."""

    kind: Literal["location"] = "location"
    location_id: str = Field(min_length=1)
    action: Literal["unlock", "lock", "change_mood"] = "unlock"
    new_mood: str | None = None


class TravelEffect(_EffectModel):
    """Move the player, open a route, or demand travel to a destination."""

    kind: Literal["travel"] = "travel"
    action: Literal["move", "unlock_route", "require_travel"]
    target_location_id: str = Field(min_length=1)
    target_location_name: str | None = None
    reason: str | None = None
    deadline: int | None = None

    @model_validator(mode="after")
    def _require_travel_needs_reason(self) -> TravelEffect:
        if self.action == "require_travel" and not self.reason:
            raise ValueError("require_travel needs a reason")
        return self


class ObjectiveSpec(_EffectModel):
    """Objective as described by the generation service."""

    id: str
    description: str
    type: ObjectiveType = ObjectiveType.CUSTOM
    target: str | None = None
    optional: bool = False


class QuestEffect(_EffectModel):
    """Add, update, complete or fail a quest."""

    kind: Literal["quest"] = "quest"
    action: Literal["add", "update", "complete", "fail"]
    quest_id: str = Field(min_length=1)
    title: str | None = None
    description: str | None = None
    quest_type: QuestType | None = Field(
        default=None,
        validation_alias=AliasChoices("quest_type", "questType", "type"),
    )
    objectives: tuple[ObjectiveSpec, ...] = ()
    rewards: QuestRewards | None = None
    completed_objective_ids: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _add_needs_title(self) -> QuestEffect:
        if self.action == "add" and not self.title:
            raise ValueError("quest add needs a title")
        return self


Effect = Annotated[
    Union[
        StatEffect,
        ItemEffect,
        RelationshipEffect,
        FlagEffect,
        LocationEffect,
        TravelEffect,
        QuestEffect,
    ],
    Field(discriminator="kind"),
]

EFFECT_TYPES: tuple[type[BaseModel], ...] = (
    StatEffect,
    ItemEffect,
    RelationshipEffect,
    FlagEffect,
    LocationEffect,
    TravelEffect,
    QuestEffect,
)

effect_adapter: TypeAdapter[Effect] = TypeAdapter(Effect)


class AppliedEffect(BaseModel):
    """One human-readable entry of the applied-effects log."""

    model_config = ConfigDict(frozen=True)

    description: str
    tone: EffectTone = EffectTone.NEUTRAL
    kind: EffectKind


# =============================================================================
# Parsing
# =============================================================================


def normalize_effect_payload(raw: dict[str, Any]) -> dict[str, Any]:
    """Flatten the nested ``{"type": kind, kind: {...}}`` form.

    Payloads already carrying ``kind`` are returned unchanged.
    """
    if "kind" in raw:
        return raw
    kind = raw.get("type")
    if not isinstance(kind, str):
        return raw
    payload = raw.get(kind)
    if not isinstance(payload, dict):
        payload = {}
    return {**payload, "kind": kind}


def parse_effect(raw: Any) -> Effect:
    """Validate one raw effect into its typed model.

    Args:
        raw: An Effect model or a raw dict in flat or nested form.

    Returns:
        The typed effect.

    Raises:
        ValidationError: If the payload is malformed.
    """
    if isinstance(raw, EFFECT_TYPES):
        return raw  # type: ignore[return-value]
    if isinstance(raw, dict):
        raw = normalize_effect_payload(raw)
    return effect_adapter.validate_python(raw)


def parse_effects(raws: list[Any]) -> list[Effect]:
    """Validate a batch, dropping malformed entries with a warning."""
    effects: list[Effect] = []
    for index, raw in enumerate(raws):
        try:
            effects.append(parse_effect(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed effect #{index}: {e.error_count()} error(s)")
    return effects
