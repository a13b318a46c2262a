"""Narrative effects and the interpreter that applies them."""

from wayfarer.effects.interpreter import EffectBatchResult, EffectInterpreter
from wayfarer.effects.schemas import (
    AppliedEffect,
    Effect,
    EffectKind,
    EffectTone,
    FlagEffect,
    ItemEffect,
    LocationEffect,
    ObjectiveSpec,
    QuestEffect,
    RelationshipEffect,
    StatEffect,
    TravelEffect,
    parse_effect,
    parse_effects,
)

__all__ = [
    "EffectBatchResult",
    "EffectInterpreter",
    "AppliedEffect",
    "Effect",
    "EffectKind",
    "EffectTone",
    "FlagEffect",
    "ItemEffect",
    "LocationEffect",
    "ObjectiveSpec",
    "QuestEffect",
    "RelationshipEffect",
    "StatEffect",
    "TravelEffect",
    "parse_effect",
    "parse_effects",
]
