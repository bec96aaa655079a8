"""
Rule elements: typed effect declarations attached to content items.

Importing this package registers every built-in variant.
"""

from . import combat, declarative, grants, modifiers, options  # noqa: F401
from .base import (
    RuleElement,
    RuleElementSource,
    get_all_rule_elements,
    get_rule_element,
    registered_keys,
    rule_element,
)
from .combat import AdjustDegree, AdjustToughness, AttributeOverride, DiceOverride, Resistance
from .declarative import CreationData, FateOption, VFXOverride
from .grants import GRANTED_BY_FLAG, GrantItem, ItemResolver
from .modifiers import ActorValue, FlatModifier, apply_transform
from .options import ChoiceOption, ChoicePrompt, ChoiceSet, RollOption
from .registry import instantiate

__all__ = [
    "ActorValue",
    "AdjustDegree",
    "AdjustToughness",
    "AttributeOverride",
    "ChoiceOption",
    "ChoicePrompt",
    "ChoiceSet",
    "CreationData",
    "DiceOverride",
    "FateOption",
    "FlatModifier",
    "GRANTED_BY_FLAG",
    "GrantItem",
    "ItemResolver",
    "Resistance",
    "RollOption",
    "RuleElement",
    "RuleElementSource",
    "VFXOverride",
    "apply_transform",
    "get_all_rule_elements",
    "get_rule_element",
    "instantiate",
    "registered_keys",
    "rule_element",
]
