"""
Engine systems built on the rule element framework.

- preparation:       per-actor synthetics pass
- lifecycle:         ChoiceSet / GrantItem item creation and deletion hooks
- authoring:         YAML text form and validation of rules lists
- weapon_qualities:  attack-time sources from weapon qualities / craftsmanship
- target_conditions: attack-time sources from the target's conditions
"""

from .authoring import YAML_TEMPLATE, ValidationReport, check_text, clean_rule, from_text, to_text, validate
from .lifecycle import ItemLifecycle
from .preparation import PreparationPass
from .target_conditions import TargetConditionBonus, target_condition_bonuses
from .weapon_qualities import (
    armour_craftsmanship_bonus,
    craftsmanship_rule_sources,
    is_exotic_quality,
    parse_quality,
    quality_rule_sources,
)

__all__ = [
    "ItemLifecycle",
    "PreparationPass",
    "TargetConditionBonus",
    "ValidationReport",
    "YAML_TEMPLATE",
    "armour_craftsmanship_bonus",
    "check_text",
    "clean_rule",
    "craftsmanship_rule_sources",
    "from_text",
    "is_exotic_quality",
    "parse_quality",
    "quality_rule_sources",
    "target_condition_bonuses",
    "to_text",
    "validate",
]
