# acolyte/engine/systems/target_conditions.py
"""
Attacker bonuses from the target's conditions.

Synthesized at attack time, the same way weapon qualities are: the returned
sources go into the attacker's derived synthetics and the roll options join
the attack's tag set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..documents import Actor

CONDITION_ITEM_TYPE = "condition"

SELF_PREFIX = "self:"
TARGET_PREFIX = "target:"


@dataclass
class TargetConditionBonus:
    """Rule sources to contribute for the attacker, plus extra roll options."""

    sources: list[dict[str, Any]] = field(default_factory=list)
    roll_options: list[str] = field(default_factory=list)


def _situational(domain: str, value: int, label: str, predicate: list[str] | None = None) -> dict[str, Any]:
    source: dict[str, Any] = {
        "key": "FlatModifier",
        "domain": domain,
        "value": value,
        "label": label,
        "source": "situational",
    }
    if predicate:
        source["predicate"] = predicate
    return source


def _both_attacks(value: int, label: str) -> list[dict[str, Any]]:
    return [
        _situational("attack:melee", value, label),
        _situational("attack:ranged", value, label),
    ]


def condition_slugs(target: Actor) -> list[str]:
    """Slugs of the target's condition items, in item order, without repeats."""
    slugs: list[str] = []
    for item in target.items:
        if item.type != CONDITION_ITEM_TYPE:
            continue
        slug = item.system.get("slug")
        if isinstance(slug, str) and slug and slug not in slugs:
            slugs.append(slug)
    return slugs


def target_condition_bonuses(target: Actor, is_melee: bool) -> TargetConditionBonus:
    """
    Attacker-side bonuses for attacking `target`.

    Roll options come from two places: every condition item gives
    "target:<slug>", and every "self:<x>" option in the target's prepared
    synthetics (e.g. "self:helpless" from Unconscious) gives "target:<x>".
    """
    bonus = TargetConditionBonus()
    conditions = condition_slugs(target)

    if target.synthetics is not None:
        for option in sorted(target.synthetics.roll_options):
            if option.startswith(SELF_PREFIX):
                bonus.roll_options.append(TARGET_PREFIX + option[len(SELF_PREFIX):])

    for slug in conditions:
        option = TARGET_PREFIX + slug
        if option not in bonus.roll_options:
            bonus.roll_options.append(option)

    if "stunned" in conditions:
        bonus.sources.extend(_both_attacks(20, "Target Stunned"))

    if "prone" in conditions:
        if is_melee:
            bonus.sources.append(_situational("attack:melee", 10, "Target Prone"))
        else:
            bonus.sources.append(
                _situational("attack:ranged", -10, "Target Prone", predicate=["not:range:point-blank"])
            )

    if "surprised" in conditions:
        bonus.sources.extend(_both_attacks(30, "Target Surprised (+3 DoS)"))

    if "grappled" in conditions:
        bonus.sources.extend(_both_attacks(20, "Target Grappled"))

    return bonus
