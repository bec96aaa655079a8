# acolyte/engine/modifier.py
"""
Modifiers and the modifier resolution pipeline.

Uses "tagged stacking + exclusion groups":
- Every modifier carries a source tag ("equipment", "talent", "condition", ...)
- Modifiers sharing an exclusion group compete: best bonus and worst penalty win
- Ungrouped modifiers always stack

Resolution is a pure function of its inputs, which is what makes the result
independent of the order rule elements contributed in.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from acolyte.config import DEFAULT_MODIFIER_CAP

from .predicate import Predicate


@dataclass
class Modifier:
    """A single signed numeric contribution to a domain."""

    label: str  # Human-readable, e.g. "Weapon Skill Advance"
    value: int  # Positive = bonus, negative = penalty
    source: str = "rule-element"  # "equipment", "talent", "condition", "situational"...
    exclusion_group: str | None = None
    predicate: Predicate = field(default_factory=Predicate)
    enabled: bool = True
    toggleable: bool = False  # Can the user switch it off in a roll dialog

    def __post_init__(self) -> None:
        if not isinstance(self.predicate, Predicate):
            self.predicate = Predicate.from_data(self.predicate)
        if not self.exclusion_group:
            self.exclusion_group = None

    @property
    def is_bonus(self) -> bool:
        return self.value > 0

    @property
    def is_penalty(self) -> bool:
        return self.value < 0

    def clone(self) -> "Modifier":
        """Copy that can be toggled without touching the pass registry."""
        return dataclasses.replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Breakdown row for display by consumers."""
        return {
            "label": self.label,
            "value": self.value,
            "source": self.source,
            "exclusion_group": self.exclusion_group,
            "predicate": self.predicate.to_data(),
            "enabled": self.enabled,
            "toggleable": self.toggleable,
        }


@dataclass
class ModifierResolution:
    """Outcome of resolve_modifiers."""

    total: int
    applied: list[Modifier]  # Modifiers that actually contributed to the total
    all_modifiers: list[Modifier]  # Every input modifier, for breakdown display


def apply_exclusion_groups(modifiers: Iterable[Modifier]) -> list[Modifier]:
    """
    Apply exclusion group rules to a list of modifiers.

    For each exclusion group only the highest bonus and the lowest (most
    negative) penalty survive; zero-value grouped modifiers are dropped.
    Ungrouped modifiers always pass through.

    Ties are broken by a stable sort on value: among equal values the one
    that came first in the input wins. The total is the same either way;
    only which label shows as applied differs.

    Output order: ungrouped modifiers in input order, then per group (in
    order of first appearance) the winning bonus followed by the winning
    penalty.
    """
    ungrouped: list[Modifier] = []
    groups: dict[str, list[Modifier]] = {}

    for mod in modifiers:
        if mod.exclusion_group:
            groups.setdefault(mod.exclusion_group, []).append(mod)
        else:
            ungrouped.append(mod)

    resolved = list(ungrouped)

    for group_mods in groups.values():
        bonuses = sorted((m for m in group_mods if m.is_bonus), key=lambda m: -m.value)
        penalties = sorted((m for m in group_mods if m.is_penalty), key=lambda m: m.value)

        if bonuses:
            resolved.append(bonuses[0])
        if penalties:
            resolved.append(penalties[0])

    return resolved


def resolve_modifiers(
    modifiers: Iterable[Modifier],
    roll_options: Iterable[str],
    cap: int = DEFAULT_MODIFIER_CAP,
) -> ModifierResolution:
    """
    The full modifier pipeline.

    1. Keep modifiers that are enabled and whose predicate holds
    2. Apply exclusion groups
    3. Sum values
    4. Clamp to [-cap, cap]

    Args:
        modifiers: Candidate modifiers for one domain
        roll_options: Active tags for this resolution context
        cap: Absolute clamp for the total (caller supplied)

    Returns:
        ModifierResolution with the clamped total, the applied subset and
        every input modifier
    """
    if cap < 0:
        raise ValueError(f"Modifier cap must not be negative, got {cap}")

    all_modifiers = list(modifiers)
    options = set(roll_options)

    applicable = [m for m in all_modifiers if m.enabled and m.predicate.test(options)]
    applied = apply_exclusion_groups(applicable)

    raw_total = sum(m.value for m in applied)
    total = max(-cap, min(cap, raw_total))

    return ModifierResolution(total=total, applied=applied, all_modifiers=all_modifiers)
