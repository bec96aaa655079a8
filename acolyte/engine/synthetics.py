# acolyte/engine/synthetics.py
"""
Synthetics: the per-preparation-pass registry of rule element contributions.

Collected from rule elements while an actor prepares its data and read by the
game-math consumers afterwards. Domains are namespaced strings such as:
- "characteristic:ws"  - modifiers to Weapon Skill tests
- "skill:athletics"    - modifiers to Athletics tests
- "attack:melee"       - modifiers to melee attack rolls
- "damage:ranged"      - modifiers to ranged damage

Domains are never validated against a vocabulary; a typo just creates an
unused bucket. Every accessor lazily creates an empty collection so rule
elements never have to null-check.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from acolyte.config import DEFAULT_MODIFIER_CAP

from .modifier import Modifier, ModifierResolution, resolve_modifiers
from .predicate import Predicate

WILDCARD = "*"


class DiceOverrideMode(str, Enum):
    """How a damage dice override treats the rolled dice."""

    REROLL_LOWEST = "rerollLowest"  # Tearing
    MINIMUM_DIE = "minimumDie"  # Proven(X)
    MAXIMIZE_DIE = "maximizeDie"  # Primitive(X) caps, Force maximizes


class ToughnessMode(str, Enum):
    ADD = "add"
    MULTIPLY = "multiply"


class ResistanceMode(str, Enum):
    FLAT = "flat"  # Subtract value from damage
    HALF = "half"  # Halve damage of this type


@dataclass
class DosAdjustment:
    """Post-roll shift to Degrees of Success (positive) or Failure (negative)."""

    amount: int
    predicate: Predicate
    source: str


@dataclass
class DiceOverrideEntry:
    mode: DiceOverrideMode
    source: str
    value: int | None = None  # e.g. the minimum for Proven(3)


@dataclass
class ToughnessAdjustment:
    """Adjustment to the effective Toughness Bonus used to soak damage."""

    value: float
    mode: ToughnessMode
    source: str


@dataclass
class ResistanceEntry:
    damage_type: str  # "energy", "impact", "all"...
    value: int
    mode: ResistanceMode
    source: str


@dataclass
class AttributeOverrideEntry:
    """Use a different characteristic for a test domain (e.g. Int for initiative)."""

    domain: str
    characteristic: str
    predicate: Predicate
    source: str


@dataclass
class FateOptionEntry:
    """An extra "spend Fate for X" action offered by the resource-spending UI."""

    slug: str
    label: str
    description: str
    effect_type: str  # "autoSucceed", "bonusDamage", "substituteDos", "gainHatred"
    source: str
    dos_characteristic: str | None = None


@dataclass
class VFXOverrideEntry:
    """Presentation hint for the renderer. No gameplay effect."""

    effect_path: str
    effect_type: str
    source_item_id: str
    source: str
    scale: float | None = None


@dataclass
class Synthetics:
    """All rule element contributions for one actor and one preparation pass."""

    modifiers: dict[str, list[Modifier]] = field(default_factory=dict)
    roll_options: set[str] = field(default_factory=set)
    dos_adjustments: list[DosAdjustment] = field(default_factory=list)
    dice_overrides: dict[str, list[DiceOverrideEntry]] = field(default_factory=dict)
    toughness_adjustments: list[ToughnessAdjustment] = field(default_factory=list)
    resistances: list[ResistanceEntry] = field(default_factory=list)
    attribute_overrides: list[AttributeOverrideEntry] = field(default_factory=list)
    fate_options: list[FateOptionEntry] = field(default_factory=list)
    vfx_overrides: dict[str, VFXOverrideEntry] = field(default_factory=dict)

    # ---------- Get-or-create accessors ----------

    def get_modifiers(self, domain: str) -> list[Modifier]:
        """Modifier list for a domain, created empty on first touch."""
        return self.modifiers.setdefault(domain, [])

    def get_dice_overrides(self, domain: str) -> list[DiceOverrideEntry]:
        """Dice override list for a domain, created empty on first touch."""
        return self.dice_overrides.setdefault(domain, [])

    def add_roll_option(self, option: str) -> None:
        """Add a tag. The tag set is append-only for the rest of the pass."""
        self.roll_options.add(option)

    # ---------- Consumer helpers ----------

    def resolve(
        self,
        domain: str,
        roll_options: Iterable[str] = (),
        cap: int = DEFAULT_MODIFIER_CAP,
        extra: Iterable[Modifier] = (),
    ) -> ModifierResolution:
        """
        Resolve one domain against the pass's tags plus the caller's tags.

        The domain's modifiers are cloned so a caller may toggle them (e.g.
        in a roll dialog) without affecting this registry.
        """
        candidates = [m.clone() for m in self.modifiers.get(domain, ())]
        candidates.extend(extra)
        options = self.roll_options | set(roll_options)
        return resolve_modifiers(candidates, options, cap)

    def dice_overrides_for(self, domain: str) -> list[DiceOverrideEntry]:
        """
        Entries for a domain, including wildcard domains that cover it.

        "damage:*" covers "damage:melee" and "damage:ranged"; "*" covers all.
        """
        entries: list[DiceOverrideEntry] = []
        for key, overrides in self.dice_overrides.items():
            if key == domain or _wildcard_covers(key, domain):
                entries.extend(overrides)
        return entries

    def attribute_override_for(
        self, domain: str, roll_options: Iterable[str] = ()
    ) -> AttributeOverrideEntry | None:
        """First characteristic substitution for a domain whose predicate holds."""
        options = self.roll_options | set(roll_options)
        for entry in self.attribute_overrides:
            if entry.domain == domain and entry.predicate.test(options):
                return entry
        return None

    def degree_adjustment(self, roll_options: Iterable[str] = ()) -> int:
        """Net DoS/DoF shift from every adjustment whose predicate holds."""
        options = self.roll_options | set(roll_options)
        return sum(a.amount for a in self.dos_adjustments if a.predicate.test(options))

    def derive(self) -> "Synthetics":
        """
        Independent copy for one attack or check.

        Synthesized sources (weapon qualities, target conditions) are
        contributed into the copy so the actor's pass registry stays as-is.
        Entries are shared; the containers are not.
        """
        return Synthetics(
            modifiers={d: list(mods) for d, mods in self.modifiers.items()},
            roll_options=set(self.roll_options),
            dos_adjustments=list(self.dos_adjustments),
            dice_overrides={d: list(e) for d, e in self.dice_overrides.items()},
            toughness_adjustments=list(self.toughness_adjustments),
            resistances=list(self.resistances),
            attribute_overrides=list(self.attribute_overrides),
            fate_options=list(self.fate_options),
            vfx_overrides=dict(self.vfx_overrides),
        )


def _wildcard_covers(key: str, domain: str) -> bool:
    if key == WILDCARD:
        return True
    if key.endswith(":" + WILDCARD):
        return domain.startswith(key[: -len(WILDCARD)])
    return False
