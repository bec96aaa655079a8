"""
Declarative rule elements.

These carry data for other parts of the system and have no effect on any
numeric resolution:
- FateOption:   extra choices for the Fate-spending UI
- VFXOverride:  presentation hints for the renderer
- Creation*:    origin data read by the character creation wizard
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..synthetics import FateOptionEntry, VFXOverrideEntry
from .base import RuleElement, RuleElementSource, rule_element

if TYPE_CHECKING:
    from ..synthetics import Synthetics

FATE_EFFECT_TYPES = ("autoSucceed", "bonusDamage", "substituteDos", "gainHatred")
VFX_EFFECT_TYPES = ("projectile", "melee", "cone", "impact", "aura")

CREATION_KEYS = (
    "CreationBonus",
    "CreationFate",
    "CreationWounds",
    "CreationCorruption",
    "GrantAptitude",
    "Grant",
)


@rule_element("FateOption", description="Offer an extra Fate point spend")
class FateOption(RuleElement):
    """
    Adds a "spend Fate for X" option for role abilities such as Sure Kill.

        - key: FateOption
          slug: quest-for-knowledge
          label: Quest for Knowledge
          description: Auto-succeed Logic or any Lore test (DoS = Int Bonus)
          effectType: autoSucceed
          dosCharacteristic: int
    """

    def contribute(self, synthetics: Synthetics) -> None:
        slug = self.require("slug", str)
        synthetics.fate_options.append(
            FateOptionEntry(
                slug=slug,
                label=self.optional("label", str) or slug,
                description=self.optional("description", str, ""),
                effect_type=self.require("effectType", str),
                dos_characteristic=self.optional("dosCharacteristic", str),
                source=self.item.name,
            )
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("slug"), str):
            errors.append('FateOption requires a "slug" string.')
        if source.get("effectType") not in FATE_EFFECT_TYPES:
            errors.append(f'FateOption "effectType" must be one of: {", ".join(FATE_EFFECT_TYPES)}.')
        return errors


@rule_element("VFXOverride", description="Override the visual effect for an item")
class VFXOverride(RuleElement):
    """
    Overrides the visual effect played for the owning item.

        - key: VFXOverride
          label: Blue Lasbeam
          effectPath: jb2a.lasershot.blue
          effectType: projectile
    """

    def contribute(self, synthetics: Synthetics) -> None:
        synthetics.vfx_overrides[self.item.id] = VFXOverrideEntry(
            effect_path=self.require("effectPath", str),
            effect_type=self.optional("effectType", str, "projectile"),
            scale=self.optional("scale", (int, float)),
            source_item_id=self.item.id,
            source=self.label,
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("effectPath"), str):
            errors.append('VFXOverride requires an "effectPath" string.')
        effect_type = source.get("effectType")
        if effect_type is not None and effect_type not in VFX_EFFECT_TYPES:
            errors.append(f'VFXOverride "effectType" must be one of: {", ".join(VFX_EFFECT_TYPES)}.')
        return errors


@rule_element(*CREATION_KEYS, description="Character creation data (no runtime effect)")
class CreationData(RuleElement):
    """
    Structured origin data (homeworld, background, role) consumed by the
    character creation wizard. Registered so that origin items can express
    every grant in their rules list without tripping the unknown-key path.
    """

    def contribute(self, synthetics: Synthetics) -> None:
        return None


# ---------- Readers used by character creation ----------


def _of_key(rules: list[Any], key: str) -> list[Mapping[str, Any]]:
    return [r for r in rules if isinstance(r, Mapping) and r.get("key") == key]


def creation_bonuses(rules: list[Any]) -> list[dict[str, Any]]:
    """CreationBonus entries as [{"characteristic": "ws", "value": 5}, ...]."""
    return [
        {"characteristic": r.get("characteristic"), "value": r.get("value", 0)}
        for r in _of_key(rules, "CreationBonus")
    ]


def fate_config(rules: list[Any]) -> dict[str, int] | None:
    """CreationFate as {"threshold": n, "blessing": n}, or None."""
    found = _of_key(rules, "CreationFate")
    if not found:
        return None
    return {"threshold": found[0].get("threshold", 2), "blessing": found[0].get("blessing", 1)}


def wounds_formula(rules: list[Any]) -> str | None:
    found = _of_key(rules, "CreationWounds")
    return found[0].get("formula") if found else None


def corruption_formula(rules: list[Any]) -> str | None:
    found = _of_key(rules, "CreationCorruption")
    return found[0].get("formula") if found else None


def aptitudes(rules: list[Any]) -> list[str | list[str]]:
    """GrantAptitude entries: a plain aptitude, or a list when it is a choice."""
    result: list[str | list[str]] = []
    for r in _of_key(rules, "GrantAptitude"):
        options = r.get("options")
        if isinstance(options, list):
            result.append(list(options))
        elif isinstance(r.get("aptitude"), str):
            result.append(r["aptitude"])
    return result


def creation_grants(rules: list[Any], grant_type: str | None = None) -> list[Mapping[str, Any]]:
    """Grant entries (talents, skills, gear... to hand out), optionally of one type."""
    grants = _of_key(rules, "Grant")
    if grant_type is None:
        return grants
    return [g for g in grants if g.get("type") == grant_type]
