"""
Rule elements read by the combat and check consumers.

- DiceOverride:      Tearing, Proven, Primitive damage dice handling
- AdjustDegree:      post-roll Degrees of Success/Failure shifts
- AdjustToughness:   Unnatural Toughness style soak adjustments
- Resistance:        damage reduction by damage type
- AttributeOverride: test a different characteristic for a domain
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..errors import RuleElementError
from ..paths import MISSING, resolve_number
from ..synthetics import (
    AttributeOverrideEntry,
    DiceOverrideEntry,
    DiceOverrideMode,
    DosAdjustment,
    ResistanceEntry,
    ResistanceMode,
    ToughnessAdjustment,
    ToughnessMode,
)
from .base import RATING, RuleElement, RuleElementSource, rule_element
from .modifiers import apply_transform

if TYPE_CHECKING:
    from ..synthetics import Synthetics

logger = logging.getLogger(__name__)

# AdjustDegree amounts of the form "actor:system.characteristics.wp.bonus"
ACTOR_PATH_PREFIX = "actor:"


def _enum_values(enum: type[Enum]) -> list[str]:
    return [m.value for m in enum]


@rule_element("DiceOverride", description="Modify damage dice (Tearing, Proven, etc.)")
class DiceOverride(RuleElement):
    """
    Changes how damage dice behave for a domain.

        - key: DiceOverride
          domain: damage:melee
          mode: rerollLowest        # Tearing

        - key: DiceOverride
          domain: damage:*
          mode: minimumDie          # Proven(3)
          value: 3
    """

    def contribute(self, synthetics: Synthetics) -> None:
        domain = self.require("domain", str)
        mode = self.require("mode", str)
        try:
            mode = DiceOverrideMode(mode)
        except ValueError:
            raise RuleElementError(self.key, f"unknown mode {mode!r}") from None

        value = self.optional("value", (int, float))
        synthetics.get_dice_overrides(domain).append(
            DiceOverrideEntry(
                mode=mode,
                value=int(value) if value is not None else None,
                source=self.label,
            )
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("domain"), str):
            errors.append('DiceOverride requires a "domain" string.')
        if source.get("mode") not in _enum_values(DiceOverrideMode):
            errors.append(
                f'DiceOverride "mode" must be one of: {", ".join(_enum_values(DiceOverrideMode))}.'
            )
        return errors


@rule_element("AdjustDegree", description="Adjust DoS/DoF after a check")
class AdjustDegree(RuleElement):
    """
    Shifts Degrees of Success (positive) or Failure (negative) after a check.

        - key: AdjustDegree
          amount: 1
          predicate: [self:aim:full]
          label: Accurate

    `amount` may also read the actor's data, optionally transformed:

        - key: AdjustDegree
          amount: actor:system.characteristics.wp.bonus
          transform: half-floor
    """

    def contribute(self, synthetics: Synthetics) -> None:
        amount = self.require("amount", (int, float, str))

        if isinstance(amount, str):
            if not amount.startswith(ACTOR_PATH_PREFIX):
                raise RuleElementError(
                    self.key, f'"amount" must be a number or "{ACTOR_PATH_PREFIX}<path>"'
                )
            if self.actor is None:
                return
            path = amount[len(ACTOR_PATH_PREFIX):]
            resolved = resolve_number(self.actor.to_data(), path)
            if resolved is MISSING:
                logger.debug("AdjustDegree on %r: path %r did not resolve", self.item.name, path)
                return
            amount = apply_transform(resolved, self.optional("transform", str))

        synthetics.dos_adjustments.append(
            DosAdjustment(amount=int(amount), predicate=self.predicate, source=self.label)
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        amount = source.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
            return [f'AdjustDegree requires an "amount" (number or "{ACTOR_PATH_PREFIX}path").']
        if isinstance(amount, str) and not amount.startswith(ACTOR_PATH_PREFIX):
            return [f'AdjustDegree "amount" strings must start with "{ACTOR_PATH_PREFIX}".']
        return []


@rule_element("AdjustToughness", description="Modify effective TB for damage soak")
class AdjustToughness(RuleElement):
    """
    Modifies the Toughness Bonus used when soaking damage.

        - key: AdjustToughness      # Unnatural Toughness (2)
          value: 2
          mode: add

        - key: AdjustToughness      # Daemonic (X), X from the trait's rating
          value: rating
          mode: add
    """

    def contribute(self, synthetics: Synthetics) -> None:
        value = self.numeric_or_rating("value")
        mode = self.optional("mode", str, ToughnessMode.ADD.value)
        try:
            mode = ToughnessMode(mode)
        except ValueError:
            raise RuleElementError(self.key, f"unknown mode {mode!r}") from None

        synthetics.toughness_adjustments.append(
            ToughnessAdjustment(value=value, mode=mode, source=self.label)
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        value = source.get("value")
        if value != RATING and (isinstance(value, bool) or not isinstance(value, (int, float))):
            errors.append(f'AdjustToughness requires a numeric "value" (or "{RATING}").')
        mode = source.get("mode")
        if mode is not None and mode not in _enum_values(ToughnessMode):
            errors.append('AdjustToughness "mode" must be one of: add, multiply.')
        return errors


@rule_element("Resistance", description="Damage reduction by type")
class Resistance(RuleElement):
    """
    Reduces incoming damage of one type.

        - key: Resistance
          damageType: energy
          value: 2
          mode: flat        # subtract 2

        - key: Resistance
          damageType: impact
          mode: half        # halve
    """

    def contribute(self, synthetics: Synthetics) -> None:
        damage_type = self.require("damageType", str)
        value = self.optional("value", (int, float), 0)
        mode = self.optional("mode", str, ResistanceMode.FLAT.value)
        try:
            mode = ResistanceMode(mode)
        except ValueError:
            raise RuleElementError(self.key, f"unknown mode {mode!r}") from None

        synthetics.resistances.append(
            ResistanceEntry(damage_type=damage_type, value=int(value), mode=mode, source=self.label)
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("damageType"), str):
            errors.append('Resistance requires a "damageType" string.')
        mode = source.get("mode")
        if mode is not None and mode not in _enum_values(ResistanceMode):
            errors.append('Resistance "mode" must be one of: flat, half.')
        return errors


@rule_element("AttributeOverride", description="Swap characteristic for a test domain")
class AttributeOverride(RuleElement):
    """
    Tests a different characteristic for a domain.

        - key: AttributeOverride    # Constant Vigilance
          domain: initiative
          characteristic: int
    """

    def contribute(self, synthetics: Synthetics) -> None:
        synthetics.attribute_overrides.append(
            AttributeOverrideEntry(
                domain=self.require("domain", str),
                characteristic=self.require("characteristic", str),
                predicate=self.predicate,
                source=self.label,
            )
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("domain"), str):
            errors.append('AttributeOverride requires a "domain" string.')
        if not isinstance(source.get("characteristic"), str):
            errors.append('AttributeOverride requires a "characteristic" string.')
        return errors
