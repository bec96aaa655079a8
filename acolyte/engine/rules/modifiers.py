"""Rule elements that push Modifiers into a domain."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ..modifier import Modifier
from ..paths import MISSING, resolve_number
from .base import RATING, RuleElement, RuleElementSource, rule_element

if TYPE_CHECKING:
    from ..synthetics import Synthetics

logger = logging.getLogger(__name__)

TRANSFORMS = ("identity", "half-ceil", "half-floor", "negate", "multiply:<n>")


def apply_transform(value: int | float, transform: str | None) -> int | float:
    """
    Apply a named transform to a resolved number.

    Unknown transform names, and a multiply factor that is not a number,
    leave the value unchanged.
    """
    if not transform or transform == "identity":
        return value
    if transform == "half-ceil":
        return math.ceil(value / 2)
    if transform == "half-floor":
        return math.floor(value / 2)
    if transform == "negate":
        return -value
    if transform.startswith("multiply:"):
        try:
            factor = float(transform[len("multiply:"):])
        except ValueError:
            return value
        if math.isnan(factor):
            return value
        return value * factor
    return value


@rule_element("FlatModifier", description="Add a flat modifier to a domain")
class FlatModifier(RuleElement):
    """
    Adds a flat numeric modifier to a domain.

    Example on a talent:

        - key: FlatModifier
          domain: characteristic:bs
          value: 10
          label: Marksman
          source: talent
          predicate: [self:aim:full]

    `value: rating` reads the owning item's rating (Natural Armour (4) -> 4).
    """

    def contribute(self, synthetics: Synthetics) -> None:
        domain = self.require("domain", str)
        value = self.numeric_or_rating("value")

        synthetics.get_modifiers(domain).append(
            Modifier(
                label=self.label,
                value=int(value),
                source=self.optional("source", str, "rule-element"),
                exclusion_group=self.optional("exclusionGroup", str),
                predicate=self.predicate,
            )
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("domain"), str):
            errors.append('FlatModifier requires a "domain" string.')
        value = source.get("value")
        if not (_is_number(value) or value == RATING):
            errors.append(f'FlatModifier requires a numeric "value" (or "{RATING}").')
        return errors


@rule_element(
    "ActorValue", description="Dynamic value from actor stats (e.g. half WSB)"
)
class ActorValue(RuleElement):
    """
    Resolves a number from the owning actor's data and adds it as a modifier.

    Used for talents whose bonus scales with a characteristic:

        - key: ActorValue
          domain: damage:melee
          path: system.characteristics.ws.bonus
          transform: half-ceil
          label: Crushing Blow
          source: talent

    A path that does not resolve to a number contributes nothing.
    """

    def contribute(self, synthetics: Synthetics) -> None:
        domain = self.require("domain", str)
        path = self.require("path", str)
        transform = self.optional("transform", str)

        if self.actor is None:
            return
        raw = resolve_number(self.actor.to_data(), path)
        if raw is MISSING:
            logger.debug("ActorValue on %r: path %r did not resolve", self.item.name, path)
            return

        synthetics.get_modifiers(domain).append(
            Modifier(
                label=self.label,
                value=int(apply_transform(raw, transform)),
                source=self.optional("source", str, "rule-element"),
                exclusion_group=self.optional("exclusionGroup", str),
                predicate=self.predicate,
            )
        )

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("domain"), str):
            errors.append('ActorValue requires a "domain" string.')
        if not isinstance(source.get("path"), str):
            errors.append('ActorValue requires a "path" string.')
        transform = source.get("transform")
        if transform is not None and not _is_known_transform(transform):
            errors.append(
                f'ActorValue "transform" must be one of: {", ".join(TRANSFORMS)}.'
            )
        return errors


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_known_transform(transform: object) -> bool:
    if not isinstance(transform, str):
        return False
    if transform.startswith("multiply:"):
        try:
            float(transform[len("multiply:"):])
        except ValueError:
            return False
        return True
    return transform in TRANSFORMS
