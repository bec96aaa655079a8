"""GrantItem: companion items created and removed alongside their granting item."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from .base import RuleElement, RuleElementSource, rule_element

if TYPE_CHECKING:
    from ..documents import Item
    from ..synthetics import Synthetics

# Item flag naming the item that granted this one (cascade deletion looks for it)
GRANTED_BY_FLAG = "grantedBy"

# uuid -> the referenced item (or its plain-data source), None when not found
ItemResolver = Callable[[str], Awaitable["Item | Mapping[str, Any] | None"]]


@rule_element("GrantItem", description="Auto-grant an item on creation")
class GrantItem(RuleElement):
    """
    Grants another item when the owning item is added to an actor.

        - key: GrantItem
          uuid: Compendium.dh2e-data.conditions.Item.stunned
          cascadeDelete: true

    Nothing happens during data preparation. The work is done by the item
    lifecycle hooks in systems.lifecycle, which use the helpers below.
    """

    def contribute(self, synthetics: Synthetics) -> None:
        return None

    @staticmethod
    def grant_sources(item: Item) -> list[RuleElementSource]:
        """GrantItem sources on an item that name something to grant."""
        return [
            r for r in item.rules
            if isinstance(r, Mapping) and r.get("key") == "GrantItem" and isinstance(r.get("uuid"), str)
        ]

    @staticmethod
    def cascades(item: Item) -> bool:
        """True if removing the item should also remove what it granted."""
        return any(r.get("cascadeDelete", True) is not False for r in GrantItem.grant_sources(item))

    @classmethod
    def validate_source(cls, source: RuleElementSource) -> list[str]:
        errors = []
        if not isinstance(source.get("uuid"), str):
            errors.append('GrantItem requires a "uuid" string.')
        if "cascadeDelete" in source and not isinstance(source["cascadeDelete"], bool):
            errors.append('GrantItem "cascadeDelete" must be true or false.')
        return errors
