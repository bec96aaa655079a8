# acolyte/engine/systems/lifecycle.py
"""
Item lifecycle hooks that rule elements need outside data preparation.

- pre-create: every ChoiceSet on the item prompts the user; a cancelled
  prompt vetoes the creation of the item
- created:    every GrantItem resolves its referenced item and adds a copy
  to the actor, tagged with the granting item's id
- deleted:    items granted by the removed item are removed too (cascade)

These are the only asynchronous paths in the engine. Data preparation never
waits on them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..documents import Item
from ..rules.grants import GRANTED_BY_FLAG, GrantItem, ItemResolver
from ..rules.options import ChoicePrompt, ChoiceSet

if TYPE_CHECKING:
    from ..documents import Actor

logger = logging.getLogger(__name__)

# Stop runaway grant chains (A grants B grants A...)
MAX_GRANT_DEPTH = 4


class ItemLifecycle:
    """
    Creates and deletes items on actors, running rule element hooks.

    Usage:
        lifecycle = ItemLifecycle(resolver=compendium.lookup, prompt=ui.choose)
        item = await lifecycle.create_item(actor, talent)
        if item is None:
            ...  # user cancelled a choice
    """

    def __init__(
        self,
        resolver: ItemResolver | None = None,
        prompt: ChoicePrompt | None = None,
    ):
        self.resolver = resolver
        self.prompt = prompt

    async def pre_create(self, item: Item) -> bool:
        """
        Ask every ChoiceSet on the item and store the answers as item flags.

        Returns False (veto creation) as soon as one prompt is cancelled; no
        flags are written in that case.
        """
        choice_sets = [r for r in item.rules if isinstance(r, Mapping) and r.get("key") == "ChoiceSet"]
        if not choice_sets:
            return True
        if self.prompt is None:
            logger.warning("Item %r has ChoiceSets but no prompt is available", item.name)
            return False

        answers: dict[str, str] = {}
        for source in choice_sets:
            flag = source.get("flag")
            if not isinstance(flag, str):
                logger.warning("ChoiceSet on %r has no flag; skipping it", item.name)
                continue
            choice = await ChoiceSet.elicit(source, self.prompt)
            if choice is None:
                logger.info("Creation of %r cancelled at ChoiceSet %r", item.name, flag)
                return False
            answers[flag] = choice

        item.set_flags(**answers)
        return True

    async def create_item(self, actor: Actor, item: Item, _depth: int = 0) -> Item | None:
        """
        Full creation flow: pre-create hook, add to actor, then grants.

        Returns the created item, or None if a ChoiceSet prompt was cancelled.
        """
        if not await self.pre_create(item):
            return None

        actor.add_item(item)
        await self.grant_items(actor, item, _depth)
        return item

    async def grant_items(self, actor: Actor, item: Item, _depth: int = 0) -> list[Item]:
        """
        Create the items an item grants. A grant that cannot be resolved is
        logged and skipped; the granting item stays on the actor regardless.
        """
        grants = GrantItem.grant_sources(item)
        if not grants:
            return []
        if self.resolver is None:
            logger.warning("Item %r grants items but no resolver is available", item.name)
            return []
        if _depth >= MAX_GRANT_DEPTH:
            logger.warning("Grant chain from %r is too deep; stopping", item.name)
            return []

        created: list[Item] = []
        for grant in grants:
            uuid = grant["uuid"]
            try:
                found = await self.resolver(uuid)
            except Exception:
                logger.warning("GrantItem: error resolving %s", uuid, exc_info=True)
                continue
            if found is None:
                logger.warning("GrantItem: could not resolve %s", uuid)
                continue
            if isinstance(found, Item):
                data = found.to_source()
            elif isinstance(found, Mapping):
                data = dict(found)
            else:
                logger.warning("GrantItem: %s resolved to %s, not an item", uuid, type(found).__name__)
                continue

            # Every grant is a fresh copy with its own id
            data.pop("id", None)
            granted = Item.from_source(data)
            granted.set_flags(**{GRANTED_BY_FLAG: item.id})

            result = await self.create_item(actor, granted, _depth + 1)
            if result is not None:
                created.append(result)

        return created

    async def delete_item(self, actor: Actor, item_id: str) -> list[str]:
        """
        Remove an item and, if it cascades, everything it granted.

        Returns the ids of every removed item, the requested one first.
        """
        item = actor.remove_item(item_id)
        if item is None:
            return []

        removed = [item.id]
        if not GrantItem.cascades(item):
            return removed

        granted_ids = [i.id for i in actor.items if i.get_flag(GRANTED_BY_FLAG) == item.id]
        for granted_id in granted_ids:
            removed.extend(await self.delete_item(actor, granted_id))
        return removed
