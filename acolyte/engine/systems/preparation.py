# acolyte/engine/systems/preparation.py
"""
PreparationPass: builds an actor's Synthetics once per data preparation.

Order within one actor:
1. Base numeric derivation (characteristic values and bonuses)
2. A fresh Synthetics registry
3. Every owned item's rule elements contribute, item by item
4. Consumers (armour totals, checks, damage) read the registry

Rule elements may read derived data from step 1, never anything from step 4.
The pass is best effort: an unknown key or a failing element is logged and
skipped, and the pass always completes with a usable registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from acolyte.config import RulesConfig

from ..documents import Actor, Item, derive_characteristics
from ..modifier import ModifierResolution
from ..rules import instantiate
from ..synthetics import Synthetics

logger = logging.getLogger(__name__)


class PreparationPass:
    """
    Runs rule element contribution for actors.

    Stateless apart from its config; one instance can prepare any number of
    actors, one at a time.
    """

    def __init__(self, config: RulesConfig | None = None):
        self.config = config or RulesConfig()

    def run(self, actor: Actor) -> Synthetics:
        """
        Prepare an actor: derive base data, then collect synthetics.

        The new registry replaces whatever the actor held from its previous
        pass and is also returned.
        """
        derive_characteristics(actor)

        synthetics = Synthetics()
        contributed = 0
        for item in actor.items:
            contributed += self.contribute_item(synthetics, item)

        actor.synthetics = synthetics
        logger.debug(
            "Prepared %r: %d rule elements from %d items, %d domains",
            actor.name, contributed, len(actor.items), len(synthetics.modifiers),
        )
        return synthetics

    def contribute_item(self, synthetics: Synthetics, item: Item) -> int:
        """Contribute an item's authored rules. Returns how many contributed."""
        if not isinstance(item.system, Mapping):
            logger.warning("Item %r has a non-mapping system field; skipping it", item.name)
            return 0
        rules = item.system.get("rules")
        if rules is not None and not isinstance(rules, list):
            logger.warning("Item %r has a non-list rules field; skipping it", item.name)
            return 0
        return self.contribute_sources(synthetics, item.rules, item)

    def contribute_sources(
        self, synthetics: Synthetics, sources: Iterable[Any], item: Item
    ) -> int:
        """
        Contribute a list of rule sources on behalf of an item.

        Also used for sources synthesized at attack time (weapon qualities,
        craftsmanship, target conditions) that are not stored on any item.
        """
        contributed = 0
        for source in sources:
            element = instantiate(source, item)
            if element is None:
                continue
            try:
                element.contribute(synthetics)
            except Exception:
                logger.warning(
                    "Error processing rule element %r on %r",
                    element.key, item.name, exc_info=True,
                )
                continue
            contributed += 1
        return contributed

    def resolve(
        self,
        actor: Actor,
        domain: str,
        roll_options: Iterable[str] = (),
    ) -> ModifierResolution:
        """Resolve a domain for an actor with this pass's configured cap."""
        synthetics = actor.synthetics if actor.synthetics is not None else self.run(actor)
        return synthetics.resolve(domain, roll_options, cap=self.config.modifier_cap)
