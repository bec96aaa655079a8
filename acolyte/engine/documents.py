# acolyte/engine/documents.py
"""
Owning item / owning actor models.

The host application owns persistence; these dataclasses only carry what the
rules engine reads: an item's name, its system data bag (with its authored
`rules` list and optional `rating`), its flags, and the actor's derived data
used for dot-path lookups.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .synthetics import Synthetics

logger = logging.getLogger(__name__)

# Namespace for engine-owned item flags (choices, grant bookkeeping)
FLAG_SCOPE = "acolyte"

ItemId = str
ActorId = str


def new_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass
class Item:
    """A content item owned by an actor (talent, trait, condition, weapon...)."""

    name: str
    type: str = "talent"
    system: dict[str, Any] = field(default_factory=dict)
    flags: dict[str, Any] = field(default_factory=dict)
    id: ItemId = field(default_factory=new_id)
    parent: Actor | None = field(default=None, repr=False, compare=False)

    @property
    def rules(self) -> list[Any]:
        """Authored rule element sources. Anything but a list counts as none."""
        if not isinstance(self.system, Mapping):
            return []
        rules = self.system.get("rules")
        return rules if isinstance(rules, list) else []

    @property
    def rating(self) -> int | float:
        """The item's rating, e.g. Natural Armour (4). Missing counts as 0."""
        if not isinstance(self.system, Mapping):
            return 0
        rating = self.system.get("rating", 0)
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            return 0
        return rating

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(FLAG_SCOPE, {}).get(key, default)

    def set_flags(self, **values: Any) -> None:
        self.flags.setdefault(FLAG_SCOPE, {}).update(values)

    def to_source(self) -> dict[str, Any]:
        """Plain-data copy (what a compendium lookup hands to GrantItem)."""
        return {
            "name": self.name,
            "type": self.type,
            "system": copy.deepcopy(self.system),
            "flags": copy.deepcopy(self.flags),
        }

    @classmethod
    def from_source(cls, data: dict[str, Any], item_id: ItemId | None = None) -> Item:
        return cls(
            name=data.get("name", "Unnamed Item"),
            type=data.get("type", "talent"),
            system=copy.deepcopy(data.get("system") or {}),
            flags=copy.deepcopy(data.get("flags") or {}),
            id=item_id or data.get("id") or new_id(),
        )


@dataclass
class Actor:
    """An entity that owns items and prepares synthetics from them."""

    name: str
    type: str = "acolyte"
    system: dict[str, Any] = field(default_factory=dict)
    items: list[Item] = field(default_factory=list)
    id: ActorId = field(default_factory=new_id)
    synthetics: Synthetics | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        for item in self.items:
            item.parent = self

    def add_item(self, item: Item) -> Item:
        item.parent = self
        self.items.append(item)
        return item

    def get_item(self, item_id: ItemId) -> Item | None:
        return next((i for i in self.items if i.id == item_id), None)

    def remove_item(self, item_id: ItemId) -> Item | None:
        item = self.get_item(item_id)
        if item is None:
            return None
        self.items.remove(item)
        item.parent = None
        return item

    def to_data(self) -> dict[str, Any]:
        """Tree-of-maps view used for dot-path lookups ("system.characteristics.ws.bonus")."""
        return {"id": self.id, "name": self.name, "type": self.type, "system": self.system}

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> Actor:
        """Build an actor (and its items) from a plain mapping, e.g. loaded YAML."""
        items = [Item.from_source(i) for i in data.get("items") or []]
        return cls(
            name=data.get("name", "Unnamed Actor"),
            type=data.get("type", "acolyte"),
            system=copy.deepcopy(data.get("system") or {}),
            items=items,
            id=data.get("id") or new_id(),
        )


def derive_characteristics(actor: Actor) -> None:
    """
    Base numeric derivation, run before any rule element contributes.

    value = base + advances * 5, bonus = value // 10. Characteristics that
    already carry a plain `value` (and no `base`) keep it. One whose base or
    advances is not a number is logged and left untouched.
    """
    if not isinstance(actor.system, Mapping):
        logger.warning("Actor %r has a non-mapping system field; skipping derivation", actor.name)
        return
    characteristics = actor.system.get("characteristics")
    if not isinstance(characteristics, dict):
        return

    for key, char in characteristics.items():
        if not isinstance(char, dict):
            continue
        if "base" in char:
            base = char["base"]
            advances = char.get("advances", 0)
            if not (_is_number(base) and _is_number(advances)):
                logger.warning(
                    "Actor %r: characteristic %r has a non-numeric base or advances; skipping it",
                    actor.name, key,
                )
                continue
            char["value"] = int(base) + int(advances) * 5
        value = char.get("value")
        if _is_number(value):
            char["bonus"] = int(value) // 10


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
