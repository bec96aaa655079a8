"""
Builder pattern utilities for rules engine testing.

These builders provide fluent APIs for creating items and actors
with sensible defaults and easy customization.
"""

from typing import Any, Optional

from acolyte.engine.documents import Actor, Item


class ItemBuilder:
    """
    Fluent builder for content items.

    Example:
        item = (ItemBuilder()
                .with_name("Marksman")
                .with_flat_modifier("characteristic:bs", 10, predicate=["self:aim:full"])
                .build())
    """

    def __init__(self):
        self._name = "Test Talent"
        self._type = "talent"
        self._system: dict[str, Any] = {"rules": []}
        self._flags: dict[str, Any] = {}
        self._id: Optional[str] = None

    def with_name(self, name: str) -> "ItemBuilder":
        self._name = name
        return self

    def with_type(self, item_type: str) -> "ItemBuilder":
        """Types: talent, trait, condition, weapon, armour, cybernetic"""
        self._type = item_type
        return self

    def with_id(self, item_id: str) -> "ItemBuilder":
        self._id = item_id
        return self

    def with_rating(self, rating: int) -> "ItemBuilder":
        self._system["rating"] = rating
        return self

    def with_slug(self, slug: str) -> "ItemBuilder":
        self._system["slug"] = slug
        return self

    def with_system(self, **values: Any) -> "ItemBuilder":
        self._system.update(values)
        return self

    def with_flag(self, key: str, value: Any) -> "ItemBuilder":
        self._flags.setdefault("acolyte", {})[key] = value
        return self

    def with_rule(self, **source: Any) -> "ItemBuilder":
        self._system["rules"].append(source)
        return self

    def with_raw_rule(self, source: Any) -> "ItemBuilder":
        """Append anything, including malformed entries."""
        self._system["rules"].append(source)
        return self

    def with_flat_modifier(
        self,
        domain: str,
        value: Any,
        exclusion_group: Optional[str] = None,
        predicate: Optional[list] = None,
        **extra: Any,
    ) -> "ItemBuilder":
        source: dict[str, Any] = {"key": "FlatModifier", "domain": domain, "value": value, **extra}
        if exclusion_group:
            source["exclusionGroup"] = exclusion_group
        if predicate is not None:
            source["predicate"] = predicate
        self._system["rules"].append(source)
        return self

    def with_roll_option(self, option: str) -> "ItemBuilder":
        self._system["rules"].append({"key": "RollOption", "option": option})
        return self

    def with_grant(self, uuid: str, cascade_delete: Optional[bool] = None) -> "ItemBuilder":
        source: dict[str, Any] = {"key": "GrantItem", "uuid": uuid}
        if cascade_delete is not None:
            source["cascadeDelete"] = cascade_delete
        self._system["rules"].append(source)
        return self

    def with_choice_set(self, flag: str, choices: list, prompt: str = "Choose") -> "ItemBuilder":
        self._system["rules"].append(
            {"key": "ChoiceSet", "flag": flag, "prompt": prompt, "choices": choices}
        )
        return self

    def build(self) -> Item:
        item = Item(name=self._name, type=self._type, system=self._system, flags=self._flags)
        if self._id:
            item.id = self._id
        return item


class ActorBuilder:
    """
    Fluent builder for actors.

    Example:
        actor = (ActorBuilder()
                 .with_characteristic("ws", 40)
                 .with_item(ItemBuilder().with_name("Sound Constitution").build())
                 .build())
    """

    def __init__(self):
        self._name = "Test Acolyte"
        self._type = "acolyte"
        self._system: dict[str, Any] = {"characteristics": {}}
        self._items: list[Item] = []

    def with_name(self, name: str) -> "ActorBuilder":
        self._name = name
        return self

    def with_type(self, actor_type: str) -> "ActorBuilder":
        self._type = actor_type
        return self

    def with_characteristic(self, key: str, base: int, advances: int = 0) -> "ActorBuilder":
        self._system["characteristics"][key] = {"base": base, "advances": advances}
        return self

    def with_system(self, **values: Any) -> "ActorBuilder":
        self._system.update(values)
        return self

    def with_item(self, item: Item) -> "ActorBuilder":
        self._items.append(item)
        return self

    def with_items(self, *items: Item) -> "ActorBuilder":
        self._items.extend(items)
        return self

    def build(self) -> Actor:
        return Actor(name=self._name, type=self._type, system=self._system, items=list(self._items))


def condition(slug: str) -> Item:
    """Shortcut for a condition item, e.g. condition("stunned")."""
    return ItemBuilder().with_name(slug.title()).with_type("condition").with_slug(slug).build()


class FakeCompendium:
    """In-memory item lookup standing in for the host's compendium."""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.lookups: list[str] = []

    async def lookup(self, uuid: str):
        self.lookups.append(uuid)
        return self.entries.get(uuid)


class ScriptedPrompt:
    """Choice prompt that answers from a fixed list (None = cancel)."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked: list[tuple[str, list]] = []

    async def __call__(self, text, choices):
        self.asked.append((text, choices))
        return self.answers.pop(0) if self.answers else None
