"""
Tests for the preparation pass.

Covers best-effort contribution (bad elements are skipped, siblings still
run), derivation ordering, and attack-time synthesized sources.
"""

import logging

import pytest
from builders import ActorBuilder, ItemBuilder, condition

from acolyte.config import RulesConfig
from acolyte.engine.documents import Actor
from acolyte.engine.systems.preparation import PreparationPass
from acolyte.engine.systems.target_conditions import target_condition_bonuses
from acolyte.engine.systems.weapon_qualities import craftsmanship_rule_sources, quality_rule_sources


@pytest.mark.systems
def test_run_collects_every_item(preparation, acolyte):
    acolyte.add_item(ItemBuilder().with_name("Sound Constitution").with_flat_modifier("wounds", 1).build())
    acolyte.add_item(ItemBuilder().with_name("Jaded").with_roll_option("self:jaded").build())

    synthetics = preparation.run(acolyte)

    assert acolyte.synthetics is synthetics
    assert synthetics.resolve("wounds").total == 1
    assert synthetics.roll_options == {"self:jaded"}


@pytest.mark.systems
def test_each_pass_starts_fresh(preparation, acolyte):
    acolyte.add_item(ItemBuilder().with_flat_modifier("wounds", 1).build())

    first = preparation.run(acolyte)
    second = preparation.run(acolyte)

    assert first is not second
    assert second.resolve("wounds").total == 1


@pytest.mark.systems
def test_bad_elements_skipped_siblings_run(preparation, acolyte, caplog):
    item = (
        ItemBuilder()
        .with_name("Messy Talent")
        .with_flat_modifier("characteristic:ws", 5)
        .with_rule(key="DoesNotExist", value=99)
        .with_rule(key="FlatModifier", value=10)
        .with_raw_rule("not a mapping")
        .with_rule(key="DiceOverride", domain="damage:*", mode="explode")
        .with_roll_option("self:messy")
        .build()
    )
    acolyte.add_item(item)

    with caplog.at_level(logging.WARNING):
        synthetics = preparation.run(acolyte)

    assert synthetics.resolve("characteristic:ws").total == 5
    assert synthetics.roll_options == {"self:messy"}
    assert synthetics.dice_overrides == {}
    assert "DoesNotExist" in caplog.text
    assert "Error processing rule element 'FlatModifier'" in caplog.text


@pytest.mark.systems
def test_unknown_key_does_not_affect_other_items(preparation):
    good = ItemBuilder().with_name("Good").with_flat_modifier("attack:melee", 10).build()
    bad = ItemBuilder().with_name("Bad").with_rule(key="DoesNotExist").build()
    with_bad = ActorBuilder().with_items(bad, good).build()
    without_bad = ActorBuilder().with_items(
        ItemBuilder().with_name("Good").with_flat_modifier("attack:melee", 10).build()
    ).build()

    assert preparation.run(with_bad).modifiers == preparation.run(without_bad).modifiers


@pytest.mark.systems
def test_non_list_rules_field_skipped(preparation, acolyte, caplog):
    acolyte.add_item(ItemBuilder().with_name("Broken").with_system(rules={"key": "RollOption"}).build())

    with caplog.at_level(logging.WARNING):
        synthetics = preparation.run(acolyte)

    assert synthetics.roll_options == set()
    assert "non-list rules field" in caplog.text


@pytest.mark.systems
@pytest.mark.parametrize("system", [["x"], "scalar"])
def test_non_mapping_item_system_skipped(preparation, system, caplog):
    actor = Actor.from_data(
        {
            "name": "Vane",
            "items": [
                {"name": "Corrupt", "system": system},
                {"name": "Sound Constitution", "system": {"rules": [{"key": "FlatModifier", "domain": "wounds", "value": 3}]}},
            ],
        }
    )

    with caplog.at_level(logging.WARNING):
        synthetics = preparation.run(actor)

    assert synthetics.resolve("wounds").total == 3
    assert "non-mapping system field" in caplog.text


@pytest.mark.systems
@pytest.mark.parametrize("base", [None, "thirty"])
def test_malformed_characteristic_does_not_abort_pass(preparation, base):
    actor = ActorBuilder().with_system(characteristics={"ws": {"base": base}}).build()
    actor.add_item(ItemBuilder().with_flat_modifier("x", 3).build())

    assert preparation.run(actor).resolve("x").total == 3


@pytest.mark.systems
def test_elements_read_derived_characteristics(preparation, acolyte):
    # wp base 45 + 2 advances -> 55 -> bonus 5, derived before contribution
    acolyte.add_item(
        ItemBuilder()
        .with_name("Iron Faith")
        .with_rule(key="ActorValue", domain="fear", path="system.characteristics.wp.bonus")
        .build()
    )

    assert preparation.run(acolyte).resolve("fear").total == 5


@pytest.mark.systems
def test_resolve_uses_configured_cap(acolyte):
    acolyte.add_item(ItemBuilder().with_flat_modifier("attack:melee", 50).with_flat_modifier("attack:melee", 30).build())

    assert PreparationPass().resolve(acolyte, "attack:melee").total == 60
    assert PreparationPass(RulesConfig(modifier_cap=70)).resolve(acolyte, "attack:melee").total == 70


@pytest.mark.systems
def test_resolve_prepares_unprepared_actor(preparation, acolyte):
    acolyte.add_item(ItemBuilder().with_flat_modifier("wounds", 2).build())

    assert acolyte.synthetics is None
    assert preparation.resolve(acolyte, "wounds").total == 2
    assert acolyte.synthetics is not None


# ============================================================================
# Attack-time synthesis
# ============================================================================


@pytest.mark.systems
def test_weapon_sources_go_into_derived_copy(preparation, acolyte):
    weapon = ItemBuilder().with_name("Godwyn-De'az Bolter").with_type("weapon").build()
    acolyte.add_item(weapon)
    synthetics = preparation.run(acolyte)

    attack = synthetics.derive()
    sources = quality_rule_sources(["Accurate", "Tearing"]) + craftsmanship_rule_sources("good")
    contributed = preparation.contribute_sources(attack, sources, weapon)

    assert contributed == len(sources)
    assert attack.resolve("attack:ranged", {"self:aim"}).total == 15
    assert attack.degree_adjustment({"self:aim:full"}) == 1
    assert [e.source for e in attack.dice_overrides_for("damage:ranged")] == ["Tearing"]
    assert "weapon:accurate" in attack.roll_options

    assert synthetics.resolve("attack:ranged", {"self:aim"}).total == 0
    assert synthetics.dice_overrides == {}


@pytest.mark.systems
def test_target_condition_sources(preparation, acolyte):
    target = ActorBuilder().with_name("Heretic").with_items(condition("prone"), condition("stunned")).build()
    preparation.run(target)
    weapon = ItemBuilder().with_name("Autopistol").with_type("weapon").build()
    acolyte.add_item(weapon)

    attack = preparation.run(acolyte).derive()
    bonus = target_condition_bonuses(target, is_melee=False)
    preparation.contribute_sources(attack, bonus.sources, weapon)

    assert attack.resolve("attack:ranged", bonus.roll_options).total == 10
    assert attack.resolve("attack:ranged", ["range:point-blank", *bonus.roll_options]).total == 20
