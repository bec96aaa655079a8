"""
Unit tests for the YAML authoring layer.

Tests text conversion, the template placeholder, validation messages and
the rule builder cleanup step.
"""

import pytest

from acolyte.engine.errors import AuthoringError
from acolyte.engine.systems.authoring import (
    YAML_TEMPLATE,
    check_text,
    clean_rule,
    from_text,
    to_text,
    validate,
)

MARKSMAN = {
    "key": "FlatModifier",
    "domain": "characteristic:bs",
    "value": 10,
    "label": "Marksman",
    "source": "talent",
    "predicate": ["self:aim:full", {"or": ["range:long", "range:extreme"]}],
}

# ============================================================================
# Text conversion
# ============================================================================


@pytest.mark.unit
def test_round_trip():
    rules = [
        MARKSMAN,
        {"key": "RollOption", "option": "weapon:reliable"},
        {"key": "ChoiceSet", "flag": "group", "choices": [{"value": "bolt", "label": "Bolt"}]},
    ]
    assert from_text(to_text(rules)) == rules


@pytest.mark.unit
def test_to_text_keeps_key_order():
    text = to_text([MARKSMAN])
    assert text.startswith("- key: FlatModifier\n  domain: characteristic:bs\n")


@pytest.mark.unit
def test_empty_list_gives_template():
    assert to_text([]) == YAML_TEMPLATE
    assert to_text(None) == YAML_TEMPLATE


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   \n", YAML_TEMPLATE, "\n" + YAML_TEMPLATE + "\n", "# just a comment\n"])
def test_empty_text_gives_empty_list(text):
    assert from_text(text) == []


@pytest.mark.unit
def test_single_mapping_is_wrapped():
    assert from_text("key: RollOption\noption: weapon:reliable\n") == [
        {"key": "RollOption", "option": "weapon:reliable"}
    ]


@pytest.mark.unit
def test_scalar_is_rejected():
    with pytest.raises(AuthoringError, match="YAML list"):
        from_text("just words")


@pytest.mark.unit
def test_parse_error_reports_position():
    with pytest.raises(AuthoringError) as exc_info:
        from_text("- key: FlatModifier\n  domain: [unclosed\n")

    assert exc_info.value.line is not None
    assert exc_info.value.column is not None
    assert "line" in str(exc_info.value)


# ============================================================================
# Validation
# ============================================================================


@pytest.mark.unit
def test_valid_rules_have_no_errors():
    assert validate([MARKSMAN, {"key": "GrantItem", "uuid": "Compendium.conditions.stunned"}]) == []


@pytest.mark.unit
def test_unknown_key_lists_valid_types():
    (error,) = validate([{"key": "FlatModifer"}])

    assert error.startswith('Rule #1: Unknown RE type "FlatModifer". Valid types: ')
    assert "FlatModifier" in error
    assert "GrantItem" in error


@pytest.mark.unit
def test_messages_use_one_based_positions():
    errors = validate([MARKSMAN, {"domain": "x"}, {"key": 5}, "oops"])

    assert errors == [
        'Rule #2: Missing required "key" field.',
        'Rule #3: "key" must be a string.',
        'Rule #4: must be a mapping with a "key" field.',
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "rule,message",
    [
        ({"key": "FlatModifier", "value": 1}, 'FlatModifier requires a "domain" string.'),
        ({"key": "FlatModifier", "domain": "x", "value": "1"}, 'FlatModifier requires a numeric "value"'),
        ({"key": "RollOption"}, 'RollOption requires an "option" string.'),
        ({"key": "DiceOverride", "domain": "x", "mode": "explode"}, 'DiceOverride "mode" must be one of'),
        ({"key": "AdjustDegree"}, 'AdjustDegree requires an "amount"'),
        ({"key": "AdjustDegree", "amount": "two"}, 'must start with "actor:"'),
        ({"key": "GrantItem"}, 'GrantItem requires a "uuid" string.'),
        ({"key": "Resistance", "damageType": "fire", "mode": "double"}, 'Resistance "mode" must be one of'),
        ({"key": "AdjustToughness", "value": 1, "mode": "square"}, 'AdjustToughness "mode" must be one of'),
        ({"key": "ChoiceSet", "flag": "x"}, 'ChoiceSet requires a "choices" array.'),
        ({"key": "ChoiceSet", "flag": "x", "choices": [{"label": "A"}]}, 'have a "value" string.'),
        ({"key": "ActorValue", "domain": "x"}, 'ActorValue requires a "path" string.'),
        ({"key": "ActorValue", "domain": "x", "path": "p", "transform": "cube"}, 'ActorValue "transform"'),
        ({"key": "AttributeOverride", "domain": "x"}, 'requires a "characteristic" string.'),
        ({"key": "FateOption", "effectType": "autoSucceed"}, 'FateOption requires a "slug" string.'),
        ({"key": "FateOption", "slug": "s", "effectType": "win"}, 'FateOption "effectType" must be one of'),
        ({"key": "VFXOverride"}, 'VFXOverride requires an "effectPath" string.'),
    ],
)
def test_variant_checks(rule, message):
    errors = validate([rule])

    assert errors
    assert all(e.startswith("Rule #1: ") for e in errors)
    assert any(message in e for e in errors)


@pytest.mark.unit
def test_rating_value_is_valid():
    assert validate([{"key": "FlatModifier", "domain": "armour:all", "value": "rating"}]) == []
    assert validate([{"key": "AdjustToughness", "value": "rating"}]) == []


# ============================================================================
# check_text and ValidationReport
# ============================================================================


@pytest.mark.unit
def test_check_text_reports_parse_error():
    report = check_text("- key: [")

    assert not report.is_valid
    assert report.errors[0].startswith("YAML parse error")


@pytest.mark.unit
def test_check_text_warnings_and_strict():
    text = "- key: RollOption\n  option: weapon:reliable\n  predicate: self:aim\n"

    report = check_text(text)
    assert report.is_valid
    assert report.rule_count == 1
    assert report.warnings == ['Rule #1: "predicate" should be a list of statements.']

    strict = check_text(text, strict=True)
    assert not strict.is_valid
    assert strict.warnings == []


# ============================================================================
# Rule builder cleanup
# ============================================================================


@pytest.mark.unit
def test_clean_rule_strips_empty_fields():
    clean = clean_rule(
        {"key": "FlatModifier", "domain": "x", "value": 10, "label": "", "source": None}
    )
    assert clean == {"key": "FlatModifier", "domain": "x", "value": 10}


@pytest.mark.unit
def test_clean_rule_coerces_numbers():
    assert clean_rule({"key": "FlatModifier", "value": "10"})["value"] == 10
    assert clean_rule({"key": "AdjustDegree", "amount": "2"})["amount"] == 2
    assert clean_rule({"key": "FlatModifier", "value": "2.5"})["value"] == 2.5


@pytest.mark.unit
def test_clean_rule_keeps_zero_and_symbolic_values():
    assert clean_rule({"key": "DiceOverride", "value": 0})["value"] == 0
    assert clean_rule({"key": "FlatModifier", "value": "rating"})["value"] == "rating"
    assert clean_rule({"key": "AdjustDegree", "amount": "actor:system.x"})["amount"] == "actor:system.x"
