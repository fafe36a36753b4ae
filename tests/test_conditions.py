"""
Tests for conditional-logic evaluation and field visibility.

Run: pytest tests/test_conditions.py -v
"""

import math

import pytest

from core.schemas import FieldSchema
from services.validation.conditions import evaluate_condition, is_field_visible, to_number


def make_field(clauses):
    return FieldSchema.model_validate({
        "fieldId": "practiceSize",
        "label": "Practice Size",
        "type": "text",
        "required": True,
        "order": 1,
        "conditionalLogic": clauses,
    })


class TestEvaluateCondition:
    """Operator semantics."""

    def test_equals_is_strict(self):
        assert evaluate_condition("equals", "yes", "yes") is True
        assert evaluate_condition("equals", "1", 1) is False
        assert evaluate_condition("equals", True, 1) is False

    def test_not_equals(self):
        assert evaluate_condition("not_equals", "a", "b") is True
        assert evaluate_condition("not_equals", "a", "a") is False
        assert evaluate_condition("not_equals", None, "a") is True

    def test_contains_requires_string(self):
        assert evaluate_condition("contains", "clinical practice", "practice") is True
        assert evaluate_condition("contains", "clinical", "wholesale") is False
        assert evaluate_condition("contains", ["practice"], "practice") is False
        assert evaluate_condition("contains", None, "practice") is False

    def test_numeric_comparisons_coerce(self):
        assert evaluate_condition("greater_than", "10", 5) is True
        assert evaluate_condition("less_than", 3, "5") is True
        assert evaluate_condition("greater_than", 5, 5) is False

    def test_non_numeric_comparisons_are_false_both_ways(self):
        assert evaluate_condition("greater_than", "abc", 5) is False
        assert evaluate_condition("less_than", "abc", 5) is False
        assert evaluate_condition("greater_than", None, 0) is False
        assert evaluate_condition("less_than", None, 0) is False

    def test_in_array(self):
        assert evaluate_condition("in_array", "b", ["a", "b"]) is True
        assert evaluate_condition("in_array", "c", ["a", "b"]) is False
        assert evaluate_condition("in_array", "a", "abc") is False

    @pytest.mark.parametrize("actual,expected", [(None, None), ("x", 1), ([], {})])
    def test_unknown_operator_fails_open(self, actual, expected):
        assert evaluate_condition("bogus_op", actual, expected) is True

    def test_unknown_operator_logs_warning(self, caplog):
        evaluate_condition("bogus_op", 1, 2)
        assert "Unknown condition operator: bogus_op" in caplog.text


class TestToNumber:

    def test_blank_string_is_zero(self):
        assert to_number("   ") == 0.0

    def test_numeric_strings(self):
        assert to_number(" 12.5 ") == 12.5
        assert to_number(True) == 1.0

    def test_non_numeric_is_nan(self):
        assert math.isnan(to_number("12abc"))
        assert math.isnan(to_number("1_000"))
        assert math.isnan(to_number(None))
        assert math.isnan(to_number(["1"]))


class TestFieldVisibility:
    """First matching clause decides."""

    def test_no_logic_always_visible(self):
        assert is_field_visible(make_field([]), {}) is True

    def test_hide_when_condition_met(self):
        field = make_field([
            {"dependsOn": "hasPractice", "condition": "equals", "value": "no", "action": "hide"},
        ])
        assert is_field_visible(field, {"hasPractice": "no"}) is False
        assert is_field_visible(field, {"hasPractice": "yes"}) is True

    def test_show_and_require_include(self):
        for action in ("show", "require"):
            field = make_field([
                {"dependsOn": "hasPractice", "condition": "equals", "value": "yes", "action": action},
            ])
            assert is_field_visible(field, {"hasPractice": "yes"}) is True

    def test_optional_action_skips_field(self):
        field = make_field([
            {"dependsOn": "hasPractice", "condition": "equals", "value": "no", "action": "optional"},
        ])
        assert is_field_visible(field, {"hasPractice": "no"}) is False

    def test_first_matching_clause_wins(self):
        field = make_field([
            {"dependsOn": "tier", "condition": "in_array", "value": ["gold", "silver"], "action": "show"},
            {"dependsOn": "tier", "condition": "equals", "value": "gold", "action": "hide"},
        ])
        assert is_field_visible(field, {"tier": "gold"}) is True

    def test_no_matching_clause_includes_field(self):
        field = make_field([
            {"dependsOn": "tier", "condition": "equals", "value": "bronze", "action": "hide"},
        ])
        assert is_field_visible(field, {"tier": "gold"}) is True
