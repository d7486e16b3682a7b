"""Tests for condition set evaluation.

Covers relation folds, short-circuiting, nested groups, sub-key access and
the flat shorthand form used by control definitions.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from control_conditions.conditions import (
    MISSING,
    ConditionBuilder,
    ConditionEvaluator,
    ConditionSet,
    ConditionTerm,
    Operator,
    Relation,
    get_condition_value,
    parse_term_name,
)
from control_conditions.config import EngineConfig


def _term(name: str, value, operator: str = "===") -> dict:
    return {"name": name, "value": value, "operator": operator}


@pytest.fixture
def evaluator() -> ConditionEvaluator:
    return ConditionEvaluator()


class TestConditionValue:
    def test_reads_sub_key_of_object_setting(self):
        assert get_condition_value({"image_overlay": {"url": "x"}}, "image_overlay", "url") == "x"

    def test_reads_top_level_setting(self):
        assert get_condition_value({"foo": "bar"}, "foo") == "bar"

    def test_sub_key_ignored_for_scalar_setting(self):
        assert get_condition_value({"foo": "bar"}, "foo", "url") == "bar"

    def test_missing_setting_and_sub_key(self):
        assert get_condition_value({}, "foo") is MISSING
        assert get_condition_value({"image": {}}, "image", "url") is MISSING

    def test_numeric_sub_key_indexes_list_setting(self):
        assert get_condition_value({"items": ["a", "b"]}, "items", "0") == "a"
        assert get_condition_value({"items": ["a", "b"]}, "items", "1") == "b"

    def test_list_sub_key_out_of_range_or_non_numeric_is_missing(self):
        assert get_condition_value({"items": ["a", "b"]}, "items", "2") is MISSING
        assert get_condition_value({"items": ["a", "b"]}, "items", "url") is MISSING

    def test_list_index_terms(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("items[0]", "a")]}
        assert evaluator.check(conditions, {"items": ["a", "b"]}) is True
        assert evaluator.check(conditions, {"items": ["b", "a"]}) is False
        assert evaluator.check(conditions, {"items": []}) is False

    def test_explicit_none_is_not_missing(self):
        assert get_condition_value({"foo": None}, "foo") is None


class TestParseTermName:
    def test_plain_and_bracketed_names(self):
        assert parse_term_name("link_type") == ("link_type", None)
        assert parse_term_name("image_overlay[url]") == ("image_overlay", "url")
        assert parse_term_name("box-shadow[color]") == ("box-shadow", "color")

    def test_unparseable_name_used_verbatim(self):
        assert parse_term_name("[]") == ("[]", None)


class TestCheckAnd:
    """AND sets need every term and stop at the first failure."""

    def test_true_only_when_all_terms_match(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("a", 1), _term("b", 2)]}
        assert evaluator.check(conditions, {"a": 1, "b": 2}) is True
        assert evaluator.check(conditions, {"a": 1, "b": 3}) is False
        assert evaluator.check(conditions, {"a": 0, "b": 2}) is False

    def test_short_circuits_after_first_false(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("a", 1), _term("b", 2)]}
        with patch.object(evaluator, "compare", wraps=evaluator.compare) as spy:
            assert evaluator.check(conditions, {"a": 0, "b": 2}) is False
        assert spy.call_count == 1
        spy.assert_called_once_with(0, 1, Operator.STRICT_EQUAL)

    def test_empty_terms_are_true(self, evaluator):
        assert evaluator.check({"relation": "and", "terms": []}, {}) is True


class TestCheckOr:
    """OR sets need one matching term and stop at the first success."""

    def test_true_when_any_term_matches(self, evaluator):
        conditions = {"relation": "or", "terms": [_term("a", 1), _term("b", 2)]}
        assert evaluator.check(conditions, {"a": 0, "b": 2}) is True
        assert evaluator.check(conditions, {"a": 1, "b": 0}) is True
        assert evaluator.check(conditions, {"a": 0, "b": 0}) is False

    def test_short_circuits_after_first_true(self, evaluator):
        conditions = {"relation": "or", "terms": [_term("a", 1), _term("b", 2)]}
        with patch.object(evaluator, "compare", wraps=evaluator.compare) as spy:
            assert evaluator.check(conditions, {"a": 1, "b": 2}) is True
        assert spy.call_count == 1

    def test_empty_terms_are_false(self, evaluator):
        assert evaluator.check({"relation": "or", "terms": []}, {}) is False

    def test_unknown_relation_folds_as_and(self, evaluator):
        conditions = ConditionSet.model_validate(
            {"relation": "xor", "terms": [_term("a", 1), _term("b", 2)]}
        )
        assert conditions.relation is Relation.AND
        assert evaluator.check(conditions, {"a": 1, "b": 0}) is False


class TestNestedGroups:
    def test_nested_group_is_and_inside_or(self, evaluator):
        conditions = {
            "relation": "or",
            "terms": [{"terms": [_term("a", 1), _term("b", 2)]}],
        }
        assert evaluator.check(conditions, {"a": 1, "b": 2}) is True
        assert evaluator.check(conditions, {"a": 1, "b": 0}) is False
        assert evaluator.check(conditions, {"a": 0, "b": 2}) is False

    def test_group_relation_ignored_by_default(self, evaluator):
        conditions = {
            "relation": "or",
            "terms": [{"relation": "or", "terms": [_term("a", 1), _term("b", 2)]}],
        }
        assert evaluator.check(conditions, {"a": 1, "b": 0}) is False

    def test_group_relation_honored_when_enabled(self):
        evaluator = ConditionEvaluator(EngineConfig(nested_relation="term"))
        conditions = {
            "relation": "and",
            "terms": [
                _term("c", 3),
                {"relation": "or", "terms": [_term("a", 1), _term("b", 2)]},
            ],
        }
        assert evaluator.check(conditions, {"a": 1, "b": 0, "c": 3}) is True
        assert evaluator.check(conditions, {"a": 0, "b": 0, "c": 3}) is False

    def test_deeply_nested_groups(self, evaluator):
        conditions = {
            "relation": "and",
            "terms": [{"terms": [_term("a", 1), {"terms": [_term("b", 2, "contains")]}]}],
        }
        assert evaluator.check(conditions, {"a": 1, "b": [1, 2, 3]}) is True
        assert evaluator.check(conditions, {"a": 1, "b": [3]}) is False


class TestLeafTerms:
    def test_missing_setting_never_matches(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("a", "x", "!==")]}
        assert evaluator.check(conditions, {}) is False
        assert evaluator.check(conditions, {"a": "y"}) is True

    def test_missing_setting_is_not_compared(self, evaluator):
        conditions = {"relation": "or", "terms": [_term("a", 1)]}
        with patch.object(evaluator, "compare", wraps=evaluator.compare) as spy:
            assert evaluator.check(conditions, {}) is False
        spy.assert_not_called()

    def test_sub_key_terms(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("image_overlay[url]", "", "!==")]}
        assert evaluator.check(conditions, {"image_overlay": {"url": "a.png"}}) is True
        assert evaluator.check(conditions, {"image_overlay": {"url": ""}}) is False
        assert evaluator.check(conditions, {"image_overlay": {}}) is False

    def test_unknown_operator_text_is_strict_equality(self, evaluator):
        conditions = {"relation": "and", "terms": [_term("a", 1, "approximately")]}
        assert evaluator.check(conditions, {"a": 1}) is True
        assert evaluator.check(conditions, {"a": "1"}) is False

    def test_unknown_operator_text_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="control_conditions.conditions.models"):
            term = ConditionTerm.model_validate(_term("a", 1, "approximately"))
        assert term.operator is Operator.STRICT_EQUAL
        assert "Unknown operator 'approximately'" in caplog.text

    def test_known_and_default_operators_do_not_log(self, caplog):
        with caplog.at_level(logging.WARNING, logger="control_conditions.conditions.models"):
            ConditionTerm.model_validate(_term("a", 1, "!in"))
            ConditionTerm(name="a", value=1)
        assert caplog.text == ""


class TestShorthand:
    """Flat {name: value, name!: value} conditions."""

    def test_all_keys_must_match(self, evaluator):
        condition = {"link_type": "external", "image_overlay[url]!": ""}
        assert evaluator.check_shorthand(
            condition, {"link_type": "external", "image_overlay": {"url": "a.png"}}
        )
        assert not evaluator.check_shorthand(
            condition, {"link_type": "external", "image_overlay": {"url": ""}}
        )

    def test_list_values_infer_membership(self, evaluator):
        assert evaluator.check_shorthand({"layout": ["boxed", "full"]}, {"layout": "full"})
        assert not evaluator.check_shorthand({"layout!": ["boxed", "full"]}, {"layout": "full"})

    def test_list_settings_infer_contains(self, evaluator):
        assert evaluator.check_shorthand({"tags": "sale"}, {"tags": ["new", "sale"]})
        assert evaluator.check_shorthand({"tags!": "old"}, {"tags": ["new", "sale"]})

    def test_missing_setting_fails(self, evaluator):
        assert not evaluator.check_shorthand({"layout!": "boxed"}, {})


class TestConditionBuilder:
    def test_builds_condition_set(self, evaluator):
        conditions = (
            ConditionBuilder("or")
            .strictly_equals("layout", "boxed")
            .group(lambda g: g.greater_than("width", 100).in_("unit", ["px", "em"]))
            .build()
        )
        assert conditions.relation is Relation.OR
        assert conditions.terms[1].terms[1].operator is Operator.IN
        assert evaluator.check(conditions, {"layout": "full", "width": 200, "unit": "px"})
        assert not evaluator.check(conditions, {"layout": "full", "width": 50, "unit": "px"})

    def test_group_relation_is_recorded(self):
        conditions = ConditionBuilder().group(lambda g: g.equals("a", 1), relation="or").build()
        assert conditions.terms[0].relation is Relation.OR
