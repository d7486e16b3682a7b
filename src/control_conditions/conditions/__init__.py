"""Condition evaluation for control visibility rules.

Leaf comparisons plus AND/OR composition over nested term groups, evaluated
against a mapping of current setting values.
"""

from .builder import ConditionBuilder
from .compare import compare, get_operator, loose_equals, strict_equals
from .models import (
    MISSING,
    ComparisonObject,
    ConditionSet,
    ConditionTerm,
    ControlCondition,
    ControlState,
    Operator,
    Relation,
    SettingValue,
    VisibilityResult,
)
from .registry import RELATION_EVALUATORS, ConditionEvaluator
from .values import base_setting_name, get_condition_value, parse_term_name

__all__ = [
    "MISSING",
    "ComparisonObject",
    "ConditionBuilder",
    "ConditionEvaluator",
    "ConditionSet",
    "ConditionTerm",
    "ControlCondition",
    "ControlState",
    "Operator",
    "RELATION_EVALUATORS",
    "Relation",
    "SettingValue",
    "VisibilityResult",
    "base_setting_name",
    "compare",
    "get_condition_value",
    "get_operator",
    "loose_equals",
    "parse_term_name",
    "strict_equals",
]
