"""Conditional visibility rules for page-builder editor controls."""

from .conditions import (
    ConditionBuilder,
    ConditionEvaluator,
    ConditionSet,
    ConditionTerm,
    ControlCondition,
    ControlState,
    Operator,
    Relation,
    VisibilityResult,
)
from .config import EngineConfig, configure_logging
from .controls import ControlConditionsRegistry, load_conditions

__all__ = [
    "ConditionBuilder",
    "ConditionEvaluator",
    "ConditionSet",
    "ConditionTerm",
    "ControlCondition",
    "ControlConditionsRegistry",
    "ControlState",
    "EngineConfig",
    "Operator",
    "Relation",
    "VisibilityResult",
    "configure_logging",
    "load_conditions",
]
