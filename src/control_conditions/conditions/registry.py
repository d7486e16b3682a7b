"""Condition evaluator for control visibility rules.

Design:
- Relation folds are functions that take (terms, ctx) and return bool
- ``ctx`` is an EvalContext built per ``check`` call; its ``evaluate_term``
  callback resolves leaf values or recurses into nested groups
- Nested groups are evaluated as an independent AND set unless the engine is
  configured with ``nested_relation="term"``, in which case a group's own
  ``relation`` (default AND) is used
- A leaf whose setting is missing never matches
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from ..config import EngineConfig
from .basic import evaluate_and, evaluate_or
from .compare import compare as _compare, get_operator as _get_operator
from .context import EvalContext
from .models import MISSING, ConditionSet, ConditionTerm, Operator, Relation
from .values import get_condition_value as _get_condition_value, parse_term_name

RelationEvaluator = Callable[[Iterable[ConditionTerm], EvalContext], bool]

# Registry mapping relation -> fold function
RELATION_EVALUATORS: dict[Relation, RelationEvaluator] = {
    Relation.AND: evaluate_and,
    Relation.OR: evaluate_or,
}


class ConditionEvaluator:
    """Stateless evaluator for condition sets against a comparison object."""

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()

    def compare(self, left_value: Any, right_value: Any, operator: Operator | str) -> bool:
        return _compare(left_value, right_value, operator)

    def get_operator(
        self, condition_value: Any, is_negative_condition: bool, current_value: Any
    ) -> Operator:
        return _get_operator(condition_value, is_negative_condition, current_value)

    def get_condition_value(
        self,
        comparison_object: Mapping[str, Any],
        condition_name: str,
        sub_condition_name: Optional[str] = None,
    ) -> Any:
        return _get_condition_value(comparison_object, condition_name, sub_condition_name)

    def check(
        self, conditions: ConditionSet | Mapping[str, Any], comparison_object: Mapping[str, Any]
    ) -> bool:
        """Check whether a condition set is met by the comparison object.

        Plain mappings are validated into a ConditionSet first.
        """
        if not isinstance(conditions, ConditionSet):
            conditions = ConditionSet.model_validate(conditions)

        ctx = self._build_eval_context(comparison_object)
        return RELATION_EVALUATORS[conditions.relation](conditions.terms, ctx)

    def _build_eval_context(self, comparison_object: Mapping[str, Any]) -> EvalContext:
        def evaluate_term(term: ConditionTerm) -> bool:
            return self._evaluate_term(term, comparison_object)

        return EvalContext(comparison_object=comparison_object, evaluate_term=evaluate_term)

    def _nested_relation(self, term: ConditionTerm) -> Relation:
        if self.config.nested_relation == "term" and term.relation is not None:
            return term.relation
        return Relation.AND

    def _evaluate_term(self, term: ConditionTerm, comparison_object: Mapping[str, Any]) -> bool:
        if term.is_group:
            nested = ConditionSet(relation=self._nested_relation(term), terms=term.terms)
            return self.check(nested, comparison_object)

        real_name, sub_key = parse_term_name(term.name)
        value = self.get_condition_value(comparison_object, real_name, sub_key)
        if value is MISSING:
            return False
        return self.compare(value, term.value, term.operator)

    def check_shorthand(
        self, condition: Mapping[str, Any], comparison_object: Mapping[str, Any]
    ) -> bool:
        """Check the flat ``{"name": value, "name!": value}`` condition form.

        Every key must match (AND). A trailing ``!`` negates the key, and the
        operator is inferred from the shapes of the expected and current
        values. Keys may use the ``name[subkey]`` convention.
        """
        for key, expected in condition.items():
            is_negative = key.endswith("!")
            name = key[:-1] if is_negative else key
            real_name, sub_key = parse_term_name(name)
            value = self.get_condition_value(comparison_object, real_name, sub_key)
            if value is MISSING:
                return False
            operator = self.get_operator(expected, is_negative, value)
            if not self.compare(value, expected, operator):
                return False
        return True
