"""Fluent builder for condition sets.

    ConditionBuilder("or").equals("layout", "boxed").in_("width", ["full", "wide"]).build()
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .models import ConditionSet, ConditionTerm, Operator, Relation


class ConditionBuilder:
    """Accumulates terms and produces an immutable ConditionSet."""

    def __init__(self, relation: Relation | str = Relation.AND) -> None:
        self._relation = Relation.parse(relation)
        self._terms: list[ConditionTerm] = []

    def _add(self, name: str, value: Any, operator: Operator) -> "ConditionBuilder":
        self._terms.append(ConditionTerm(name=name, value=value, operator=operator))
        return self

    def equals(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.LOOSE_EQUAL)

    def not_equals(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.LOOSE_NOT_EQUAL)

    def strictly_equals(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.STRICT_EQUAL)

    def not_strictly_equals(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.STRICT_NOT_EQUAL)

    def greater_than(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.GT)

    def greater_than_or_equal(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.GTE)

    def less_than(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.LT)

    def less_than_or_equal(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.LTE)

    def in_(self, name: str, values: list[Any]) -> "ConditionBuilder":
        return self._add(name, list(values), Operator.IN)

    def not_in(self, name: str, values: list[Any]) -> "ConditionBuilder":
        return self._add(name, list(values), Operator.NOT_IN)

    def contains(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.CONTAINS)

    def not_contains(self, name: str, value: Any) -> "ConditionBuilder":
        return self._add(name, value, Operator.NOT_CONTAINS)

    def group(
        self,
        build: Callable[["ConditionBuilder"], Any],
        relation: Optional[Relation | str] = None,
    ) -> "ConditionBuilder":
        """Add a nested group whose terms are filled in by ``build``.

        ``relation`` is stored on the group term; it only takes effect when
        the evaluator is configured with ``nested_relation="term"``.
        """
        inner = ConditionBuilder()
        build(inner)
        self._terms.append(
            ConditionTerm(
                terms=list(inner._terms),
                relation=None if relation is None else Relation.parse(relation),
            )
        )
        return self

    def build(self) -> ConditionSet:
        return ConditionSet(relation=self._relation, terms=list(self._terms))
