"""Operator table for condition terms.

Equality follows the editor's settings semantics: ``===``/``!==`` require the
same kind of value, ``==``/``!=`` coerce booleans and numeric strings when
one side is a number. Membership operators fail closed when their array
operand is not a list.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, Callable

from .models import MISSING, Operator


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _to_number(value: Any) -> float | None:
    """Numeric coercion for loose comparisons; None if not coercible."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return None
    return None


def strict_equals(left: Any, right: Any) -> bool:
    """Equal and of the same kind (bool, number, str, list, mapping, None)."""
    if left is MISSING or right is MISSING:
        return left is right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if type(left) is not type(right):
        return False
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    """Type-coercing equality."""
    if strict_equals(left, right):
        return True
    if left is None or right is None or left is MISSING or right is MISSING:
        return False
    if _is_number(left) or _is_number(right) or isinstance(left, bool) or isinstance(right, bool):
        left_num, right_num = _to_number(left), _to_number(right)
        if left_num is None or right_num is None:
            return False
        return left_num == right_num
    return False


def _contains(container: Any, item: Any) -> bool:
    return any(strict_equals(element, item) for element in container)


def _ordered(left: Any, right: Any, op: Callable[[Any, Any], bool]) -> bool:
    """Native ordering, falling back to numeric coercion for mixed kinds."""
    try:
        return bool(op(left, right))
    except TypeError:
        left_num, right_num = _to_number(left), _to_number(right)
        if left_num is None or right_num is None:
            return False
        return op(left_num, right_num)


_COMPARATORS: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.LOOSE_EQUAL: loose_equals,
    Operator.LOOSE_NOT_EQUAL: lambda left, right: not loose_equals(left, right),
    Operator.STRICT_NOT_EQUAL: lambda left, right: not strict_equals(left, right),
    Operator.IN: lambda left, right: isinstance(right, list) and _contains(right, left),
    Operator.NOT_IN: lambda left, right: isinstance(right, list) and not _contains(right, left),
    Operator.CONTAINS: lambda left, right: isinstance(left, list) and _contains(left, right),
    Operator.NOT_CONTAINS: lambda left, right: isinstance(left, list) and not _contains(left, right),
    Operator.LT: lambda left, right: _ordered(left, right, lambda a, b: a < b),
    Operator.LTE: lambda left, right: _ordered(left, right, lambda a, b: a <= b),
    Operator.GT: lambda left, right: _ordered(left, right, lambda a, b: a > b),
    Operator.GTE: lambda left, right: _ordered(left, right, lambda a, b: a >= b),
    Operator.STRICT_EQUAL: strict_equals,
}


def compare(left: Any, right: Any, operator: Operator | str) -> bool:
    """Compare two values using the operator table.

    Unknown operator text falls back to strict equality.
    """
    return _COMPARATORS[Operator.parse(operator)](left, right)


def get_operator(condition_value: Any, is_negative: bool, current_value: Any) -> Operator:
    """Pick an operator from the shape of the values being compared.

    A non-empty list condition value means membership (``in``), otherwise a
    non-empty list current value means ``contains``, otherwise strict
    (in)equality.
    """
    if isinstance(condition_value, list) and condition_value:
        return Operator.NOT_IN if is_negative else Operator.IN
    if isinstance(current_value, list) and current_value:
        return Operator.NOT_CONTAINS if is_negative else Operator.CONTAINS
    if is_negative:
        return Operator.STRICT_NOT_EQUAL
    return Operator.STRICT_EQUAL
