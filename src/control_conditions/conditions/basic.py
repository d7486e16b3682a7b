"""Relation folds for condition sets: and, or."""

from __future__ import annotations

from typing import Iterable

from .context import EvalContext
from .models import ConditionTerm


def evaluate_and(terms: Iterable[ConditionTerm], ctx: EvalContext) -> bool:
    """Evaluate AND: all terms must be true, stopping at the first false."""
    for term in terms:
        if not ctx.evaluate_term(term):
            return False
    return True


def evaluate_or(terms: Iterable[ConditionTerm], ctx: EvalContext) -> bool:
    """Evaluate OR: at least one term must be true, stopping at the first true."""
    for term in terms:
        if ctx.evaluate_term(term):
            return True
    return False
