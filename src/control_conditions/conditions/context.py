"""Minimal context for condition set evaluation.

Built once per ``ConditionEvaluator.check`` call; the relation folds in
``basic.py`` receive only what they need through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .models import ConditionTerm


@dataclass
class EvalContext:
    """Everything a relation fold needs to evaluate its terms."""

    comparison_object: Mapping[str, Any]
    evaluate_term: Callable[[ConditionTerm], bool]  # leaf or nested group -> bool
