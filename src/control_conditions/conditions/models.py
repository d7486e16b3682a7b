"""Typed condition models for control visibility rules.

These models mirror the condition configuration shape supplied by control
definitions and provide typed access to term fields instead of dict lookups.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel for a setting (or sub-key) that is not present at all."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

SettingValue = Union[
    str, int, float, bool, None, list["SettingValue"], dict[str, "SettingValue"]
]
ComparisonObject = Mapping[str, SettingValue]


class Operator(str, Enum):
    """Comparison operators for condition terms."""

    LOOSE_EQUAL = "=="
    LOOSE_NOT_EQUAL = "!="
    STRICT_NOT_EQUAL = "!=="
    IN = "in"
    NOT_IN = "!in"
    CONTAINS = "contains"
    NOT_CONTAINS = "!contains"
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    STRICT_EQUAL = "==="

    @classmethod
    def parse(cls, value: Any) -> "Operator":
        """Map operator text to a member; anything unknown is strict equality."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.STRICT_EQUAL
        try:
            return cls(value)
        except (TypeError, ValueError):
            logger.warning(f"Unknown operator {value!r}, using strict equality")
            return cls.STRICT_EQUAL


class Relation(str, Enum):
    """Logical relation between the terms of a condition set."""

    AND = "and"
    OR = "or"

    @classmethod
    def parse(cls, value: Any) -> "Relation":
        # Only an explicit "or" switches the fold; everything else folds as AND.
        if isinstance(value, cls):
            return value
        return cls.OR if value == cls.OR.value else cls.AND


class ConditionTerm(BaseModel):
    """A single comparison (leaf) or a nested group of terms.

    ``name`` may address a sub-key of an object-valued setting using the
    ``key[subkey]`` convention, e.g. ``image_overlay[url]``. A term with
    ``terms`` is a group; its own ``relation`` is honored only when nested
    relations are enabled in :class:`~control_conditions.config.EngineConfig`.
    """

    model_config = {"frozen": True}

    name: str = ""
    value: Any = None
    operator: Operator = Operator.STRICT_EQUAL
    terms: Optional[list["ConditionTerm"]] = None
    relation: Optional[Relation] = None

    @field_validator("operator", mode="before")
    @classmethod
    def _coerce_operator(cls, value: Any) -> Operator:
        return Operator.parse(value)

    @field_validator("relation", mode="before")
    @classmethod
    def _coerce_relation(cls, value: Any) -> Optional[Relation]:
        if value is None:
            return None
        return Relation.parse(value)

    @property
    def is_group(self) -> bool:
        return self.terms is not None


class ConditionSet(BaseModel):
    """A relation (AND/OR) over a list of terms."""

    model_config = {"frozen": True}

    relation: Relation = Relation.AND
    terms: list[ConditionTerm] = []

    @field_validator("relation", mode="before")
    @classmethod
    def _coerce_relation(cls, value: Any) -> Relation:
        return Relation.parse(value)


class ControlCondition(BaseModel):
    """Binds a condition set to a control with a show/hide action."""

    model_config = {"frozen": True}

    control_name: str
    conditions: ConditionSet
    action: Literal["show", "hide"]


class VisibilityResult(BaseModel):
    """Outcome of a visibility check for one control."""

    model_config = {"frozen": True}

    visible: bool
    reason: Optional[str] = None
    trigger_condition: Optional[str] = None


class ControlState(BaseModel):
    """Derived, cacheable projection of a control's visibility."""

    model_config = {"frozen": True}

    visible: bool
    enabled: bool
    data: Optional[dict[str, Any]] = None


ConditionTerm.model_rebuild()
