"""Bulk loading of control conditions from configuration documents.

Document shape (JSON)::

    {
        "url_type": [
            {"conditions": {"relation": "and", "terms": [...]}, "action": "show"},
            {"conditions": {...}, "action": "hide"}
        ],
        "image_size": {"conditions": {...}, "action": "show"}
    }

A control maps either to one condition or to an ordered list of them.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, TypeAdapter

from ..conditions.models import ConditionSet, ControlCondition
from .registry import ControlConditionsRegistry

logger = logging.getLogger(__name__)


class ConditionEntry(BaseModel):
    """One condition for a control, without the control name."""

    model_config = {"frozen": True}

    conditions: ConditionSet
    action: Literal["show", "hide"]


ConditionsDocument = dict[str, Union[list[ConditionEntry], ConditionEntry]]
ConditionsDocumentAdapter = TypeAdapter(ConditionsDocument)


def parse_conditions(source: Union[str, Path, Mapping[str, Any]]) -> list[ControlCondition]:
    """Validate a conditions document into ControlConditions, in document order.

    Raises:
        pydantic.ValidationError: if the document does not have the expected shape
        FileNotFoundError / json.JSONDecodeError: for unreadable files
    """
    if isinstance(source, (str, Path)):
        raw = json.loads(Path(source).read_text())
    else:
        raw = source

    document = ConditionsDocumentAdapter.validate_python(raw)
    parsed: list[ControlCondition] = []
    for control_name, entries in document.items():
        if isinstance(entries, ConditionEntry):
            entries = [entries]
        for entry in entries:
            parsed.append(
                ControlCondition(
                    control_name=control_name,
                    conditions=entry.conditions,
                    action=entry.action,
                )
            )
    return parsed


def load_conditions(
    source: Union[str, Path, Mapping[str, Any]],
    registry: ControlConditionsRegistry,
) -> int:
    """Validate a conditions document and register every entry. Returns the count.

    Nothing is registered if validation fails.
    """
    conditions = parse_conditions(source)
    for condition in conditions:
        registry.register_condition(condition)
    logger.info(
        f"Loaded {len(conditions)} conditions for "
        f"{len({c.control_name for c in conditions})} controls"
    )
    return len(conditions)
