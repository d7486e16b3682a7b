"""Setting name parsing and value resolution for condition terms."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from .models import MISSING

logger = logging.getLogger(__name__)

# 'image_overlay[url]' -> ('image_overlay', 'url')
_TERM_NAME_PATTERN = re.compile(r"([\w-]+)(?:\[([\w-]+)])?")
# Dependency extraction only needs the part before the first bracket.
_BASE_NAME_PATTERN = re.compile(r"^([^[]+)")


def parse_term_name(name: str) -> tuple[str, Optional[str]]:
    """Split a term name into (setting name, sub-key).

    Names that do not match the ``name`` / ``name[subkey]`` pattern are used
    whole, with no sub-key.
    """
    match = _TERM_NAME_PATTERN.search(name)
    if match is None:
        logger.warning(f"Unparseable condition name {name!r}, using it verbatim")
        return name, None
    return match.group(1) or name, match.group(2)


def base_setting_name(name: str) -> Optional[str]:
    """Setting name referenced by a term, ignoring any ``[subkey]`` suffix."""
    match = _BASE_NAME_PATTERN.match(name)
    return match.group(1) if match else None


def get_condition_value(
    comparison_object: Mapping[str, Any],
    condition_name: str,
    sub_condition_name: Optional[str] = None,
) -> Any:
    """Resolve a setting value, reaching into object-valued settings by sub-key.

    List settings are indexed by numeric sub-keys (``items[0]``). Returns
    :data:`MISSING` when the setting (or sub-key) is absent.
    """
    value = comparison_object.get(condition_name, MISSING)
    if not sub_condition_name:
        return value
    if isinstance(value, Mapping):
        return value.get(sub_condition_name, MISSING)
    if isinstance(value, list):
        if sub_condition_name.isdigit() and int(sub_condition_name) < len(value):
            return value[int(sub_condition_name)]
        return MISSING
    return value
