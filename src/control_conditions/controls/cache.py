"""Control state cache.

States are stored per control, then per digest of the settings they were
computed from. The digest covers either the whole settings snapshot or only
the settings the control's rules reference.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Iterable, Mapping, Optional

from ..conditions.models import ControlState

logger = logging.getLogger(__name__)


def _tagged(value: Any) -> Any:
    """Wrap containers with their type name so ``("a",)`` and ``["a"]`` differ."""
    if isinstance(value, Mapping):
        return {type(value).__name__: {str(key): _tagged(item) for key, item in value.items()}}
    if isinstance(value, (list, tuple)):
        return {type(value).__name__: [_tagged(item) for item in value]}
    return value


def _digest(payload: Any) -> str:
    encoded = json.dumps(_tagged(payload), sort_keys=True, default=repr)
    return hashlib.sha256(encoded.encode()).hexdigest()[:24]


def snapshot_key(settings: Mapping[str, Any]) -> str:
    """Stable key for a full settings snapshot."""
    return _digest(dict(settings))


def dependencies_key(settings: Mapping[str, Any], dependencies: Iterable[str]) -> str:
    """Stable key for only the referenced settings; absent keys stay absent."""
    return _digest({name: settings[name] for name in dependencies if name in settings})


class StateCache:
    """Two-level cache: control name -> settings digest -> ControlState."""

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, ControlState]] = {}

    def get(self, control_name: str, key: str) -> Optional[ControlState]:
        state = self._entries.get(control_name, {}).get(key)
        if state is not None:
            logger.debug(f"State cache hit for {control_name}")
        return state

    def put(self, control_name: str, key: str, state: ControlState) -> None:
        self._entries.setdefault(control_name, {})[key] = state

    def discard(self, control_name: str) -> None:
        self._entries.pop(control_name, None)

    def clear(self) -> None:
        if self._entries:
            logger.debug(f"Clearing state cache ({len(self)} entries)")
        self._entries.clear()

    def __len__(self) -> int:
        return sum(len(states) for states in self._entries.values())
