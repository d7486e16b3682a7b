"""Control conditions registry.

Binds condition sets to control names, holds the active settings snapshot
and answers visibility/state queries. Conditions for a control are evaluated
in registration order; the first one whose set matches decides, and a control
with no matching condition stays visible.

The state cache is dropped wholesale on every ``set_settings`` call. The
dependency tree is exposed for callers that want finer-grained refreshes;
the registry does not use it for invalidation.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel

from ..config import EngineConfig
from ..conditions.models import (
    ConditionSet,
    ConditionTerm,
    ControlCondition,
    ControlState,
    Operator,
    Relation,
    VisibilityResult,
)
from ..conditions.registry import ConditionEvaluator
from .cache import StateCache, dependencies_key, snapshot_key
from .dependencies import control_dependencies, evaluated_setting_name, invert_dependency_tree

logger = logging.getLogger(__name__)


class RegistryStats(BaseModel):
    """Diagnostic counters for a registry."""

    total_controls: int
    total_conditions: int
    cache_size: int
    average_conditions_per_control: float


class ControlConditionsRegistry:
    """Visibility rules for the controls of one editing session."""

    def __init__(
        self,
        evaluator: Optional[ConditionEvaluator] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or (evaluator.config if evaluator else EngineConfig())
        self.evaluator = evaluator or ConditionEvaluator(self.config)
        self._conditions: dict[str, list[ControlCondition]] = {}
        self._cache = StateCache()
        self._settings: Mapping[str, Any] = {}

    @property
    def settings(self) -> Mapping[str, Any]:
        return self._settings

    def register_condition(self, condition: ControlCondition | Mapping[str, Any]) -> None:
        """Append a condition to its control's ordered list."""
        if not isinstance(condition, ControlCondition):
            condition = ControlCondition.model_validate(condition)
        control_name = condition.control_name
        self._conditions.setdefault(control_name, []).append(condition)
        # Cached states for this control predate the new rule.
        self._cache.discard(control_name)
        logger.debug(
            f"Registered {condition.action} condition #{len(self._conditions[control_name])} "
            f"for control {control_name}"
        )

    def bulk_register_conditions(self, conditions_config: Mapping[str, Mapping[str, Any]]) -> None:
        """Register one condition per control from ``{control_name: {conditions, action}}``."""
        for control_name, config in conditions_config.items():
            self.register_condition({"control_name": control_name, **config})

    def clear_conditions(self, control_name: str) -> None:
        """Remove every condition and cached state for a control."""
        self._conditions.pop(control_name, None)
        self._cache.discard(control_name)

    def get_conditions(self, control_name: str) -> tuple[ControlCondition, ...]:
        return tuple(self._conditions.get(control_name, ()))

    def set_settings(self, settings: Mapping[str, Any]) -> None:
        """Replace the active settings snapshot and drop all cached states."""
        self._settings = settings
        self._cache.clear()

    def check_visibility(
        self, control_name: str, settings: Optional[Mapping[str, Any]] = None
    ) -> VisibilityResult:
        """Decide whether a control is visible under the given (or active) settings."""
        settings_to_use = self._settings if settings is None else settings
        control_conditions = self._conditions.get(control_name)

        if not control_conditions:
            return VisibilityResult(visible=True, reason="No conditions defined")

        for condition in control_conditions:
            if self.evaluator.check(condition.conditions, settings_to_use):
                return VisibilityResult(
                    visible=condition.action == "show",
                    reason=f'Condition "{condition.action}" triggered',
                    trigger_condition=condition.conditions.model_dump_json(),
                )

        return VisibilityResult(visible=True, reason="No conditions matched, default visible")

    def _cache_key(self, control_name: str, settings: Mapping[str, Any]) -> str:
        if self.config.cache_strategy == "dependencies":
            dependencies = control_dependencies(
                self._conditions.get(control_name, ()), resolve=evaluated_setting_name
            )
            return dependencies_key(settings, dependencies)
        return snapshot_key(settings)

    def get_control_state(
        self, control_name: str, settings: Optional[Mapping[str, Any]] = None
    ) -> ControlState:
        """Visibility projected into a ControlState, memoized per settings.

        ``enabled`` always follows ``visible``.
        """
        settings_to_use = self._settings if settings is None else settings
        cache_key = None
        if self.config.cache_enabled:
            cache_key = self._cache_key(control_name, settings_to_use)
            cached = self._cache.get(control_name, cache_key)
            if cached is not None:
                return cached

        result = self.check_visibility(control_name, settings_to_use)
        state = ControlState(
            visible=result.visible,
            enabled=result.visible,
            data={"reason": result.reason, "trigger_condition": result.trigger_condition},
        )

        if cache_key is not None:
            self._cache.put(control_name, cache_key, state)
        return state

    def get_visible_controls(
        self, control_names: Iterable[str], settings: Optional[Mapping[str, Any]] = None
    ) -> list[str]:
        return [
            name for name in control_names if self.check_visibility(name, settings).visible
        ]

    def has_visible_controls(
        self, control_names: Iterable[str], settings: Optional[Mapping[str, Any]] = None
    ) -> bool:
        return any(self.check_visibility(name, settings).visible for name in control_names)

    @staticmethod
    def create_simple_condition(
        condition_name: str, expected_value: Any, operator: Operator | str = Operator.STRICT_EQUAL
    ) -> ConditionSet:
        """Single-term AND condition."""
        return ConditionSet(
            relation=Relation.AND,
            terms=[ConditionTerm(name=condition_name, value=expected_value, operator=operator)],
        )

    @staticmethod
    def create_multi_value_condition(
        condition_name: str, expected_values: Iterable[Any]
    ) -> ConditionSet:
        """OR condition matching any of the expected values (strict equality)."""
        return ConditionSet(
            relation=Relation.OR,
            terms=[
                ConditionTerm(name=condition_name, value=value, operator=Operator.STRICT_EQUAL)
                for value in expected_values
            ],
        )

    @staticmethod
    def create_responsive_condition(
        base_name: str, device_suffix: str, expected_value: Any
    ) -> ConditionSet:
        """OR condition on the device-suffixed setting, falling back to the base one."""
        return ConditionSet(
            relation=Relation.OR,
            terms=[
                ConditionTerm(
                    name=base_name + device_suffix,
                    value=expected_value,
                    operator=Operator.STRICT_EQUAL,
                ),
                ConditionTerm(name=base_name, value=expected_value, operator=Operator.STRICT_EQUAL),
            ],
        )

    def get_dependency_tree(self) -> dict[str, list[str]]:
        """Map each control to the settings its rules reference.

        Controls whose rules reference no settings are omitted.
        """
        dependencies: dict[str, list[str]] = {}
        for control_name, conditions in self._conditions.items():
            deps = control_dependencies(conditions)
            if deps:
                dependencies[control_name] = deps
        return dependencies

    def get_dependent_controls(self, setting_name: str) -> list[str]:
        """Controls that must be re-checked after ``setting_name`` changes."""
        return invert_dependency_tree(self.get_dependency_tree()).get(setting_name, [])

    def reset(self) -> None:
        """Drop all conditions, cached states and the settings snapshot."""
        self._conditions.clear()
        self._cache.clear()
        self._settings = {}

    def get_stats(self) -> RegistryStats:
        total_controls = len(self._conditions)
        total_conditions = sum(len(conditions) for conditions in self._conditions.values())
        return RegistryStats(
            total_controls=total_controls,
            total_conditions=total_conditions,
            cache_size=len(self._cache),
            average_conditions_per_control=(
                total_conditions / total_controls if total_controls > 0 else 0
            ),
        )
