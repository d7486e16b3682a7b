"""Control visibility registry built on the condition evaluator."""

from .cache import StateCache
from .dependencies import control_dependencies, extract_dependencies, invert_dependency_tree
from .loading import ConditionEntry, load_conditions, parse_conditions
from .registry import ControlConditionsRegistry, RegistryStats

__all__ = [
    "ConditionEntry",
    "ControlConditionsRegistry",
    "RegistryStats",
    "StateCache",
    "control_dependencies",
    "extract_dependencies",
    "invert_dependency_tree",
    "load_conditions",
    "parse_conditions",
]
