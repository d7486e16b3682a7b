"""Dependency extraction from registered condition terms.

Two readings of a term name exist. The dependency tree uses the part before
the first bracket; cache keys use the setting the evaluator actually reads
(``parse_term_name``), which differs for names such as ``layout.mode``.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..conditions.models import ConditionTerm, ControlCondition
from ..conditions.values import base_setting_name, parse_term_name

NameResolver = Callable[[str], Optional[str]]


def evaluated_setting_name(name: str) -> str:
    """Setting name the evaluator resolves for a term name."""
    return parse_term_name(name)[0]


def extract_dependencies(
    terms: Iterable[ConditionTerm],
    dependencies: list[str],
    resolve: NameResolver = base_setting_name,
) -> None:
    """Collect the setting names referenced by leaf terms, recursing into groups."""
    for term in terms:
        if term.is_group:
            extract_dependencies(term.terms, dependencies, resolve)
            continue
        name = resolve(term.name)
        if name is not None:
            dependencies.append(name)


def control_dependencies(
    conditions: Sequence[ControlCondition],
    resolve: NameResolver = base_setting_name,
) -> list[str]:
    """De-duplicated setting names a control's rules depend on, first-seen order."""
    dependencies: list[str] = []
    for condition in conditions:
        extract_dependencies(condition.conditions.terms, dependencies, resolve)
    return list(dict.fromkeys(dependencies))


def invert_dependency_tree(tree: Mapping[str, Sequence[str]]) -> dict[str, list[str]]:
    """Turn control -> settings into setting -> controls."""
    dependents: dict[str, list[str]] = {}
    for control_name, settings in tree.items():
        for setting in settings:
            dependents.setdefault(setting, []).append(control_name)
    return dependents
