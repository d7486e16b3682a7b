"""Engine configuration.

Values come from the environment, falling back to defaults that reproduce
the editor's stock behavior (nested groups fold as AND, cache keyed by the
full settings snapshot).
"""

from __future__ import annotations

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel

ENV_PREFIX = "CONTROL_CONDITIONS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


class EngineConfig(BaseModel):
    """Tunable behavior for evaluators and registries."""

    model_config = {"frozen": True}

    cache_enabled: bool = True
    # "snapshot": key by the whole settings mapping.
    # "dependencies": key by only the settings the control's rules reference.
    cache_strategy: Literal["snapshot", "dependencies"] = "snapshot"
    # "and": nested groups always fold as AND.
    # "term": a nested group may carry its own relation.
    nested_relation: Literal["and", "term"] = "and"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``CONTROL_CONDITIONS_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        raw = env.get(f"{ENV_PREFIX}CACHE_ENABLED")
        if raw is not None:
            values["cache_enabled"] = _parse_bool(f"{ENV_PREFIX}CACHE_ENABLED", raw)

        for field, choices in (
            ("cache_strategy", ("snapshot", "dependencies")),
            ("nested_relation", ("and", "term")),
        ):
            name = f"{ENV_PREFIX}{field.upper()}"
            raw = env.get(name)
            if raw is None:
                continue
            value = raw.strip().lower()
            if value not in choices:
                raise ValueError(f"{name} must be one of {choices}, got {raw!r}")
            values[field] = value

        raw = env.get(f"{ENV_PREFIX}LOG_LEVEL")
        if raw is not None:
            level = raw.strip().upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {raw!r}")
            values["log_level"] = level

        return cls(**values)


def configure_logging(config: Optional[EngineConfig] = None) -> None:
    """Apply the engine's log level and format to the root logger."""
    config = config or EngineConfig()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
