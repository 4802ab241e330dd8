from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, model_validator

from fluentcheck.sync import GuardedLock

CONFIG_ENV_VAR = "FLUENTCHECK_CONFIG"


class RenderConfig(BaseModel):
    """Read-only settings consumed by the reporter when rendering results."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    use_colors: bool = True
    use_unicode_symbols: bool = True
    show_success_details: bool = True
    enhanced_output: bool = False

    @model_validator(mode="before")
    @classmethod
    def expand_env_variables(cls, data: Any) -> Any:
        """Expand ``${VAR}`` / ``${VAR:-default}`` in string values.

        Raises ValueError listing every unset variable that has no default.
        """
        if not isinstance(data, dict):
            return data

        expanded: dict[str, Any] = {}
        missing: list[str] = []
        for key, value in data.items():
            if not isinstance(value, str):
                expanded[key] = value
                continue
            try:
                expanded[key] = expandvars(value, nounset=True)
            except Exception:
                # Variable is missing and has no default
                missing.append(f"  {key}={value}")

        if missing:
            details = "\n".join(missing)
            raise ValueError(f"config has missing environment variables:\n{details}")

        return expanded


def load_config(path: Path) -> RenderConfig:
    """Load and validate a render config from a YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f)

    return RenderConfig(**(raw or {}))


_config_lock = GuardedLock("config")
_config: RenderConfig | None = None


def get_config() -> RenderConfig:
    """Return the process-wide config, loading ``$FLUENTCHECK_CONFIG`` on first use."""
    global _config
    with _config_lock:
        if _config is not None:
            return _config

    # Load outside the lock: a broken file must not poison it
    env_path = os.environ.get(CONFIG_ENV_VAR)
    loaded = load_config(Path(env_path)) if env_path else RenderConfig()

    with _config_lock:
        if _config is None:
            _config = loaded
        return _config


def set_config(config: RenderConfig | None) -> None:
    """Replace the process-wide config. ``None`` restores lazy default loading."""
    global _config
    with _config_lock:
        _config = config


def configure(**overrides: Any) -> RenderConfig:
    """Update selected fields of the process-wide config and return the result."""
    current = get_config()
    updated = RenderConfig(**{**current.model_dump(), **overrides})
    set_config(updated)
    return updated
