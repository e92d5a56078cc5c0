"""
Process-wide defaults for running Deno code blocks.

Settings are layered: built-in defaults, then an optional YAML file, then
environment variables. They are read each time `load_settings` is called so
changes take effect on the next execution.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from deno_babel.deno_datatypes import ConfigError

VARIABLE_PREFIXES = ("const", "let", "var")

CONFIG_PATH_ENV = "DENO_BABEL_CONFIG"

# env var -> settings field
ENV_OVERRIDES = {
    "DENO_BABEL_COMMAND": "command",
    "DENO_BABEL_PREFIX": "variable_prefix",
    "DENO_BABEL_TIMEOUT": "timeout",
}


@dataclass(frozen=True)
class Settings:
    command: str = "deno run"
    variable_prefix: str = "let"
    script_suffix: str = ".ts"
    no_color_var: str = "NO_COLOR"
    timeout: Optional[float] = None

    def __post_init__(self):
        if self.variable_prefix not in VARIABLE_PREFIXES:
            raise ConfigError(
                f"variable_prefix must be one of {', '.join(VARIABLE_PREFIXES)}, got {self.variable_prefix!r}"
            )
        if self.timeout is not None:
            try:
                timeout = float(self.timeout)
            except (TypeError, ValueError):
                raise ConfigError(f"timeout must be a number, got {self.timeout!r}") from None
            if timeout <= 0:
                raise ConfigError(f"timeout must be greater than 0, got {self.timeout!r}")
            object.__setattr__(self, "timeout", timeout)


def _read_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown settings in {path}: {', '.join(unknown)}")
    return data


def load_settings(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    overrides: Dict[str, Any] = {}

    path = path or env.get(CONFIG_PATH_ENV)
    if path:
        overrides.update(_read_config_file(path))

    for var, name in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            overrides[name] = value

    return replace(Settings(), **overrides)


__all__ = ["Settings", "load_settings", "VARIABLE_PREFIXES"]
