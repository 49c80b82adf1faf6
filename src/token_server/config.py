"""Configuration loading and parsing."""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from token_server.duration.declaration import declare_range
from token_server.duration.human import HumanDuration

TOKEN_LIFETIME_RANGE = declare_range("{default: 2h, min: 1500ms, max: 60day}")
PURGE_INTERVAL_RANGE = declare_range("{min: 1500ms, default: 1min, max: 90min}")

MIN_PORT = 3000
MAX_PORT = 65535
DEFAULT_PORT = 3666


def _is_enabled(switch: bool) -> str:
    return "enabled" if switch else "disabled"


@dataclass
class ServerOptions:
    """Options the token server runs with."""
    port: int = DEFAULT_PORT
    purge_interval: HumanDuration = PURGE_INTERVAL_RANGE.default
    token_lifetime: HumanDuration = TOKEN_LIFETIME_RANGE.default
    dump_enabled: bool = False
    shutdown_enabled: bool = False

    def __str__(self) -> str:
        return (
            f"Port: {self.port}, "
            f"Token lifetime: {self.token_lifetime:#}, "
            f"Purge cycle: {self.purge_interval:#}, "
            f"HEAD /dump {_is_enabled(self.dump_enabled)}, "
            f"GET /shutdown {_is_enabled(self.shutdown_enabled)}"
        )


def validate_port(port: int) -> int:
    if not MIN_PORT <= port <= MAX_PORT:
        raise ValueError(f"Port must be between {MIN_PORT} and {MAX_PORT}, got {port}")
    return port


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR} patterns with environment variable values."""
    pattern = r'\$\{([^}]+)\}'

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise ValueError(f"Environment variable not set: {var_name}")
        return env_value

    return re.sub(pattern, replacer, value)


def _substitute_env_vars_recursive(obj):
    """Recursively substitute env vars in a data structure."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars_recursive(item) for item in obj]
    return obj


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config(config_path: str) -> ServerOptions:
    """Load server options from a YAML file.

    Keys that are absent keep their defaults. Durations are checked against
    the same ranges as the command line flags.
    """
    path = Path(config_path)
    raw = yaml.safe_load(path.read_text()) or {}

    # Substitute environment variables
    raw = _substitute_env_vars_recursive(raw)

    options = ServerOptions()

    if "port" in raw:
        options.port = validate_port(int(raw["port"]))

    if "purge_interval" in raw:
        options.purge_interval = PURGE_INTERVAL_RANGE.parse_and_validate(str(raw["purge_interval"]))

    if "token_lifetime" in raw:
        options.token_lifetime = TOKEN_LIFETIME_RANGE.parse_and_validate(str(raw["token_lifetime"]))

    if "dump_enabled" in raw:
        options.dump_enabled = _as_bool(raw["dump_enabled"])

    if "shutdown_enabled" in raw:
        options.shutdown_enabled = _as_bool(raw["shutdown_enabled"])

    return options
