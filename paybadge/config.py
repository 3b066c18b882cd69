"""Configuration loading for the paybadge service.

Supports two configuration sources:
1. Environment variables (for containers/CI) - takes priority
2. A JSON config file (for local development)

Environment Variable Format:
    PAYBADGE_HOST=0.0.0.0
    PAYBADGE_PORT=3000            (PORT is also honored)
    PAYBADGE_EXCHANGE_RATE_URL=https://exchange-rate.profullstack.com
    PAYBADGE_REQUEST_TIMEOUT=10
    PAYBADGE_CACHE_MAX_AGE=3600

Example config.json:
    {
        "host": "127.0.0.1",
        "port": 8080,
        "exchange_rate_url": "https://rates.example.com",
        "request_timeout": 5,
        "cache_max_age": 600
    }
"""

import json
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Mapping, Optional

from paybadge.models import ServerConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


# Environment variable -> ServerConfig field, in lookup order
ENV_VARS = [
    ("PAYBADGE_HOST", "host"),
    ("PORT", "port"),
    ("PAYBADGE_PORT", "port"),
    ("PAYBADGE_EXCHANGE_RATE_URL", "exchange_rate_url"),
    ("PAYBADGE_REQUEST_TIMEOUT", "request_timeout"),
    ("PAYBADGE_CACHE_MAX_AGE", "cache_max_age"),
]

_FIELD_TYPES = {f.name: f.type for f in fields(ServerConfig)}


def _coerce(name: str, value: Any, source: str) -> Any:
    """Convert a raw value to the type of the ServerConfig field."""
    field_type = _FIELD_TYPES[name]
    try:
        if field_type in (int, "int"):
            if isinstance(value, bool):
                raise ValueError(value)
            return int(value)
        if field_type in (float, "float"):
            if isinstance(value, bool):
                raise ValueError(value)
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{name}' in {source}: {value!r}") from e
    return str(value)


def _apply(config: ServerConfig, values: Mapping[str, Any], source: str) -> ServerConfig:
    for name, value in values.items():
        setattr(config, name, _coerce(name, value, source))
    return config


def load_from_json(config_path: str) -> dict[str, Any]:
    """Load configuration values from a JSON file.

    Args:
        config_path: Path to the JSON config file.

    Returns:
        Dictionary of recognized ServerConfig fields. Unknown keys are
        ignored.

    Raises:
        ConfigError: If the file doesn't exist, contains invalid JSON,
                    or isn't a JSON object.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    return {key: value for key, value in data.items() if key in _FIELD_TYPES}


def load_from_env() -> dict[str, str]:
    """Load configuration values from PAYBADGE_* environment variables.

    Returns:
        Dictionary of ServerConfig fields set in the environment.
        PAYBADGE_PORT wins over PORT when both are set.
    """
    values: dict[str, str] = {}

    for env_key, field_name in ENV_VARS:
        env_value = os.environ.get(env_key)
        if env_value:
            values[field_name] = env_value

    return values


def load_config(config_path: Optional[str] = None) -> ServerConfig:
    """Load the server configuration.

    Priority order:
    1. Environment variables
    2. The JSON config file, if given
    3. ServerConfig defaults

    Args:
        config_path: Optional path to a JSON config file. A missing file
                     is an error when the path is given explicitly.

    Returns:
        Populated ServerConfig.

    Raises:
        ConfigError: If the file or any value is invalid.
    """
    config = ServerConfig()

    if config_path:
        _apply(config, load_from_json(config_path), config_path)

    _apply(config, load_from_env(), "environment")

    if not 0 < config.port < 65536:
        raise ConfigError(f"Port out of range: {config.port}")

    return config
