"""
Startup settings for the demo services.

Values come from config.yml (path in CLOCKDEMO_CONFIG) and can be overridden
per key with CLOCKDEMO_* environment variables.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = "config.yml"
DEFAULT_PORT = 8080

FIELD_TYPES = {
    "host": str,
    "port": int,
    "assets_dir": str,
    "push_interval": float,
    "timezone": str,
    "websocket_max_message_size": int,
}

ENV_OVERRIDES = {
    "host": "CLOCKDEMO_HOST",
    "port": "CLOCKDEMO_PORT",
    "assets_dir": "CLOCKDEMO_ASSETS_DIR",
    "push_interval": "CLOCKDEMO_PUSH_INTERVAL",
    "timezone": "CLOCKDEMO_TIMEZONE",
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    assets_dir: str = "./assets"
    push_interval: float = 3.0
    timezone: Optional[str] = None
    websocket_max_message_size: int = 1024

    def replace(self, **changes):
        return replace(self, **changes)

    def validate(self):
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"port out of range: {self.port}")
        if self.push_interval <= 0:
            raise ConfigError(f"push_interval must be positive, got {self.push_interval}")
        if self.websocket_max_message_size <= 0:
            raise ConfigError("websocket_max_message_size must be positive")
        return self


def read_config_file(path):
    """
    Load the YAML config and return it as a dict. A missing file is an empty config.
    """
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return data


def coerce(field, value, source):
    """Convert one raw value to its Settings type or raise ConfigError naming where it came from."""
    cast = FIELD_TYPES[field]
    if isinstance(value, (bool, list, dict)):
        raise ConfigError(f"{source}: {field}={value!r} is not a valid {cast.__name__}")
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: {field}={value!r} is not a valid {cast.__name__}") from e


def service_entry(data, service):
    for svc in data.get("services") or []:
        if svc.get("name") == service:
            return svc
    return {}


def load_settings(service=None, path=None, environ=None):
    """
    Build Settings for one service.

    Precedence, lowest first: built-in defaults, top-level keys of the config
    file, the service's entry under `services:`, CLOCKDEMO_* variables.
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get("CLOCKDEMO_CONFIG", DEFAULT_CONFIG_PATH)
    data = read_config_file(path)

    values = {}
    for field in FIELD_TYPES:
        if field != "port" and data.get(field) is not None:
            values[field] = coerce(field, data[field], path)
    if service is not None:
        port = service_entry(data, service).get("port")
        if port is not None:
            values["port"] = coerce("port", port, path)

    for field, name in ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw:
            values[field] = coerce(field, raw, name)

    return Settings(**values).validate()
