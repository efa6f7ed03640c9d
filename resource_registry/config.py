"""Configuration management for the resource registry service."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

import yaml

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_LOG_LEVEL = "info"

CONFIG_PATH_ENV = "REGISTRY_CONFIG"


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime settings for the HTTP service."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_dict(data: Mapping[str, object], base: "ServiceConfig | None" = None) -> "ServiceConfig":
        """Overlay the keys present in ``data`` on top of ``base``."""
        config = base or ServiceConfig()
        known_fields = {"host", "port", "timeout_seconds", "cors_origins", "log_level"}
        unknown = set(data.keys()) - known_fields
        if unknown:
            raise ValueError(f"Unknown server configuration fields: {', '.join(sorted(unknown))}")

        updates: Dict[str, object] = {}
        if "host" in data:
            updates["host"] = str(data["host"]).strip() or DEFAULT_HOST
        if "port" in data:
            updates["port"] = _parse_int(data["port"], "port")
        if "timeout_seconds" in data:
            updates["timeout_seconds"] = _parse_int(data["timeout_seconds"], "timeout_seconds")
        if "cors_origins" in data:
            updates["cors_origins"] = _parse_origins(data["cors_origins"])
        if "log_level" in data:
            updates["log_level"] = str(data["log_level"]).strip().lower() or DEFAULT_LOG_LEVEL
        return replace(config, **updates)


def _parse_int(value: object, name: str) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


def _parse_origins(value: object) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ValueError("cors_origins must be a comma-separated string or a list")
    origins = tuple(item.strip() for item in items if item.strip())
    return origins or ("*",)


def load_config_file(config_path: Path) -> Dict[str, object]:
    """Load the ``server`` section of a YAML configuration file."""
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")

    server = raw.get("server") or {}
    if not isinstance(server, dict):
        raise ValueError("The 'server' section of the configuration file must be a mapping")
    return server


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, object]:
    mapping = {
        "REGISTRY_HOST": "host",
        "REGISTRY_PORT": "port",
        "REGISTRY_TIMEOUT": "timeout_seconds",
        "REGISTRY_CORS_ORIGINS": "cors_origins",
        "REGISTRY_LOG_LEVEL": "log_level",
    }
    overrides: Dict[str, object] = {}
    for variable, field_name in mapping.items():
        value = environ.get(variable)
        if value is None or not value.strip():
            continue
        if field_name in {"port", "timeout_seconds"}:
            overrides[field_name] = _parse_int(value, variable)
        else:
            overrides[field_name] = value
    return overrides


def resolve_config_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the optional configuration file path."""
    if not env_value or not env_value.strip():
        return None
    return Path(env_value.strip()).expanduser().resolve(strict=False)


def load_service_config(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceConfig:
    """Build the service configuration from defaults, a YAML file, and the environment."""

    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get(CONFIG_PATH_ENV))

    config = ServiceConfig()
    if path is not None:
        config = ServiceConfig.from_dict(load_config_file(path), base=config)
    return ServiceConfig.from_dict(_env_overrides(env), base=config)


__all__ = [
    "CONFIG_PATH_ENV",
    "ServiceConfig",
    "load_config_file",
    "load_service_config",
    "resolve_config_path",
]
