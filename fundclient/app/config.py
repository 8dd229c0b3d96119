# fundclient/app/config.py
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from fundclient.core.errors import ConfigError


@dataclass(frozen=True)
class ClientConfig:
    host: str = "localhost"
    port: int = 12345
    retry_delay_s: float = 2.0
    connect_timeout_s: float = 5.0
    log_file: Optional[str] = None
    trace_file: Optional[str] = None

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """Return a validated copy; None values leave the field unchanged."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return validate_config(replace(self, **changes))


_FIELD_TYPES: Dict[str, type] = {
    "host": str,
    "port": int,
    "retry_delay_s": float,
    "connect_timeout_s": float,
    "log_file": str,
    "trace_file": str,
}


def validate_config(cfg: ClientConfig) -> ClientConfig:
    if not cfg.host:
        raise ConfigError("Server host must not be empty.")
    if not (1 <= int(cfg.port) <= 65535):
        raise ConfigError(
            f"Invalid server port {cfg.port}.",
            hint="Use a TCP port between 1 and 65535.",
            details={"port": cfg.port},
        )
    if cfg.retry_delay_s < 0:
        raise ConfigError(
            f"Invalid retry delay {cfg.retry_delay_s}s.",
            hint="Use 0 or a positive number of seconds.",
        )
    if cfg.connect_timeout_s <= 0:
        raise ConfigError(f"Invalid connect timeout {cfg.connect_timeout_s}s.")
    return cfg


def config_from_mapping(doc: Dict[str, Any]) -> ClientConfig:
    """
    Build a config from a mapping. Settings may sit at top level or under a
    'client' key.
    """
    section = doc.get("client", doc)
    if not isinstance(section, dict):
        raise ConfigError("Config 'client' section must be a mapping.")

    known = {f.name for f in fields(ClientConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(
            f"Unknown config key(s): {', '.join(map(str, unknown))}.",
            hint=f"Known keys: {', '.join(sorted(known))}.",
        )

    values: Dict[str, Any] = {}
    for key, raw in section.items():
        if raw is None:
            continue
        cast = _FIELD_TYPES[key]
        try:
            values[key] = cast(raw)
        except (TypeError, ValueError):
            raise ConfigError(
                f"Invalid value for '{key}': {raw!r}.",
                details={"key": key, "value": raw},
            ) from None

    return validate_config(ClientConfig(**values))


def load_config(path: Path | str) -> ClientConfig:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}", hint=str(e)) from None

    if not isinstance(doc, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return config_from_mapping(doc)
