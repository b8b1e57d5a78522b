"""Configuration loader (YAML-first + strict env expansion).

- YAML is the primary source of truth.
- Environment variables are for secrets and machine-specific overrides.
- ``${ENV_VAR}`` inside string values is expanded; missing or empty
  variables raise ConfigError naming the key path.
- A ``.env`` next to the config file is loaded first without overriding
  variables that are already set.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from caseapi.core.errors import ConfigError

from .model import AppConfig, BroadcastConfig, DrawConfig, LoggingConfig, StorageConfig

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_STORAGE_BACKENDS = {"memory", "json"}


def _expand_env_in_str(value: str, *, path: str) -> str:
    def repl(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in os.environ or os.environ[key] == "":
            raise ConfigError(f"environment variable {key!r} is not set", path=path or "<root>")
        return os.environ[key]

    return _ENV_PATTERN.sub(repl, value)


def _expand_env(obj: Any, *, path: str) -> Any:
    if isinstance(obj, str):
        return _expand_env_in_str(obj, path=path)
    if isinstance(obj, list):
        return [_expand_env(v, path=f"{path}[{i}]") for i, v in enumerate(obj)]
    if isinstance(obj, dict):
        return {k: _expand_env(v, path=f"{path}.{k}" if path else str(k)) for k, v in obj.items()}
    return obj


def load_yaml_mapping(path: str | Path) -> dict[str, Any]:
    """Read a UTF-8 YAML file whose top level is a mapping, with env expansion."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigError("file does not exist", path=str(file_path))

    load_dotenv(file_path.parent / ".env", override=False)

    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse failed: {e}", path=str(file_path)) from e

    if not isinstance(raw, dict):
        raise ConfigError("top level must be a YAML mapping", path=str(file_path))

    return _expand_env(raw, path="")


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("must be a mapping", path=key)
    return value


def _resolve(base: Path, value: Any) -> Path:
    p = Path(str(value))
    return p if p.is_absolute() else (base / p)


def load_config(path: str | Path) -> AppConfig:
    """Load the application config; relative paths resolve against its directory."""

    config_path = Path(path)
    raw = load_yaml_mapping(config_path)
    base = config_path.parent

    catalog = raw.get("catalog")
    if not isinstance(catalog, str) or not catalog.strip():
        raise ConfigError("must be a non-empty path", path="catalog")

    storage_raw = _section(raw, "storage")
    backend = str(storage_raw.get("backend", StorageConfig.backend)).lower()
    if backend not in _STORAGE_BACKENDS:
        raise ConfigError(f"unsupported backend {backend!r}", path="storage.backend")
    storage_path = storage_raw.get("path")
    if backend == "json" and not storage_path:
        raise ConfigError("json backend requires a path", path="storage.path")
    storage = StorageConfig(
        backend=backend,
        path=_resolve(base, storage_path) if storage_path else None,
    )

    draw_raw = _section(raw, "draw")
    seed = draw_raw.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigError("must be an integer or null", path="draw.seed")

    logging_raw = _section(raw, "logging")
    level = str(logging_raw.get("level", LoggingConfig.level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"unknown log level {level!r}", path="logging.level")

    broadcast_raw = _section(raw, "broadcast")
    template = str(broadcast_raw.get("template", BroadcastConfig.template))

    return AppConfig(
        catalog_path=_resolve(base, catalog),
        storage=storage,
        draw=DrawConfig(seed=seed),
        logging=LoggingConfig(level=level),
        broadcast=BroadcastConfig(template=template),
    )
