"""Configuration loading and schema.

- YAML-first configuration under configs/*.yaml
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
"""

from __future__ import annotations

from caseapi.core.errors import ConfigError

from .loader import load_config, load_yaml_mapping
from .model import AppConfig, BroadcastConfig, DrawConfig, LoggingConfig, StorageConfig

__all__ = [
    "AppConfig",
    "BroadcastConfig",
    "ConfigError",
    "DrawConfig",
    "LoggingConfig",
    "StorageConfig",
    "load_config",
    "load_yaml_mapping",
]
