from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class StorageConfig:
    backend: str = "memory"  # "memory" | "json"
    path: Path | None = None


@dataclass(frozen=True)
class DrawConfig:
    seed: int | None = None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class BroadcastConfig:
    # Placeholders: {player}, {case}, {reward}
    template: str = "{player} won {reward} from {case}!"


@dataclass(frozen=True)
class AppConfig:
    catalog_path: Path
    storage: StorageConfig = field(default_factory=StorageConfig)
    draw: DrawConfig = field(default_factory=DrawConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    broadcast: BroadcastConfig = field(default_factory=BroadcastConfig)
