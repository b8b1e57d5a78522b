from __future__ import annotations

from .base import PlayerStore
from .json_file import JsonFilePlayerStore
from .memory import InMemoryPlayerStore

__all__ = ["InMemoryPlayerStore", "JsonFilePlayerStore", "PlayerStore"]
