from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from caseapi.core.errors import ConfigError
from caseapi.observability.logging import get_logger

from .memory import InMemoryPlayerStore


class JsonFilePlayerStore(InMemoryPlayerStore):
    """In-memory store mirrored to a UTF-8 JSON snapshot after every mutation.

    The snapshot is taken under the store lock and written from a worker
    thread, so the event loop is not blocked on disk I/O while mutations
    stay ordered. It goes to a sibling temp file that is renamed into place,
    so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)
        self._log = get_logger("caseapi.storage")
        if self._path.exists():
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
            except ValueError as e:
                raise ConfigError(f"invalid store snapshot: {e}", path=str(self._path)) from e
            if not isinstance(raw, dict):
                raise ConfigError("store snapshot must be a JSON object", path=str(self._path))
            try:
                self.load_dict(raw)
            except (AttributeError, TypeError, ValueError) as e:
                raise ConfigError(f"invalid store snapshot content: {e}", path=str(self._path)) from e
            self._log.debug("store_loaded", path=str(self._path), players=len(raw.get("players") or {}))

    @property
    def path(self) -> Path:
        return self._path

    async def _changed(self) -> None:
        await asyncio.to_thread(self._write_snapshot, self.to_dict())

    def _write_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)
