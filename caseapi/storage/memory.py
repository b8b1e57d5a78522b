from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID


@dataclass(slots=True)
class PlayerState:
    jewelry: int = 0
    cases: dict[str, int] = field(default_factory=dict)
    opened: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"jewelry": self.jewelry, "cases": dict(self.cases), "opened": self.opened}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PlayerState:
        cases = raw.get("cases") or {}
        return cls(
            jewelry=max(0, int(raw.get("jewelry", 0))),
            cases={str(k): max(0, int(v)) for k, v in cases.items()},
            opened=max(0, int(raw.get("opened", 0))),
        )


class InMemoryPlayerStore:
    """Process-local store. All mutations happen under a single asyncio lock."""

    def __init__(self) -> None:
        self._players: defaultdict[UUID, PlayerState] = defaultdict(PlayerState)
        self._total_opened = 0
        self._lock = asyncio.Lock()

    async def get_jewelry(self, player_uuid: UUID) -> int:
        state = self._players.get(player_uuid)
        return state.jewelry if state else 0

    async def set_jewelry(self, player_uuid: UUID, amount: int) -> None:
        async with self._lock:
            self._players[player_uuid].jewelry = max(0, int(amount))
            await self._changed()

    async def add_jewelry(self, player_uuid: UUID, delta: int) -> int:
        async with self._lock:
            state = self._players[player_uuid]
            state.jewelry = max(0, state.jewelry + int(delta))
            await self._changed()
            return state.jewelry

    async def get_cases(self, player_uuid: UUID, case_id: str) -> int:
        state = self._players.get(player_uuid)
        return state.cases.get(case_id, 0) if state else 0

    async def set_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None:
        async with self._lock:
            self._put_cases(player_uuid, case_id, max(0, int(amount)))
            await self._changed()

    async def add_cases(self, player_uuid: UUID, case_id: str, delta: int) -> int:
        async with self._lock:
            current = self._players[player_uuid].cases.get(case_id, 0)
            new = max(0, current + int(delta))
            self._put_cases(player_uuid, case_id, new)
            await self._changed()
            return new

    async def record_open(self, player_uuid: UUID, case_id: str) -> None:
        async with self._lock:
            self._players[player_uuid].opened += 1
            self._total_opened += 1
            await self._changed()

    async def get_total_opened(self) -> int:
        return self._total_opened

    async def get_opened_by(self, player_uuid: UUID) -> int:
        state = self._players.get(player_uuid)
        return state.opened if state else 0

    def _put_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None:
        cases = self._players[player_uuid].cases
        if amount:
            cases[case_id] = amount
        else:
            cases.pop(case_id, None)

    async def _changed(self) -> None:
        """Hook awaited with the lock held after every mutation."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_opened": self._total_opened,
            "players": {str(k): v.to_dict() for k, v in self._players.items()},
        }

    def load_dict(self, raw: dict[str, Any]) -> None:
        self._total_opened = max(0, int(raw.get("total_opened", 0)))
        self._players.clear()
        for key, value in (raw.get("players") or {}).items():
            self._players[UUID(str(key))] = PlayerState.from_dict(value or {})
