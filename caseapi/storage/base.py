from __future__ import annotations

from typing import Protocol
from uuid import UUID


class PlayerStore(Protocol):
    """Persistent per-player state: jewelry, owned cases and open statistics.

    Amounts never go negative; ``add_*`` with a negative delta clamps at zero
    and returns the new value.
    """

    async def get_jewelry(self, player_uuid: UUID) -> int: ...

    async def set_jewelry(self, player_uuid: UUID, amount: int) -> None: ...

    async def add_jewelry(self, player_uuid: UUID, delta: int) -> int: ...

    async def get_cases(self, player_uuid: UUID, case_id: str) -> int: ...

    async def set_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None: ...

    async def add_cases(self, player_uuid: UUID, case_id: str, delta: int) -> int: ...

    async def record_open(self, player_uuid: UUID, case_id: str) -> None: ...

    async def get_total_opened(self) -> int: ...

    async def get_opened_by(self, player_uuid: UUID) -> int: ...
