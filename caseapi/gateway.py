"""Platform hooks used to hand out rewards and show previews.

The game server binding implements :class:`RewardGateway`. The package ships
:class:`RecordingGateway`, an in-process implementation that records every
call; the CLI uses it to simulate openings and tests use it to assert on them.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol
from uuid import UUID

from caseapi.models.case import CasePreview
from caseapi.observability.logging import get_logger
from caseapi.storage.base import PlayerStore


class RewardGateway(Protocol):
    async def has_permission(self, player_uuid: UUID, permission: str) -> bool: ...

    async def give_item(self, player_uuid: UUID, item_stack_base64: str) -> bool: ...

    async def deposit_money(self, player_uuid: UUID, amount: float) -> bool: ...

    async def dispatch_command(self, command: str) -> bool: ...

    async def grant_permission(self, player_uuid: UUID, permission: str, duration: timedelta | None) -> bool: ...

    async def show_preview(self, player_uuid: UUID, preview: CasePreview) -> None: ...

    async def broadcast(self, message: str) -> None: ...


@dataclass(frozen=True, slots=True)
class RewardTarget:
    """Everything a reward needs to apply itself to a player."""

    gateway: RewardGateway
    store: PlayerStore


@dataclass(frozen=True, slots=True)
class GatewayCall:
    name: str
    player_uuid: UUID | None
    args: dict[str, Any] = field(default_factory=dict)


class RecordingGateway:
    """Gateway that keeps everything in memory.

    Permissions granted through rewards are honoured by ``has_permission``
    until they expire. ``fail`` names operations that should report failure,
    which is handy to exercise rollback paths.
    """

    def __init__(self, *, grant_all: bool = False, fail: set[str] | None = None) -> None:
        self.calls: list[GatewayCall] = []
        self.balances: defaultdict[UUID, float] = defaultdict(float)
        self._grant_all = grant_all
        self._fail = set(fail or ())
        self._permissions: dict[tuple[UUID, str], datetime | None] = {}
        self._log = get_logger("caseapi.gateway")

    def allow(self, player_uuid: UUID, permission: str) -> None:
        self._permissions[(player_uuid, permission)] = None

    async def has_permission(self, player_uuid: UUID, permission: str) -> bool:
        if self._grant_all:
            return True
        key = (player_uuid, permission)
        if key not in self._permissions:
            return False
        expires_at = self._permissions[key]
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            del self._permissions[key]
            return False
        return True

    async def give_item(self, player_uuid: UUID, item_stack_base64: str) -> bool:
        return self._record("give_item", player_uuid, item=item_stack_base64)

    async def deposit_money(self, player_uuid: UUID, amount: float) -> bool:
        ok = self._record("deposit_money", player_uuid, amount=amount)
        if ok:
            self.balances[player_uuid] += amount
        return ok

    async def dispatch_command(self, command: str) -> bool:
        return self._record("dispatch_command", None, command=command)

    async def grant_permission(self, player_uuid: UUID, permission: str, duration: timedelta | None) -> bool:
        ok = self._record(
            "grant_permission",
            player_uuid,
            permission=permission,
            duration_s=duration.total_seconds() if duration is not None else None,
        )
        if ok:
            expires_at = datetime.now(timezone.utc) + duration if duration is not None else None
            self._permissions[(player_uuid, permission)] = expires_at
        return ok

    async def show_preview(self, player_uuid: UUID, preview: CasePreview) -> None:
        self._record("show_preview", player_uuid, case_id=preview.case.case_id, preview=preview)

    async def broadcast(self, message: str) -> None:
        self._record("broadcast", None, message=message)

    def calls_named(self, name: str) -> list[GatewayCall]:
        return [c for c in self.calls if c.name == name]

    def _record(self, name: str, player_uuid: UUID | None, **args: Any) -> bool:
        self.calls.append(GatewayCall(name=name, player_uuid=player_uuid, args=args))
        ok = name not in self._fail
        self._log.debug("gateway_call", op=name, player=str(player_uuid) if player_uuid else None, ok=ok)
        return ok
