"""Rewards that can be drawn from a case.

A reward carries its base chance and draw limits; how it is handed to the
player depends on its type. Concrete types delegate to a
:class:`~caseapi.gateway.RewardTarget`, which bundles the platform gateway
(items, money, commands, permissions) with the player store (gems).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Mapping
from uuid import UUID

from caseapi.core.errors import UnsupportedRewardError
from caseapi.utils.durations import get_duration

from .duration import DurationUnit, parse_duration_spec

if TYPE_CHECKING:
    from caseapi.gateway import RewardTarget

    from .case import Case


class CaseRewardType(str, Enum):
    ITEM = "item"
    GEMS = "gems"
    MONEY = "money"
    COMMAND = "command"
    PERMISSION = "permission"


UNLIMITED = -1


@dataclass(slots=True, eq=False)
class CaseReward:
    """Base reward: chance, optional icon and draw limits.

    ``max_draws == -1`` means unlimited; in that case ``remaining_draws`` is
    also ``-1``. A limited reward never has fewer than zero draws left.
    """

    chance: float
    item_stack_base64: str | None = None
    with_broadcast_message: bool = False
    max_draws: int = UNLIMITED
    remaining_draws: int = UNLIMITED
    index: int = 0

    type: ClassVar[CaseRewardType | None] = None

    def __post_init__(self) -> None:
        if not self.chance > 0:
            raise ValueError(f"reward chance must be > 0, got {self.chance!r}")
        if self.max_draws < 0:
            self.max_draws = UNLIMITED
            self.remaining_draws = UNLIMITED
        elif self.remaining_draws < 0 or self.remaining_draws > self.max_draws:
            self.remaining_draws = self.max_draws

    def win_chance(self, total_chance: float) -> float:
        """Probability of drawing this reward when rewards sum to ``total_chance``."""

        if total_chance <= 0:
            return 0.0
        return self.chance / total_chance

    def set_index(self, index: int) -> CaseReward:
        self.index = index
        return self

    @property
    def is_limited(self) -> bool:
        return self.max_draws >= 0

    @property
    def is_available(self) -> bool:
        return not self.is_limited or self.remaining_draws > 0

    def reduce_remaining_draws(self) -> None:
        if self.is_limited and self.remaining_draws > 0:
            self.remaining_draws -= 1

    def restore_draw(self) -> None:
        """Undo one :meth:`reduce_remaining_draws` after a failed apply."""

        if self.is_limited and self.remaining_draws < self.max_draws:
            self.remaining_draws += 1

    # Type-specific accessors; None unless the concrete type provides them.

    @property
    def gems_amount(self) -> int | None:
        return None

    @property
    def money_amount(self) -> float | None:
        return None

    @property
    def command(self) -> str | None:
        return None

    @property
    def permission(self) -> str | None:
        return None

    @property
    def raw_permission_duration(self) -> int | None:
        return None

    @property
    def permission_duration_unit(self) -> DurationUnit | None:
        return None

    @property
    def permission_duration(self) -> timedelta | None:
        return None

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        raise UnsupportedRewardError(f"{type(self).__name__} has no reward type and cannot be applied")

    def describe(self) -> str:
        kind = self.type.value if self.type is not None else "untyped"
        return f"#{self.index} {kind}"


@dataclass(slots=True, eq=False)
class ItemReward(CaseReward):
    type: ClassVar[CaseRewardType] = CaseRewardType.ITEM

    def __post_init__(self) -> None:
        CaseReward.__post_init__(self)
        if not self.item_stack_base64:
            raise ValueError("item reward requires item_stack_base64")

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        return await target.gateway.give_item(player_uuid, self.item_stack_base64 or "")


@dataclass(slots=True, eq=False)
class GemsReward(CaseReward):
    amount: int = 0

    type: ClassVar[CaseRewardType] = CaseRewardType.GEMS

    def __post_init__(self) -> None:
        CaseReward.__post_init__(self)
        if self.amount <= 0:
            raise ValueError(f"gems amount must be > 0, got {self.amount!r}")

    @property
    def gems_amount(self) -> int | None:
        return self.amount

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        await target.store.add_jewelry(player_uuid, self.amount)
        return True

    def describe(self) -> str:
        return f"#{self.index} {self.amount} gems"


@dataclass(slots=True, eq=False)
class MoneyReward(CaseReward):
    amount: float = 0.0

    type: ClassVar[CaseRewardType] = CaseRewardType.MONEY

    def __post_init__(self) -> None:
        CaseReward.__post_init__(self)
        if self.amount <= 0:
            raise ValueError(f"money amount must be > 0, got {self.amount!r}")

    @property
    def money_amount(self) -> float | None:
        return self.amount

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        return await target.gateway.deposit_money(player_uuid, self.amount)

    def describe(self) -> str:
        return f"#{self.index} money {self.amount:g}"


@dataclass(slots=True, eq=False)
class CommandReward(CaseReward):
    """Runs a console command; ``{player}`` and ``{case}`` are substituted."""

    command_line: str = ""

    type: ClassVar[CaseRewardType] = CaseRewardType.COMMAND

    def __post_init__(self) -> None:
        CaseReward.__post_init__(self)
        if not self.command_line.strip():
            raise ValueError("command reward requires a command")

    @property
    def command(self) -> str | None:
        return self.command_line

    def render(self, player_uuid: UUID, case: Case) -> str:
        line = self.command_line.strip().removeprefix("/")
        return line.replace("{player}", str(player_uuid)).replace("{case}", case.case_id)

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        return await target.gateway.dispatch_command(self.render(player_uuid, case))

    def describe(self) -> str:
        return f"#{self.index} command {self.command_line!r}"


@dataclass(slots=True, eq=False)
class PermissionReward(CaseReward):
    """Grants a permission node, permanently when no duration is configured."""

    node: str = ""
    duration_amount: int | None = None
    duration_unit: DurationUnit | None = None

    type: ClassVar[CaseRewardType] = CaseRewardType.PERMISSION

    def __post_init__(self) -> None:
        CaseReward.__post_init__(self)
        if not self.node.strip():
            raise ValueError("permission reward requires a permission node")
        if (self.duration_amount is None) != (self.duration_unit is None):
            raise ValueError("permission duration needs both amount and unit")

    @property
    def permission(self) -> str | None:
        return self.node

    @property
    def raw_permission_duration(self) -> int | None:
        return self.duration_amount

    @property
    def permission_duration_unit(self) -> DurationUnit | None:
        return self.duration_unit

    @property
    def permission_duration(self) -> timedelta | None:
        if self.duration_amount is None:
            return None
        return get_duration(self.duration_amount, self.duration_unit)

    async def apply(self, player_uuid: UUID, case: Case, target: RewardTarget) -> bool:
        return await target.gateway.grant_permission(player_uuid, self.node, self.permission_duration)

    def describe(self) -> str:
        if self.duration_amount is None:
            return f"#{self.index} permission {self.node}"
        return f"#{self.index} permission {self.node} for {self.duration_amount}{self.duration_unit.suffix}"  # type: ignore[union-attr]


_REWARD_CLASSES: dict[CaseRewardType, type[CaseReward]] = {
    CaseRewardType.ITEM: ItemReward,
    CaseRewardType.GEMS: GemsReward,
    CaseRewardType.MONEY: MoneyReward,
    CaseRewardType.COMMAND: CommandReward,
    CaseRewardType.PERMISSION: PermissionReward,
}


def reward_from_mapping(data: Mapping[str, Any], *, index: int = 0) -> CaseReward:
    """Build a concrete reward from a catalog entry.

    Raises ValueError/TypeError on malformed entries; the catalog loader
    turns those into ConfigError with the key path.
    """

    raw_type = data.get("type")
    try:
        reward_type = CaseRewardType(str(raw_type).lower())
    except ValueError:
        allowed = ", ".join(t.value for t in CaseRewardType)
        raise ValueError(f"unknown reward type {raw_type!r} (allowed: {allowed})") from None

    broadcast = data.get("broadcast", False)
    if not isinstance(broadcast, bool):
        raise TypeError(f"broadcast must be true or false, got {broadcast!r}")

    common: dict[str, Any] = {
        "chance": float(data.get("chance", 0)),
        "item_stack_base64": str(data["item"]) if data.get("item") is not None else None,
        "with_broadcast_message": broadcast,
        "max_draws": int(data.get("max_draws", UNLIMITED)),
        "remaining_draws": int(data.get("remaining_draws", UNLIMITED)),
        "index": index,
    }

    if reward_type is CaseRewardType.GEMS:
        return GemsReward(**common, amount=int(data.get("amount", 0)))
    if reward_type is CaseRewardType.MONEY:
        return MoneyReward(**common, amount=float(data.get("amount", 0)))
    if reward_type is CaseRewardType.COMMAND:
        return CommandReward(**common, command_line=str(data.get("command") or ""))
    if reward_type is CaseRewardType.PERMISSION:
        amount: int | None = None
        unit: DurationUnit | None = None
        if data.get("duration") is not None:
            amount, unit = parse_duration_spec(str(data["duration"]))
        return PermissionReward(
            **common,
            node=str(data.get("permission") or ""),
            duration_amount=amount,
            duration_unit=unit,
        )
    return _REWARD_CLASSES[reward_type](**common)
