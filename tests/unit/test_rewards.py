from __future__ import annotations

import asyncio
from datetime import timedelta
from uuid import UUID

import pytest

from caseapi.core.errors import UnsupportedRewardError
from caseapi.gateway import RecordingGateway, RewardTarget
from caseapi.models import (
    Case,
    CaseReward,
    CaseRewardType,
    CommandReward,
    DurationUnit,
    GemsReward,
    ItemReward,
    MoneyReward,
    PermissionReward,
    reward_from_mapping,
)
from caseapi.storage import InMemoryPlayerStore

PLAYER = UUID("8f14e45f-ceea-467f-a0e6-6d7b1c3a2b10")


def _case(*rewards: CaseReward) -> Case:
    return Case(case_id="crate", display_name="Crate", item_stack_base64="icon", rewards=rewards)


def test_win_chance_is_normalized() -> None:
    reward = GemsReward(chance=25, amount=1)
    assert reward.win_chance(100) == pytest.approx(0.25)
    assert reward.win_chance(0) == 0.0


def test_unlimited_reward() -> None:
    reward = GemsReward(chance=1, amount=1)
    assert not reward.is_limited
    assert reward.is_available
    assert reward.max_draws == -1 and reward.remaining_draws == -1

    reward.reduce_remaining_draws()
    assert reward.remaining_draws == -1


def test_limited_reward_runs_out() -> None:
    reward = MoneyReward(chance=1, amount=10.0, max_draws=2)
    assert reward.is_limited and reward.remaining_draws == 2

    reward.reduce_remaining_draws()
    reward.reduce_remaining_draws()
    reward.reduce_remaining_draws()
    assert reward.remaining_draws == 0
    assert not reward.is_available

    reward.restore_draw()
    assert reward.remaining_draws == 1


def test_remaining_draws_clamped_to_max() -> None:
    assert GemsReward(chance=1, amount=1, max_draws=3, remaining_draws=9).remaining_draws == 3
    assert GemsReward(chance=1, amount=1, max_draws=3, remaining_draws=1).remaining_draws == 1


def test_set_index_chains() -> None:
    reward = GemsReward(chance=1, amount=1)
    assert reward.set_index(4) is reward
    assert reward.index == 4


def test_case_assigns_indexes() -> None:
    a, b = GemsReward(chance=1, amount=1), GemsReward(chance=3, amount=2)
    case = _case(a, b)
    assert (a.index, b.index) == (0, 1)
    assert case.total_chance == 4


def test_type_specific_accessors_default_to_none() -> None:
    reward = ItemReward(chance=1, item_stack_base64="abc")
    assert reward.type is CaseRewardType.ITEM
    assert reward.gems_amount is None
    assert reward.money_amount is None
    assert reward.command is None
    assert reward.permission is None
    assert reward.raw_permission_duration is None
    assert reward.permission_duration_unit is None
    assert reward.permission_duration is None


def test_permission_duration() -> None:
    reward = PermissionReward(chance=1, node="fly", duration_amount=2, duration_unit=DurationUnit.WEEKS)
    assert reward.permission == "fly"
    assert reward.permission_duration == timedelta(days=14)
    assert PermissionReward(chance=1, node="fly").permission_duration is None


@pytest.mark.parametrize(
    "factory",
    [
        lambda: GemsReward(chance=0, amount=1),
        lambda: GemsReward(chance=1, amount=0),
        lambda: MoneyReward(chance=1, amount=-5),
        lambda: ItemReward(chance=1),
        lambda: CommandReward(chance=1, command_line="  "),
        lambda: PermissionReward(chance=1, node=""),
        lambda: PermissionReward(chance=1, node="x", duration_amount=1),
    ],
)
def test_invalid_rewards(factory) -> None:  # noqa: ANN001
    with pytest.raises(ValueError):
        factory()


def test_untyped_reward_cannot_be_applied() -> None:
    reward = CaseReward(chance=1)
    target = RewardTarget(gateway=RecordingGateway(), store=InMemoryPlayerStore())
    with pytest.raises(UnsupportedRewardError):
        asyncio.run(reward.apply(PLAYER, _case(reward), target))


def test_apply_delegates_by_type() -> None:
    gateway = RecordingGateway()
    store = InMemoryPlayerStore()
    target = RewardTarget(gateway=gateway, store=store)

    gems = GemsReward(chance=1, amount=15)
    money = MoneyReward(chance=1, amount=99.5)
    item = ItemReward(chance=1, item_stack_base64="sword")
    cmd = CommandReward(chance=1, command_line="/give {player} apple 1 # {case}")
    perm = PermissionReward(chance=1, node="kit.vip", duration_amount=1, duration_unit=DurationUnit.DAYS)
    case = _case(gems, money, item, cmd, perm)

    async def run() -> list[bool]:
        return [await r.apply(PLAYER, case, target) for r in case.rewards]

    assert asyncio.run(run()) == [True, True, True, True, True]
    assert asyncio.run(store.get_jewelry(PLAYER)) == 15
    assert gateway.balances[PLAYER] == pytest.approx(99.5)
    assert gateway.calls_named("give_item")[0].args == {"item": "sword"}
    assert gateway.calls_named("dispatch_command")[0].args["command"] == f"give {PLAYER} apple 1 # crate"
    assert gateway.calls_named("grant_permission")[0].args["duration_s"] == 86400
    assert asyncio.run(gateway.has_permission(PLAYER, "kit.vip"))


def test_reward_from_mapping() -> None:
    reward = reward_from_mapping(
        {"type": "PERMISSION", "chance": "2.5", "permission": "a.b", "duration": "30m", "broadcast": True},
        index=3,
    )
    assert isinstance(reward, PermissionReward)
    assert reward.chance == 2.5
    assert reward.index == 3
    assert reward.with_broadcast_message
    assert reward.permission_duration == timedelta(minutes=30)

    with pytest.raises(ValueError):
        reward_from_mapping({"type": None, "chance": 1})
