"""The CaseAPI surface: opening cases, balances, statistics and listeners.

:class:`CaseService` is the implementation wired from config by
:func:`build_service`. Callers that only need the contract should type
against :class:`CaseAPI`.
"""

from __future__ import annotations

import asyncio
import random
import time
import weakref
from typing import Protocol
from uuid import UUID

from caseapi.catalog import CaseCatalog, load_catalog
from caseapi.config.model import AppConfig, BroadcastConfig
from caseapi.core.errors import RewardApplyError
from caseapi.events import CaseOpenCompleteEvent, CaseOpeningEventListener, EventBus
from caseapi.gateway import RecordingGateway, RewardGateway, RewardTarget
from caseapi.models.case import Case
from caseapi.models.reward import CaseReward
from caseapi.observability import bind_context, clear_context, get_logger
from caseapi.observability.ids import new_trace_id
from caseapi.storage import InMemoryPlayerStore, JsonFilePlayerStore, PlayerStore


class CaseAPI(Protocol):
    async def case_exists(self, case_id: str) -> bool: ...

    async def open_case_with_remove(self, player_uuid: UUID, case_id: str) -> bool: ...

    async def open_case_without_remove(self, player_uuid: UUID, case_id: str) -> bool: ...

    async def open_case_preview(self, player_uuid: UUID, case_id: str) -> None: ...

    async def set_jewelry(self, player_uuid: UUID, amount: int) -> None: ...

    async def add_jewelry(self, player_uuid: UUID, amount: int) -> None: ...

    async def remove_jewelry(self, player_uuid: UUID, amount: int) -> None: ...

    async def set_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None: ...

    async def add_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None: ...

    async def remove_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None: ...

    async def get_jewelry(self, player_uuid: UUID) -> int: ...

    async def get_player_cases(self, player_uuid: UUID, case_id: str) -> int: ...

    async def get_total_cases_opened(self) -> int: ...

    async def get_total_cases_opened_by_player(self, player_uuid: UUID) -> int: ...

    def register_listener(self, listener: CaseOpeningEventListener) -> None: ...

    def unregister_listener(self, listener: CaseOpeningEventListener) -> None: ...


def _non_negative(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"amount must be >= 0, got {amount}")
    return amount


class CaseService:
    """Default CaseAPI implementation.

    Opening a case:
      1. unknown case, missing permission, no owned case (when removing) or
         no reward left to draw -> False
      2. draw among available rewards, weighted by base chance
      3. consume the draw and (optionally) the case, then apply the reward;
         a failed apply restores both and returns False
      4. record statistics, broadcast if the reward asks for it, notify
         listeners, return True

    Opens for one player are serialised so a player can never spend the
    same case twice.
    """

    def __init__(
        self,
        catalog: CaseCatalog,
        store: PlayerStore,
        gateway: RewardGateway,
        *,
        rng: random.Random | None = None,
        events: EventBus | None = None,
        broadcast_template: str = BroadcastConfig.template,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._gateway = gateway
        self._rng = rng or random.Random()
        self._events = events or EventBus()
        self._broadcast_template = broadcast_template
        self._target = RewardTarget(gateway=gateway, store=store)
        # Entries vanish once no opener holds or waits on the lock.
        self._player_locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = weakref.WeakValueDictionary()
        self._log = get_logger("caseapi.service")

    @property
    def catalog(self) -> CaseCatalog:
        return self._catalog

    @property
    def store(self) -> PlayerStore:
        return self._store

    @property
    def gateway(self) -> RewardGateway:
        return self._gateway

    # -- cases -------------------------------------------------------------

    async def case_exists(self, case_id: str) -> bool:
        return case_id in self._catalog

    async def open_case_with_remove(self, player_uuid: UUID, case_id: str) -> bool:
        return await self._open(player_uuid, case_id, remove=True)

    async def open_case_without_remove(self, player_uuid: UUID, case_id: str) -> bool:
        return await self._open(player_uuid, case_id, remove=False)

    async def open_case_preview(self, player_uuid: UUID, case_id: str) -> None:
        case = self._catalog.get(case_id)
        if case is None:
            self._log.warning("preview_unknown_case", case_id=case_id, player=str(player_uuid))
            return
        await self._gateway.show_preview(player_uuid, case.preview())

    # -- jewelry -----------------------------------------------------------

    async def set_jewelry(self, player_uuid: UUID, amount: int) -> None:
        await self._store.set_jewelry(player_uuid, _non_negative(amount))

    async def add_jewelry(self, player_uuid: UUID, amount: int) -> None:
        await self._store.add_jewelry(player_uuid, _non_negative(amount))

    async def remove_jewelry(self, player_uuid: UUID, amount: int) -> None:
        await self._store.add_jewelry(player_uuid, -_non_negative(amount))

    async def get_jewelry(self, player_uuid: UUID) -> int:
        return await self._store.get_jewelry(player_uuid)

    # -- owned cases -------------------------------------------------------

    async def set_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None:
        self._catalog.require(case_id)
        await self._store.set_cases(player_uuid, case_id, _non_negative(amount))

    async def add_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None:
        self._catalog.require(case_id)
        await self._store.add_cases(player_uuid, case_id, _non_negative(amount))

    async def remove_cases(self, player_uuid: UUID, case_id: str, amount: int) -> None:
        self._catalog.require(case_id)
        await self._store.add_cases(player_uuid, case_id, -_non_negative(amount))

    async def get_player_cases(self, player_uuid: UUID, case_id: str) -> int:
        return await self._store.get_cases(player_uuid, case_id)

    # -- statistics --------------------------------------------------------

    async def get_total_cases_opened(self) -> int:
        return await self._store.get_total_opened()

    async def get_total_cases_opened_by_player(self, player_uuid: UUID) -> int:
        return await self._store.get_opened_by(player_uuid)

    # -- listeners ---------------------------------------------------------

    def register_listener(self, listener: CaseOpeningEventListener) -> None:
        self._events.register(listener)

    def unregister_listener(self, listener: CaseOpeningEventListener) -> None:
        self._events.unregister(listener)

    # -- internals ---------------------------------------------------------

    def draw(self, case: Case) -> CaseReward | None:
        """Pick one available reward, weighted by base chance."""

        available = case.available_rewards()
        if not available:
            return None
        total = sum(r.chance for r in available)
        roll = self._rng.random() * total
        cumulative = 0.0
        for reward in available:
            cumulative += reward.chance
            if roll < cumulative:
                return reward
        # Float rounding can leave roll == total.
        return available[-1]

    def _player_lock(self, player_uuid: UUID) -> asyncio.Lock:
        lock = self._player_locks.get(player_uuid)
        if lock is None:
            lock = self._player_locks[player_uuid] = asyncio.Lock()
        return lock

    async def _open(self, player_uuid: UUID, case_id: str, *, remove: bool) -> bool:
        bind_context(trace_id=new_trace_id(), player=str(player_uuid), case_id=case_id)
        t0 = time.perf_counter()
        try:
            case = self._catalog.get(case_id)
            if case is None:
                self._log.warning("open_rejected", reason="unknown_case")
                return False

            if case.permission and not await self._gateway.has_permission(player_uuid, case.permission):
                self._log.info("open_rejected", reason="missing_permission", permission=case.permission)
                return False

            async with self._player_lock(player_uuid):
                reward = await self._open_locked(player_uuid, case, remove=remove)
            if reward is None:
                return False

            if reward.with_broadcast_message:
                await self._gateway.broadcast(self._broadcast_message(player_uuid, case, reward))

            await self._events.dispatch(
                CaseOpenCompleteEvent(player_uuid=player_uuid, case=case, reward=reward)
            )

            self._log.info(
                "case_opened",
                reward_index=reward.index,
                reward_type=reward.type.value if reward.type is not None else None,
                removed=remove,
                latency_ms=round((time.perf_counter() - t0) * 1000, 2),
            )
            return True
        finally:
            clear_context()

    async def _open_locked(self, player_uuid: UUID, case: Case, *, remove: bool) -> CaseReward | None:
        if remove and await self._store.get_cases(player_uuid, case.case_id) < 1:
            self._log.info("open_rejected", reason="no_case_owned")
            return None

        reward = self.draw(case)
        if reward is None:
            self._log.warning("open_rejected", reason="no_reward_available")
            return None

        reward.reduce_remaining_draws()
        if remove:
            await self._store.add_cases(player_uuid, case.case_id, -1)

        try:
            ok = await reward.apply(player_uuid, case, self._target)
        except RewardApplyError as e:
            self._log.warning(
                "reward_apply_failed",
                reward_index=reward.index,
                error_type=e.error_type,
                error=e.message,
            )
            ok = False
        except Exception:
            await self._rollback(player_uuid, case, reward, remove=remove)
            raise

        if not ok:
            await self._rollback(player_uuid, case, reward, remove=remove)
            self._log.warning("open_failed", reason="reward_not_applied", reward_index=reward.index)
            return None

        await self._store.record_open(player_uuid, case.case_id)
        return reward

    async def _rollback(self, player_uuid: UUID, case: Case, reward: CaseReward, *, remove: bool) -> None:
        reward.restore_draw()
        if remove:
            await self._store.add_cases(player_uuid, case.case_id, 1)

    def _broadcast_message(self, player_uuid: UUID, case: Case, reward: CaseReward) -> str:
        return (
            self._broadcast_template.replace("{player}", str(player_uuid))
            .replace("{case}", case.display_name)
            .replace("{reward}", reward.describe())
        )


def build_service(cfg: AppConfig, *, gateway: RewardGateway | None = None) -> CaseService:
    """Wire a CaseService from config: catalog, store backend and RNG."""

    catalog = load_catalog(cfg.catalog_path)

    store: PlayerStore
    if cfg.storage.backend == "json" and cfg.storage.path is not None:
        store = JsonFilePlayerStore(cfg.storage.path)
    else:
        store = InMemoryPlayerStore()

    return CaseService(
        catalog,
        store,
        gateway or RecordingGateway(),
        rng=random.Random(cfg.draw.seed),
        broadcast_template=cfg.broadcast.template,
    )
