from __future__ import annotations

from dataclasses import dataclass, field

from .reward import CaseReward


@dataclass(frozen=True, slots=True)
class Case:
    """A case players can own and open.

    ``price`` is the price the case was created with; later catalog edits to
    shop prices do not change it. An empty ``permission`` means anyone may
    open the case.
    """

    case_id: str
    display_name: str
    item_stack_base64: str
    price: int = 0
    with_glowing: bool = False
    permission: str | None = None
    rewards: tuple[CaseReward, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.case_id:
            raise ValueError("case_id must be a non-empty string")
        if self.price < 0:
            raise ValueError(f"price must be >= 0, got {self.price!r}")
        for i, reward in enumerate(self.rewards):
            reward.set_index(i)

    @property
    def total_chance(self) -> float:
        return sum(r.chance for r in self.rewards)

    def available_rewards(self) -> list[CaseReward]:
        return [r for r in self.rewards if r.is_available]

    def preview(self) -> CasePreview:
        total = self.total_chance
        return CasePreview(
            case=self,
            entries=tuple(
                PreviewEntry(reward=r, win_chance=r.win_chance(total), available=r.is_available)
                for r in self.rewards
            ),
        )


@dataclass(frozen=True, slots=True)
class PreviewEntry:
    reward: CaseReward
    win_chance: float
    available: bool


@dataclass(frozen=True, slots=True)
class CasePreview:
    """What a player sees when previewing a case: every reward and its odds."""

    case: Case
    entries: tuple[PreviewEntry, ...]
