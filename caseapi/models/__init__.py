from __future__ import annotations

from .case import Case, CasePreview, PreviewEntry
from .duration import DurationUnit, parse_duration_spec
from .reward import (
    CaseReward,
    CaseRewardType,
    CommandReward,
    GemsReward,
    ItemReward,
    MoneyReward,
    PermissionReward,
    reward_from_mapping,
)

__all__ = [
    "Case",
    "CasePreview",
    "CaseReward",
    "CaseRewardType",
    "CommandReward",
    "DurationUnit",
    "GemsReward",
    "ItemReward",
    "MoneyReward",
    "PermissionReward",
    "PreviewEntry",
    "parse_duration_spec",
    "reward_from_mapping",
]
