"""CaseAPI: cases, weighted rewards, jewelry and opening statistics."""

from __future__ import annotations

from caseapi.about import TOOLCHAIN, __group__, __title__, __version__, archive_file_name, artifact_name
from caseapi.catalog import CaseCatalog, load_catalog
from caseapi.core.errors import (
    CaseApiError,
    CaseNotFoundError,
    ConfigError,
    RewardApplyError,
    UnsupportedRewardError,
)
from caseapi.events import CaseOpenCompleteEvent, CaseOpeningEventListener, EventBus
from caseapi.gateway import RecordingGateway, RewardGateway, RewardTarget
from caseapi.models import Case, CaseReward, CaseRewardType, DurationUnit
from caseapi.service import CaseAPI, CaseService, build_service
from caseapi.storage import InMemoryPlayerStore, JsonFilePlayerStore, PlayerStore

__all__ = [
    "TOOLCHAIN",
    "Case",
    "CaseAPI",
    "CaseApiError",
    "CaseCatalog",
    "CaseNotFoundError",
    "CaseOpenCompleteEvent",
    "CaseOpeningEventListener",
    "CaseReward",
    "CaseRewardType",
    "CaseService",
    "ConfigError",
    "DurationUnit",
    "EventBus",
    "InMemoryPlayerStore",
    "JsonFilePlayerStore",
    "PlayerStore",
    "RecordingGateway",
    "RewardApplyError",
    "RewardGateway",
    "RewardTarget",
    "UnsupportedRewardError",
    "__group__",
    "__title__",
    "__version__",
    "archive_file_name",
    "artifact_name",
    "build_service",
    "load_catalog",
]
