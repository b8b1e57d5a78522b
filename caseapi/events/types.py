from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from caseapi.models.case import Case
from caseapi.models.reward import CaseReward


@dataclass(frozen=True, slots=True)
class CaseOpenCompleteEvent:
    """Fired after a player finished opening a case and received the reward.

    The event is informational: it cannot be cancelled.
    """

    player_uuid: UUID
    case: Case
    reward: CaseReward


class CaseOpeningEventListener:
    """Base listener; override the hooks you care about.

    Hooks may be plain functions or coroutines.
    """

    def on_case_open_complete(self, event: CaseOpenCompleteEvent) -> object:
        return None
