from __future__ import annotations

from .bus import EventBus
from .types import CaseOpenCompleteEvent, CaseOpeningEventListener

__all__ = ["CaseOpenCompleteEvent", "CaseOpeningEventListener", "EventBus"]
