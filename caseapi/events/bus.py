from __future__ import annotations

import inspect

from caseapi.observability.logging import get_logger

from .types import CaseOpenCompleteEvent, CaseOpeningEventListener


class EventBus:
    """Ordered listener registry.

    Listeners run in registration order, so the most recently registered one
    runs last and sees the effects of the others. A failing listener is
    logged and does not prevent the remaining listeners from running.
    """

    def __init__(self) -> None:
        self._listeners: list[CaseOpeningEventListener] = []
        self._log = get_logger("caseapi.events")

    def register(self, listener: CaseOpeningEventListener) -> None:
        if any(existing is listener for existing in self._listeners):
            return
        self._listeners.append(listener)

    def unregister(self, listener: CaseOpeningEventListener) -> None:
        self._listeners = [existing for existing in self._listeners if existing is not listener]

    @property
    def listeners(self) -> tuple[CaseOpeningEventListener, ...]:
        return tuple(self._listeners)

    async def dispatch(self, event: CaseOpenCompleteEvent) -> None:
        # Snapshot so listeners may (un)register during dispatch.
        for listener in list(self._listeners):
            try:
                out = listener.on_case_open_complete(event)
                if inspect.isawaitable(out):
                    await out
            except Exception:  # noqa: BLE001
                self._log.exception(
                    "listener_failed",
                    listener=type(listener).__name__,
                    case_id=event.case.case_id,
                )
