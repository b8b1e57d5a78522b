from __future__ import annotations

from contextvars import ContextVar


_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_player: ContextVar[str | None] = ContextVar("player", default=None)
_case_id: ContextVar[str | None] = ContextVar("case_id", default=None)


def bind_context(*, trace_id: str, player: str | None = None, case_id: str | None = None) -> None:
    _trace_id.set(trace_id)
    _player.set(player)
    _case_id.set(case_id)


def clear_context() -> None:
    _trace_id.set(None)
    _player.set(None)
    _case_id.set(None)


def snapshot() -> dict[str, object]:
    """Return a snapshot of current observability context for logging."""

    out: dict[str, object] = {}
    if (v := _trace_id.get()) is not None:
        out["trace_id"] = v
    if (v := _player.get()) is not None:
        out["player"] = v
    if (v := _case_id.get()) is not None:
        out["case_id"] = v
    return out
