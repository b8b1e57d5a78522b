from __future__ import annotations

import json
import logging

from caseapi.observability import bind_context, clear_context
from caseapi.observability.logging import JsonFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("caseapi.test", logging.INFO, __file__, 1, "case_opened", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_formatter_includes_context_and_extras() -> None:
    bind_context(trace_id="t-1", player="alice", case_id="starter")
    try:
        line = JsonFormatter().format(_record(reward_index=2, blob=object()))
    finally:
        clear_context()

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "caseapi.test"
    assert payload["message"] == "case_opened"
    assert payload["trace_id"] == "t-1"
    assert payload["player"] == "alice"
    assert payload["case_id"] == "starter"
    assert payload["reward_index"] == 2
    assert payload["blob"].startswith("<object")
    assert "ts" in payload


def test_cleared_context_is_not_logged() -> None:
    clear_context()
    payload = json.loads(JsonFormatter().format(_record()))
    assert "trace_id" not in payload
