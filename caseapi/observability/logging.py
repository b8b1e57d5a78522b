from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .context import snapshot

_RESERVED = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)


class JsonFormatter(logging.Formatter):
    """One JSON object per record: base fields, bound context, then extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(snapshot())

        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


_configured = False


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time."""

    @property  # type: ignore[override]
    def stream(self):  # noqa: ANN201
        return sys.stderr

    @stream.setter
    def stream(self, value: object) -> None:
        pass


class KVLogger:
    """A tiny structured logging adapter: keyword arguments become JSON fields."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._log("debug", msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._log("info", msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._log("warning", msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._log("error", msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: object) -> None:
        kwargs.setdefault("exc_info", True)
        self._log("error", msg, *args, **kwargs)

    def _log(self, level: str, msg: str, *args: object, **kwargs: object) -> None:
        extra = kwargs.pop("extra", None)
        exc_info = kwargs.pop("exc_info", None)
        if extra is None:
            extra_dict: dict[str, object] = {}
        elif isinstance(extra, dict):
            extra_dict = dict(extra)
        else:
            extra_dict = {"extra": repr(extra)}

        for k, v in kwargs.items():
            extra_dict[k] = v

        log_fn = getattr(self._logger, level)
        log_fn(msg, *args, extra=extra_dict, exc_info=exc_info)


def configure_logging(*, level: str = "INFO") -> None:
    """Configure root logging with JSON output on stderr.

    Safe to call multiple times; later calls only adjust the level.
    """

    global _configured
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    handler = _StderrHandler()
    handler.setFormatter(JsonFormatter())

    root.handlers.clear()
    root.addHandler(handler)
    _configured = True


def get_logger(name: str = "caseapi") -> KVLogger:
    return KVLogger(logging.getLogger(name))
