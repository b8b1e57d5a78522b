from __future__ import annotations

from .context import bind_context, clear_context
from .logging import configure_logging, get_logger

__all__ = ["bind_context", "clear_context", "configure_logging", "get_logger"]
