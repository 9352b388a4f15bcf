"""Logging context: ContextVar-based log enrichment for request handling.

Every log record is automatically enriched with an ``[op:request]`` prefix
via a `ContextFilter` attached to the root logger handlers.

Operation codes: ``trigger`` (dispatch trigger request).
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

# aiohttp runs each request in its own task, so these never leak across requests.
ctx_operation: ContextVar[str | None] = ContextVar("ctx_operation", default=None)
ctx_request_id: ContextVar[str | None] = ContextVar("ctx_request_id", default=None)


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        op = ctx_operation.get(None)
        rid = ctx_request_id.get(None)
        parts: list[str] = []
        if op:
            parts.append(op)
        if rid:
            parts.append(rid[:8])
        record.ctx = f"[{':'.join(parts)}] " if parts else ""
        return True


def set_log_context(
    *,
    operation: str | None = None,
    request_id: str | None = None,
) -> None:
    """Set logging context for the current asyncio task."""
    if operation is not None:
        ctx_operation.set(operation)
    if request_id is not None:
        ctx_request_id.set(request_id)
