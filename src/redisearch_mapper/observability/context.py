"""Context of the search in flight, carried across async boundaries for log correlation."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from opentelemetry import trace


search_context: ContextVar[dict[str, Any] | None] = ContextVar("search_context", default=None)


@contextmanager
def bind_search_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """Attach fields (index, query, ...) to every log record emitted inside the block.

    Nested blocks extend the outer context and restore it on exit.
    """
    ctx = {**(search_context.get() or {}), **fields}
    token = search_context.set(ctx)
    try:
        yield ctx
    finally:
        search_context.reset(token)


def get_search_context() -> dict[str, Any]:
    """Bound search fields plus the ids of the current OpenTelemetry span, if any."""
    ctx = dict(search_context.get() or {})
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        ctx["trace_id"] = format(span_context.trace_id, "032x")
        ctx["span_id"] = format(span_context.span_id, "016x")
    return ctx
