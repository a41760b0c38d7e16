"""Observability module for OpenTelemetry-aligned tracing and logging."""

from redisearch_mapper.observability.context import bind_search_context, get_search_context, search_context
from redisearch_mapper.observability.logging import JsonFormatter, configure_logging
from redisearch_mapper.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "JsonFormatter",
    "bind_search_context",
    "configure_logging",
    "create_span",
    "get_search_context",
    "get_tracer",
    "init_tracing",
    "search_context",
]
