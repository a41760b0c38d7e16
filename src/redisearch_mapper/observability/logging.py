"""Structured JSON logs for the ``redisearch_mapper`` logger."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import IO, Any

import orjson
from pydantic import BaseModel

from redisearch_mapper.config import get_settings
from redisearch_mapper.observability.context import get_search_context


PACKAGE_LOGGER = "redisearch_mapper"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with the index, query and span of the search in flight."""

    MAX_MESSAGE_LEN = 2000
    MAX_QUERY_LEN = 500

    _RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": self._truncate(record.getMessage(), self.MAX_MESSAGE_LEN),
            "logger": record.name,
        }

        # schema / search / repository
        if record.name.startswith(f"{PACKAGE_LOGGER}."):
            log_entry["component"] = record.name.split(".")[1]

        for key, value in get_search_context().items():
            if key == "query" and isinstance(value, str):
                value = self._truncate(value, self.MAX_QUERY_LEN)
            log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED and not key.startswith("_"):
                log_entry[key] = value

        return orjson.dumps(log_entry, default=self._json_default).decode("utf-8")

    @staticmethod
    def _truncate(text: str, limit: int) -> str:
        if len(text) > limit:
            return text[:limit] + "..."
        return text

    @staticmethod
    def _json_default(value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump()
        if isinstance(value, (set, frozenset)):
            try:
                return sorted(value)
            except TypeError:
                return list(value)
        if isinstance(value, (bytes, bytearray)):
            return value.decode("utf-8", errors="replace")
        return repr(value)


def configure_logging(
    level: str | None = None,
    json_output: bool | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Send the library's own logs to ``stream``.

    Only the ``redisearch_mapper`` logger is touched; the root logger and
    the application's handlers are left alone. Calling it again replaces the
    handler installed by the previous call.

    Args:
        level: Log level (default: ``log_level`` setting)
        json_output: Emit structured JSON logs when True (default: ``log_json`` setting)
        stream: Destination (default: stderr)

    Returns:
        The installed handler.
    """
    settings = get_settings()
    level = level or settings.log_level
    json_output = settings.log_json if json_output is None else json_output

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in package_logger.handlers[:]:
        if getattr(existing, "_redisearch_mapper_handler", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._redisearch_mapper_handler = True  # type: ignore[attr-defined]
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    return handler
