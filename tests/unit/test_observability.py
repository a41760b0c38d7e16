"""Unit tests for observability module."""

import io
import json
import logging

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
import pytest

from redisearch_mapper.client import RawRecord, RawSearchBatch
from redisearch_mapper.observability import (
    JsonFormatter,
    bind_search_context,
    configure_logging,
    create_span,
    get_search_context,
    init_tracing,
    tracing as tracing_module,
)
from redisearch_mapper.schema import Point
from redisearch_mapper.search import Search


def make_record(msg="test message", level=logging.INFO, name="redisearch_mapper.search.search"):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def span_exporter(monkeypatch):
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))
    return exporter


@pytest.fixture
def package_logger():
    """Restore the library logger after a test configures it."""
    logger = logging.getLogger("redisearch_mapper")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class OneRecordClient:
    async def run_search(self, index_name, query, offset, limit):
        return RawSearchBatch(count=1, records=(RawRecord(key="HashEntity:1", payload={"aNumber": "1"}),))


@pytest.mark.unit
class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_basic_fields(self):
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["logger"] == "redisearch_mapper.search.search"
        assert data["component"] == "search"
        assert "timestamp" in data
        assert "index" not in data
        assert "trace_id" not in data

    def test_foreign_loggers_have_no_component(self):
        data = json.loads(JsonFormatter().format(make_record(name="app.views")))

        assert "component" not in data

    def test_format_includes_search_context(self):
        with bind_search_context(index="Album:index", query="(@year:[1984 1984])"):
            data = json.loads(JsonFormatter().format(make_record()))

        assert data["index"] == "Album:index"
        assert data["query"] == "(@year:[1984 1984])"

    def test_long_queries_and_messages_are_truncated(self):
        with bind_search_context(query="q" * 1000):
            data = json.loads(JsonFormatter().format(make_record("x" * 5000)))

        assert len(data["query"]) == JsonFormatter.MAX_QUERY_LEN + 3
        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3

    def test_format_includes_span_ids(self, span_exporter):
        with create_span("redisearch.search") as span:
            data = json.loads(JsonFormatter().format(make_record()))

        assert data["trace_id"] == format(span.get_span_context().trace_id, "032x")
        assert data["span_id"] == format(span.get_span_context().span_id, "016x")

    def test_format_includes_extra_fields(self):
        record = make_record()
        record.entity_id = "abc"
        record.count = 3

        data = json.loads(JsonFormatter().format(record))

        assert data["entity_id"] == "abc"
        assert data["count"] == 3
        assert "lineno" not in data

    def test_unserializable_extras_fall_back(self):
        record = make_record()
        record.fields = {"b", "a"}
        record.raw = b"bytes"
        record.origin = Point(longitude=1.5, latitude=2.5)

        data = json.loads(JsonFormatter().format(record))

        assert data["fields"] == ["a", "b"]
        assert data["raw"] == "bytes"
        assert data["origin"] == {"longitude": 1.5, "latitude": 2.5}


@pytest.mark.unit
class TestSearchContext:
    def test_empty_outside_a_search(self):
        assert get_search_context() == {}

    def test_nested_blocks_extend_and_restore(self):
        with bind_search_context(index="a"):
            with bind_search_context(query="*"):
                assert get_search_context() == {"index": "a", "query": "*"}
            assert get_search_context() == {"index": "a"}
        assert get_search_context() == {}


@pytest.mark.unit
class TestCreateSpan:
    def test_span_records_attributes(self, span_exporter):
        with create_span("redisearch.search", attributes={"search.query": "*"}):
            pass

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "redisearch.search"
        assert span.attributes["search.query"] == "*"

    def test_span_records_errors(self, span_exporter):
        with pytest.raises(RuntimeError), create_span("redisearch.search"):
            raise RuntimeError("boom")

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR

    async def test_search_runs_inside_a_span(self, span_exporter, hash_schema):
        assert await Search(hash_schema, OneRecordClient()).where("aNumber").eq(1).count() == 1

        (span,) = span_exporter.get_finished_spans()
        assert span.attributes["search.index"] == "HashEntity:index"
        assert span.attributes["search.query"] == "(@aNumber:[1 1])"

    def test_init_tracing_installs_provider(self, monkeypatch):
        installed = []
        monkeypatch.setattr(tracing_module.trace, "set_tracer_provider", installed.append)
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", None)

        provider = init_tracing("redisearch-mapper-test", {"deployment.environment": "test"})

        assert installed == [provider]
        assert provider.resource.attributes["service.name"] == "redisearch-mapper-test"
        assert provider.resource.attributes["deployment.environment"] == "test"
        assert tracing_module._tracer_holder["tracer"] is not None


@pytest.mark.unit
class TestConfigureLogging:
    def test_only_the_library_logger_is_configured(self, package_logger):
        root = logging.getLogger()
        root_handlers, root_level = root.handlers[:], root.level

        handler = configure_logging("debug", json_output=True, stream=io.StringIO())

        assert root.handlers == root_handlers
        assert root.level == root_level
        assert package_logger.level == logging.DEBUG
        assert handler in package_logger.handlers
        assert isinstance(handler.formatter, JsonFormatter)
        assert package_logger.propagate is False

    def test_reconfiguring_replaces_the_handler(self, package_logger):
        first = configure_logging("info", json_output=True, stream=io.StringIO())
        second = configure_logging("warning", json_output=False, stream=io.StringIO())

        assert first not in package_logger.handlers
        assert second in package_logger.handlers
        assert not isinstance(second.formatter, JsonFormatter)
        assert package_logger.level == logging.WARNING

    def test_defaults_come_from_settings(self, package_logger, monkeypatch):
        from redisearch_mapper.config import reset_settings

        monkeypatch.setenv("REDISEARCH_MAPPER_LOG_LEVEL", "error")
        monkeypatch.setenv("REDISEARCH_MAPPER_LOG_JSON", "false")
        reset_settings()

        handler = configure_logging(stream=io.StringIO())

        assert package_logger.level == logging.ERROR
        assert not isinstance(handler.formatter, JsonFormatter)

    async def test_search_logs_carry_index_and_query(self, package_logger, hash_schema):
        stream = io.StringIO()
        configure_logging("debug", json_output=True, stream=stream)

        await Search(hash_schema, OneRecordClient()).where("aNumber").eq(1).page(0, 10)

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        converted = [line for line in lines if line["message"].startswith("Converted")]
        assert converted
        assert converted[0]["index"] == "HashEntity:index"
        assert converted[0]["query"] == "(@aNumber:[1 1])"
        assert converted[0]["component"] == "search"
