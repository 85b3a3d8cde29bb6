"""Tests for the structured logging system (tradedoc_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from tradedoc_kernel.domain.documents import DocumentType
from tradedoc_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite configuration."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def _parse_log(stream: StringIO) -> dict:
    return _parse_all_logs(stream)[0]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "tradedoc.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("document_created", extra={"human_code": "ACPO-001", "line_count": 3})

        record = _parse_log(stream)
        assert record["human_code"] == "ACPO-001"
        assert record["line_count"] == 3

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", document_type="invoice")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["document_type"] == "invoice"

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info(
            "values",
            extra={
                "entry_id": uid,
                "total": Decimal("877.80"),
                "due": date(2024, 1, 31),
                "kind": DocumentType.INVOICE,
            },
        )

        record = _parse_log(stream)
        assert record["entry_id"] == str(uid)
        assert record["total"] == "877.80"
        assert record["due"] == "2024-01-31"
        assert record["kind"] == "invoice"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_tradedoc_exception_attributes_extracted(self):
        from tradedoc_kernel.exceptions import DocumentReferencedError

        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise DocumentReferencedError("rfq", "doc-1", 2)
        except DocumentReferencedError:
            get_logger("test").error("delete_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "DOCUMENT_REFERENCED"
        assert record["exc_document_id"] == "doc-1"
        assert record["exc_referencing_count"] == 2

    def test_level_filtering(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        assert [r["message"] for r in logs] == ["first", "second"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_set_ignores_unset_fields(self):
        LogContext.set(company_id="c1")
        LogContext.set(action="create")

        assert LogContext.get_all() == {"company_id": "c1", "action": "create"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()

        assert LogContext.get_all() == {}

    def test_bind_restores_previous_value(self):
        LogContext.set(document_id="outer")
        with LogContext.bind(document_id="inner"):
            assert LogContext.get_all()["document_id"] == "inner"

        assert LogContext.get_all()["document_id"] == "outer"

    def test_bind_restores_none(self):
        with LogContext.bind(company_id="temp", document_type=None):
            assert LogContext.get_all() == {"company_id": "temp"}

        assert LogContext.get_all() == {}

    def test_bind_ignores_unknown_keys(self):
        with LogContext.bind(unknown="x", action="list"):
            assert LogContext.get_all() == {"action": "list"}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_idempotent(self):
        reset_logging()
        h1, stream1 = _make_handler()
        configure_logging(handler=h1)
        h2, stream2 = _make_handler()
        configure_logging(handler=h2, level=logging.DEBUG)

        root = logging.getLogger("tradedoc")
        ours = [h for h in root.handlers if h is h1 or h is h2]
        assert ours == [h1]
        assert root.level == logging.INFO

        get_logger("idempotency").info("once")
        assert [r["message"] for r in _parse_all_logs(stream1)] == ["once"]
        assert stream2.getvalue() == ""

    def test_get_logger_returns_child(self):
        assert get_logger("services.documents").name == "tradedoc.services.documents"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "tradedoc.deep.nested.module"
