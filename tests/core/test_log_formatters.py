"""Tests for logging setup, context binding and formatters."""

import json
import logging
import sys

import pytest

from ecr_secret_operator.core.logging import (
    ROOT_LOGGER_NAME,
    ContextFilter,
    JSONFormatter,
    StructuredFormatter,
    get_logging_context,
    log_context,
    setup_logging,
)


def make_record(message="Secret needs renewal", level=logging.INFO, **extra):
    record = logging.LogRecord(
        "ecr_secret_operator.test", level, __file__, 10, message, (), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Tests for log_context."""

    def test_binds_and_resets(self):
        assert get_logging_context() == {}
        with log_context(namespace="default"):
            assert get_logging_context() == {"namespace": "default"}
        assert get_logging_context() == {}

    def test_nested_contexts_merge(self):
        with log_context(namespace="default"):
            with log_context(secret="registry-secret"):
                assert get_logging_context() == {
                    "namespace": "default",
                    "secret": "registry-secret",
                }
            assert get_logging_context() == {"namespace": "default"}

    def test_filter_copies_context_onto_record(self):
        record = make_record()
        with log_context(ecrsecret="default/test-secret"):
            assert ContextFilter().filter(record) is True
        assert record.context == {"ecrsecret": "default/test-secret"}


class TestStructuredFormatter:
    def test_appends_context(self):
        record = make_record()
        with log_context(namespace="default", secret="registry-secret"):
            ContextFilter().filter(record)

        output = StructuredFormatter().format(record)

        assert "Secret needs renewal" in output
        assert output.endswith("| namespace=default | secret=registry-secret")

    def test_includes_extra_fields(self):
        record = make_record(attempt=2)
        output = StructuredFormatter().format(record)
        assert "attempt=2" in output

    def test_context_can_be_disabled(self):
        record = make_record()
        with log_context(namespace="default"):
            ContextFilter().filter(record)
        output = StructuredFormatter(include_context=False).format(record)
        assert "namespace=default" not in output


class TestJSONFormatter:
    def test_emits_json_with_context(self):
        record = make_record(level=logging.WARNING)
        with log_context(namespace="kube-system"):
            ContextFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "ecr_secret_operator.test"
        assert data["message"] == "Secret needs renewal"
        assert data["namespace"] == "kube-system"
        assert "timestamp" in data

    def test_includes_exception(self):
        try:
            raise ValueError("bad annotation")
        except ValueError:
            record = logging.LogRecord(
                "ecr_secret_operator.test",
                logging.ERROR,
                __file__,
                1,
                "failed",
                (),
                sys.exc_info(),
            )

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad annotation"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def cleanup(self):
        yield
        logging.getLogger(ROOT_LOGGER_NAME).handlers.clear()

    def test_text_format(self):
        logger = setup_logging("debug", "text")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_json_format(self):
        logger = setup_logging("INFO", "json")
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging("INFO", "text")
        logger = setup_logging("INFO", "text")
        assert len(logger.handlers) == 1

    def test_quiets_client_libraries(self):
        setup_logging("DEBUG", "text")
        assert logging.getLogger("botocore").level == logging.WARNING
