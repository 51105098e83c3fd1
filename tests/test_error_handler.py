"""Tests for error classification and reporting."""

import json
import socket
from urllib.error import HTTPError, URLError

import pytest

from co1_extract.error_handler import (
    ErrorHandler, ErrorSeverity, ErrorType, get_error_handler, setup_error_handler
)


class TestErrorClassification:
    """Test cases for mapping exceptions to error types."""

    @pytest.fixture
    def handler(self):
        return ErrorHandler()

    @pytest.mark.parametrize("error,expected", [
        (HTTPError("u", 429, "Too Many Requests", {}, None), ErrorType.API_RATE_LIMIT),
        (HTTPError("u", 404, "Not Found", {}, None), ErrorType.NOT_FOUND),
        (HTTPError("u", 400, "Bad Request", {}, None), ErrorType.NOT_FOUND),
        (HTTPError("u", 503, "Unavailable", {}, None), ErrorType.NETWORK_TIMEOUT),
        (URLError("no route"), ErrorType.NETWORK_TIMEOUT),
        (socket.timeout("timed out"), ErrorType.NETWORK_TIMEOUT),
        (ConnectionResetError("reset"), ErrorType.NETWORK_TIMEOUT),
        (PermissionError("denied"), ErrorType.FILE_IO_ERROR),
        (RuntimeError("API rate limit exceeded"), ErrorType.API_RATE_LIMIT),
        (RuntimeError("Invalid uid 0 at position 0"), ErrorType.NOT_FOUND),
        (ValueError("unexpected tag"), ErrorType.PARSE_ERROR),
        (KeyError("IdList"), ErrorType.PARSE_ERROR),
        (OSError("disk full"), ErrorType.FILE_IO_ERROR),
        (Exception("something odd"), ErrorType.UNKNOWN),
    ])
    def test_classify(self, handler, error, expected):
        """Test each exception kind maps to its error type."""
        assert handler._classify_error(error) is expected

    def test_override_type(self, handler):
        """Test an explicit type skips classification."""
        context = handler.handle_error(Exception("x"), "op", error_type=ErrorType.PARSE_ERROR)

        assert context.error_type is ErrorType.PARSE_ERROR


class TestErrorSeverity:
    """Test cases for severity grading."""

    def test_network_escalates_with_retries(self):
        handler = ErrorHandler(max_retries=3)

        assert handler._determine_severity(ErrorType.NETWORK_TIMEOUT, 0) is ErrorSeverity.WARNING
        assert handler._determine_severity(ErrorType.NETWORK_TIMEOUT, 2) is ErrorSeverity.ERROR
        assert handler._determine_severity(ErrorType.NETWORK_TIMEOUT, 3) is ErrorSeverity.CRITICAL

    def test_not_found_is_warning(self):
        handler = ErrorHandler()

        assert handler._determine_severity(ErrorType.NOT_FOUND, 0) is ErrorSeverity.WARNING

    def test_unknown_is_error(self):
        handler = ErrorHandler()

        assert handler._determine_severity(ErrorType.UNKNOWN, 0) is ErrorSeverity.ERROR


class TestErrorReporting:
    """Test cases for history, summary and export."""

    def test_context_fields(self):
        """Test the context records operation, item and suggestion."""
        handler = ErrorHandler()

        context = handler.handle_error(URLError("down"), "Entrez efetch", item_id="MN123", retry_count=1)

        assert context.operation == "Entrez efetch"
        assert context.item_id == "MN123"
        assert context.retry_count == 1
        assert "NCBI" in context.suggestion
        assert handler.error_history == [context]

    def test_summary_counts(self):
        """Test the summary groups errors by type and severity."""
        handler = ErrorHandler()
        handler.handle_error(URLError("a"), "op")
        handler.handle_error(URLError("b"), "op")
        handler.handle_error(ValueError("c"), "op")

        summary = handler.get_error_summary()

        assert summary['total_errors'] == 3
        assert summary['by_type'] == {'network_timeout': 2, 'parse_error': 1}
        assert summary['by_severity'] == {'warning': 3}
        assert len(summary['recent_errors']) == 3

    def test_recent_errors_limited(self):
        handler = ErrorHandler()
        for i in range(8):
            handler.handle_error(ValueError(str(i)), "op")

        recent = handler.get_error_summary()['recent_errors']

        assert [e['message'] for e in recent] == ['3', '4', '5', '6', '7']

    def test_export_report(self, tmp_path):
        """Test the JSON report is written without exception objects."""
        handler = ErrorHandler()
        handler.handle_error(HTTPError("u", 404, "Not Found", {}, None), "Entrez esummary", item_id="7147")

        report_file = tmp_path / "errors.json"
        handler.export_error_report(str(report_file))

        report = json.loads(report_file.read_text())
        assert report['summary']['total_errors'] == 1
        detail = report['detailed_errors'][0]
        assert detail['error_type'] == 'not_found'
        assert detail['severity'] == 'warning'
        assert detail['item_id'] == '7147'
        assert 'exception' not in detail

    def test_clear(self):
        handler = ErrorHandler()
        handler.handle_error(ValueError("x"), "op")

        handler.clear()

        assert handler.get_error_summary()['total_errors'] == 0


class TestGlobalHandler:
    """Test cases for the shared handler instance."""

    def test_setup_replaces_global(self):
        handler = setup_error_handler(max_retries=5)

        assert get_error_handler() is handler
        assert handler.max_retries == 5
        setup_error_handler()
